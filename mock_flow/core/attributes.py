"""
Attribute text extraction from raw source.

The model builder receives one of these functions as a dependency so that it
never slices source text itself.
"""

from typing import Callable, List, Optional, Sequence

from .models import AttributeSpan

AttributeExtractor = Callable[[Sequence[AttributeSpan], str, Optional[str]], List[str]]


def extract_attributes(spans: Sequence[AttributeSpan], content: str, filter_on: Optional[str] = None) -> List[str]:
    """
    Return the source text of each attribute span.

    Offsets and lengths are UTF-8 byte positions, as reported by SourceKitten.
    Spans whose kind differs from `filter_on` are skipped, as are spans that
    fall outside `content`.
    """
    if not content:
        return []
    data = content.encode("utf-8")
    results = []
    for span in spans:
        if filter_on is not None and span.kind != filter_on:
            continue
        end = span.offset + span.length
        if span.length <= 0 or span.offset < 0 or end > len(data):
            continue
        text = data[span.offset:end].decode("utf-8", errors="replace").strip()
        if text:
            results.append(text)
    return results

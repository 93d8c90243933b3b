"""
Overload resolution across all methods of one type.

Each method gets the shortest identifier level that no sibling shares, so
that non-overloaded methods keep their bare name and overloads receive
just enough of their signature to stay distinct.
"""

import logging
from collections import Counter
from typing import Dict, List, Sequence

from .method_model import MethodModel
from .models import IdentifierLevel

logger = logging.getLogger(__name__)

_LEVELS = list(IdentifierLevel)


def _first_unique_level(model: MethodModel, counts: Dict[IdentifierLevel, Counter]) -> IdentifierLevel:
    for level in _LEVELS:
        if counts[level][model.identifier(level)] == 1:
            return level
    return IdentifierLevel.FULL


def resolve_identifiers(models: Sequence[MethodModel]) -> List[IdentifierLevel]:
    """
    Choose an identifier level for each model, in input order.

    A level is kept only if the identifier at that level is unique among the
    siblings at the same level and among the identifiers already chosen for
    the others. Models whose full names collide cannot be told apart and all
    end up at FULL; use `find_duplicates` to drop them beforehand.
    """
    counts = {
        level: Counter(model.identifier(level) for model in models)
        for level in _LEVELS
    }
    levels = [_first_unique_level(model, counts) for model in models]

    # A name picked at one level may equal another model's name at a
    # different level (e.g. `fooB()` vs `foo(b:)` at MEDIUM).
    while True:
        chosen = Counter(model.identifier(level) for model, level in zip(models, levels))
        bumped = False
        for index, (model, level) in enumerate(zip(models, levels)):
            if chosen[model.identifier(level)] > 1 and level is not IdentifierLevel.FULL:
                levels[index] = level.next()
                bumped = True
        if not bumped:
            return levels


def find_duplicates(models: Sequence[MethodModel]) -> List[int]:
    """
    Indices of models whose full name repeats an earlier model's.

    Earlier means lower source offset; ties keep input order.
    """
    order = sorted(range(len(models)), key=lambda i: models[i].offset)
    seen = set()
    duplicates = []
    for index in order:
        full_name = models[index].full_name
        if full_name in seen:
            logger.warning(f"Duplicate declaration '{full_name}' at offset {models[index].offset}")
            duplicates.append(index)
        else:
            seen.add(full_name)
    return sorted(duplicates)

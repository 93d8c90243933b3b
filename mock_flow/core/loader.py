"""
Loader for SourceKitten structure dumps.

Turns the JSON printed by `sourcekitten structure --file X.swift` (or a YAML
file with the same keys) into `ProtocolDeclaration`s holding `Declaration`s.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .models import AttributeSpan, Declaration, Substructure
from .type_utils import UNKNOWN_TYPE

logger = logging.getLogger(__name__)

PROTOCOL_KIND = "source.lang.swift.decl.protocol"
METHOD_KIND_PREFIX = "source.lang.swift.decl.function.method."
ACCESSIBILITY_PREFIX = "source.lang.swift.accessibility."

# Mocks of internal protocols stay internal, so only these are spelled out.
_EMITTED_ACCESS_LEVELS = {"public", "open"}


@dataclass
class ProtocolDeclaration:
    name: str
    offset: int = 0
    access_level: str = ""
    methods: List[Declaration] = field(default_factory=list)
    attributes: List[AttributeSpan] = field(default_factory=list)


def access_level_description(accessibility: str | None) -> str:
    """`source.lang.swift.accessibility.public` -> `public`"""
    if not accessibility:
        return ""
    level = accessibility[len(ACCESSIBILITY_PREFIX):] if accessibility.startswith(ACCESSIBILITY_PREFIX) else accessibility
    # Members of an `open` protocol's mock are public.
    if level == "open":
        return "public"
    return level if level in _EMITTED_ACCESS_LEVELS else ""


def _attributes(node: Dict[str, Any]) -> List[AttributeSpan]:
    return [
        AttributeSpan(
            kind=entry.get("key.attribute", ""),
            offset=int(entry.get("key.offset", 0)),
            length=int(entry.get("key.length", 0)),
        )
        for entry in node.get("key.attributes", []) or []
    ]


def _substructure(node: Dict[str, Any]) -> Substructure:
    return Substructure(
        kind=node.get("key.kind", ""),
        name=node.get("key.name", ""),
        type_name=node.get("key.typename", UNKNOWN_TYPE),
        offset=int(node.get("key.offset", 0)),
    )


def declaration_from_dict(node: Dict[str, Any]) -> Declaration:
    """Map one method node of a structure dump to a Declaration."""
    return Declaration(
        name=node.get("key.name", ""),
        type_name=node.get("key.typename", UNKNOWN_TYPE),
        kind=node.get("key.kind", ""),
        offset=int(node.get("key.offset", 0)),
        access_level=access_level_description(node.get("key.accessibility")),
        attributes=_attributes(node),
        default_value=node.get("key.default_value"),
        substructures=[_substructure(child) for child in node.get("key.substructure", []) or []],
    )


def _is_method(node: Dict[str, Any]) -> bool:
    return str(node.get("key.kind", "")).startswith(METHOD_KIND_PREFIX)


def protocols_from_structure(data: Dict[str, Any]) -> List[ProtocolDeclaration]:
    """Collect every protocol in a structure dump, in source order."""
    protocols: List[ProtocolDeclaration] = []
    _walk(data, protocols)
    return sorted(protocols, key=lambda p: p.offset)


def _walk(node: Dict[str, Any], protocols: List[ProtocolDeclaration]) -> None:
    for child in node.get("key.substructure", []) or []:
        if child.get("key.kind") == PROTOCOL_KIND:
            methods = [declaration_from_dict(m) for m in child.get("key.substructure", []) or [] if _is_method(m)]
            protocols.append(ProtocolDeclaration(
                name=child.get("key.name", ""),
                offset=int(child.get("key.offset", 0)),
                access_level=access_level_description(child.get("key.accessibility")),
                methods=methods,
                attributes=_attributes(child),
            ))
        else:
            _walk(child, protocols)


def load_structure(path: Path) -> Dict[str, Any]:
    """Read a structure dump; `.json` files use json, anything else yaml."""
    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Structure file {path} does not contain a mapping")
    logger.info(f"Loaded structure from {path}")
    return data

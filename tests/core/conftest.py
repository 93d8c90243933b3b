"""
Pytest configuration and fixtures for mock generation tests.
"""

import pytest
from typing import Dict, List, Optional, Tuple

from mock_flow.core.models import (
    AVAILABLE_ATTRIBUTE_KIND,
    VAR_PARAMETER_KIND,
    AttributeSpan,
    Declaration,
    Substructure,
)
from mock_flow.core.type_utils import UNKNOWN_TYPE


def make_declaration(
    name: str,
    params: Optional[List[Tuple[str, str]]] = None,
    type_name: str = UNKNOWN_TYPE,
    offset: int = 0,
    **kwargs,
) -> Declaration:
    """Build a Declaration from (param name, param type) pairs."""
    substructures = [
        Substructure(kind=VAR_PARAMETER_KIND, name=param_name, type_name=param_type)
        for param_name, param_type in (params or [])
    ]
    return Declaration(name=name, type_name=type_name, offset=offset, substructures=substructures, **kwargs)


@pytest.fixture
def declaration_factory():
    return make_declaration


AVAILABLE_SOURCE = """protocol Fetcher {
    @available(iOS 13.0, *)
    func fetch(id: Int) -> String
}
"""


@pytest.fixture
def available_source() -> str:
    return AVAILABLE_SOURCE


@pytest.fixture
def available_span() -> AttributeSpan:
    start = AVAILABLE_SOURCE.index("@available")
    end = AVAILABLE_SOURCE.index(")", start) + 1
    return AttributeSpan(kind=AVAILABLE_ATTRIBUTE_KIND, offset=start, length=end - start)


def method_node(name: str, type_name: Optional[str] = None, params: Optional[List[Tuple[str, str]]] = None,
                offset: int = 0, kind: str = "source.lang.swift.decl.function.method.instance",
                accessibility: str = "source.lang.swift.accessibility.internal") -> Dict:
    node = {
        "key.kind": kind,
        "key.name": name,
        "key.offset": offset,
        "key.accessibility": accessibility,
        "key.substructure": [
            {"key.kind": VAR_PARAMETER_KIND, "key.name": param_name, "key.typename": param_type}
            for param_name, param_type in (params or [])
        ],
    }
    if type_name is not None:
        node["key.typename"] = type_name
    return node


@pytest.fixture
def sample_structure() -> Dict:
    """A SourceKitten-style dump with one protocol holding overloads."""
    return {
        "key.diagnostic_stage": "source.diagnostic.stage.swift.parse",
        "key.substructure": [
            {
                "key.kind": "source.lang.swift.decl.protocol",
                "key.name": "DataService",
                "key.offset": 0,
                "key.accessibility": "source.lang.swift.accessibility.public",
                "key.substructure": [
                    method_node("load(id:)", "Data", [("id", "Int")], offset=40,
                                accessibility="source.lang.swift.accessibility.public"),
                    method_node("load(id:)", "Data", [("identifier", "String")], offset=80,
                                accessibility="source.lang.swift.accessibility.public"),
                    method_node("reset()", offset=120,
                                kind="source.lang.swift.decl.function.method.static",
                                accessibility="source.lang.swift.accessibility.public"),
                    {
                        "key.kind": "source.lang.swift.decl.var.instance",
                        "key.name": "count",
                        "key.typename": "Int",
                        "key.offset": 150,
                    },
                ],
            },
            {
                "key.kind": "source.lang.swift.decl.class",
                "key.name": "Outer",
                "key.offset": 200,
                "key.substructure": [
                    {
                        "key.kind": "source.lang.swift.decl.protocol",
                        "key.name": "Listener",
                        "key.offset": 220,
                        "key.substructure": [
                            method_node("notify(_:)", None, [("event", "String")], offset=240),
                        ],
                    }
                ],
            },
        ],
    }

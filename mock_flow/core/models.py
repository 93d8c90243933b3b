"""
Core data models for declarations and the mock models derived from them.

`Declaration` and its children are the immutable input handed over by the
structure loader. `ParamModel`, `ClosureModel` and `IdentifierLevel` are the
rendering-side pieces shared by `MethodModel`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .templates import apply_closure_template, apply_param_template
from .type_utils import UNKNOWN_TYPE, default_value

VAR_PARAMETER_KIND = "source.lang.swift.decl.var.parameter"
AVAILABLE_ATTRIBUTE_KIND = "source.decl.attribute.available"
STATIC_KIND_STRING = "static"
STATIC_METHOD_KINDS = (
    "source.lang.swift.decl.function.method.static",
    "source.lang.swift.decl.function.method.class",
)


@dataclass(frozen=True)
class AttributeSpan:
    """Location of one attribute (e.g. `@available(...)`) in the source file."""
    kind: str
    offset: int = 0
    length: int = 0


@dataclass(frozen=True)
class Substructure:
    """A child node of a declaration, such as a parameter."""
    kind: str
    name: str = ""
    type_name: str = UNKNOWN_TYPE
    offset: int = 0

    @property
    def is_var_parameter(self) -> bool:
        return self.kind == VAR_PARAMETER_KIND


@dataclass(frozen=True)
class Declaration:
    """A parsed method/function declaration."""
    name: str
    type_name: str = UNKNOWN_TYPE
    kind: str = "source.lang.swift.decl.function.method.instance"
    offset: int = 0
    access_level: str = ""
    is_static: bool = False
    attributes: Tuple[AttributeSpan, ...] = ()
    default_value: Optional[str] = None
    substructures: Tuple[Substructure, ...] = ()

    def __post_init__(self):
        # Loaders hand over lists; store tuples so the declaration stays immutable.
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "substructures", tuple(self.substructures))

    @property
    def is_static_method(self) -> bool:
        return self.is_static or self.kind in STATIC_METHOD_KINDS

    @property
    def has_available_attribute(self) -> bool:
        return any(a.kind == AVAILABLE_ATTRIBUTE_KIND for a in self.attributes)


class IdentifierLevel(Enum):
    """How much of the signature goes into a generated member name."""
    NAME = 0
    MEDIUM = 1
    LONG = 2
    FULL = 3

    def next(self) -> "IdentifierLevel":
        return IdentifierLevel(min(self.value + 1, IdentifierLevel.FULL.value))

    @classmethod
    def for_identifier(cls, model, identifier: str) -> "IdentifierLevel":
        """Map a raw identifier to a level; anything unmatched means FULL."""
        if identifier == model.name:
            return cls.NAME
        if identifier == model.medium_name:
            return cls.MEDIUM
        if identifier == model.long_name:
            return cls.LONG
        return cls.FULL


class IdentifierSet:
    name: str
    medium_name: str
    long_name: str
    full_name: str

    def identifier(self, level: IdentifierLevel) -> str:
        if level is IdentifierLevel.NAME:
            return self.name
        if level is IdentifierLevel.MEDIUM:
            return self.medium_name
        if level is IdentifierLevel.LONG:
            return self.long_name
        return self.full_name


@dataclass(frozen=True)
class ParamModel:
    label: str
    name: str
    type_name: str

    @classmethod
    def from_substructure(cls, node: Substructure, label: str, index: int) -> "ParamModel":
        name = node.name or f"arg{index}"
        type_name = "" if node.type_name == UNKNOWN_TYPE else node.type_name
        return cls(label=label, name=name, type_name=type_name)

    def render(self) -> Optional[str]:
        if not self.name or not self.type_name:
            return None
        return apply_param_template(self.label, self.name, self.type_name)


@dataclass(frozen=True)
class ClosureModel(IdentifierSet):
    """The handler property backing a mocked method."""
    name: str
    medium_name: str
    long_name: str
    full_name: str
    param_names: Tuple[str, ...]
    param_types: Tuple[str, ...]
    return_type: str
    static_kind: str = ""
    default_return: str = ""

    @property
    def type(self) -> str:
        return_type = f"({self.return_type})" if self.return_type else "()"
        return f"(({', '.join(self.param_types)}) -> {return_type})?"

    def var_name(self, level: IdentifierLevel) -> str:
        return f"{self.identifier(level)}Handler"

    def render(self, level: IdentifierLevel, template: Optional[str] = None) -> str:
        """Raises TemplateRenderFailure if the closure template cannot be filled."""
        return apply_closure_template(
            name=self.var_name(level),
            param_vals=self.param_names,
            return_type=self.return_type,
            default_return=self.default_return or default_value(self.return_type),
            template=template,
        )

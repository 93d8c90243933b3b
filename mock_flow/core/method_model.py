"""
Declaration-to-model transformation and method stub rendering.

`build` turns one `Declaration` into a `MethodModel` carrying four
identifiers of increasing specificity:

    name         foo
    medium_name  name + capitalized parameter names
    long_name    medium_name + return type display form
    full_name    name + (capitalized label + parameter type display form)...
                 + return type display form

The medium name is keyed on internal parameter names while the full name is
keyed on argument labels. Overload resolution relies on this asymmetry.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .attributes import AttributeExtractor, extract_attributes
from .models import (
    AVAILABLE_ATTRIBUTE_KIND,
    STATIC_KIND_STRING,
    ClosureModel,
    Declaration,
    IdentifierLevel,
    IdentifierSet,
    ParamModel,
)
from .templates import TemplateRenderFailure, apply_method_template
from .type_utils import UNKNOWN_TYPE, capitalize_first, default_value, display_for_type

logger = logging.getLogger(__name__)

_NAME_DELIMITERS = re.compile(r"[:()]")


class InputContractViolation(ValueError):
    """The declaration's labels and parameter nodes do not line up."""

    def __init__(self, name: str, offset: int, label_count: int, param_count: int):
        self.name = name
        self.offset = offset
        self.label_count = label_count
        self.param_count = param_count
        super().__init__(
            f"Declaration '{name}' at offset {offset} has {label_count} labels "
            f"but {param_count} parameters"
        )


@dataclass(frozen=True)
class MethodModel(IdentifierSet):
    name: str
    medium_name: str
    long_name: str
    full_name: str
    type: str
    offset: int
    static_kind: str
    access_control_level_description: str
    default_value: str
    handler: ClosureModel
    params: Tuple[ParamModel, ...] = ()
    attributes: Tuple[str, ...] = ()

    def render(
        self,
        level: IdentifierLevel,
        method_template: Optional[str] = None,
        closure_template: Optional[str] = None,
    ) -> Optional[str]:
        """
        Render the stub and its handler property at the given identifier level.

        Returns None when either template cannot be filled.
        """
        param_decls = [decl for decl in (p.render() for p in self.params) if decl is not None]
        identifier = self.identifier(level)
        try:
            handler_return = self.handler.render(level, template=closure_template)
            return apply_method_template(
                name=self.name,
                identifier=identifier,
                param_decls=param_decls,
                return_type=self.type,
                static_kind=self.static_kind,
                access_control_level_description=self.access_control_level_description,
                handler_var_name=self.handler.var_name(level),
                handler_var_type=self.handler.type,
                handler_return=handler_return,
                attributes=self.attributes,
                template=method_template,
            )
        except TemplateRenderFailure as e:
            logger.warning(f"Could not render '{identifier}' at offset {self.offset}: {e}")
            return None

    def render_identifier(self, identifier: str, **templates) -> Optional[str]:
        return self.render(IdentifierLevel.for_identifier(self, identifier), **templates)


def split_name(raw_name: str) -> List[str]:
    """`foo(bar:baz:)` -> ['foo', 'bar', 'baz']"""
    return [part for part in _NAME_DELIMITERS.split(raw_name) if part]


def build(
    declaration: Declaration,
    content: str = "",
    attribute_extractor: AttributeExtractor = extract_attributes,
) -> MethodModel:
    """
    Build the mock model for one declaration.

    Args:
        declaration: The parsed method/function declaration.
        content: Full source text of the file the declaration came from. Only
            read when the declaration carries an `@available` attribute.
        attribute_extractor: Function returning attribute source strings.

    Raises:
        InputContractViolation: If the number of labels in the name differs
            from the number of parameter nodes.
    """
    name_comps = split_name(declaration.name)
    if not name_comps:
        raise InputContractViolation(declaration.name, declaration.offset, 0, 0)
    name, labels = name_comps[0], name_comps[1:]

    return_type = "" if declaration.type_name == UNKNOWN_TYPE else declaration.type_name
    static_kind = STATIC_KIND_STRING if declaration.is_static_method else ""

    param_decls = [s for s in declaration.substructures if s.is_var_parameter]
    if len(param_decls) != len(labels):
        raise InputContractViolation(declaration.name, declaration.offset, len(labels), len(param_decls))

    params = tuple(
        ParamModel.from_substructure(node, label, index)
        for index, (node, label) in enumerate(zip(param_decls, labels))
    )
    # The handler is called with exactly the parameters the stub declares.
    rendered = [p for p in params if p.render() is not None]

    medium_name = name + "".join(capitalize_first(p.name) for p in params)
    long_name = medium_name + display_for_type(return_type)
    full_name = (
        name
        + "".join(capitalize_first(p.label) + display_for_type(p.type_name) for p in params)
        + display_for_type(return_type)
    )

    default = default_value(return_type, declaration.default_value)
    handler = ClosureModel(
        name=name,
        medium_name=medium_name,
        long_name=long_name,
        full_name=full_name,
        param_names=tuple(p.name for p in rendered),
        param_types=tuple(p.type_name for p in rendered),
        return_type=return_type,
        static_kind=static_kind,
        default_return=default,
    )

    attributes: Tuple[str, ...] = ()
    if declaration.has_available_attribute:
        attributes = tuple(attribute_extractor(declaration.attributes, content, AVAILABLE_ATTRIBUTE_KIND))

    return MethodModel(
        name=name,
        medium_name=medium_name,
        long_name=long_name,
        full_name=full_name,
        type=return_type,
        offset=declaration.offset,
        static_kind=static_kind,
        access_control_level_description=declaration.access_level,
        default_value=default,
        handler=handler,
        params=params,
        attributes=attributes,
    )


ChosenIdentifier = Union[IdentifierLevel, str]


def render(model: MethodModel, chosen: ChosenIdentifier, **templates) -> Optional[str]:
    """Render `model` with either an IdentifierLevel or a raw chosen identifier."""
    if isinstance(chosen, IdentifierLevel):
        return model.render(chosen, **templates)
    return model.render_identifier(chosen, **templates)

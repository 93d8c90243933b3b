"""
Text templates for generated mocks and the substitution helpers that fill them.

Templates use `str.format` named fields. They are module-level strings and
never mutated, so the helpers are safe to call from any number of callers.
"""

from typing import List, Optional


METHOD_TEMPLATE = """\
{attributes}    {access_level}{static_prefix}var {identifier}CallCount = 0
{attributes}    {access_level}{static_prefix}var {handler_var_name}: {handler_var_type}
{attributes}    {access_level}{static_prefix}func {name}({param_decls}){return_clause} {{
        {identifier}CallCount += 1
{handler_return}
    }}
"""

CLOSURE_TEMPLATE = """\
        if let {name} = {name} {{
            {return_prefix}{name}({param_vals})
        }}
{fallback}"""

CLASS_TEMPLATE = """\
{attributes}{access_level}class {mock_name}: {protocol_name} {{
    {access_level}init() {{}}
{body}}}
"""

PARAM_TEMPLATE = "{prefix}{name}: {type_name}"


class TemplateRenderFailure(Exception):
    """Raised when a template cannot be filled with the supplied fields."""

    def __init__(self, template_kind: str, reason: str):
        self.template_kind = template_kind
        self.reason = reason
        super().__init__(f"Failed to render {template_kind} template: {reason}")


def apply_template(template: str, template_kind: str, **fields) -> str:
    try:
        return template.format(**fields)
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise TemplateRenderFailure(template_kind, f"{type(e).__name__}: {e}") from e


def _acl_prefix(access_level: str) -> str:
    return f"{access_level} " if access_level else ""


def _attribute_lines(attributes: List[str], indent: str) -> str:
    return "".join(f"{indent}{attribute}\n" for attribute in attributes)


def apply_param_template(label: str, name: str, type_name: str) -> str:
    prefix = "" if not label or label == name else f"{label} "
    return apply_template(PARAM_TEMPLATE, "parameter", prefix=prefix, name=name, type_name=type_name)


def apply_closure_template(
    name: str,
    param_vals: List[str],
    return_type: str,
    default_return: str,
    template: Optional[str] = None,
) -> str:
    """
    Render the handler invocation block placed inside a method stub.

    Void handlers are only called; value-returning handlers return their
    result and fall back to `default_return` when unset.
    """
    returns_value = bool(return_type) and return_type not in ("Void", "()")
    if not returns_value:
        fallback = ""
    elif default_return.startswith("fatalError("):
        fallback = f"        {default_return}"
    else:
        fallback = f"        return {default_return}"
    return apply_template(
        template or CLOSURE_TEMPLATE,
        "closure",
        name=name,
        param_vals=", ".join(param_vals),
        return_prefix="return " if returns_value else "",
        fallback=fallback,
    ).rstrip("\n")


def apply_method_template(
    name: str,
    identifier: str,
    param_decls: List[str],
    return_type: str,
    static_kind: str,
    access_control_level_description: str,
    handler_var_name: str,
    handler_var_type: str,
    handler_return: str,
    attributes: Optional[List[str]] = None,
    template: Optional[str] = None,
) -> str:
    return apply_template(
        template or METHOD_TEMPLATE,
        "method",
        attributes=_attribute_lines(attributes or [], "    "),
        access_level=_acl_prefix(access_control_level_description),
        static_prefix=f"{static_kind} " if static_kind else "",
        identifier=identifier,
        handler_var_name=handler_var_name,
        handler_var_type=handler_var_type,
        name=name,
        param_decls=", ".join(param_decls),
        return_clause=f" -> {return_type}" if return_type else "",
        handler_return=handler_return,
    )


def apply_class_template(
    mock_name: str,
    protocol_name: str,
    access_level: str,
    body: List[str],
    attributes: Optional[List[str]] = None,
    template: Optional[str] = None,
) -> str:
    return apply_template(
        template or CLASS_TEMPLATE,
        "class",
        attributes=_attribute_lines(attributes or [], ""),
        access_level=_acl_prefix(access_level),
        mock_name=mock_name,
        protocol_name=protocol_name,
        body="".join(f"\n{stub}" for stub in body),
    )

"""
Translate MapBox GL filter and value expressions into expression text.

Filters such as ["all", ["==", ["get", "class"], "river"], ["has", "name"]]
are rendered recursively: keys become column references, strings become
quoted literals and ==/!= use the null safe IS/IS NOT operators.
"""

import re
from typing import Any, List, Tuple

from .values import format_number, is_number

_SINGLE_FIELD_RX = re.compile(r"^{([^}]+)}$")
_MULTI_FIELD_RX = re.compile(r"(?={[^}]+})")

_COMPARISON_OPERATORS = {"==": "IS", "!=": "IS NOT", ">=": ">=", ">": ">", "<=": "<=", "<": "<"}


def quoted_column_ref(name: str) -> str:
    """Return name as a double quoted column reference."""
    return '"{}"'.format(str(name).replace('"', '""'))


def quoted_string(text: str) -> str:
    """Return text as a single quoted string literal."""
    return "'{}'".format(str(text).replace("\\", "\\\\").replace("'", "''"))


def quoted_value(value: Any) -> str:
    """Render a JSON scalar as an expression literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if is_number(value):
        return format_number(value)
    return quoted_string(value)


def create_field_equality_expression(field_name: str, value: Any) -> str:
    """Return a "field" = value test, or "field" IS NULL for None."""
    if value is None:
        return f"{quoted_column_ref(field_name)} IS NULL"
    return f"{quoted_column_ref(field_name)} = {quoted_value(value)}"


def parse_expression(expression: List[Any], context) -> str:
    """
    Translate a filter or value expression list.

    Unsupported operators push a warning to the context and return an
    empty string, which callers treat as "no expression".
    """
    if not isinstance(expression, (list, tuple)) or not expression:
        context.push_warning(f"Skipping non-supported expression: {expression}")
        return ""

    op = str(expression[0])
    if op in ("all", "any", "none"):
        parts = []
        for item in expression[1:]:
            part = parse_value(item, context)
            if not part:
                context.push_warning("Skipping unsupported expression")
                return ""
            parts.append(part)

        if op == "none":
            return "NOT ({})".format(") AND NOT (".join(parts))
        joiner = ") AND (" if op == "all" else ") OR ("
        return "({})".format(joiner.join(parts))

    if op == "!":
        return _parse_negation(expression, context)

    if op in _COMPARISON_OPERATORS:
        if len(expression) < 3:
            context.push_warning(f"Skipping non-supported expression: {op}")
            return ""
        value = parse_value(expression[2], context)
        if not value:
            return ""
        return f"{parse_key(expression[1])} {_COMPARISON_OPERATORS[op]} {value}"

    if op in ("has", "!has", "in", "!in", "get") and len(expression) < 2:
        context.push_warning(f"Skipping non-supported expression: {op}")
        return ""

    if op == "has":
        return f"{parse_key(expression[1])} IS NOT NULL"

    if op == "!has":
        return f"{parse_key(expression[1])} IS NULL"

    if op in ("in", "!in"):
        key = parse_key(expression[1])
        parts = []
        for item in expression[2:]:
            part = parse_value(item, context)
            if not part:
                context.push_warning("Skipping unsupported expression")
                return ""
            parts.append(part)

        if op == "in":
            return "{} IN ({})".format(key, ", ".join(parts))
        return "({0} IS NULL OR {0} NOT IN ({1}))".format(key, ", ".join(parts))

    if op == "get":
        return parse_key(expression[1])

    if op == "match":
        return _parse_match(expression, context)

    if op == "to-string":
        inner = expression[1] if len(expression) > 1 else None
        if isinstance(inner, (list, tuple)):
            inner_text = parse_expression(inner, context)
        else:
            inner_text = parse_value(inner, context)
        return f"to_string({inner_text})" if inner_text else ""

    context.push_warning(f"Skipping non-supported expression: {op}")
    return ""


def parse_key(value: Any) -> str:
    """Resolve a filter key to a column reference."""
    if value == "$type":
        return "_geom_type"
    if isinstance(value, (list, tuple)):
        if len(value) > 1:
            return str(value[1])
        return str(value[0]) if value else ""
    return quoted_column_ref(value)


def parse_value(value: Any, context) -> str:
    """Resolve a filter operand to expression text, empty when unsupported."""
    if isinstance(value, (list, tuple)):
        return parse_expression(value, context)
    if isinstance(value, str):
        return quoted_value(value)
    if is_number(value):
        return format_number(value)

    context.push_warning("Skipping unsupported expression part")
    return ""


def process_label_field(text: str) -> Tuple[str, bool]:
    """
    Convert a text-field template into (field name or expression, is_expression).

    "{name}" refers to the name field directly; templates mixing several
    fields or literal text become a concat() expression.
    """
    match = _SINGLE_FIELD_RX.match(text)
    if match:
        return match.group(1), False

    parts = [part for part in _MULTI_FIELD_RX.split(text) if part]
    if not any(part.startswith("{") for part in parts):
        return text, False

    res = []
    for part in parts:
        if not part.startswith("{") or "}" not in part:
            res.append(quoted_value(part))
            continue
        field_name, remainder = part[1:].split("}", 1)
        res.append(quoted_column_ref(field_name))
        if remainder:
            res.append(quoted_value(remainder))
    return "concat({})".format(",".join(res)), True


def _parse_negation(expression: List[Any], context) -> str:
    """Translate ["!", inner] by re-dispatching to the negated operator."""
    inner = expression[1] if len(expression) > 1 else None
    if not isinstance(inner, (list, tuple)) or not inner:
        context.push_warning("Skipping unsupported expression")
        return ""

    if inner[0] in ("has", "in"):
        # ["!", ["has", "level"]] -> ["!has", "level"]
        return parse_expression(["!" + inner[0]] + list(inner[1:]), context)

    inner_text = parse_expression(inner, context)
    return f"NOT ({inner_text})" if inner_text else ""


def _parse_match(expression: List[Any], context) -> str:
    """Translate ["match", ["get", attr], labels, output, ..., fallback]."""
    attribute = expression[1] if len(expression) > 1 else ""
    if isinstance(attribute, (list, tuple)):
        attribute = attribute[1] if len(attribute) > 1 else ""
    attribute = str(attribute)

    if len(expression) == 5 and expression[3] is True and expression[4] is False:
        # simple case, make a nice simple expression instead of a CASE statement
        labels = expression[2]
        if isinstance(labels, (list, tuple)):
            return _match_condition(attribute, labels)
        if isinstance(labels, str) or is_number(labels):
            return create_field_equality_expression(attribute, labels)
        context.push_warning("Skipping non-supported expression: match")
        return ""

    if len(expression) < 5:
        context.push_warning("Skipping non-supported expression: match")
        return ""

    case_string = "CASE "
    for i in range(2, len(expression) - 2, 2):
        labels = expression[i]
        if isinstance(labels, (list, tuple)):
            case_string += f"WHEN {_match_condition(attribute, labels)} "
        elif isinstance(labels, str) or is_number(labels):
            case_string += f"WHEN ({create_field_equality_expression(attribute, labels)}) "
        else:
            context.push_warning("Skipping non-supported expression: match")
            return ""
        case_string += f"THEN {quoted_value(expression[i + 1])} "
    case_string += f"ELSE {quoted_value(expression[-1])} END"
    return case_string


def _match_condition(attribute: str, labels: List[Any]) -> str:
    if len(labels) > 1:
        parts = ", ".join(quoted_value(label) for label in labels)
        return f"{quoted_column_ref(attribute)} IN ({parts})"
    return create_field_equality_expression(attribute, labels[0] if labels else None)

"""Field value formatting for template rendering.

format_field_value turns a resolved raw value into its display string using
the field's data type and optional FormatRule. It never raises: values that do
not parse for their type pass through unchanged.

Format rules are stored as JSON on FieldDefinition.options_json, e.g.
{"decimals": 2, "currencySymbol": "₹"}. parse_format_rule validates that JSON
with jsonschema (used when document types are saved); decode_format_rule is the
lenient variant used during generation, where a malformed rule means no rule.
"""

from __future__ import annotations

import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

import jsonschema

from docfill.domain.enums import DataType
from docfill.domain.exceptions import ValidationException
from docfill.domain.value_objects import FormatRule
from docfill.shared.telemetry.logging import get_logger
from docfill.shared.utils.dates import DATE_LAYOUTS, format_calendar_date, parse_calendar_date

logger = get_logger(__name__)

FORMAT_RULE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "dateFormat": {"type": "string", "enum": list(DATE_LAYOUTS)},
        "decimals": {"type": "integer", "minimum": 0, "maximum": 20},
        "currencySymbol": {"type": "string", "maxLength": 8},
        "transform": {"type": "string", "enum": ["uppercase", "lowercase"]},
        "prefix": {"type": "string"},
        "suffix": {"type": "string"},
    },
}


def parse_format_rule(options_json: str | None) -> FormatRule | None:
    """Decode and validate options_json.

    Returns None for absent or blank input. Raises ValidationException
    (field='options_json') for unparseable or schema-invalid JSON.
    """
    if options_json is None or not options_json.strip():
        return None
    try:
        data = json.loads(options_json)
    except json.JSONDecodeError as e:
        raise ValidationException(
            f"Format options are not valid JSON: {e.msg}", field="options_json"
        ) from e
    try:
        jsonschema.validate(instance=data, schema=FORMAT_RULE_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ValidationException(
            f"Invalid format options: {e.message}", field="options_json"
        ) from e
    return FormatRule.from_mapping(data)


def decode_format_rule(options_json: str | None) -> FormatRule | None:
    """Decode options_json, treating malformed input as no rule (warning logged)."""
    try:
        return parse_format_rule(options_json)
    except ValidationException as e:
        logger.warning("Ignoring malformed format options %r: %s", options_json, e.message)
        return None


def _format_date(raw: Any, rule: FormatRule) -> str:
    parsed = parse_calendar_date(raw, rule.date_format)
    if parsed is None:
        return str(raw)
    return format_calendar_date(parsed, rule.date_format)


def _to_decimal(raw: Any) -> Decimal | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    else:
        try:
            value = Decimal(str(raw).strip())
        except InvalidOperation:
            return None
    return value if value.is_finite() else None


def _format_number(raw: Any, rule: FormatRule) -> str:
    value = _to_decimal(raw)
    if value is None:
        return str(raw)
    if rule.decimals is not None:
        # Precision must cover every integer digit plus the requested places.
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, value.adjusted() + rule.decimals + 2)
            value = value.quantize(Decimal(1).scaleb(-rule.decimals), rounding=ROUND_HALF_UP)
    body = format(value, "f")
    if rule.currency_symbol:
        body = rule.currency_symbol + body
    return body


def _format_text(raw: Any, rule: FormatRule) -> str:
    body = str(raw)
    if rule.transform == "uppercase":
        return body.upper()
    if rule.transform == "lowercase":
        return body.lower()
    return body


def format_field_value(
    raw: Any, data_type: DataType | str, rule: FormatRule | None = None
) -> str:
    """Return the display string for raw under data_type and rule.

    - No rule: str(raw) verbatim (None -> ''), no prefix/suffix.
    - raw None: empty body, still wrapped by prefix/suffix.
    - date: re-emitted in rule.date_format (default DD-MM-YYYY); unparseable passes through.
    - number/currency: decimals fixed places (default source precision), currency
      symbol prepended; unparseable passes through.
    - text and anything else: optional uppercase/lowercase transform.
    """
    if rule is None:
        return "" if raw is None else str(raw)
    if raw is None:
        body = ""
    else:
        kind = data_type.value if isinstance(data_type, DataType) else str(data_type).lower()
        if kind == DataType.DATE.value:
            body = _format_date(raw, rule) if raw != "" else ""
        elif kind in (DataType.NUMBER.value, DataType.CURRENCY.value):
            body = _format_number(raw, rule)
        else:
            body = _format_text(raw, rule)
    return f"{rule.prefix}{body}{rule.suffix}"


def is_numeric_value(value: Any) -> bool:
    """True if value parses as a finite decimal number."""
    return _to_decimal(value) is not None

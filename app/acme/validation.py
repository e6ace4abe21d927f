from __future__ import annotations

import decimal
from dataclasses import dataclass, field
from typing import Any, Mapping

from werkzeug.datastructures import MultiDict
from wtforms import DecimalField, Form
from wtforms.validators import ValidationError


@dataclass
class ParseResult:
    ok: bool
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)


def strip_filter(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _as_formdata(raw: Mapping[str, Any]) -> Any:
    # request.form already is a MultiDict; tests and scripts pass plain dicts.
    if hasattr(raw, "getlist"):
        return raw
    return MultiDict({k: v for k, v in raw.items() if v is not None})


def parse_form(form_cls: type[Form], raw: Mapping[str, Any]) -> ParseResult:
    """
    Validate raw form input against a declarative form.

    Every field is checked, so the result carries the complete set of field errors
    rather than the first one.
    """
    form = form_cls(formdata=_as_formdata(raw))
    if not form.validate():
        return ParseResult(ok=False, errors={k: list(v) for k, v in form.errors.items()})
    return ParseResult(ok=True, data=dict(form.data))


class CoercedDecimalField(DecimalField):
    """Decimal field that coerces a blank submission to 0 instead of failing."""

    def process_formdata(self, valuelist):
        if valuelist and not (valuelist[0] or "").strip():
            self.data = decimal.Decimal(0)
            return
        super().process_formdata(valuelist)


class GreaterThan:
    """Strict lower bound; missing or non-finite values fail as well."""

    def __init__(self, minimum: int | decimal.Decimal, message: str | None = None):
        self.minimum = minimum
        self.message = message or f"Must be greater than {minimum}."

    def __call__(self, form: Form, field) -> None:
        value = field.data
        if value is None:
            raise ValidationError(self.message)
        if isinstance(value, decimal.Decimal) and not value.is_finite():
            raise ValidationError(self.message)
        if value <= self.minimum:
            raise ValidationError(self.message)

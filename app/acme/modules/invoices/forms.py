from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from wtforms import Form, StringField
from wtforms.validators import UUID, AnyOf, DataRequired, ValidationError

from app.acme.modules.invoices.models import INVOICE_STATUSES, MAX_AMOUNT_CENTS
from app.acme.validation import CoercedDecimalField, GreaterThan, strip_filter

AMOUNT_MESSAGE = "Please enter an amount greater than $0."
MAX_AMOUNT = Decimal(MAX_AMOUNT_CENTS) / 100
MAX_AMOUNT_MESSAGE = f"Please enter an amount no greater than ${MAX_AMOUNT:,}."


def to_cents(amount: Decimal) -> int:
    """Dollars -> integer cents, half-up. Callers keep ``amount`` within ``MAX_AMOUNT``."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InvoiceForm(Form):
    customer_id = StringField(
        "Customer",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Please select a customer."),
            UUID(message="Please select a customer."),
        ],
    )
    amount = CoercedDecimalField("Amount", validators=[GreaterThan(0, message=AMOUNT_MESSAGE)])
    status = StringField(
        "Status",
        filters=[strip_filter],
        validators=[AnyOf(INVOICE_STATUSES, message="Please select an invoice status.")],
    )

    def validate_amount(self, field):
        value = field.data
        # Missing, non-finite and non-positive values are GreaterThan's to report.
        if value is None or not value.is_finite() or value <= 0:
            return
        if value > MAX_AMOUNT:
            raise ValidationError(MAX_AMOUNT_MESSAGE)
        # 0.001 is > 0 but stores as 0 cents.
        if to_cents(value) < 1:
            raise ValidationError(AMOUNT_MESSAGE)


class DeleteInvoiceForm(Form):
    id = StringField(
        filters=[strip_filter],
        validators=[DataRequired(message="Invalid Invoice ID."), UUID(message="Invalid Invoice ID.")],
    )

from __future__ import annotations

from wtforms import Form, StringField
from wtforms.validators import URL, UUID, DataRequired, Email, Length

from app.acme.validation import strip_filter


class CustomerForm(Form):
    name = StringField(
        "Customer Name",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Please enter a customer name."),
            Length(max=255, message="Customer name must be at most 255 characters."),
        ],
    )
    email = StringField(
        "Email Address",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Please enter a valid email address."),
            Email(message="Please enter a valid email address."),
        ],
    )
    image_url = StringField(
        "Image URL",
        filters=[strip_filter],
        validators=[
            DataRequired(message="Please enter a valid image URL."),
            URL(message="Please enter a valid image URL."),
        ],
    )


class DeleteCustomerForm(Form):
    id = StringField(
        filters=[strip_filter],
        validators=[DataRequired(message="Invalid Customer ID."), UUID(message="Invalid Customer ID.")],
    )

"""
Signature String Builder

Serializes a PreparedPayment into the exact text the signature covers. The
gateway rebuilds the same string to verify the signature, so field order,
delimiter and rendering must never drift.
"""
from typing import Any, Iterable

from ..models.fields import CART_ITEM_FIELDS, SIGNED_FIELDS, FieldKind, SignedField
from ..models.payment import CartItem, PreparedPayment

DELIMITER = "|"


def render_scalar(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def render_flag(value: Any) -> str:
    if value is None:
        return ""
    return "true" if value else "false"


def render_cart_item(item: CartItem) -> str:
    """Four sub-fields of one item, pipe-joined."""
    return DELIMITER.join(render_scalar(getattr(item, name)) for name in CART_ITEM_FIELDS)


def render_record_list(items: Iterable[CartItem]) -> str:
    # Only two levels exist: payment fields and cart item fields
    if items is None:
        return ""
    return DELIMITER.join(render_cart_item(item) for item in items)


def render_field(field: SignedField, value: Any) -> str:
    """Render one field value according to its kind."""
    if field.kind is FieldKind.SCALAR:
        return render_scalar(value)
    if field.kind is FieldKind.FLAG:
        return render_flag(value)
    if field.kind is FieldKind.RECORD_LIST:
        return render_record_list(value)
    raise TypeError(f"Unsupported field kind {field.kind!r} for {field.wire_name}")


def signature_string(prepared: PreparedPayment) -> str:
    """
    Build the canonical signature string.

    Example:
        "M1|12345|20240101120000|payment|card|100|CZK|true|https://shop/ret|POST|Shoes|1|100||Shop, 12345|||CZ"
    """
    return DELIMITER.join(
        render_field(field, getattr(prepared, field.attribute))
        for field in SIGNED_FIELDS
    )

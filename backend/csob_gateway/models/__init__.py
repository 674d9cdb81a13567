"""
Payment request models.

Exports the request builder, the prepared (signable) payment and the signed
field descriptors.
"""
from .fields import CART_ITEM_FIELDS, SIGNATURE_FIELD, SIGNED_FIELDS, FieldKind, SignedField
from .payment import CartItem, PaymentRequest, PreparedPayment

__all__ = [
    "CART_ITEM_FIELDS",
    "SIGNATURE_FIELD",
    "SIGNED_FIELDS",
    "FieldKind",
    "SignedField",
    "CartItem",
    "PaymentRequest",
    "PreparedPayment",
]

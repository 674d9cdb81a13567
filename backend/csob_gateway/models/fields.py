"""
Signed Field Descriptors

The gateway recomputes the signature string from the fields it receives, in
a fixed order. That order lives here and nowhere else.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class FieldKind(str, Enum):
    """How a field value is rendered into the signature string."""
    SCALAR = "scalar"
    FLAG = "flag"
    RECORD_LIST = "record_list"


@dataclass(frozen=True)
class SignedField:
    """One field of the signed payload."""
    wire_name: str  # name the gateway uses (camelCase)
    attribute: str  # attribute on PreparedPayment
    kind: FieldKind = FieldKind.SCALAR


SIGNED_FIELDS: Tuple[SignedField, ...] = (
    SignedField("merchantId", "merchant_id"),
    SignedField("orderNo", "order_no"),
    SignedField("dttm", "dttm"),
    SignedField("payOperation", "pay_operation"),
    SignedField("payMethod", "pay_method"),
    SignedField("totalAmount", "total_amount"),
    SignedField("currency", "currency"),
    SignedField("closePayment", "close_payment", FieldKind.FLAG),
    SignedField("returnUrl", "return_url"),
    SignedField("returnMethod", "return_method"),
    SignedField("cart", "cart", FieldKind.RECORD_LIST),
    SignedField("description", "description"),
    SignedField("merchantData", "merchant_data"),
    SignedField("customerId", "customer_id"),
    SignedField("language", "language"),
)

# Sub-fields of one cart item, in render order
CART_ITEM_FIELDS: Tuple[str, ...] = ("name", "quantity", "amount", "description")

SIGNATURE_FIELD = "signature"

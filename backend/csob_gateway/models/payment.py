"""
Pydantic Payment Request Models

PaymentRequest collects a merchant's order data while it is being built.
PreparedPayment is the frozen, validated result of preparation and the only
thing that can be signed.
"""
import base64
import binascii
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from ..exceptions import InvalidInputError, StructuralLimitError
from ..text import shorten

logger = logging.getLogger(__name__)

MAX_CART_ITEMS = 2
MAX_MERCHANT_DATA_LENGTH = 255
CART_ITEM_NAME_LENGTH = 20
CART_ITEM_DESCRIPTION_LENGTH = 40

Quantity = Union[int, Decimal]


def _coerce_quantity(quantity) -> Quantity:
    """Accept any numeric quantity >= 1; integral values come back as int."""
    value = None
    if isinstance(quantity, (int, float, Decimal, str)) and not isinstance(quantity, bool):
        try:
            value = Decimal(str(quantity).strip())
        except InvalidOperation:
            value = None

    if value is None or not value.is_finite() or value < 1:
        raise InvalidInputError(
            f"Invalid quantity: {quantity}. It must be numeric and >= 1",
            {"quantity": str(quantity)}
        )

    if value == value.to_integral_value():
        return int(value)
    return value.normalize()


class CartItem(BaseModel):
    """One line of the order. Amount is the total for all pieces, in minor units."""
    name: str = Field(max_length=CART_ITEM_NAME_LENGTH)
    quantity: Quantity
    amount: int
    description: str = Field(default="", max_length=CART_ITEM_DESCRIPTION_LENGTH)

    model_config = {"frozen": True, "extra": "forbid"}


class PaymentRequest(BaseModel):
    """
    Payment request under construction.

    Only the order number is mandatory. Everything left empty is filled in
    from merchant configuration or gateway defaults by prepare().

    Example:
        request = PaymentRequest("12345")
        request.add_cart_item("Shoes", 1, 149900)
        prepared = request.prepare(settings)
    """
    order_no: Optional[str]
    currency: Optional[str] = None
    close_payment: Optional[bool] = None  # None means "use default" (True)
    return_url: Optional[str] = None
    return_method: Optional[str] = None
    description: Optional[str] = None
    customer_id: Optional[str] = None
    language: Optional[str] = None
    pay_operation: Optional[str] = None
    pay_method: Optional[str] = None

    _cart: List[CartItem] = PrivateAttr(default_factory=list)
    _merchant_data: Optional[str] = PrivateAttr(default=None)
    _pay_id: Optional[str] = PrivateAttr(default=None)

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
        "coerce_numbers_to_str": True,
    }

    def __init__(
        self,
        order_no: Optional[str],
        merchant_data: Optional[str] = None,
        customer_id: Optional[str] = None,
        **data
    ):
        super().__init__(order_no=order_no, customer_id=customer_id or None, **data)
        if merchant_data:
            self.set_merchant_data(merchant_data)

    @property
    def cart(self) -> Tuple[CartItem, ...]:
        return tuple(self._cart)

    @property
    def merchant_data(self) -> Optional[str]:
        """Merchant data in its base64 form, as it will be sent."""
        return self._merchant_data

    def add_cart_item(
        self,
        name: str,
        quantity,
        amount: int,
        description: str = ""
    ) -> "PaymentRequest":
        """
        Add one cart item.

        The gateway accepts one or two items per payment.

        Args:
            name: Name the customer will see (cut to 20 characters on a word boundary)
            quantity: Number of pieces, numeric and >= 1
            amount: Total price of the line in minor units (cents, halere)
            description: Auxiliary description (cut to 40 characters)

        Returns:
            self, for chaining

        Raises:
            StructuralLimitError: When the cart already holds two items
            InvalidInputError: When quantity or amount is invalid
        """
        if len(self._cart) >= MAX_CART_ITEMS:
            raise StructuralLimitError(
                f"The gateway supports only up to {MAX_CART_ITEMS} cart items in a single payment",
                {"order_no": self.order_no, "cart_size": len(self._cart)}
            )

        quantity = _coerce_quantity(quantity)

        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidInputError(
                f"Invalid amount: {amount}. It must be an integer in minor currency units",
                {"amount": str(amount)}
            )

        item = CartItem(
            name=shorten(name, CART_ITEM_NAME_LENGTH, word_safe=True),
            quantity=quantity,
            amount=amount,
            description=shorten(description, CART_ITEM_DESCRIPTION_LENGTH),
        )
        self._cart.append(item)
        logger.debug(f"Order {self.order_no}: added cart item {item.name!r} ({item.amount})")
        return self

    def set_merchant_data(self, data: Union[str, bytes], already_encoded: bool = False) -> "PaymentRequest":
        """
        Set arbitrary data the gateway returns when the customer comes back.

        Args:
            data: Raw data, or base64 text when already_encoded is True
            already_encoded: True if data is already base64 encoded

        Raises:
            InvalidInputError: When the encoded form exceeds 255 characters,
                already-encoded data is not valid base64, or the data is
                not UTF-8 text
        """
        if isinstance(data, str):
            data = data.encode("utf-8")

        if already_encoded:
            try:
                raw = base64.b64decode(data, validate=True)
            except binascii.Error as e:
                raise InvalidInputError(
                    "Merchant data marked as encoded is not valid base64",
                    {"error": str(e)}
                ) from e
            encoded = data.decode("ascii")
        else:
            raw = data
            encoded = base64.b64encode(data).decode("ascii")

        # get_merchant_data() hands back text
        try:
            raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidInputError(
                "Merchant data must be UTF-8 text",
                {"error": str(e)}
            ) from e

        if len(encoded) > MAX_MERCHANT_DATA_LENGTH:
            raise InvalidInputError(
                f"Merchant data can not be longer than {MAX_MERCHANT_DATA_LENGTH} characters after base64 encoding",
                {"encoded_length": len(encoded)}
            )

        self._merchant_data = encoded
        return self

    def get_merchant_data(self) -> str:
        """Merchant data decoded back to the original value, or "" if unset."""
        if self._merchant_data:
            return base64.b64decode(self._merchant_data).decode("utf-8")
        return ""

    def get_pay_id(self) -> Optional[str]:
        """PayID assigned by the gateway after payment/init."""
        return self._pay_id

    def set_pay_id(self, pay_id: Optional[str]) -> None:
        self._pay_id = pay_id

    def prepare(
        self,
        config,
        now: Union[None, datetime, Callable[[], datetime]] = None
    ) -> "PreparedPayment":
        """Validate and fill defaults; see services.normalizer.prepare."""
        from ..services.normalizer import prepare
        return prepare(self, config, now=now)


class PreparedPayment(BaseModel):
    """
    Validated payment request, ready for signing.

    Produced by services.normalizer.prepare(). Frozen, and re-checks its
    own invariants so an invalid instance cannot be built by hand either.
    """
    merchant_id: str
    order_no: str = Field(pattern=r"^[0-9]{1,10}$")
    dttm: str = Field(pattern=r"^[0-9]{14}$")
    pay_operation: str
    pay_method: str
    total_amount: int
    currency: str
    close_payment: bool
    return_url: str = Field(min_length=1)
    return_method: str
    cart: Tuple[CartItem, ...] = Field(min_length=1, max_length=MAX_CART_ITEMS)
    description: str = Field(max_length=240)
    merchant_data: Optional[str] = Field(default=None, max_length=MAX_MERCHANT_DATA_LENGTH)
    customer_id: Optional[str] = Field(default=None, max_length=50)
    language: str

    model_config = {"frozen": True, "extra": "forbid"}

    @model_validator(mode='after')
    def validate_total_amount(self):
        """Ensure total amount matches the cart."""
        expected = sum(item.amount for item in self.cart)
        if self.total_amount != expected:
            raise ValueError(f"Total amount {self.total_amount} != sum of cart items({expected})")
        return self

"""
Payment Preparation Service

Turns a PaymentRequest into a PreparedPayment: fills defaults from merchant
configuration, stamps dttm, validates structure and computes the total.

Preparation only reads the request; the builder is left as the caller
built it and can be prepared again (with a fresh dttm).
"""
import logging
import re
from datetime import datetime
from typing import Callable, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import DATE_FORMAT, Settings
from ..exceptions import ConfigurationError, InvalidInputError, StructuralLimitError
from ..models.payment import PaymentRequest, PreparedPayment
from ..text import shorten

logger = logging.getLogger(__name__)

ORDER_NO_PATTERN = re.compile(r"[0-9]{1,10}")

DEFAULT_PAY_OPERATION = "payment"
DEFAULT_PAY_METHOD = "card"
DEFAULT_CURRENCY = "CZK"
DEFAULT_LANGUAGE = "CZ"

DESCRIPTION_LENGTH = 240
DESCRIPTION_ENDING = "..."
CUSTOMER_ID_LENGTH = 50

Clock = Union[None, datetime, Callable[[], datetime]]


def format_dttm(config: Settings, now: Clock = None) -> str:
    """
    Current time in the gateway's dttm format (YYYYMMDDHHMMSS).

    Args:
        config: Merchant settings (provides the gateway timezone)
        now: Fixed datetime, or a callable returning one; defaults to the wall clock

    Raises:
        ConfigurationError: If the configured timezone is unknown
    """
    try:
        zone = ZoneInfo(config.gateway_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown gateway timezone: {config.gateway_timezone}",
            {"gateway_timezone": config.gateway_timezone}
        ) from e

    if now is None:
        moment = datetime.now(zone)
    elif isinstance(now, datetime):
        moment = now
    else:
        moment = now()

    if moment.tzinfo is not None:
        moment = moment.astimezone(zone)

    return moment.strftime(DATE_FORMAT)


def prepare(request: PaymentRequest, config: Settings, now: Clock = None) -> PreparedPayment:
    """
    Validate a payment request and fill in everything the gateway needs.

    Steps, in order:
    1. merchant_id from config
    2. dttm stamped with the current time
    3. gateway defaults for pay_operation, pay_method, currency, language, close_payment
    4. return_url / return_method from config when not set on the request
    5. description defaulted to "{shop_name}, {order_no}" and cut to 240 chars
    6. customer_id cut to 50 chars
    7. cart must not be empty
    8. order_no must be 1-10 digits
    9. total_amount computed from the cart

    Args:
        request: Payment request built by the caller
        config: Merchant settings
        now: Optional clock override for dttm

    Returns:
        Frozen PreparedPayment

    Raises:
        ConfigurationError: No return URL on the request or in config
        StructuralLimitError: Empty cart
        InvalidInputError: Missing or malformed order number
    """
    merchant_id = config.merchant_id
    dttm = format_dttm(config, now)
    logger.debug(f"Preparing order {request.order_no} for merchant {merchant_id} at {dttm}")

    pay_operation = request.pay_operation or DEFAULT_PAY_OPERATION
    pay_method = request.pay_method or DEFAULT_PAY_METHOD
    currency = request.currency or DEFAULT_CURRENCY
    language = request.language or DEFAULT_LANGUAGE
    close_payment = True if request.close_payment is None else request.close_payment

    return_url = request.return_url or config.return_url
    if not return_url:
        raise ConfigurationError(
            "A return URL must be set, either on the payment request or in merchant configuration",
            {"order_no": request.order_no}
        )
    return_method = request.return_method or config.return_method

    description = request.description or f"{config.shop_name}, {request.order_no}"
    description = shorten(description, DESCRIPTION_LENGTH, DESCRIPTION_ENDING)

    customer_id = shorten(request.customer_id, CUSTOMER_ID_LENGTH, word_safe=True) or None

    cart = request.cart
    if not cart:
        raise StructuralLimitError(
            "Cart is empty. Add one or two items using add_cart_item()",
            {"order_no": request.order_no}
        )

    order_no = request.order_no
    if not order_no or not ORDER_NO_PATTERN.fullmatch(order_no):
        raise InvalidInputError(
            "Invalid order number: it must be a non-empty numeric value, 10 characters max",
            {"order_no": order_no}
        )

    total_amount = sum(item.amount for item in cart)

    prepared = PreparedPayment(
        merchant_id=merchant_id,
        order_no=order_no,
        dttm=dttm,
        pay_operation=pay_operation,
        pay_method=pay_method,
        total_amount=total_amount,
        currency=currency,
        close_payment=close_payment,
        return_url=return_url,
        return_method=return_method,
        cart=cart,
        description=description,
        merchant_data=request.merchant_data,
        customer_id=customer_id,
        language=language,
    )

    logger.info(f"Prepared order {order_no}: {len(cart)} cart item(s), total {total_amount} {currency}")
    return prepared

"""
Signature Service for Payment Requests

Signs a prepared payment and exports it as the ordered wire payload
sent to payment/init.
"""
import logging
from typing import Any, Dict, List

from ..config import Settings
from ..crypto import Signer, sign_string
from ..exceptions import SigningError
from ..models.fields import CART_ITEM_FIELDS, SIGNATURE_FIELD, SIGNED_FIELDS, FieldKind
from ..models.payment import PreparedPayment
from .canonical import render_field, render_scalar, signature_string

logger = logging.getLogger(__name__)


def export_cart(items) -> List[Dict[str, str]]:
    """Cart as a list of records; it is only flattened for the signature string."""
    return [
        {name: render_scalar(getattr(item, name)) for name in CART_ITEM_FIELDS}
        for item in items
    ]


def export_unsigned(prepared: PreparedPayment) -> Dict[str, Any]:
    """
    Export all signed fields in gateway order, without the signature.

    Values are strings rendered the same way as in the signature string,
    except the cart which stays structured.
    """
    payload: Dict[str, Any] = {}
    for field in SIGNED_FIELDS:
        value = getattr(prepared, field.attribute)
        if field.kind is FieldKind.RECORD_LIST:
            payload[field.wire_name] = export_cart(value)
        else:
            payload[field.wire_name] = render_field(field, value)
    return payload


def export_signed(
    prepared: PreparedPayment,
    config: Settings,
    signer: Signer = sign_string
) -> Dict[str, Any]:
    """
    Sign a prepared payment and export the wire payload.

    Args:
        prepared: Payment returned by prepare()
        config: Merchant settings (private key file and passphrase)
        signer: Signing capability, sign(message, key_file, passphrase)

    Returns:
        Ordered dict of all fields with "signature" appended last

    Raises:
        SigningError: If the signer fails or returns an empty signature
    """
    message = signature_string(prepared)

    try:
        signature = signer(message, config.private_key_file, config.private_key_password)
    except SigningError:
        raise
    except Exception as e:
        logger.error(f"Signing order {prepared.order_no} failed: {e}")
        raise SigningError(
            f"Signing failed: {e}",
            {"order_no": prepared.order_no, "error_type": type(e).__name__}
        ) from e

    if not signature:
        raise SigningError(
            "Signer returned an empty signature",
            {"order_no": prepared.order_no}
        )

    payload = export_unsigned(prepared)
    payload[SIGNATURE_FIELD] = signature

    logger.info(f"Signed order {prepared.order_no}")
    return payload

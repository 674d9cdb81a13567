"""
Payments API Endpoints

Builds a signed payment/init payload from order data. Sending the payload
to the gateway is left to the caller's HTTP client.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging

from ..config import Settings, get_settings
from ..crypto import Signer, sign_string
from ..models.payment import PaymentRequest
from ..services.canonical import signature_string
from ..services.signature_service import export_signed

logger = logging.getLogger(__name__)

router = APIRouter()


def get_signer() -> Signer:
    """FastAPI dependency returning the signing capability."""
    return sign_string


class CartItemBody(BaseModel):
    name: str
    quantity: Any = 1  # validated by add_cart_item
    amount: Any  # validated by add_cart_item
    description: str = ""


class PaymentInitBody(BaseModel):
    """Order data for one payment. Empty optional fields use gateway/config defaults."""
    order_no: str
    cart: List[CartItemBody] = []
    merchant_data: Optional[str] = None
    customer_id: Optional[str] = None
    currency: Optional[str] = None
    language: Optional[str] = None
    close_payment: Optional[bool] = None
    return_url: Optional[str] = None
    return_method: Optional[str] = None
    description: Optional[str] = None

    model_config = {
        "coerce_numbers_to_str": True,
        "json_schema_extra": {
            "example": {
                "order_no": "12345",
                "cart": [
                    {"name": "Running shoes", "quantity": 1, "amount": 149900, "description": "Size 42"}
                ],
                "merchant_data": "basket=8871",
                "customer_id": "jane@example.com"
            }
        }
    }


@router.post("/payments/init-payload")
def init_payload_endpoint(
    body: PaymentInitBody,
    config: Settings = Depends(get_settings),
    signer: Signer = Depends(get_signer)
) -> Dict[str, Any]:
    """
    Prepare and sign a payment/init payload.

    Request Body:
        PaymentInitBody (order number and one or two cart items at minimum)

    Returns:
        {
            "order_no": str,
            "signature_string": str,  # exact text that was signed
            "payload": dict           # ordered wire payload incl. signature
        }

    Errors:
        400 csob:input:invalid / csob:request:structural_limit
        500 csob:config:missing / csob:signature:failed
    """
    logger.info(f"Building payment/init payload for order: {body.order_no}")

    request = PaymentRequest(
        body.order_no,
        merchant_data=body.merchant_data,
        customer_id=body.customer_id,
        currency=body.currency,
        language=body.language,
        close_payment=body.close_payment,
        return_url=body.return_url,
        return_method=body.return_method,
        description=body.description,
    )
    for item in body.cart:
        request.add_cart_item(item.name, item.quantity, item.amount, item.description)

    prepared = request.prepare(config)
    payload = export_signed(prepared, config, signer)

    return {
        "order_no": prepared.order_no,
        "signature_string": signature_string(prepared),
        "payload": payload
    }

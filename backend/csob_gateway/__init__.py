"""
CSOB Gateway - payment/init request core.

Builds, validates, canonicalizes and signs card payment requests for the
CSOB payment gateway.
"""
from .exceptions import (
    ConfigurationError,
    GatewayError,
    InvalidInputError,
    SigningError,
    StructuralLimitError,
)
from .models import CartItem, PaymentRequest, PreparedPayment
from .services import export_signed, export_unsigned, prepare, signature_string

__version__ = "0.1.0"
__all__ = [
    "CartItem",
    "PaymentRequest",
    "PreparedPayment",
    "prepare",
    "signature_string",
    "export_signed",
    "export_unsigned",
    "GatewayError",
    "InvalidInputError",
    "StructuralLimitError",
    "ConfigurationError",
    "SigningError",
]

"""
CSOB Gateway Exception Hierarchy

Stable error codes for every failure the payment request core can raise.
All errors use the csob: prefix so API consumers can match on them.
"""
from typing import Optional, Dict, Any


class GatewayError(Exception):
    """
    Base exception for all payment request errors.

    A request either prepares and signs completely or one of these is
    raised; there is no partially valid state.
    """

    status_code: int = 400

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(GatewayError):
    """
    Malformed caller input.

    Examples:
    - Cart item quantity that is not numeric, zero or negative
    - Merchant data longer than 255 characters after base64 encoding
    - Order number that is not 1 to 10 digits
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("csob:input:invalid", message, details)


class StructuralLimitError(GatewayError):
    """
    Request violates the gateway's structural limits.

    Examples:
    - Third cart item added
    - Empty cart at preparation time
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("csob:request:structural_limit", message, details)


class ConfigurationError(GatewayError):
    """
    Required value missing from both the request and merchant configuration.

    Example:
    - No return URL on the request and none configured
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("csob:config:missing", message, details)


class SigningError(GatewayError):
    """
    The signing capability failed.

    Examples:
    - Private key file missing or unreadable
    - Wrong key passphrase
    - Key is not an RSA key
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("csob:signature:failed", message, details)

"""
RSA Signing for Gateway Requests

The gateway verifies every request with the merchant's public key:
RSA PKCS#1 v1.5 over SHA-1, signature carried as base64 text.

Any callable with the Signer signature can replace sign_string(), which is
how tests sign without key files.
"""
import base64
import binascii
import logging
from typing import Callable, Optional

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .exceptions import SigningError

logger = logging.getLogger(__name__)

# sign(message, key_file, passphrase) -> base64 signature
Signer = Callable[[str, str, Optional[str]], str]


def load_private_key(key_file: str, passphrase: Optional[str] = None) -> rsa.RSAPrivateKey:
    """
    Load a PEM RSA private key.

    Raises:
        SigningError: File missing/unreadable, wrong passphrase, or not an RSA key
    """
    try:
        with open(key_file, "rb") as fh:
            pem = fh.read()
    except OSError as e:
        logger.error(f"Cannot read private key file {key_file}: {e}")
        raise SigningError(
            f"Cannot read private key file: {key_file}",
            {"key_file": key_file}
        ) from e

    password = passphrase.encode("utf-8") if passphrase else None
    try:
        key = serialization.load_pem_private_key(pem, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.error(f"Cannot load private key {key_file}: {e}")
        raise SigningError(
            "Cannot load private key (bad key file or passphrase)",
            {"key_file": key_file}
        ) from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError(
            "Private key is not an RSA key",
            {"key_file": key_file, "key_type": type(key).__name__}
        )
    return key


def sign_string(message: str, key_file: str, passphrase: Optional[str] = None) -> str:
    """
    Sign a message with the merchant's private key.

    Args:
        message: Signature string (signed as UTF-8)
        key_file: Path to PEM private key
        passphrase: Key passphrase, if the key is encrypted

    Returns:
        Base64-encoded signature

    Raises:
        SigningError: If the key can not be loaded
    """
    key = load_private_key(key_file, passphrase)
    signature = key.sign(message.encode("utf-8"), padding.PKCS1v15(), hashes.SHA1())
    return base64.b64encode(signature).decode("ascii")


def verify_string(message: str, signature: str, public_key_file: str) -> bool:
    """
    Verify a base64 signature against a PEM public key.

    Returns:
        True if signature valid, False if it does not match or is malformed

    Raises:
        SigningError: If the public key can not be loaded
    """
    try:
        with open(public_key_file, "rb") as fh:
            public_key = serialization.load_pem_public_key(fh.read())
    except (OSError, ValueError, UnsupportedAlgorithm) as e:
        raise SigningError(
            f"Cannot load public key: {public_key_file}",
            {"key_file": public_key_file}
        ) from e

    if not isinstance(public_key, rsa.RSAPublicKey):
        raise SigningError(
            "Public key is not an RSA key",
            {"key_file": public_key_file, "key_type": type(public_key).__name__}
        )

    try:
        raw = base64.b64decode(signature, validate=True)
    except (binascii.Error, ValueError):
        return False

    try:
        public_key.verify(raw, message.encode("utf-8"), padding.PKCS1v15(), hashes.SHA1())
    except InvalidSignature:
        return False
    return True

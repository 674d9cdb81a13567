"""
Shared fixtures: merchant settings, fixed clock, stub signer and RSA keys.
"""
from datetime import datetime

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from csob_gateway.config import Settings
from csob_gateway.models.payment import PaymentRequest

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5)
FIXED_DTTM = "20240102030405"
KEY_PASSPHRASE = "secret"


class StubSigner:
    """Records calls and returns a fixed signature."""

    def __init__(self, signature="stub-signature"):
        self.signature = signature
        self.calls = []

    def __call__(self, message, key_file, passphrase):
        self.calls.append((message, key_file, passphrase))
        return self.signature


@pytest.fixture
def config():
    return Settings(
        merchant_id="M1MIPS0000",
        shop_name="Shop",
        return_url="https://shop.example/return",
        return_method="POST",
        private_key_file="/keys/merchant.key",
        private_key_password="pw",
        gateway_timezone="Europe/Prague",
    )


@pytest.fixture
def stub_signer():
    return StubSigner()


@pytest.fixture
def request_one_item():
    request = PaymentRequest("12345")
    request.add_cart_item("Shoes", 1, 100)
    return request


@pytest.fixture
def request_two_items():
    request = PaymentRequest("12345")
    request.add_cart_item("A", 1, 50, "d1")
    request.add_cart_item("B", 2, 50, "d2")
    return request


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def key_files(tmp_path, rsa_key):
    """Encrypted private key and matching public key as PEM files."""
    private_file = tmp_path / "merchant.key"
    private_file.write_bytes(rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.BestAvailableEncryption(KEY_PASSPHRASE.encode()),
    ))
    public_file = tmp_path / "merchant.pub"
    public_file.write_bytes(rsa_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ))
    return str(private_file), str(public_file)

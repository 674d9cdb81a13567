import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from csob_gateway.crypto import sign_string, verify_string
from csob_gateway.exceptions import SigningError
from csob_gateway.models.fields import SIGNED_FIELDS
from csob_gateway.services.canonical import signature_string
from csob_gateway.services.normalizer import prepare
from csob_gateway.services.signature_service import export_signed, export_unsigned

from .conftest import FIXED_NOW, KEY_PASSPHRASE, StubSigner


@pytest.fixture
def prepared(config, request_two_items):
    request_two_items.set_merchant_data("hello")
    return prepare(request_two_items, config, now=FIXED_NOW)


class TestExport:

    def test_keys_in_field_order_with_signature_last(self, prepared, config, stub_signer):
        payload = export_signed(prepared, config, stub_signer)
        assert list(payload) == [field.wire_name for field in SIGNED_FIELDS] + ["signature"]
        assert payload["signature"] == "stub-signature"

    def test_values_rendered_as_strings(self, prepared, config, stub_signer):
        payload = export_signed(prepared, config, stub_signer)
        assert payload["totalAmount"] == "100"
        assert payload["closePayment"] == "true"
        assert payload["merchantData"] == "aGVsbG8="
        assert payload["customerId"] == ""
        assert payload["dttm"] == "20240102030405"

    def test_cart_stays_structured(self, prepared, config, stub_signer):
        payload = export_signed(prepared, config, stub_signer)
        assert payload["cart"] == [
            {"name": "A", "quantity": "1", "amount": "50", "description": "d1"},
            {"name": "B", "quantity": "2", "amount": "50", "description": "d2"},
        ]

    def test_signer_gets_signature_string_and_key(self, prepared, config, stub_signer):
        export_signed(prepared, config, stub_signer)
        assert stub_signer.calls == [(signature_string(prepared), "/keys/merchant.key", "pw")]

    def test_unsigned_export(self, prepared, config, stub_signer):
        unsigned = export_unsigned(prepared)
        signed = export_signed(prepared, config, stub_signer)
        assert "signature" not in unsigned
        assert {k: v for k, v in signed.items() if k != "signature"} == unsigned


class TestSignerFailures:

    def test_signing_error_passes_through(self, prepared, config):
        error = SigningError("bad key")

        def signer(message, key_file, passphrase):
            raise error

        with pytest.raises(SigningError) as exc_info:
            export_signed(prepared, config, signer)
        assert exc_info.value is error

    def test_other_errors_wrapped(self, prepared, config):
        def signer(message, key_file, passphrase):
            raise OSError("disk gone")

        with pytest.raises(SigningError) as exc_info:
            export_signed(prepared, config, signer)
        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.details["error_type"] == "OSError"

    def test_empty_signature_rejected(self, prepared, config):
        with pytest.raises(SigningError):
            export_signed(prepared, config, StubSigner(signature=""))


class TestRsa:

    def test_sign_and_verify(self, key_files):
        private_file, public_file = key_files
        signature = sign_string("M1|12345|x", private_file, KEY_PASSPHRASE)
        assert verify_string("M1|12345|x", signature, public_file)

    def test_tampered_message_fails(self, key_files):
        private_file, public_file = key_files
        signature = sign_string("M1|12345|x", private_file, KEY_PASSPHRASE)
        assert not verify_string("M1|12346|x", signature, public_file)

    def test_malformed_signature_fails(self, key_files):
        assert not verify_string("M1|12345|x", "!!not-base64!!", key_files[1])

    def test_wrong_passphrase(self, key_files):
        with pytest.raises(SigningError):
            sign_string("message", key_files[0], "wrong")

    def test_missing_passphrase(self, key_files):
        with pytest.raises(SigningError):
            sign_string("message", key_files[0])

    def test_missing_key_file(self, tmp_path):
        with pytest.raises(SigningError):
            sign_string("message", str(tmp_path / "missing.key"))

    def test_non_rsa_key(self, tmp_path):
        key = ec.generate_private_key(ec.SECP256R1())
        key_file = tmp_path / "ec.key"
        key_file.write_bytes(key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ))
        with pytest.raises(SigningError):
            sign_string("message", str(key_file))

    def test_export_with_real_key(self, prepared, config, key_files):
        private_file, public_file = key_files
        config = config.model_copy(update={
            "private_key_file": private_file,
            "private_key_password": KEY_PASSPHRASE,
        })

        payload = export_signed(prepared, config)

        assert verify_string(signature_string(prepared), payload["signature"], public_file)

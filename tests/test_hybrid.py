"""
Tests for encrypt-then-sign / verify-then-decrypt.
"""

import pytest

from securecrypt.core.crypto.asymmetric import AsymmetricEngine, KeyAlgorithm
from securecrypt.core.crypto.hybrid import HybridProtocol
from securecrypt.core.errors import InvalidSignature, MessageTooLong


@pytest.fixture
def protocol(asymmetric_engine):
    return HybridProtocol(asymmetric_engine)


class TestEncryptAndSign:
    """Sender side."""

    def test_signature_covers_ciphertext(self, protocol, asymmetric_engine, rsa_pair, ecdsa_pair):
        sealed = protocol.encrypt_and_sign("wire transfer", rsa_pair.public_key, ecdsa_pair.private_key)

        assert sealed.signature_algorithm is KeyAlgorithm.ECDSA
        assert asymmetric_engine.verify(sealed.ciphertext, sealed.signature, ecdsa_pair.public_key)
        assert not asymmetric_engine.verify("wire transfer", sealed.signature, ecdsa_pair.public_key)

    def test_encrypts_before_signing(self, rsa_pair, ecdsa_pair):
        engine = AsymmetricEngine()
        calls = []
        original_encrypt, original_sign = engine.encrypt_rsa, engine.sign

        class Recording:
            def encrypt_rsa(self, *args):
                calls.append("encrypt")
                return original_encrypt(*args)

            def sign(self, *args):
                calls.append("sign")
                return original_sign(*args)

        HybridProtocol(Recording()).encrypt_and_sign("hi", rsa_pair.public_key, ecdsa_pair.private_key)
        assert calls == ["encrypt", "sign"]

    def test_message_too_long_propagates(self, protocol, rsa_pair, ecdsa_pair):
        with pytest.raises(MessageTooLong):
            protocol.encrypt_and_sign("z" * 300, rsa_pair.public_key, ecdsa_pair.private_key)

    def test_boundary_payload(self, protocol, rsa_pair, dsa_pair):
        data = protocol.encrypt_and_sign("hi", rsa_pair.public_key, dsa_pair.private_key).to_dict()
        assert data["algorithm"] == {"encryption": "RSA-OAEP", "signature": "DSA"}
        assert set(data) == {"encryptedData", "signature", "algorithm"}


class TestVerifyAndDecrypt:
    """Recipient side."""

    @pytest.mark.parametrize("signer", ["ecdsa_pair", "dsa_pair"])
    def test_round_trip(self, request, protocol, rsa_pair, signer):
        pair = request.getfixturevalue(signer)
        sealed = protocol.encrypt_and_sign("meet at noon", rsa_pair.public_key, pair.private_key)

        plaintext = protocol.verify_and_decrypt(
            sealed.ciphertext, sealed.signature, pair.public_key, rsa_pair.private_key
        )
        assert plaintext == "meet at noon"

    def test_corrupted_signature_never_decrypts(self, monkeypatch, protocol, rsa_pair, ecdsa_pair):
        sealed = protocol.encrypt_and_sign("secret", rsa_pair.public_key, ecdsa_pair.private_key)
        corrupted = bytearray(sealed.signature)
        corrupted[-1] ^= 0x01

        def fail_if_called(*args, **kwargs):
            raise AssertionError("decrypt_rsa reached with an unverified ciphertext")

        monkeypatch.setattr(AsymmetricEngine, "decrypt_rsa", fail_if_called)

        with pytest.raises(InvalidSignature):
            protocol.verify_and_decrypt(
                sealed.ciphertext, bytes(corrupted), ecdsa_pair.public_key, rsa_pair.private_key
            )

    def test_tampered_ciphertext_rejected(self, protocol, rsa_pair, ecdsa_pair):
        sealed = protocol.encrypt_and_sign("secret", rsa_pair.public_key, ecdsa_pair.private_key)
        tampered = bytearray(sealed.ciphertext)
        tampered[0] ^= 0x80

        with pytest.raises(InvalidSignature):
            protocol.verify_and_decrypt(
                bytes(tampered), sealed.signature, ecdsa_pair.public_key, rsa_pair.private_key
            )

    def test_wrong_sender_key_rejected(self, protocol, asymmetric_engine, rsa_pair, ecdsa_pair):
        sealed = protocol.encrypt_and_sign("secret", rsa_pair.public_key, ecdsa_pair.private_key)
        impostor = asymmetric_engine.generate_ecdsa_key_pair("P-256")

        with pytest.raises(InvalidSignature):
            protocol.verify_and_decrypt(
                sealed.ciphertext, sealed.signature, impostor.public_key, rsa_pair.private_key
            )

    @pytest.mark.parametrize("signature", [b"\x00garbage", b"not-der-at-all", b""])
    def test_non_der_signature_never_decrypts(self, monkeypatch, protocol, rsa_pair, dsa_pair, signature):
        sealed = protocol.encrypt_and_sign("secret", rsa_pair.public_key, dsa_pair.private_key)

        def fail_if_called(*args, **kwargs):
            raise AssertionError("decrypt_rsa reached with an unverified ciphertext")

        monkeypatch.setattr(AsymmetricEngine, "decrypt_rsa", fail_if_called)

        with pytest.raises(InvalidSignature):
            protocol.verify_and_decrypt(
                sealed.ciphertext, signature, dsa_pair.public_key, rsa_pair.private_key
            )

"""
tests/test_crypto.py

SignatureEngine contracts.

  - sign is deterministic and verify(sign(m)) holds for the matching key
  - verify never raises; malformed input is simply False
  - key loading round-trips through seed, NaCl secret key, base58 and PEM
"""

import base64

import base58
import pytest

from endorser.core.crypto import (
    SignatureEngine,
    decode_public_key_base58,
    decode_signature_base64,
)


@pytest.fixture
def engine():
    return SignatureEngine.generate()


@pytest.fixture
def other():
    return SignatureEngine.generate()


class TestSigning:

    @pytest.mark.parametrize(
        "message",
        [b"", b"x", b"endorsement", bytes(range(256)), b"\x00" * 4096],
    )
    def test_sign_then_verify(self, engine, message):
        signature = engine.sign(message)
        assert len(signature) == 64
        assert engine.verify(message, signature)
        assert SignatureEngine.verify_detached(message, signature, engine.public_key)

    def test_sign_is_deterministic(self, engine):
        assert engine.sign(b"same bytes") == engine.sign(b"same bytes")

    def test_sign_base64_is_standard_base64(self, engine):
        text = engine.sign_base64(b"msg")
        assert base64.b64decode(text, validate=True) == engine.sign(b"msg")

    def test_wrong_key_fails(self, engine, other):
        signature = engine.sign(b"msg")
        assert not other.verify(b"msg", signature)
        assert not engine.verify(b"msg", signature, other.public_key)

    def test_changed_message_fails(self, engine):
        signature = engine.sign(b"msg")
        assert not engine.verify(b"msg2", signature)


class TestVerifyNeverRaises:

    def test_short_signature(self, engine):
        assert not engine.verify(b"msg", b"\x00" * 63)

    def test_long_signature(self, engine):
        assert not engine.verify(b"msg", engine.sign(b"msg") + b"\x00")

    def test_short_public_key(self, engine):
        assert not SignatureEngine.verify_detached(b"msg", engine.sign(b"msg"), b"\x01" * 31)

    def test_non_bytes_inputs(self, engine):
        assert not SignatureEngine.verify_detached(b"msg", "not-bytes", engine.public_key)
        assert not SignatureEngine.verify_detached(b"msg", engine.sign(b"msg"), None)

    def test_garbage_signature(self, engine):
        assert not engine.verify(b"msg", b"\xff" * 64)


class TestDecoding:

    def test_public_key_base58_round_trip(self, engine):
        assert decode_public_key_base58(engine.public_key_base58) == engine.public_key

    @pytest.mark.parametrize("text", ["", "0OIl", "not base58!", "abc"])
    def test_bad_public_key_base58(self, text):
        assert decode_public_key_base58(text) is None

    def test_public_key_wrong_length(self):
        assert decode_public_key_base58(base58.b58encode(b"\x01" * 33).decode()) is None

    def test_signature_base64_round_trip(self, engine):
        text = engine.sign_base64(b"msg")
        assert decode_signature_base64(text) == engine.sign(b"msg")

    @pytest.mark.parametrize("text", ["", "****", "AAAA", "é"])
    def test_bad_signature_base64(self, text):
        assert decode_signature_base64(text) is None


class TestKeyLoading:

    def test_seed_round_trip(self, engine):
        loaded = SignatureEngine.from_seed(engine.secret_key[:32])
        assert loaded.public_key == engine.public_key

    def test_secret_key_layout(self, engine):
        secret = engine.secret_key
        assert len(secret) == 64
        assert secret[32:] == engine.public_key

    def test_secret_key_round_trip(self, engine):
        loaded = SignatureEngine.from_secret_key(engine.secret_key)
        assert loaded.sign(b"msg") == engine.sign(b"msg")

    def test_secret_key_base58_round_trip(self, engine):
        text = base58.b58encode(engine.secret_key).decode()
        loaded = SignatureEngine.from_secret_key_base58(text)
        assert loaded.public_key_base58 == engine.public_key_base58

    def test_mismatched_secret_key_rejected(self, engine, other):
        with pytest.raises(ValueError):
            SignatureEngine.from_secret_key(engine.secret_key[:32] + other.public_key)

    def test_wrong_seed_length_rejected(self):
        with pytest.raises(ValueError):
            SignatureEngine.from_seed(b"\x00" * 31)

    def test_bad_base58_secret_rejected(self):
        with pytest.raises(ValueError):
            SignatureEngine.from_secret_key_base58("0OIl")

    def test_pem_round_trip(self, engine, tmp_path):
        path = tmp_path / "keys" / "authority.pem"
        engine.save(path)
        loaded = SignatureEngine.from_file(path)
        assert loaded.public_key == engine.public_key

    def test_missing_pem(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SignatureEngine.from_file(tmp_path / "missing.pem")

    def test_invalid_pem(self, tmp_path):
        path = tmp_path / "bad.pem"
        path.write_text("not a key")
        with pytest.raises(ValueError):
            SignatureEngine.from_file(path)

    def test_repr_hides_secret(self, engine):
        assert engine.public_key_base58[:12] in repr(engine)

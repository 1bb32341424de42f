"""
endorser/core/crypto.py

Ed25519 signature engine.

Key contracts:
    public_key            : @property → raw 32 bytes
    secret_key            : @property → raw 64 bytes (seed ‖ public key, NaCl layout)
    public_key_base58     : @property → base58 text, the authority's published identity
    sign(data)            : bytes → raw 64-byte signature
    sign_base64(data)     : bytes → standard base64 text (with padding)
    verify_detached(...)  : @staticmethod: verifies with ONLY a public key
    verify(...)           : instance method: defaults to THIS engine's key

Verification never raises. Malformed keys, wrong-length signatures and
undecodable text all come back as False (or None from the decode helpers).

The engine is immutable after construction and safe to share across
threads without locking.
"""

import base64
from pathlib import Path
from typing import Optional

import base58
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
    load_pem_private_key,
)


PUBLIC_KEY_LENGTH = 32
SEED_LENGTH       = 32
SECRET_KEY_LENGTH = 64
SIGNATURE_LENGTH  = 64


# ── Decoding helpers ──────────────────────────────────────────

def decode_public_key_base58(text: str) -> Optional[bytes]:
    """Decode a base58 public key. None unless it is exactly 32 bytes."""
    try:
        raw = base58.b58decode(text)
    except (ValueError, TypeError):
        return None
    if len(raw) != PUBLIC_KEY_LENGTH:
        return None
    return raw


def decode_signature_base64(text: str) -> Optional[bytes]:
    """Strictly decode a base64 signature. None unless it is exactly 64 bytes."""
    try:
        raw = base64.b64decode(text, validate=True)
    except (ValueError, TypeError):
        return None
    if len(raw) != SIGNATURE_LENGTH:
        return None
    return raw


class SignatureEngine:
    """
    Wraps a single Ed25519 keypair for the lifetime of the process.

    Public surface:
        SignatureEngine.generate()                      → new random key
        SignatureEngine.from_seed(seed)                 → raw 32-byte seed
        SignatureEngine.from_secret_key(sk)             → raw 64-byte secret key
        SignatureEngine.from_secret_key_base58(text)    → base58 64-byte secret key
        SignatureEngine.from_file(path)                 → PEM PKCS8 private key
        SignatureEngine.verify_detached(data, sig, pk)  → @staticmethod

        engine.sign(data) / engine.sign_base64(data)
        engine.verify(data, sig, public_key=None)
        engine.save(path)
    """

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key: Ed25519PrivateKey = private_key
        self._public_key:  Ed25519PublicKey  = private_key.public_key()
        self._public_key_bytes: bytes = self._public_key.public_bytes(
            Encoding.Raw, PublicFormat.Raw
        )
        self._public_key_base58: str = (
            base58.b58encode(self._public_key_bytes).decode("ascii")
        )

    # ── Construction ──────────────────────────────────────────

    @classmethod
    def generate(cls) -> "SignatureEngine":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "SignatureEngine":
        """Raises ValueError if seed is not exactly 32 bytes."""
        if len(seed) != SEED_LENGTH:
            raise ValueError(f"Ed25519 seed must be 32 bytes, got {len(seed)}")
        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "SignatureEngine":
        """
        Load a 64-byte NaCl-style secret key (seed followed by public key).

        Raises ValueError on wrong length, or when the public half does
        not belong to the seed.
        """
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise ValueError(
                f"Ed25519 secret key must be 64 bytes, got {len(secret_key)}"
            )
        engine = cls.from_seed(secret_key[:SEED_LENGTH])
        if engine.public_key != secret_key[SEED_LENGTH:]:
            raise ValueError("Ed25519 secret key public half does not match its seed")
        return engine

    @classmethod
    def from_secret_key_base58(cls, text: str) -> "SignatureEngine":
        """Raises ValueError on undecodable text or a bad key."""
        try:
            raw = base58.b58decode(text.strip())
        except (ValueError, TypeError) as exc:
            raise ValueError(f"secret key is not valid base58: {exc}") from exc
        return cls.from_secret_key(raw)

    @classmethod
    def from_file(cls, path: Path) -> "SignatureEngine":
        """
        Load an Ed25519 private key from a PEM file.
        Raises FileNotFoundError if path does not exist.
        Raises ValueError if the file is not a valid Ed25519 PEM key.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Key file not found: {path}")
        pem_bytes = path.read_bytes()
        try:
            private_key = load_pem_private_key(pem_bytes, password=None)
        except (ValueError, TypeError) as exc:
            raise ValueError(
                f"Failed to load Ed25519 key from {path}: {exc}"
            ) from exc
        if not isinstance(private_key, Ed25519PrivateKey):
            raise ValueError(f"Key file {path} does not contain an Ed25519 private key")
        return cls(private_key)

    # ── Keys ──────────────────────────────────────────────────

    @property
    def public_key(self) -> bytes:
        return self._public_key_bytes

    @property
    def public_key_base58(self) -> str:
        return self._public_key_base58

    @property
    def secret_key(self) -> bytes:
        """
        Raw 64-byte secret key (seed ‖ public key).
        Use only for secure backup, never log or transmit.
        """
        seed = self._private_key.private_bytes(
            encoding=             Encoding.Raw,
            format=               PrivateFormat.Raw,
            encryption_algorithm= NoEncryption(),
        )
        return seed + self._public_key_bytes

    # ── Signing ───────────────────────────────────────────────

    def sign(self, data: bytes) -> bytes:
        """
        Sign data with Ed25519. Deterministic for a given (key, data).

        Caller is responsible for canonicalization; see endorser.core.canonical.
        """
        return self._private_key.sign(data)

    def sign_base64(self, data: bytes) -> str:
        return base64.b64encode(self.sign(data)).decode("ascii")

    # ── Verification ──────────────────────────────────────────

    def verify(
        self,
        data:       bytes,
        signature:  bytes,
        public_key: Optional[bytes] = None,
    ) -> bool:
        """Verify against public_key, or this engine's own key if omitted."""
        key = public_key if public_key is not None else self._public_key_bytes
        return SignatureEngine.verify_detached(data, signature, key)

    @staticmethod
    def verify_detached(
        data:       bytes,
        signature:  bytes,
        public_key: bytes,
    ) -> bool:
        """
        Verify an Ed25519 signature using ONLY a raw public key.

        Returns:
            True if the signature is valid over data with the given key.
            False for ANY failure (wrong key, wrong length, malformed
            point, corrupted signature). Never raises.
        """
        try:
            if not isinstance(public_key, (bytes, bytearray)):
                return False
            if len(public_key) != PUBLIC_KEY_LENGTH:
                return False
            if not isinstance(signature, (bytes, bytearray)):
                return False
            if len(signature) != SIGNATURE_LENGTH:
                return False

            pub = Ed25519PublicKey.from_public_bytes(bytes(public_key))
            pub.verify(bytes(signature), data)
            return True

        except Exception:
            return False

    # ── Persistence ───────────────────────────────────────────

    def save(self, path: Path) -> None:
        """
        Write the private key to disk as a PEM file.
        Creates parent directories if needed.
        Raises RuntimeError on write failure.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        pem = self._private_key.private_bytes(
            encoding=             Encoding.PEM,
            format=               PrivateFormat.PKCS8,
            encryption_algorithm= NoEncryption(),
        )
        try:
            path.write_bytes(pem)
        except OSError as exc:
            raise RuntimeError(
                f"Failed to save Ed25519 key to {path}: {exc}"
            ) from exc

    def __repr__(self) -> str:
        return f"SignatureEngine(public_key={self._public_key_base58[:12]}...)"

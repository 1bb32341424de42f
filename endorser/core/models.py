"""
endorser/core/models.py

Endorsement Data Model

Wire contracts (camelCase keys on the wire, snake_case in Python):

    EndorsementRequest    caller-supplied, untrusted
    EndorsementData       canonical logical payload that gets signed
    Endorsement           {id, expirationTimeUTC, data, signature}
    PaymentInLieuToken    {endorsement, issuer, notional, signature}

Results are tagged unions. The discriminator is a plain bool
(`endorsed` / `approved`) and the rejection reasons are integer codes:

    NotEndorsedReason.RATE_LIMIT_EXCEEDED                     = 1
    PaymentInLieuRejectedReason.ENDORSEMENT_EXPIRED           = 1
    PaymentInLieuRejectedReason.RATE_LIMIT_EXCEEDED           = 2
    PaymentInLieuRejectedReason.INVALID_PAYMENT_IN_LIEU_TOKEN_SIGNATURE = 3

Quantities and fee bps stay strings on the request; only the validator
parses them, and only to confirm they are integers.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Type, Union

from endorser.core.exceptions import (
    InvalidEndorsementRequest,
    InvalidPaymentInLieuToken,
    ValidationError,
)


# ─────────────────────────────────────────────────────────────
# Field helpers
# ─────────────────────────────────────────────────────────────

def _require_mapping(data: Any, what: str, error_cls: Type[ValidationError]) -> None:
    if not isinstance(data, dict):
        raise error_cls(f"{what} must be an object", {"type": type(data).__name__})


def _check_text(value: Any, key: str, error_cls: Type[ValidationError]) -> str:
    if not isinstance(value, str):
        raise error_cls(f"{key} must be a string", {"field": key})
    # JSON admits lone surrogates; they cannot be canonicalized or signed
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise error_cls(f"{key} must be valid UTF-8 text", {"field": key}) from None
    return value


def _required_str(
    data: Dict[str, Any],
    key: str,
    error_cls: Type[ValidationError],
) -> str:
    return _check_text(data.get(key), key, error_cls)


def _optional_str(
    data: Dict[str, Any],
    key: str,
    error_cls: Type[ValidationError],
) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    return _check_text(value, key, error_cls)


# ─────────────────────────────────────────────────────────────
# Reason codes
# ─────────────────────────────────────────────────────────────

class NotEndorsedReason(IntEnum):
    RATE_LIMIT_EXCEEDED = 1


class PaymentInLieuRejectedReason(IntEnum):
    ENDORSEMENT_EXPIRED                     = 1
    RATE_LIMIT_EXCEEDED                     = 2
    INVALID_PAYMENT_IN_LIEU_TOKEN_SIGNATURE = 3


# ─────────────────────────────────────────────────────────────
# Endorsement request / payload
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EndorsementRequest:
    """An incoming request to endorse a retail trade. Never trusted."""

    retail_trader:         str
    receive_token:         str
    send_token:            Optional[str] = None
    send_qty:              Optional[str] = None
    max_send_qty:          Optional[str] = None
    platform_fee_bps:      Optional[str] = None
    platform_fee_receiver: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EndorsementRequest":
        """
        Build a request from its wire form.

        Checks shape only (required keys present, every value a string).
        Semantic rules live in endorser.core.validation.
        Raises InvalidEndorsementRequest.
        """
        err = InvalidEndorsementRequest
        _require_mapping(data, "endorsement request", err)
        return cls(
            retail_trader=         _required_str(data, "retailTrader", err),
            receive_token=         _required_str(data, "receiveToken", err),
            send_token=            _optional_str(data, "sendToken", err),
            send_qty=              _optional_str(data, "sendQty", err),
            max_send_qty=          _optional_str(data, "maxSendQty", err),
            platform_fee_bps=      _optional_str(data, "platformFeeBps", err),
            platform_fee_receiver= _optional_str(data, "platformFeeReceiver", err),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "retailTrader":        self.retail_trader,
            "receiveToken":        self.receive_token,
            "sendToken":           self.send_token,
            "sendQty":             self.send_qty,
            "maxSendQty":          self.max_send_qty,
            "platformFeeBps":      self.platform_fee_bps,
            "platformFeeReceiver": self.platform_fee_receiver,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass(frozen=True)
class PlatformFee:
    bps:      int
    receiver: str

    def to_dict(self) -> Dict[str, Any]:
        return {"bps": self.bps, "receiver": self.receiver}


@dataclass(frozen=True)
class EndorsementData:
    """
    The canonical logical payload of an endorsement.

    At most one of send_quantity / max_send_quantity is ever set.
    """

    retail_trader:     str
    receive_token:     str
    platform_fee:      Optional[PlatformFee] = None
    send_token:        Optional[str] = None
    send_quantity:     Optional[str] = None
    max_send_quantity: Optional[str] = None

    def __post_init__(self) -> None:
        if self.send_quantity is not None and self.max_send_quantity is not None:
            raise ValueError(
                "EndorsementData cannot carry both send_quantity and max_send_quantity"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form. Absent fields are omitted, never null."""
        out: Dict[str, Any] = {"retailTrader": self.retail_trader}
        if self.platform_fee is not None:
            out["platformFee"] = self.platform_fee.to_dict()
        if self.send_token is not None:
            out["sendToken"] = self.send_token
        out["receiveToken"] = self.receive_token
        if self.send_quantity is not None:
            out["sendQuantity"] = self.send_quantity
        if self.max_send_quantity is not None:
            out["maxSendQuantity"] = self.max_send_quantity
        return out


# ─────────────────────────────────────────────────────────────
# Endorsement
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Endorsement:
    """
    A signed decision. Immutable once issued.

    data is the canonical encoding of EndorsementData (UTF-8 text).
    signature is standard base64 of the 64-byte Ed25519 signature over
    the endorsement message built from (id, expiration_time_utc, data).
    """

    id:                  str
    expiration_time_utc: int
    data:                str
    signature:           str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signature":         self.signature,
            "id":                self.id,
            "expirationTimeUTC": self.expiration_time_utc,
            "data":              self.data,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        error_cls: Type[ValidationError] = ValidationError,
    ) -> "Endorsement":
        _require_mapping(data, "endorsement", error_cls)
        expiration = data.get("expirationTimeUTC")
        # bool is an int subclass; reject it explicitly
        if not isinstance(expiration, int) or isinstance(expiration, bool):
            raise error_cls(
                "expirationTimeUTC must be an integer", {"field": "expirationTimeUTC"}
            )
        return cls(
            id=                  _required_str(data, "id", error_cls),
            expiration_time_utc= expiration,
            data=                _required_str(data, "data", error_cls),
            signature=           _required_str(data, "signature", error_cls),
        )


# ─────────────────────────────────────────────────────────────
# Payment in lieu
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PaymentInLieuToken:
    """
    A settlement token counter-signed by its issuer.

    Only the embedded endorsement originates from this authority. issuer
    (base58 public key) and signature (base64) are untrusted text; they
    are decoded during verification, not here.
    """

    endorsement: Endorsement
    issuer:      str
    notional:    str
    signature:   str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "endorsement": self.endorsement.to_dict(),
            "issuer":      self.issuer,
            "notional":    self.notional,
            "signature":   self.signature,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaymentInLieuToken":
        """Raises InvalidPaymentInLieuToken on any structural problem."""
        err = InvalidPaymentInLieuToken
        _require_mapping(data, "payment in lieu token", err)
        return cls(
            endorsement= Endorsement.from_dict(data.get("endorsement"), err),
            issuer=      _required_str(data, "issuer", err),
            notional=    _required_str(data, "notional", err),
            signature=   _required_str(data, "signature", err),
        )


# ─────────────────────────────────────────────────────────────
# Results
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EndorsedResult:
    endorsement: Endorsement
    endorsed:    bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"endorsed": True, "endorsement": self.endorsement.to_dict()}


@dataclass(frozen=True)
class NotEndorsedResult:
    reason:   NotEndorsedReason
    endorsed: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"endorsed": False, "reason": int(self.reason)}


@dataclass(frozen=True)
class PaymentInLieuApprovedResult:
    approval: str
    approved: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"approved": True, "approval": self.approval}


@dataclass(frozen=True)
class PaymentInLieuRejectedResult:
    reason:   PaymentInLieuRejectedReason
    approved: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"approved": False, "reason": int(self.reason)}


EndorseResult = Union[EndorsedResult, NotEndorsedResult]
ApprovePaymentInLieuResult = Union[PaymentInLieuApprovedResult, PaymentInLieuRejectedResult]

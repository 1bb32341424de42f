"""
endorser/__init__.py

Endorser: signing authority for retail trade endorsements

Issues Ed25519-signed endorsements for retail trade requests, and
counter-signs payment-in-lieu tokens that reference a previously issued,
unexpired endorsement.

    authority = RequestEndorser(SignatureEngine.generate(), expiration_in_seconds=60)
    result    = authority.maybe_endorse({"retailTrader": ..., "receiveToken": ...}, now)
"""

__version__ = "0.1.0"

from endorser.authority import (
    Endorser,
    PaymentInLieuApprover,
    RequestEndorser,
    verify_endorsement,
)
from endorser.config import EndorserConfig
from endorser.core.canonical import (
    encode_endorsement_data,
    encode_endorsement_message,
    encode_payment_in_lieu_approval_message,
    encode_payment_in_lieu_message,
)
from endorser.core.crypto import SignatureEngine
from endorser.core.exceptions import (
    ConfigError,
    EndorserError,
    InvalidEndorsementRequest,
    InvalidPaymentInLieuToken,
    ValidationError,
)
from endorser.core.models import (
    Endorsement,
    EndorsementData,
    EndorsementRequest,
    EndorsedResult,
    NotEndorsedReason,
    NotEndorsedResult,
    PaymentInLieuApprovedResult,
    PaymentInLieuRejectedReason,
    PaymentInLieuRejectedResult,
    PaymentInLieuToken,
    PlatformFee,
)
from endorser.core.validation import validate_endorsement_request

__all__ = [
    # Authority
    "RequestEndorser",
    "Endorser",
    "PaymentInLieuApprover",
    "SignatureEngine",
    "EndorserConfig",
    "verify_endorsement",
    "validate_endorsement_request",
    # Data model
    "EndorsementRequest",
    "EndorsementData",
    "PlatformFee",
    "Endorsement",
    "PaymentInLieuToken",
    # Results
    "EndorsedResult",
    "NotEndorsedResult",
    "NotEndorsedReason",
    "PaymentInLieuApprovedResult",
    "PaymentInLieuRejectedResult",
    "PaymentInLieuRejectedReason",
    # Errors
    "EndorserError",
    "ValidationError",
    "InvalidEndorsementRequest",
    "InvalidPaymentInLieuToken",
    "ConfigError",
    # Canonical encoding
    "encode_endorsement_data",
    "encode_endorsement_message",
    "encode_payment_in_lieu_message",
    "encode_payment_in_lieu_approval_message",
]

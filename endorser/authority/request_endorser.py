"""
Caller-facing endorsement authority.

RequestEndorser wires the Endorser and PaymentInLieuApprover to one
keypair and adds the rate-limit short circuit. The limit itself is
decided by a caller-supplied gate; the authority keeps no counters.
"""

import logging
import secrets
from typing import Any, Callable, Dict, Optional, Union

from endorser.authority.approver import PaymentInLieuApprover
from endorser.authority.endorser import Endorser
from endorser.core.crypto import SignatureEngine
from endorser.core.models import (
    ApprovePaymentInLieuResult,
    EndorsedResult,
    EndorsementRequest,
    EndorseResult,
    NotEndorsedReason,
    NotEndorsedResult,
    PaymentInLieuRejectedReason,
    PaymentInLieuRejectedResult,
    PaymentInLieuToken,
)
from endorser.core.time import Now

logger = logging.getLogger(__name__)

# Returns True when the call may proceed.
RateLimitGate = Callable[[Any], bool]


class RequestEndorser:
    """
    The endorsing authority.

    Safe to call concurrently: the keypair is read-only and every call
    is a self-contained computation.
    """

    def __init__(
        self,
        signature_engine: SignatureEngine,
        expiration_in_seconds: int,
        endorse_gate: Optional[RateLimitGate] = None,
        approve_gate: Optional[RateLimitGate] = None,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ):
        self.signature_engine = signature_engine
        self.endorser = Endorser(
            signature_engine, expiration_in_seconds, random_bytes=random_bytes
        )
        self.approver = PaymentInLieuApprover(signature_engine)
        self.endorse_gate = endorse_gate
        self.approve_gate = approve_gate

    @property
    def base58_public_key(self) -> str:
        return self.signature_engine.public_key_base58

    @property
    def expiration_in_seconds(self) -> int:
        return self.endorser.expiration_in_seconds

    def maybe_endorse(
        self,
        request: Union[EndorsementRequest, Dict[str, Any]],
        now: Now,
    ) -> EndorseResult:
        """
        Endorse a request unless the endorse gate refuses it.

        Raises InvalidEndorsementRequest for malformed requests; that is
        a caller error, not a rejection result.
        """
        if isinstance(request, dict):
            request = EndorsementRequest.from_dict(request)

        if self.endorse_gate is not None and not self.endorse_gate(request):
            logger.info("endorsement for %s refused: rate limit", request.retail_trader)
            return NotEndorsedResult(reason=NotEndorsedReason.RATE_LIMIT_EXCEEDED)

        return EndorsedResult(endorsement=self.endorser.endorse(request, now))

    def maybe_approve_payment_in_lieu(
        self,
        token: Union[PaymentInLieuToken, Dict[str, Any]],
        now: Now,
    ) -> ApprovePaymentInLieuResult:
        """Raises InvalidPaymentInLieuToken only for structurally malformed dicts."""
        if isinstance(token, dict):
            token = PaymentInLieuToken.from_dict(token)

        if self.approve_gate is not None and not self.approve_gate(token):
            logger.info(
                "payment in lieu for endorsement %s refused: rate limit",
                token.endorsement.id,
            )
            return PaymentInLieuRejectedResult(
                reason=PaymentInLieuRejectedReason.RATE_LIMIT_EXCEEDED
            )

        return self.approver.approve(token, now)

    def __repr__(self) -> str:
        return (
            f"RequestEndorser("
            f"public_key={self.base58_public_key!r}, "
            f"expiration_in_seconds={self.expiration_in_seconds})"
        )

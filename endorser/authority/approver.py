"""
Payment-in-lieu approval.

PROTOCOL INVARIANT: checks run cheapest first and the first failure wins.
Order: Expiration → Issuer signature → Approval signature.

The approver never signs a payload whose issuer signature has not been
verified, so it cannot be used as a signing oracle for arbitrary bytes.
"""

import logging

from endorser.core.canonical import (
    encode_payment_in_lieu_approval_message,
    encode_payment_in_lieu_message,
)
from endorser.core.crypto import (
    SignatureEngine,
    decode_public_key_base58,
    decode_signature_base64,
)
from endorser.core.models import (
    ApprovePaymentInLieuResult,
    PaymentInLieuApprovedResult,
    PaymentInLieuRejectedReason,
    PaymentInLieuRejectedResult,
    PaymentInLieuToken,
)
from endorser.core.time import Now, unix_seconds

logger = logging.getLogger(__name__)


class PaymentInLieuApprover:
    """
    Decision function over payment-in-lieu tokens.

    Pure given (token, now, keypair): no clock reads, no shared state.
    """

    def __init__(self, signature_engine: SignatureEngine):
        self.signature_engine = signature_engine

    def approve(
        self,
        token: PaymentInLieuToken,
        now: Now,
    ) -> ApprovePaymentInLieuResult:
        endorsement = token.endorsement

        # The expiration second itself is already expired
        if unix_seconds(now) >= endorsement.expiration_time_utc:
            logger.info(
                "rejected payment in lieu for endorsement %s: expired at %d",
                endorsement.id, endorsement.expiration_time_utc,
            )
            return PaymentInLieuRejectedResult(
                reason=PaymentInLieuRejectedReason.ENDORSEMENT_EXPIRED
            )

        if not self._verify_issuer_signature(token):
            logger.info(
                "rejected payment in lieu for endorsement %s: invalid issuer signature",
                endorsement.id,
            )
            return PaymentInLieuRejectedResult(
                reason=PaymentInLieuRejectedReason.INVALID_PAYMENT_IN_LIEU_TOKEN_SIGNATURE
            )

        approval_message = encode_payment_in_lieu_approval_message(token)
        approval = self.signature_engine.sign_base64(approval_message)

        logger.debug("approved payment in lieu for endorsement %s", endorsement.id)
        return PaymentInLieuApprovedResult(approval=approval)

    @staticmethod
    def _verify_issuer_signature(token: PaymentInLieuToken) -> bool:
        """Malformed issuer or signature text is a failed verification."""
        issuer_public_key = decode_public_key_base58(token.issuer)
        if issuer_public_key is None:
            return False
        signature = decode_signature_base64(token.signature)
        if signature is None:
            return False
        try:
            message = encode_payment_in_lieu_message(token)
        except UnicodeEncodeError:
            # Lone surrogates in directly built tokens; nothing was signed over them
            return False
        return SignatureEngine.verify_detached(message, signature, issuer_public_key)

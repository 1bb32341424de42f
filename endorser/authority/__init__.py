"""
Endorser Authority

The authority turns requests into signed decisions:

- Endorser: validates an endorsement request and signs it
- PaymentInLieuApprover: checks a payment-in-lieu token and counter-signs it
- RequestEndorser: caller-facing facade with rate-limit gates

Critical Invariants:
- An endorsement's expiration is always now + configured TTL
- No endorsement carries both sendQuantity and maxSendQuantity
- An approval is only signed for an unexpired endorsement whose
  payment-in-lieu token carries a valid issuer signature
- Neither operation reads the wall clock or mutates shared state
"""

from endorser.authority.approver import PaymentInLieuApprover
from endorser.authority.endorser import Endorser, verify_endorsement
from endorser.authority.request_endorser import RateLimitGate, RequestEndorser

__all__ = [
    "Endorser",
    "PaymentInLieuApprover",
    "RateLimitGate",
    "RequestEndorser",
    "verify_endorsement",
]

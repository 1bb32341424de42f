"""
endorser/core/canonical.py

Canonical message encoding: RFC 8785 (JCS).

This is the ONLY canonicalization used by the endorser. Every byte
string that is signed or verified is produced here.

Each message is a JSON object carrying a `type` tag and the protocol
`version`, so the four message kinds can never collide with each other:

    endorsement data        (no tag, embedded as text in the message)
    "endorsement"           {id, expirationTimeUTC, data}
    "paymentInLieu"         {endorsement, issuer, notional}
    "paymentInLieuApproval" {endorsement, issuer, notional, issuerSignature}

RFC 8785: https://www.rfc-editor.org/rfc/rfc8785
"""

from typing import Any, Dict, Union

try:
    import jcs as _jcs
except ImportError as exc:
    raise ImportError(
        "endorser requires the 'jcs' package for RFC 8785 compliance.\n"
        "Install with: pip install jcs\n"
        f"Original error: {exc}"
    ) from exc

from endorser.core.models import EndorsementData, PaymentInLieuToken


PROTOCOL_VERSION = 1

MSG_TYPE_ENDORSEMENT              = "endorsement"
MSG_TYPE_PAYMENT_IN_LIEU          = "paymentInLieu"
MSG_TYPE_PAYMENT_IN_LIEU_APPROVAL = "paymentInLieuApproval"


def canonicalize(obj: Dict[str, Any]) -> bytes:
    """
    Encode a dict to RFC 8785 canonical JSON bytes.

    Output is deterministic regardless of key insertion order.
    Values must be JSON primitives; absent fields must be omitted
    by the caller rather than passed as None.
    """
    return _jcs.canonicalize(obj)


def encode_endorsement_data(data: EndorsementData) -> bytes:
    return canonicalize(data.to_dict())


def encode_endorsement_message(
    endorsement_id:      str,
    expiration_time_utc: int,
    encoded_data:        Union[bytes, str],
) -> bytes:
    if isinstance(encoded_data, bytes):
        encoded_data = encoded_data.decode("utf-8")
    return canonicalize({
        "type":              MSG_TYPE_ENDORSEMENT,
        "version":           PROTOCOL_VERSION,
        "id":                endorsement_id,
        "expirationTimeUTC": expiration_time_utc,
        "data":              encoded_data,
    })


def _payment_in_lieu_fields(token: PaymentInLieuToken) -> Dict[str, Any]:
    return {
        "endorsement": token.endorsement.to_dict(),
        "issuer":      token.issuer,
        "notional":    token.notional,
    }


def encode_payment_in_lieu_message(token: PaymentInLieuToken) -> bytes:
    """The bytes the issuer signed. Excludes the issuer's own signature."""
    return canonicalize({
        "type":    MSG_TYPE_PAYMENT_IN_LIEU,
        "version": PROTOCOL_VERSION,
        **_payment_in_lieu_fields(token),
    })


def encode_payment_in_lieu_approval_message(token: PaymentInLieuToken) -> bytes:
    """The bytes the authority signs on approval. Binds the issuer signature."""
    return canonicalize({
        "type":            MSG_TYPE_PAYMENT_IN_LIEU_APPROVAL,
        "version":         PROTOCOL_VERSION,
        **_payment_in_lieu_fields(token),
        "issuerSignature": token.signature,
    })

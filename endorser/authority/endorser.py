"""
Endorser: turns a validated endorsement request into a signed Endorsement.
"""

import base64
import logging
import secrets
from typing import Callable, Union

from endorser.core.canonical import encode_endorsement_data, encode_endorsement_message
from endorser.core.crypto import (
    SignatureEngine,
    decode_public_key_base58,
    decode_signature_base64,
)
from endorser.core.exceptions import InvalidEndorsementRequest
from endorser.core.models import Endorsement, EndorsementRequest
from endorser.core.time import Now, unix_seconds
from endorser.core.validation import validate_endorsement_request

logger = logging.getLogger(__name__)

ENDORSEMENT_ID_BYTES = 8


class Endorser:
    """
    Issues endorsements signed by the authority's key.

    Each call runs Received → Validated → Encoded → Signed, or stops at
    validation by raising InvalidEndorsementRequest. Nothing is retained
    between calls.
    """

    def __init__(
        self,
        signature_engine: SignatureEngine,
        expiration_in_seconds: int,
        random_bytes: Callable[[int], bytes] = secrets.token_bytes,
    ):
        """
        Args:
            signature_engine: the authority's keypair
            expiration_in_seconds: TTL added to `now` for every endorsement
            random_bytes: CSPRNG used for endorsement ids
        """
        if isinstance(expiration_in_seconds, bool) or not isinstance(expiration_in_seconds, int):
            raise TypeError("expiration_in_seconds must be an int")
        if expiration_in_seconds <= 0:
            raise ValueError(
                f"expiration_in_seconds must be positive, got {expiration_in_seconds}"
            )
        self.signature_engine = signature_engine
        self.expiration_in_seconds = expiration_in_seconds
        self._random_bytes = random_bytes

    def endorse(self, request: EndorsementRequest, now: Now) -> Endorsement:
        """
        Validate, encode and sign a request.

        Raises:
            InvalidEndorsementRequest: the request breaks a validation rule.
                No signature is produced.
        """
        endorsement_id = base64.b64encode(
            self._random_bytes(ENDORSEMENT_ID_BYTES)
        ).decode("ascii")
        expiration_time_utc = unix_seconds(now) + self.expiration_in_seconds

        try:
            data = validate_endorsement_request(request)
            # Directly built requests skip from_dict's text checks
            encoded_data = encode_endorsement_data(data)
        except InvalidEndorsementRequest as exc:
            logger.info(
                "rejected endorsement request from %r: %s (field %s)",
                request.retail_trader, exc.message, exc.field,
            )
            raise
        except UnicodeEncodeError:
            logger.info(
                "rejected endorsement request from %r: text is not valid UTF-8",
                request.retail_trader,
            )
            raise InvalidEndorsementRequest(
                "request fields must be valid UTF-8 text"
            ) from None

        message = encode_endorsement_message(
            endorsement_id, expiration_time_utc, encoded_data
        )
        signature = self.signature_engine.sign_base64(message)

        logger.debug(
            "issued endorsement %s for %s, expires %d",
            endorsement_id, data.retail_trader, expiration_time_utc,
        )
        return Endorsement(
            id=                  endorsement_id,
            expiration_time_utc= expiration_time_utc,
            data=                encoded_data.decode("utf-8"),
            signature=           signature,
        )


def verify_endorsement(endorsement: Endorsement, public_key: Union[bytes, str]) -> bool:
    """
    Check an endorsement's signature against an authority public key.

    public_key is raw 32 bytes or its base58 text. Returns False for any
    malformed input. Expiration is not checked here.
    """
    if isinstance(public_key, str):
        public_key = decode_public_key_base58(public_key)
        if public_key is None:
            return False
    signature = decode_signature_base64(endorsement.signature)
    if signature is None:
        return False
    try:
        message = encode_endorsement_message(
            endorsement.id, endorsement.expiration_time_utc, endorsement.data
        )
    except UnicodeEncodeError:
        return False
    return SignatureEngine.verify_detached(message, signature, public_key)

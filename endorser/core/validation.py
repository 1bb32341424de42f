"""
endorser/core/validation.py

Endorsement request validation.

Rules run in a fixed order and the first failure wins:

    1. platformFeeBps and platformFeeReceiver come as a pair
    2. platformFeeBps is an integer in [0, MAX_PLATFORM_FEE_BPS]
    3. sendQty and maxSendQty are mutually exclusive
    4. a quantity must be an integer and requires sendToken

Quantities are token amounts of arbitrary size. They are checked for
integer syntax and kept as the original string; they are never
converted to a fixed-width number.

Empty strings: an empty sendQty / maxSendQty / sendToken counts as
absent. An empty platformFeeBps is present and therefore invalid.
"""

import re
from typing import Optional

from endorser.core.exceptions import InvalidEndorsementRequest
from endorser.core.models import EndorsementData, EndorsementRequest, PlatformFee


MAX_PLATFORM_FEE_BPS = 5000

# Optional sign followed by ASCII digits. No whitespace, underscores,
# radix prefixes or non-ASCII digits.
_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")


def is_integer_string(raw: str) -> bool:
    return bool(_INTEGER_RE.match(raw))


def parse_platform_fee_bps(raw: str) -> Optional[int]:
    """Return bps as an int, or None if not an integer in range."""
    if not is_integer_string(raw):
        return None
    try:
        bps = int(raw)
    except ValueError:
        # beyond the interpreter's integer string conversion limit
        return None
    if bps < 0 or bps > MAX_PLATFORM_FEE_BPS:
        return None
    return bps


def validate_endorsement_request(request: EndorsementRequest) -> EndorsementData:
    """
    Validate a request and return the payload to sign.

    Raises InvalidEndorsementRequest with a stable message per rule;
    its `field` names the wire field that broke the rule.
    """
    fee_bps      = request.platform_fee_bps
    fee_receiver = request.platform_fee_receiver

    platform_fee = None
    if fee_bps is not None and fee_receiver is not None:
        bps = parse_platform_fee_bps(fee_bps)
        if bps is None:
            raise InvalidEndorsementRequest(
                "invalid platformFeeBps",
                {"field": "platformFeeBps", "value": fee_bps},
            )
        platform_fee = PlatformFee(bps=bps, receiver=fee_receiver)
    elif fee_bps is not None:
        raise InvalidEndorsementRequest(
            "platformFeeReceiver not specified", {"field": "platformFeeReceiver"}
        )
    elif fee_receiver is not None:
        raise InvalidEndorsementRequest(
            "platformFeeBps not specified", {"field": "platformFeeBps"}
        )

    send_token   = request.send_token or None
    send_qty     = request.send_qty or None
    max_send_qty = request.max_send_qty or None

    if send_qty and max_send_qty:
        raise InvalidEndorsementRequest(
            "request cannot specify both sendQty and maxSendQty",
            {"field": "maxSendQty"},
        )
    elif send_qty:
        if not is_integer_string(send_qty):
            raise InvalidEndorsementRequest(
                "invalid sendQty", {"field": "sendQty", "value": send_qty}
            )
        if not send_token:
            raise InvalidEndorsementRequest(
                "sendToken must be specified if sendQty is specified",
                {"field": "sendToken"},
            )
    elif max_send_qty:
        if not is_integer_string(max_send_qty):
            raise InvalidEndorsementRequest(
                "invalid maxSendQty", {"field": "maxSendQty", "value": max_send_qty}
            )
        if not send_token:
            raise InvalidEndorsementRequest(
                "sendToken must be specified if maxSendQty is specified",
                {"field": "sendToken"},
            )

    return EndorsementData(
        retail_trader=     request.retail_trader,
        receive_token=     request.receive_token,
        platform_fee=      platform_fee,
        send_token=        send_token,
        send_quantity=     send_qty,
        max_send_quantity= max_send_qty,
    )

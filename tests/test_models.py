"""
tests/test_models.py

Wire parsing of requests, endorsements and tokens.
"""

import pytest

from endorser.core.exceptions import (
    InvalidEndorsementRequest,
    InvalidPaymentInLieuToken,
    ValidationError,
)
from endorser.core.models import (
    Endorsement,
    EndorsementRequest,
    PaymentInLieuToken,
)

ENDORSEMENT = {
    "signature":         "c2ln",
    "id":                "AAAAAAAAAAA=",
    "expirationTimeUTC": 1700000060,
    "data":              "{}",
}


class TestEndorsementRequest:

    def test_from_dict_maps_wire_keys(self):
        request = EndorsementRequest.from_dict({
            "retailTrader":        "T1",
            "receiveToken":        "USDC",
            "sendToken":           "SOL",
            "maxSendQty":          "10",
            "platformFeeBps":      "5",
            "platformFeeReceiver": "FeeWallet",
        })
        assert request == EndorsementRequest(
            retail_trader="T1",
            receive_token="USDC",
            send_token="SOL",
            max_send_qty="10",
            platform_fee_bps="5",
            platform_fee_receiver="FeeWallet",
        )

    def test_null_optional_is_absent(self):
        request = EndorsementRequest.from_dict(
            {"retailTrader": "T1", "receiveToken": "USDC", "sendQty": None}
        )
        assert request.send_qty is None

    def test_to_dict_round_trip(self):
        wire = {"retailTrader": "T1", "receiveToken": "USDC", "sendToken": "SOL", "sendQty": "1"}
        assert EndorsementRequest.from_dict(wire).to_dict() == wire

    @pytest.mark.parametrize("payload", [None, [], "request"])
    def test_not_an_object(self, payload):
        with pytest.raises(InvalidEndorsementRequest):
            EndorsementRequest.from_dict(payload)

    def test_missing_receive_token(self):
        with pytest.raises(InvalidEndorsementRequest, match="receiveToken"):
            EndorsementRequest.from_dict({"retailTrader": "T1"})

    def test_numeric_fee_rejected(self):
        with pytest.raises(InvalidEndorsementRequest, match="platformFeeBps"):
            EndorsementRequest.from_dict(
                {"retailTrader": "T1", "receiveToken": "USDC", "platformFeeBps": 5}
            )

    def test_type_error_names_field(self):
        with pytest.raises(InvalidEndorsementRequest) as exc_info:
            EndorsementRequest.from_dict({"retailTrader": "T1", "receiveToken": ["USDC"]})
        assert exc_info.value.field == "receiveToken"
        assert str(exc_info.value) == "receiveToken must be a string [receiveToken]"

    @pytest.mark.parametrize("key", ["retailTrader", "sendToken", "platformFeeReceiver"])
    def test_lone_surrogate_rejected(self, key):
        wire = {"retailTrader": "T1", "receiveToken": "USDC", key: "a\udc80b"}
        with pytest.raises(InvalidEndorsementRequest) as exc_info:
            EndorsementRequest.from_dict(wire)
        assert exc_info.value.message == f"{key} must be valid UTF-8 text"
        assert exc_info.value.to_dict() == {
            "error": f"{key} must be valid UTF-8 text",
            "field": key,
        }


class TestEndorsement:

    def test_round_trip(self):
        assert Endorsement.from_dict(ENDORSEMENT).to_dict() == ENDORSEMENT

    @pytest.mark.parametrize("expiration", ["1700000060", 1.5, True, None])
    def test_expiration_must_be_int(self, expiration):
        with pytest.raises(ValidationError, match="expirationTimeUTC"):
            Endorsement.from_dict(dict(ENDORSEMENT, expirationTimeUTC=expiration))


class TestPaymentInLieuToken:

    def token_wire(self, **changes):
        wire = {
            "endorsement": dict(ENDORSEMENT),
            "issuer":      "Issuer111",
            "notional":    "5000",
            "signature":   "aXNzdWVy",
        }
        wire.update(changes)
        return wire

    def test_round_trip(self):
        wire = self.token_wire()
        assert PaymentInLieuToken.from_dict(wire).to_dict() == wire

    def test_missing_endorsement(self):
        wire = self.token_wire()
        del wire["endorsement"]
        with pytest.raises(InvalidPaymentInLieuToken, match="endorsement"):
            PaymentInLieuToken.from_dict(wire)

    def test_bad_embedded_endorsement_uses_token_error(self):
        wire = self.token_wire(endorsement=dict(ENDORSEMENT, expirationTimeUTC="soon"))
        with pytest.raises(InvalidPaymentInLieuToken):
            PaymentInLieuToken.from_dict(wire)

    def test_undecodable_issuer_text_is_still_structurally_valid(self):
        token = PaymentInLieuToken.from_dict(self.token_wire(issuer="0OIl"))
        assert token.issuer == "0OIl"

    def test_lone_surrogate_in_embedded_endorsement(self):
        wire = self.token_wire(endorsement=dict(ENDORSEMENT, data="\ud800"))
        with pytest.raises(InvalidPaymentInLieuToken) as exc_info:
            PaymentInLieuToken.from_dict(wire)
        assert exc_info.value.field == "data"

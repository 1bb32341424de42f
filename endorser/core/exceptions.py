"""
Endorser Exception Hierarchy

All raised errors inherit from EndorserError for easy catching.

Raised errors signal caller bugs or malicious input. Business outcomes
(expired endorsement, bad token signature, rate limit) are NOT raised:
they are returned as result values from the authority.

Validation errors name the offending wire field in details["field"]
(camelCase, as the caller sent it) and, where one exists, echo the
rejected text in details["value"]. Front ends report both without
parsing the message:

    {"error": "invalid sendQty", "field": "sendQty", "value": "1.5"}
"""

from typing import Any, Dict, Optional


class EndorserError(Exception):
    """Base exception for all endorser errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    @property
    def field(self) -> Optional[str]:
        """Wire name of the field the error is about, if any."""
        return self.details.get("field")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}

    def __str__(self):
        if self.field is None:
            return self.message
        return f"{self.message} [{self.field}]"


class ValidationError(EndorserError):
    """Raised when caller-supplied data is malformed or contradictory"""
    pass


class InvalidEndorsementRequest(ValidationError):
    """Raised when an endorsement request fails validation"""
    pass


class InvalidPaymentInLieuToken(ValidationError):
    """Raised when a payment-in-lieu token is structurally malformed"""
    pass


class ConfigError(EndorserError):
    """Raised when configuration or key material cannot be loaded"""
    pass

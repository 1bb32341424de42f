"""
Endorser configuration.

    expiration_in_seconds: 60
    keypair_path: ./endorser.pem       # PEM PKCS8 Ed25519 private key
    # or
    secret_key: <base58 64-byte key>   # NaCl-style secret key

Exactly one key source. The ENDORSER_SECRET_KEY environment variable,
when set, takes the place of secret_key and keypair_path.
"""

import logging
import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from endorser.authority.request_endorser import RateLimitGate, RequestEndorser
from endorser.core.crypto import SignatureEngine
from endorser.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

SECRET_KEY_ENV = "ENDORSER_SECRET_KEY"

# Endorsements valid for longer than a day are almost certainly a typo
_LONG_EXPIRATION_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class EndorserConfig:
    """Process configuration for the endorsing authority."""

    expiration_in_seconds: int
    keypair_path:          Optional[Path] = None
    secret_key:            Optional[str] = None

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        base_dir: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EndorserConfig":
        """
        Build a config from a parsed mapping.

        Relative keypair paths resolve against base_dir (the config
        file's directory when loaded with from_yaml).
        Raises ConfigError.
        """
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a mapping")
        environ = os.environ if environ is None else environ

        expiration = data.get("expiration_in_seconds")
        if isinstance(expiration, bool) or not isinstance(expiration, int):
            raise ConfigError(
                "expiration_in_seconds must be an integer",
                {"field": "expiration_in_seconds"},
            )
        if expiration <= 0:
            raise ConfigError(
                "expiration_in_seconds must be positive",
                {"field": "expiration_in_seconds", "value": expiration},
            )
        if expiration > _LONG_EXPIRATION_SECONDS:
            warnings.warn(
                f"expiration_in_seconds={expiration} is longer than a day",
                RuntimeWarning,
                stacklevel=2,
            )

        env_secret = environ.get(SECRET_KEY_ENV)
        if env_secret:
            return cls(expiration_in_seconds=expiration, secret_key=env_secret)

        keypair_path = data.get("keypair_path")
        secret_key   = data.get("secret_key")
        if (keypair_path is None) == (secret_key is None):
            raise ConfigError("exactly one of keypair_path or secret_key is required")

        if keypair_path is not None:
            if not isinstance(keypair_path, str):
                raise ConfigError(
                    "keypair_path must be a string", {"field": "keypair_path"}
                )
            path = Path(keypair_path).expanduser()
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            return cls(expiration_in_seconds=expiration, keypair_path=path)

        if not isinstance(secret_key, str):
            raise ConfigError("secret_key must be a string", {"field": "secret_key"})
        return cls(expiration_in_seconds=expiration, secret_key=secret_key)

    @classmethod
    def from_yaml(
        cls,
        config_file: Path,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "EndorserConfig":
        """Load configuration from a YAML file. Raises ConfigError."""
        config_file = Path(config_file)
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {config_file}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config file {config_file} is not valid YAML: {exc}") from exc
        return cls.from_dict(data or {}, base_dir=config_file.parent, environ=environ)

    def load_signature_engine(self) -> SignatureEngine:
        """Load the authority keypair. Raises ConfigError."""
        try:
            if self.secret_key is not None:
                engine = SignatureEngine.from_secret_key_base58(self.secret_key)
            else:
                engine = SignatureEngine.from_file(self.keypair_path)
        except (FileNotFoundError, ValueError) as exc:
            raise ConfigError(f"Failed to load keypair: {exc}") from exc
        logger.info("loaded authority keypair %s", engine.public_key_base58)
        return engine

    def build_request_endorser(
        self,
        endorse_gate: Optional[RateLimitGate] = None,
        approve_gate: Optional[RateLimitGate] = None,
    ) -> RequestEndorser:
        return RequestEndorser(
            self.load_signature_engine(),
            self.expiration_in_seconds,
            endorse_gate=endorse_gate,
            approve_gate=approve_gate,
        )

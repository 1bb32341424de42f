"""
tests/test_config.py

YAML configuration and keypair loading.
"""

import base58
import pytest

from endorser.authority import RequestEndorser
from endorser.config import SECRET_KEY_ENV, EndorserConfig
from endorser.core.crypto import SignatureEngine
from endorser.core.exceptions import ConfigError


@pytest.fixture
def engine():
    return SignatureEngine.generate()


def write_config(tmp_path, text: str):
    path = tmp_path / "endorser.yaml"
    path.write_text(text)
    return path


class TestFromYaml:

    def test_keypair_path_relative_to_config(self, tmp_path, engine):
        engine.save(tmp_path / "authority.pem")
        path = write_config(
            tmp_path, "expiration_in_seconds: 60\nkeypair_path: authority.pem\n"
        )
        config = EndorserConfig.from_yaml(path, environ={})
        assert config.keypair_path == tmp_path / "authority.pem"
        assert config.load_signature_engine().public_key == engine.public_key

    def test_secret_key(self, tmp_path, engine):
        secret = base58.b58encode(engine.secret_key).decode()
        path = write_config(tmp_path, f"expiration_in_seconds: 30\nsecret_key: {secret}\n")
        authority = EndorserConfig.from_yaml(path, environ={}).build_request_endorser()
        assert isinstance(authority, RequestEndorser)
        assert authority.base58_public_key == engine.public_key_base58
        assert authority.expiration_in_seconds == 30

    def test_env_overrides_file_key(self, tmp_path, engine):
        path = write_config(
            tmp_path, "expiration_in_seconds: 60\nkeypair_path: missing.pem\n"
        )
        env = {SECRET_KEY_ENV: base58.b58encode(engine.secret_key).decode()}
        config = EndorserConfig.from_yaml(path, environ=env)
        assert config.keypair_path is None
        assert config.load_signature_engine().public_key == engine.public_key

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            EndorserConfig.from_yaml(tmp_path / "nope.yaml", environ={})

    def test_invalid_yaml(self, tmp_path):
        path = write_config(tmp_path, "expiration_in_seconds: [60\n")
        with pytest.raises(ConfigError, match="YAML"):
            EndorserConfig.from_yaml(path, environ={})

    def test_empty_file(self, tmp_path):
        path = write_config(tmp_path, "")
        with pytest.raises(ConfigError, match="expiration_in_seconds"):
            EndorserConfig.from_yaml(path, environ={})


class TestFromDict:

    @pytest.mark.parametrize("expiration", [None, "60", 0, -5, True])
    def test_bad_expiration(self, expiration):
        with pytest.raises(ConfigError) as exc_info:
            EndorserConfig.from_dict(
                {"expiration_in_seconds": expiration, "secret_key": "x"}, environ={}
            )
        assert exc_info.value.field == "expiration_in_seconds"

    def test_long_expiration_warns(self):
        with pytest.warns(RuntimeWarning, match="longer than a day"):
            EndorserConfig.from_dict(
                {"expiration_in_seconds": 7 * 24 * 3600, "secret_key": "x"}, environ={}
            )

    def test_requires_exactly_one_key_source(self):
        with pytest.raises(ConfigError, match="exactly one"):
            EndorserConfig.from_dict({"expiration_in_seconds": 60}, environ={})
        with pytest.raises(ConfigError, match="exactly one"):
            EndorserConfig.from_dict(
                {"expiration_in_seconds": 60, "secret_key": "x", "keypair_path": "k.pem"},
                environ={},
            )

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            EndorserConfig.from_dict(["expiration_in_seconds"], environ={})


class TestLoadSignatureEngine:

    def test_missing_key_file(self, tmp_path):
        config = EndorserConfig(expiration_in_seconds=60, keypair_path=tmp_path / "none.pem")
        with pytest.raises(ConfigError, match="keypair"):
            config.load_signature_engine()

    def test_bad_secret_key(self):
        config = EndorserConfig(expiration_in_seconds=60, secret_key="0OIl")
        with pytest.raises(ConfigError):
            config.load_signature_engine()

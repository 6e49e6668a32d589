"""
Test suite for partner configuration loading and resolution
"""

import json
from unittest.mock import Mock, MagicMock

import pytest

from credkit.config import (
    PartnerConfig,
    LoggingConfig,
    CredkitConfig,
    PartnerConfigProvider,
    DEFAULT_PARTNER_ID,
    DEFAULT_PARTNER_KEY,
    ENV_PARTNER_ID,
    ENV_PARTNER_KEY,
    ENV_CONFIG_FILE,
    load_partner_config_from_json,
    load_partner_config_from_file,
)
from credkit.exceptions import ConfigurationError, ServerCommunicationError


@pytest.fixture
def config_file(tmp_path):
    """Write a complete configuration document and return its path"""
    path = tmp_path / "credkit.json"
    path.write_text(json.dumps({
        "partnerId": "partner123",
        "partnerKey": "secretKey456",
        "service": {"base_url": "https://signatures.example.com", "timeout": 5},
        "logging": {"level": "debug", "structured": True},
    }), encoding="utf-8")
    return path


class TestPartnerConfig:
    """Test the partner configuration record"""

    def test_from_dict(self):
        """Test wire key names are mapped"""
        config = PartnerConfig.from_dict({"partnerId": "p", "partnerKey": "k"}, source="remote")
        assert config.partner_id == "p"
        assert config.partner_key == "k"
        assert config.source == "remote"
        assert config.to_dict() == {"partnerId": "p", "partnerKey": "k"}

    def test_missing_key(self):
        """Test a missing key raises ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            PartnerConfig.from_dict({"partnerId": "p"})

        assert exc_info.value.error_code == "MISSING_KEY"

    def test_non_string_value(self):
        """Test non-string values raise ConfigurationError"""
        with pytest.raises(ConfigurationError):
            PartnerConfig.from_dict({"partnerId": 1, "partnerKey": "k"})

    def test_key_hidden_in_repr(self):
        """Test the partner key does not appear in repr"""
        assert "secretKey456" not in repr(PartnerConfig("partner123", "secretKey456"))


class TestLoggingConfig:
    """Test logging configuration validation"""

    def test_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(level="LOUD")


class TestCredkitConfig:
    """Test configuration document parsing"""

    def test_from_file(self, config_file):
        """Test loading a complete document"""
        config = CredkitConfig.from_file(config_file)

        assert config.partner.partner_id == "partner123"
        assert config.partner.partner_key == "secretKey456"
        assert config.partner.source == "file"
        assert config.service == {"base_url": "https://signatures.example.com", "timeout": 5}
        assert config.logging.level == "DEBUG"
        assert config.logging.structured is True

    def test_document_without_partner(self):
        """Test partner credentials are optional in the document"""
        config = CredkitConfig.from_json('{"logging": {"level": "WARNING"}}')
        assert config.partner is None
        assert config.logging.level == "WARNING"

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError) as exc_info:
            CredkitConfig.from_json("{not json")

        assert exc_info.value.error_code == "PARSE_ERROR"

    def test_non_object(self):
        with pytest.raises(ConfigurationError):
            CredkitConfig.from_json("[1, 2]")

    def test_unknown_logging_option(self):
        with pytest.raises(ConfigurationError):
            CredkitConfig.from_json('{"logging": {"colour": true}}')

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            CredkitConfig.from_file(tmp_path / "missing.json")

        assert exc_info.value.error_code == "FILE_ERROR"

    def test_load_helpers(self, config_file):
        """Test module-level loading helpers"""
        assert load_partner_config_from_file(config_file).partner_id == "partner123"
        assert load_partner_config_from_json('{"partnerId": "a", "partnerKey": "b"}').partner_key == "b"

    def test_load_from_file_without_partner(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_partner_config_from_file(path)


class TestPartnerConfigProvider:
    """Test default credential resolution order"""

    def test_file_wins(self, config_file):
        """Test the configuration file is used first"""
        environ = {ENV_PARTNER_ID: "env-id", ENV_PARTNER_KEY: "env-key"}
        config = PartnerConfigProvider(config_file=config_file, environ=environ).resolve()

        assert config.partner_id == "partner123"
        assert config.source == "file"

    def test_config_file_from_environment(self, config_file):
        """Test the file path can come from the environment"""
        config = PartnerConfigProvider(environ={ENV_CONFIG_FILE: str(config_file)}).resolve()
        assert config.partner_id == "partner123"

    def test_environment(self):
        """Test environment variables are used when no file is given"""
        environ = {ENV_PARTNER_ID: "env-id", ENV_PARTNER_KEY: "env-key"}
        config = PartnerConfigProvider(environ=environ).resolve()

        assert config.partner_id == "env-id"
        assert config.partner_key == "env-key"
        assert config.source == "environment"

    def test_incomplete_environment(self):
        """Test a half-set environment is rejected"""
        with pytest.raises(ConfigurationError):
            PartnerConfigProvider(environ={ENV_PARTNER_ID: "env-id"}).resolve()

    def test_remote(self):
        """Test the remote service is used when nothing local is configured"""
        client = Mock()
        client.fetch_default_config.return_value = PartnerConfig("remote-id", "remote-key", source="remote")

        config = PartnerConfigProvider(client=client, environ={}).resolve()

        assert config.partner_id == "remote-id"
        assert config.source == "remote"
        client.fetch_default_config.assert_called_once()

    def test_remote_failure_falls_back(self, caplog):
        """Test an unreachable service falls back to the built-in defaults"""
        client = Mock()
        client.fetch_default_config.side_effect = ServerCommunicationError("Connection error")

        with caplog.at_level("WARNING", logger="credkit"):
            config = PartnerConfigProvider(client=client, environ={}).resolve()

        assert config.partner_id == DEFAULT_PARTNER_ID
        assert config.partner_key == DEFAULT_PARTNER_KEY
        assert config.source == "fallback"
        assert "Using fallback defaults" in caplog.text

    def test_malformed_remote_falls_back(self):
        """Test a malformed remote response falls back to the built-in defaults"""
        client = Mock()
        client.fetch_default_config.side_effect = ConfigurationError("missing key", "MISSING_KEY")

        config = PartnerConfigProvider(client=client, environ={}).resolve()
        assert config.source == "fallback"

    def test_no_sources(self):
        """Test the fallback is used when no source is configured"""
        config = PartnerConfigProvider(environ={}).resolve()

        assert config.partner_id == DEFAULT_PARTNER_ID
        assert config.source == "fallback"

    @pytest.fixture
    def service_client(self, monkeypatch):
        """Replace the remote client class and return the constructor mock"""
        client = MagicMock()
        client.fetch_default_config.return_value = PartnerConfig("remote-id", "remote-key", source="remote")
        client.__enter__.return_value = client
        client_class = Mock(return_value=client)
        monkeypatch.setattr("credkit.http_client.SignatureServiceClient", client_class)
        return client_class

    def test_service_url_from_file(self, tmp_path, service_client):
        """Test a file without credentials supplies the remote service URL"""
        path = tmp_path / "service.json"
        path.write_text(json.dumps({"service": {"base_url": "https://signatures.example.com"}}), encoding="utf-8")

        config = PartnerConfigProvider(config_file=path, environ={}).resolve()

        service_client.assert_called_once()
        assert service_client.call_args.args[0].base_url == "https://signatures.example.com/"
        assert config.partner_id == "remote-id"

    def test_service_settings_from_file(self, tmp_path, service_client):
        """Test every setting in the service section reaches the client"""
        path = tmp_path / "service.json"
        path.write_text(json.dumps({"service": {
            "base_url": "https://signatures.example.com",
            "timeout": 2.5,
            "verify_ssl": False,
            "retry_attempts": 0,
        }}), encoding="utf-8")

        PartnerConfigProvider(config_file=path, environ={}).resolve()

        service_config = service_client.call_args.args[0]
        assert service_config.timeout == 2.5
        assert service_config.verify_ssl is False
        assert service_config.retry_attempts == 0

    def test_explicit_service_url_overrides_file(self, tmp_path, service_client):
        """Test the constructor URL wins while other file settings are kept"""
        path = tmp_path / "service.json"
        path.write_text(json.dumps({"service": {"base_url": "https://file.example.com", "timeout": 4}}), encoding="utf-8")

        PartnerConfigProvider(config_file=path, service_url="https://explicit.example.com", environ={}).resolve()

        service_config = service_client.call_args.args[0]
        assert service_config.base_url == "https://explicit.example.com/"
        assert service_config.timeout == 4

    def test_resolve_is_repeatable(self, tmp_path, service_client):
        """Test resolving does not change the provider"""
        path = tmp_path / "service.json"
        path.write_text(json.dumps({"service": {"base_url": "https://file.example.com"}}), encoding="utf-8")
        provider = PartnerConfigProvider(config_file=path, environ={})

        provider.resolve()
        path.write_text(json.dumps({"service": {"base_url": "https://moved.example.com"}}), encoding="utf-8")
        provider.resolve()

        assert provider.service_url is None
        assert service_client.call_args_list[1].args[0].base_url == "https://moved.example.com/"

    @pytest.mark.parametrize("service", [
        {"base_url": "https://signatures.example.com", "timeout": 0},
        {"base_url": "https://signatures.example.com", "timeout": "fast"},
        {"base_url": "https://signatures.example.com", "retries": 2},
        {"base_url": "not a url"},
    ])
    def test_invalid_service_section_raises(self, tmp_path, service_client, service):
        """Test bad service settings are an error rather than a silent fallback"""
        path = tmp_path / "service.json"
        path.write_text(json.dumps({"service": service}), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            PartnerConfigProvider(config_file=path, environ={}).resolve()

        assert exc_info.value.error_code == "INVALID_SERVICE_CONFIG"
        service_client.assert_not_called()

    def test_broken_file_raises(self, tmp_path):
        """Test a malformed file is an error rather than a silent fallback"""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            PartnerConfigProvider(config_file=path, environ={}).resolve()

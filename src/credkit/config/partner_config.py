"""
Partner configuration management for credkit

Supplies the default partner id and partner key used when the caller does not
provide them, and the optional service and logging settings that travel in the
same configuration document.
"""

import os
import json
import logging
from typing import Dict, Optional, Any, Union, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import ConfigurationError, CredkitError, ValidationError

logger = logging.getLogger(__name__)

# Used when no configuration source can be reached
DEFAULT_PARTNER_ID = "defaultPartnerID"
DEFAULT_PARTNER_KEY = "defaultPartnerKey"

ENV_PARTNER_ID = "CREDKIT_PARTNER_ID"
ENV_PARTNER_KEY = "CREDKIT_PARTNER_KEY"
ENV_CONFIG_FILE = "CREDKIT_CONFIG"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PartnerConfig:
    """
    Default partner credentials

    Attributes:
        partner_id: Partner identifier
        partner_key: Partner secret
        source: Where the values came from (file, json, environment, remote, fallback)
    """
    partner_id: str
    partner_key: str = field(repr=False)
    source: str = "json"

    def __post_init__(self):
        """Validate partner configuration"""
        for name in ("partner_id", "partner_key"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(
                    f"Partner configuration field '{name}' must be a string",
                    "INVALID_FORMAT",
                    {"field": name}
                )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: str = "json") -> 'PartnerConfig':
        """Build from a mapping with ``partnerId`` and ``partnerKey`` keys"""
        try:
            return cls(
                partner_id=data['partnerId'],
                partner_key=data['partnerKey'],
                source=source
            )
        except KeyError as e:
            raise ConfigurationError(
                f"Partner configuration is missing key: {e}",
                "MISSING_KEY",
                {"key": str(e).strip("'")}
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid partner configuration: {e}", "INVALID_FORMAT")

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the wire key names"""
        return {
            'partnerId': self.partner_id,
            'partnerKey': self.partner_key,
        }


def fallback_partner_config() -> PartnerConfig:
    """Return the hardcoded fallback partner credentials."""
    return PartnerConfig(
        partner_id=DEFAULT_PARTNER_ID,
        partner_key=DEFAULT_PARTNER_KEY,
        source="fallback"
    )


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    structured: bool = False

    def __post_init__(self):
        """Normalize and validate log level"""
        if not isinstance(self.level, str) or self.level.upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.level}",
                "INVALID_LOG_LEVEL",
                {"allowed": list(LOG_LEVELS)}
            )
        self.level = self.level.upper()


@dataclass
class CredkitConfig:
    """
    Complete configuration document

    Attributes:
        partner: Default partner credentials, if the document carries them
        service: Keyword arguments for the remote service configuration
        logging: Logging configuration
    """
    partner: Optional[PartnerConfig] = None
    service: Dict[str, Any] = field(default_factory=dict)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_json(cls, json_string: str, source: str = "json") -> 'CredkitConfig':
        """Load configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")

        return cls.from_dict(data, source)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'CredkitConfig':
        """Load configuration from file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR")

        logger.debug(f"Loaded configuration file: {path}")
        return cls.from_json(json_string, source="file")

    @classmethod
    def from_dict(cls, data: Any, source: str = "json") -> 'CredkitConfig':
        """Parse configuration dictionary into structured objects"""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object", "INVALID_FORMAT")

        partner = None
        if 'partnerId' in data or 'partnerKey' in data:
            partner = PartnerConfig.from_dict(data, source)

        service = data.get('service', {})
        if not isinstance(service, dict):
            raise ConfigurationError("'service' must be a JSON object", "INVALID_FORMAT")

        logging_data = data.get('logging', {})
        if not isinstance(logging_data, dict):
            raise ConfigurationError("'logging' must be a JSON object", "INVALID_FORMAT")

        try:
            logging_config = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid logging configuration: {e}", "INVALID_FORMAT")

        return cls(partner=partner, service=dict(service), logging=logging_config)


class PartnerConfigProvider:
    """
    Resolves the default partner credentials.

    Sources are tried in order: configuration file, environment variables,
    remote service, hardcoded fallback. The first source that yields a
    partner configuration wins.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        service_url: Optional[str] = None,
        client=None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Args:
            config_file: Optional JSON configuration file
            service_url: Optional remote service base URL for ``api/config``
            client: Optional ``SignatureServiceClient`` to use for the remote lookup
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self.environ = os.environ if environ is None else environ
        self.config_file = config_file or self.environ.get(ENV_CONFIG_FILE)
        self.service_url = service_url
        self.client = client

    def load_file(self) -> Optional[CredkitConfig]:
        """Load the configuration file if one was given."""
        if not self.config_file:
            return None
        return CredkitConfig.from_file(self.config_file)

    def from_environment(self) -> Optional[PartnerConfig]:
        """Read partner credentials from environment variables."""
        partner_id = self.environ.get(ENV_PARTNER_ID)
        partner_key = self.environ.get(ENV_PARTNER_KEY)

        if partner_id is None and partner_key is None:
            return None

        if partner_id is None or partner_key is None:
            raise ConfigurationError(
                f"Both {ENV_PARTNER_ID} and {ENV_PARTNER_KEY} must be set",
                "INCOMPLETE_ENVIRONMENT"
            )

        return PartnerConfig(partner_id, partner_key, source="environment")

    def build_service_config(self, service: Optional[Mapping[str, Any]] = None):
        """
        Build the remote service settings from a ``service`` section.

        An explicit ``service_url`` overrides the section's ``base_url``.

        Args:
            service: Keyword arguments for ``ServiceConfig``

        Returns:
            Optional[ServiceConfig]: Settings, or None when no service URL is configured

        Raises:
            ConfigurationError: If the service settings are invalid
        """
        settings = dict(service or {})
        if self.service_url:
            settings['base_url'] = self.service_url

        if not settings.get('base_url'):
            return None

        from ..http_client import ServiceConfig

        try:
            return ServiceConfig(**settings)
        except (TypeError, ValidationError) as e:
            raise ConfigurationError(
                f"Invalid service configuration: {e}",
                "INVALID_SERVICE_CONFIG",
                {"service": settings}
            )

    def from_remote(self, service_config=None) -> Optional[PartnerConfig]:
        """Fetch partner credentials from the remote service, if configured."""
        if self.client is not None:
            return self.client.fetch_default_config()

        if service_config is None:
            service_config = self.build_service_config()
            if service_config is None:
                return None

        from ..http_client import SignatureServiceClient

        with SignatureServiceClient(service_config) as client:
            return client.fetch_default_config()

    def resolve(self) -> PartnerConfig:
        """
        Resolve the default partner credentials.

        A broken configuration file, environment or service section raises;
        an unreachable remote service falls back to the hardcoded defaults.

        Returns:
            PartnerConfig: Resolved credentials

        Raises:
            ConfigurationError: If the file, environment or service configuration is malformed
        """
        service: Dict[str, Any] = {}

        file_config = self.load_file()
        if file_config is not None:
            if file_config.partner is not None:
                return file_config.partner
            service = file_config.service

        env_config = self.from_environment()
        if env_config is not None:
            return env_config

        service_config = None
        if self.client is None:
            service_config = self.build_service_config(service)
            if service_config is None:
                logger.debug("No partner configuration source available, using fallback defaults")
                return fallback_partner_config()

        try:
            remote_config = self.from_remote(service_config)
        except CredkitError as e:
            logger.warning(f"Failed to fetch default config: {e}")
            logger.warning("Could not fetch default configuration. Using fallback defaults.")
            return fallback_partner_config()

        logger.info("Loaded default partner configuration from remote service")
        return remote_config


def load_partner_config_from_json(json_string: str) -> PartnerConfig:
    """Load partner credentials from a JSON string"""
    return PartnerConfig.from_dict(_parse_json_object(json_string))


def load_partner_config_from_file(file_path: Union[str, Path]) -> PartnerConfig:
    """Load partner credentials from a JSON file"""
    config = CredkitConfig.from_file(file_path)
    if config.partner is None:
        raise ConfigurationError(
            f"Configuration file has no partner credentials: {file_path}",
            "MISSING_KEY"
        )
    return config.partner


def load_default_partner_config(
    config_file: Optional[Union[str, Path]] = None,
    service_url: Optional[str] = None
) -> PartnerConfig:
    """Resolve partner credentials through every configured source"""
    return PartnerConfigProvider(config_file=config_file, service_url=service_url).resolve()


def _parse_json_object(json_string: str) -> Dict[str, Any]:
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object", "INVALID_FORMAT")
    return data

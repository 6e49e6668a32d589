"""
Configuration management for credkit

This module resolves the default partner credentials and carries the service
and logging settings read from the same configuration document.
"""

from .partner_config import (
    PartnerConfig,
    LoggingConfig,
    CredkitConfig,
    PartnerConfigProvider,
    DEFAULT_PARTNER_ID,
    DEFAULT_PARTNER_KEY,
    ENV_PARTNER_ID,
    ENV_PARTNER_KEY,
    ENV_CONFIG_FILE,
    fallback_partner_config,
    load_partner_config_from_json,
    load_partner_config_from_file,
    load_default_partner_config,
)

__all__ = [
    'PartnerConfig',
    'LoggingConfig',
    'CredkitConfig',
    'PartnerConfigProvider',
    'DEFAULT_PARTNER_ID',
    'DEFAULT_PARTNER_KEY',
    'ENV_PARTNER_ID',
    'ENV_PARTNER_KEY',
    'ENV_CONFIG_FILE',
    'fallback_partner_config',
    'load_partner_config_from_json',
    'load_partner_config_from_file',
    'load_default_partner_config',
]

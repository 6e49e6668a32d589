"""
credkit
Partner signatures and packed agent credentials
"""

import sys
import base64
import platform
from typing import Any, Dict

from .version import __version__
from .encoding import (
    SignatureEncoder,
    CredentialPacker,
    SignatureRequest,
    SignatureResult,
    PackRequest,
    PackResult,
    EncodingErrorCodes,
    compute_signature,
    verify_signature,
    pack_credentials,
    decode_record,
    md5_available,
)
from .exceptions import (
    CredkitError,
    ValidationError,
    EncodingError,
    ConfigurationError,
    ServerCommunicationError,
)
from .config import (
    PartnerConfig,
    LoggingConfig,
    CredkitConfig,
    PartnerConfigProvider,
    load_default_partner_config,
)
from .http_client import (
    SignatureServiceClient,
    ServiceConfig,
    create_client,
)


def check_platform_compatibility() -> Dict[str, Any]:
    """
    Check platform support for the encoding primitives.

    Returns:
        dict: Availability of MD5 and base64, and platform details
    """
    try:
        base64_available = base64.b64decode(base64.b64encode(b"credkit")) == b"credkit"
    except Exception:
        base64_available = False

    return {
        'md5_available': md5_available(),
        'base64_available': base64_available,
        'platform_info': {
            'system': platform.system(),
            'python_version': sys.version,
            'architecture': platform.architecture()[0],
        }
    }


def initialize_sdk():
    """
    Check platform compatibility before use.

    Returns:
        dict: Compatibility information with 'compatible' (bool) and 'warnings' (list)
    """
    warnings = []
    compatible = True

    compat_info = check_platform_compatibility()
    if not compat_info['md5_available']:
        warnings.append('MD5 is disabled in this environment (FIPS mode?) - signatures cannot be computed')
        compatible = False

    if not compat_info['base64_available']:
        warnings.append('Base64 codec not functional - credentials cannot be packed')
        compatible = False

    return {
        'compatible': compatible,
        'warnings': warnings
    }


def is_compatible():
    """
    Quick synchronous compatibility check.

    Returns:
        bool: True if both encoders can run on this platform
    """
    return initialize_sdk()['compatible']


# Public API exports
__all__ = [
    '__version__',
    'check_platform_compatibility',
    'initialize_sdk',
    'is_compatible',
    # Encoders
    'SignatureEncoder',
    'CredentialPacker',
    'SignatureRequest',
    'SignatureResult',
    'PackRequest',
    'PackResult',
    'EncodingErrorCodes',
    'compute_signature',
    'verify_signature',
    'pack_credentials',
    'decode_record',
    # Exceptions
    'CredkitError',
    'ValidationError',
    'EncodingError',
    'ConfigurationError',
    'ServerCommunicationError',
    # Configuration
    'PartnerConfig',
    'LoggingConfig',
    'CredkitConfig',
    'PartnerConfigProvider',
    'load_default_partner_config',
    # HTTP Client
    'SignatureServiceClient',
    'ServiceConfig',
    'create_client',
]

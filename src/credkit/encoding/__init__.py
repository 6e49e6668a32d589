"""
credkit - Credential Encoding Module

Pure, deterministic transforms from raw identity fields to derived
credential strings: the partner signature and the packed agent credentials.
Nothing in this package performs I/O or keeps state between calls.
"""

from .types import (
    SignatureRequest,
    SignatureResult,
    PackRequest,
    PackResult,
    EncodingErrorCodes,
    SIGNATURE_HASH_ALGORITHM,
    SIGNATURE_DIGEST_LENGTH,
    TEXT_ENCODING,
    AGENT_DELIMITER,
    PASSWORD_DELIMITER,
)

from .signature import (
    SignatureEncoder,
    compute_signature,
    verify_signature,
    md5_available,
)

from .packer import (
    CredentialPacker,
    pack_credentials,
    decode_record,
)

from .utils import (
    is_blank,
    require_fields,
    is_valid_digest,
    is_valid_base64,
)

__all__ = [
    # Types
    'SignatureRequest',
    'SignatureResult',
    'PackRequest',
    'PackResult',
    'EncodingErrorCodes',
    'SIGNATURE_HASH_ALGORITHM',
    'SIGNATURE_DIGEST_LENGTH',
    'TEXT_ENCODING',
    'AGENT_DELIMITER',
    'PASSWORD_DELIMITER',
    # Signature
    'SignatureEncoder',
    'compute_signature',
    'verify_signature',
    'md5_available',
    # Packing
    'CredentialPacker',
    'pack_credentials',
    'decode_record',
    # Utilities
    'is_blank',
    'require_fields',
    'is_valid_digest',
    'is_valid_base64',
]

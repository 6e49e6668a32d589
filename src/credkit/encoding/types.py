"""
Type definitions for credential encoding

This module provides the value records exchanged with the signature encoder
and the credential packer, together with the fixed constants and error codes
shared by both transforms.
"""

from dataclasses import dataclass, field


# Fixed by contract with downstream verifiers, not configurable
SIGNATURE_HASH_ALGORITHM = "md5"
SIGNATURE_DIGEST_LENGTH = 32

TEXT_ENCODING = "utf-8"

AGENT_DELIMITER = "*"
PASSWORD_DELIMITER = ":"

SIGNATURE_FIELDS_REQUIRED = "Both Partner ID and Partner Key are required"
PACK_FIELDS_REQUIRED = "All three fields are required"


class EncodingErrorCodes:
    """Standard error codes for encoding operations"""
    
    # Validation errors
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD_TYPE = "INVALID_FIELD_TYPE"
    INVALID_ENCODED_VALUE = "INVALID_ENCODED_VALUE"
    
    # Primitive errors
    HASH_UNAVAILABLE = "HASH_UNAVAILABLE"
    HASH_FAILED = "HASH_FAILED"
    ENCODE_FAILED = "ENCODE_FAILED"


@dataclass(frozen=True)
class SignatureRequest:
    """
    Input to the signature encoder
    
    Attributes:
        partner_id: Partner identifier
        partner_key: Partner secret
    """
    partner_id: str
    partner_key: str = field(repr=False)
    
    def __post_init__(self):
        """Validate request after initialization"""
        from .utils import require_fields
        
        require_fields(
            {"partner_id": self.partner_id, "partner_key": self.partner_key},
            SIGNATURE_FIELDS_REQUIRED
        )
    
    @property
    def concatenated(self) -> str:
        """Exact concatenation that gets hashed, untrimmed and without separator"""
        return self.partner_id + self.partner_key


@dataclass(frozen=True)
class SignatureResult:
    """
    Output of the signature encoder
    
    Attributes:
        digest: Lowercase hex MD5 digest (32 characters)
        concatenated: The text the digest was computed over
    """
    digest: str
    concatenated: str = field(default="", repr=False)
    
    def __post_init__(self):
        """Validate signature result"""
        if len(self.digest) != SIGNATURE_DIGEST_LENGTH:
            raise ValueError(f"Digest must be exactly {SIGNATURE_DIGEST_LENGTH} hex characters")


@dataclass(frozen=True)
class PackRequest:
    """
    Input to the credential packer
    
    Attributes:
        agent_id: Agent identifier
        username: Account username
        password: Account password
    """
    agent_id: str
    username: str
    password: str = field(repr=False)
    
    def __post_init__(self):
        """Validate request after initialization"""
        from .utils import require_fields
        
        require_fields(
            {"agent_id": self.agent_id, "username": self.username, "password": self.password},
            PACK_FIELDS_REQUIRED
        )
    
    @property
    def record(self) -> str:
        """Delimited record string, ``agent_id*username:password``"""
        return f"{self.agent_id}{AGENT_DELIMITER}{self.username}{PASSWORD_DELIMITER}{self.password}"


@dataclass(frozen=True)
class PackResult:
    """
    Output of the credential packer
    
    Attributes:
        encoded: Padded standard base64 text of the record bytes
        record: The record string that was encoded
    """
    encoded: str
    record: str = field(default="", repr=False)
    
    def __post_init__(self):
        """Validate pack result"""
        if not self.encoded:
            raise ValueError("Encoded value cannot be empty")
        
        if len(self.encoded) % 4 != 0:
            raise ValueError("Encoded value length must be a multiple of 4")

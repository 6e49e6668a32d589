"""
Utility functions for credential encoding

Shared input validation and text/byte helpers used by both the signature
encoder and the credential packer.
"""

import re
import base64
import binascii
from typing import Dict, List, Any

from ..exceptions import ValidationError, EncodingError
from .types import EncodingErrorCodes, TEXT_ENCODING, SIGNATURE_DIGEST_LENGTH


_DIGEST_PATTERN = re.compile(rf'[0-9a-f]{{{SIGNATURE_DIGEST_LENGTH}}}')
_BASE64_PATTERN = re.compile(r'(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?')


def is_blank(value: Any) -> bool:
    """
    Check whether a field value is empty after trimming surrounding whitespace.

    Args:
        value: Field value to check

    Returns:
        bool: True if value is None or whitespace-only
    """
    if value is None:
        return True

    return not value.strip()


def find_blank_fields(fields: Dict[str, Any]) -> List[str]:
    """Return the names of the fields that are blank, in declaration order."""
    return [name for name, value in fields.items() if is_blank(value)]


def require_fields(fields: Dict[str, Any], message: str) -> None:
    """
    Ensure every named field is a string that is non-empty after trimming.

    Only the trimmed form is checked; callers keep using the original
    untrimmed values.

    Args:
        fields: Mapping of field name to value
        message: Error message reported when any field is blank; the
            names of the blank fields are appended to it

    Raises:
        ValidationError: If a field is not a string or is blank
    """
    for name, value in fields.items():
        if value is not None and not isinstance(value, str):
            raise ValidationError(
                f"Field '{name}' must be a string, got {type(value).__name__}",
                EncodingErrorCodes.INVALID_FIELD_TYPE,
                {"field": name, "type": type(value).__name__}
            )

    missing = find_blank_fields(fields)
    if missing:
        raise ValidationError(
            f"{message} (missing: {', '.join(missing)})",
            EncodingErrorCodes.MISSING_FIELD,
            {"missing_fields": missing}
        )


def to_bytes(text: str) -> bytes:
    """
    Encode text under the system text encoding (UTF-8).

    Raises:
        EncodingError: If the text cannot be encoded (e.g. lone surrogates)
    """
    try:
        return text.encode(TEXT_ENCODING)
    except UnicodeEncodeError as e:
        raise EncodingError(
            f"Failed to encode text as {TEXT_ENCODING}: {e}",
            EncodingErrorCodes.ENCODE_FAILED,
            {"encoding": TEXT_ENCODING, "original_error": str(e)}
        )


def to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hex string.

    Args:
        data: Bytes to convert

    Returns:
        str: Lowercase hex string, one pair per byte
    """
    return data.hex().lower()


def is_valid_digest(value: Any) -> bool:
    """Check that a value is a 32-character lowercase hex digest."""
    if not isinstance(value, str):
        return False

    return bool(_DIGEST_PATTERN.fullmatch(value))


def is_valid_base64(value: Any) -> bool:
    """
    Check that a value uses the padded standard base64 alphabet.

    Args:
        value: Value to check

    Returns:
        bool: True if value is non-empty, padded and strictly decodable
    """
    if not isinstance(value, str) or not value:
        return False

    if not _BASE64_PATTERN.fullmatch(value):
        return False

    try:
        base64.b64decode(value, validate=True)
    except binascii.Error:
        return False

    return True

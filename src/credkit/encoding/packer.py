"""
Agent credential packer

Joins an agent id, username and password into the record
``agent_id*username:password`` and encodes the UTF-8 bytes of that record as
padded standard base64.

Delimiters inside field values are not escaped, so a username or password
containing ``*`` or ``:`` produces a record that cannot be split back
unambiguously. The wire format depends on this layout.
"""

import base64
import binascii
import logging

from ..exceptions import EncodingError, ValidationError
from .types import EncodingErrorCodes, PackRequest, PackResult, TEXT_ENCODING
from .utils import to_bytes, is_blank

logger = logging.getLogger(__name__)


class CredentialPacker:
    """Stateless agent credential packer."""

    def pack(self, agent_id: str, username: str, password: str) -> str:
        """
        Pack agent credentials into a base64 string.

        Args:
            agent_id: Agent identifier
            username: Account username
            password: Account password

        Returns:
            str: Padded standard base64 encoding of the record bytes

        Raises:
            ValidationError: If any field is blank after trimming
            EncodingError: If the record cannot be encoded
        """
        return self.pack_result(PackRequest(agent_id, username, password)).encoded

    def pack_result(self, request: PackRequest) -> PackResult:
        """Pack a validated request, returning the encoded value and its record."""
        record = request.record

        try:
            encoded = base64.b64encode(to_bytes(record)).decode('ascii')
        except EncodingError:
            raise
        except Exception as e:
            raise EncodingError(
                f"Base64 encoding failed: {e}",
                EncodingErrorCodes.ENCODE_FAILED,
                {"original_error": str(e)}
            )

        logger.debug(f"Packed credentials for agent: {request.agent_id}")
        return PackResult(encoded=encoded, record=record)

    def decode_record(self, encoded: str) -> str:
        """
        Decode a packed value back to its record string.

        Args:
            encoded: Value produced by ``pack``

        Returns:
            str: The ``agent_id*username:password`` record

        Raises:
            ValidationError: If the value is blank, not strict base64, or not UTF-8
        """
        if encoded is not None and not isinstance(encoded, str):
            raise ValidationError(
                f"Encoded value must be a string, got {type(encoded).__name__}",
                EncodingErrorCodes.INVALID_FIELD_TYPE,
                {"field": "encoded", "type": type(encoded).__name__}
            )

        if is_blank(encoded):
            raise ValidationError(
                "Encoded value is required",
                EncodingErrorCodes.MISSING_FIELD,
                {"missing_fields": ["encoded"]}
            )

        try:
            raw = base64.b64decode(encoded.strip(), validate=True)
        except binascii.Error as e:
            raise ValidationError(
                f"Invalid base64 value: {e}",
                EncodingErrorCodes.INVALID_ENCODED_VALUE,
                {"original_error": str(e)}
            )

        try:
            return raw.decode(TEXT_ENCODING)
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"Decoded value is not valid {TEXT_ENCODING} text: {e}",
                EncodingErrorCodes.INVALID_ENCODED_VALUE,
                {"encoding": TEXT_ENCODING, "original_error": str(e)}
            )


_default_packer = CredentialPacker()


def pack_credentials(agent_id: str, username: str, password: str) -> str:
    """
    Convenience function packing agent credentials.

    Returns:
        str: Padded standard base64 encoding of ``agent_id*username:password``
    """
    return _default_packer.pack(agent_id, username, password)


def decode_record(encoded: str) -> str:
    """Convenience function decoding a packed value to its record string."""
    return _default_packer.decode_record(encoded)

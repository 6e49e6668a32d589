"""
Partner signature encoder

Computes the partner signature: the MD5 digest, as lowercase hex, of the
partner identifier immediately followed by the partner key. Downstream
services recompute the same MD5 digest to verify it.
"""

import hmac
import hashlib
import logging

from ..exceptions import EncodingError, ValidationError
from .types import (
    EncodingErrorCodes,
    SignatureRequest,
    SignatureResult,
    SIGNATURE_HASH_ALGORITHM,
)
from .utils import to_bytes, to_hex, is_valid_digest

logger = logging.getLogger(__name__)


def md5_available() -> bool:
    """
    Check whether the MD5 primitive can be used in this environment.

    OpenSSL builds running in FIPS mode refuse to construct MD5 hashers.
    """
    try:
        hashlib.md5(b"")
        return True
    except ValueError:
        return False


def _md5_hexdigest(data: bytes) -> str:
    try:
        hasher = hashlib.md5()
    except ValueError as e:
        raise EncodingError(
            f"Hash algorithm '{SIGNATURE_HASH_ALGORITHM}' is not available: {e}",
            EncodingErrorCodes.HASH_UNAVAILABLE,
            {"algorithm": SIGNATURE_HASH_ALGORITHM, "original_error": str(e)}
        )

    try:
        hasher.update(data)
        return to_hex(hasher.digest())
    except Exception as e:
        raise EncodingError(
            f"Signature digest calculation failed: {e}",
            EncodingErrorCodes.HASH_FAILED,
            {"algorithm": SIGNATURE_HASH_ALGORITHM, "original_error": str(e)}
        )


class SignatureEncoder:
    """
    Stateless partner signature encoder.

    Instances hold no state and may be shared freely between threads.
    """

    algorithm = SIGNATURE_HASH_ALGORITHM

    def compute(self, partner_id: str, partner_key: str) -> str:
        """
        Compute the signature for a partner id and key.

        Args:
            partner_id: Partner identifier
            partner_key: Partner secret

        Returns:
            str: 32-character lowercase hex digest

        Raises:
            ValidationError: If either field is blank after trimming
            EncodingError: If the hash primitive fails
        """
        return self.compute_result(SignatureRequest(partner_id, partner_key)).digest

    def compute_result(self, request: SignatureRequest) -> SignatureResult:
        """
        Compute the signature for a validated request.

        The untrimmed field values are concatenated; trimming only decides
        whether the request is valid.
        """
        concatenated = request.concatenated
        digest = _md5_hexdigest(to_bytes(concatenated))

        logger.debug(f"Computed {self.algorithm} signature for partner: {request.partner_id}")
        return SignatureResult(digest=digest, concatenated=concatenated)

    def verify(self, partner_id: str, partner_key: str, digest: str) -> bool:
        """
        Check a candidate digest against the signature of the given fields.

        Args:
            partner_id: Partner identifier
            partner_key: Partner secret
            digest: Candidate hex digest (case-insensitive)

        Returns:
            bool: True if the digest matches

        Raises:
            ValidationError: If either field is blank or digest is not a string
        """
        if not isinstance(digest, str):
            raise ValidationError(
                "Digest must be a string",
                EncodingErrorCodes.INVALID_FIELD_TYPE,
                {"field": "digest", "type": type(digest).__name__}
            )

        expected = self.compute(partner_id, partner_key)
        candidate = digest.strip().lower()
        if not is_valid_digest(candidate):
            return False

        return hmac.compare_digest(expected, candidate)


_default_encoder = SignatureEncoder()


def compute_signature(partner_id: str, partner_key: str) -> str:
    """
    Convenience function computing a partner signature.

    Args:
        partner_id: Partner identifier
        partner_key: Partner secret

    Returns:
        str: 32-character lowercase hex digest
    """
    return _default_encoder.compute(partner_id, partner_key)


def verify_signature(partner_id: str, partner_key: str, digest: str) -> bool:
    """Convenience function checking a digest with the default encoder."""
    return _default_encoder.verify(partner_id, partner_key, digest)

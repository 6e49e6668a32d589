#!/usr/bin/env python3
"""
credkit - Encoding Example

This example computes a partner signature from resolved default credentials,
packs a set of agent credentials and shows how validation failures surface.
"""

import base64

from credkit import (
    PartnerConfigProvider,
    SignatureEncoder,
    SignatureRequest,
    pack_credentials,
    decode_record,
    ValidationError,
)


def signature_example():
    """Compute the signature for the configured partner"""
    print("=== Partner Signature ===")

    partner = PartnerConfigProvider().resolve()
    print(f"Partner ID: {partner.partner_id} (source: {partner.source})")

    result = SignatureEncoder().compute_result(SignatureRequest(partner.partner_id, partner.partner_key))
    print(f"Concatenated: {result.concatenated}")
    print(f"MD5 Signature: {result.digest}")


def packing_example():
    """Pack agent credentials and decode them again"""
    print("\n=== Packed Agent Credentials ===")

    encoded = pack_credentials("AG1", "jdoe", "p@ss")
    print(f"Encoded: {encoded}")
    print(f"Authorization header: Basic {encoded}")
    print(f"Decoded record: {decode_record(encoded)}")
    print(f"Raw bytes: {base64.b64decode(encoded)!r}")


def validation_example():
    """Show the error raised for blank input"""
    print("\n=== Validation ===")

    try:
        pack_credentials("AG1", "   ", "p@ss")
    except ValidationError as e:
        print(f"Rejected: {e} (code: {e.error_code}, fields: {e.details['missing_fields']})")


def main():
    signature_example()
    packing_example()
    validation_example()


if __name__ == "__main__":
    main()

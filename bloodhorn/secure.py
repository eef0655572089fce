"""Reading boot files and checking kernel signatures under Secure Boot."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.serialization import (
    load_der_public_key,
    load_pem_public_key,
)

SIGNATURE_SIZE = 256
SECURE_BOOT_VARIABLE = "SecureBoot"
PLATFORM_KEY_VARIABLE = "PK"


class SecurityViolation(Exception):
    """An image failed signature verification."""


def read_file(root: str | os.PathLike[str], name: str) -> bytes:
    """Return the contents of ``name`` on the volume rooted at ``root``.

    Backslash separators are accepted; raises ``OSError`` on failure.
    """
    relative = name.replace("\\", "/").lstrip("/")
    with open(Path(root) / relative, "rb") as handle:
        return handle.read()


def _load_public_key(public_key: bytes | rsa.RSAPublicKey) -> rsa.RSAPublicKey:
    if isinstance(public_key, rsa.RSAPublicKey):
        return public_key
    data = bytes(public_key)
    try:
        if data.lstrip().startswith(b"-----"):
            key = load_pem_public_key(data)
        else:
            key = load_der_public_key(data)
    except (ValueError, TypeError, UnsupportedAlgorithm) as err:
        raise SecurityViolation("public key cannot be read") from err
    if not isinstance(key, rsa.RSAPublicKey):
        raise SecurityViolation("public key is not an RSA key")
    return key


def verify_image_signature(image: bytes, public_key: bytes | rsa.RSAPublicKey) -> bytes:
    """Check the 256-byte RSA PKCS#1 v1.5 SHA-256 signature appended to ``image``.

    Returns the signed payload; raises ``SecurityViolation`` when the image
    is too short, the key unusable or the signature wrong.
    """
    image = bytes(image)
    if len(image) < SIGNATURE_SIZE:
        raise SecurityViolation("image is shorter than its signature")
    payload = image[:-SIGNATURE_SIZE]
    signature = image[-SIGNATURE_SIZE:]
    key = _load_public_key(public_key)
    try:
        key.verify(signature, payload, padding.PKCS1v15(), hashes.SHA256())
    except (InvalidSignature, ValueError) as err:
        raise SecurityViolation("image signature does not verify") from err
    return payload


def is_secure_boot_enabled(variables: Mapping[str, bytes]) -> bool:
    """True when the one-byte ``SecureBoot`` variable holds 1."""
    value = variables.get(SECURE_BOOT_VARIABLE)
    if value is None:
        return False
    value = bytes(value)
    return len(value) == 1 and value[0] == 1


def load_and_verify_kernel(
    root: str | os.PathLike[str], name: str, variables: Mapping[str, bytes]
) -> bytes:
    """Read a kernel image and, under Secure Boot, verify it with the platform key.

    Raises ``KeyError`` when Secure Boot is on but no platform key is set.
    """
    data = read_file(root, name)
    if is_secure_boot_enabled(variables):
        public_key = variables.get(PLATFORM_KEY_VARIABLE)
        if public_key is None:
            raise KeyError(PLATFORM_KEY_VARIABLE)
        verify_image_signature(data, public_key)
    return data
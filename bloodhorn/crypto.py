"""Hashing, HMAC, block XOR and RSA PKCS#1 v1.5 signature checks."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_SIZE = 256
PUBLIC_KEY_SIZE = 516
HMAC_MAX_DATA = 1024
BLOCK_SIZE = 16

_SHA256_DIGEST_INFO = bytes(
    [
        0x30, 0x31, 0x30, 0x0D, 0x06, 0x09, 0x60, 0x86, 0x48, 0x01,
        0x65, 0x03, 0x04, 0x02, 0x01, 0x05, 0x00, 0x04, 0x20,
    ]
)


def sha256_hash(data: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of ``data``."""
    return hashlib.sha256(data).digest()


def verify_signature(data: bytes, signature: bytes, public_key: bytes) -> bool:
    """Check a 2048-bit RSA PKCS#1 v1.5 SHA-256 signature over ``data``.

    ``public_key`` holds 4 header bytes, a 256-byte big-endian exponent and a
    256-byte big-endian modulus.
    """
    if len(signature) != SIGNATURE_SIZE:
        raise ValueError(f"signature must be {SIGNATURE_SIZE} bytes")
    if len(public_key) < PUBLIC_KEY_SIZE:
        raise ValueError(f"public key must be at least {PUBLIC_KEY_SIZE} bytes")
    exponent = int.from_bytes(public_key[4:260], "big")
    modulus = int.from_bytes(public_key[260:516], "big")
    if modulus == 0:
        raise ValueError("public key modulus is zero")
    decrypted = pow(int.from_bytes(signature, "big"), exponent, modulus)
    block = decrypted.to_bytes(SIGNATURE_SIZE, "big")
    if block[:2] != b"\x00\x01":
        return False
    rest = block[2:].lstrip(b"\xff")
    if not rest or rest[0] != 0:
        return False
    return rest[1:].startswith(_SHA256_DIGEST_INFO + sha256_hash(data))


def hmac_sha256(key: bytes, data: bytes) -> bytes:
    """Return HMAC-SHA-256 of ``data`` (at most 1024 bytes) under ``key``."""
    if len(data) > HMAC_MAX_DATA:
        raise ValueError(f"data longer than {HMAC_MAX_DATA} bytes")
    return hmac.new(key, data, hashlib.sha256).digest()


def xor_encrypt_block(block: bytes, key: bytes) -> bytes:
    """XOR a 16-byte block with a 16-byte key."""
    if len(block) != BLOCK_SIZE or len(key) != BLOCK_SIZE:
        raise ValueError(f"block and key must both be {BLOCK_SIZE} bytes")
    return bytes(b ^ k for b, k in zip(block, key))


def secure_boot_verify(kernel: bytes, signature: bytes, public_key: bytes) -> bool:
    """Verify a kernel image against its detached signature."""
    return verify_signature(kernel, signature, public_key)
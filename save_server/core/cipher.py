# save_server/core/cipher.py

import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM


IV_BYTES = 16
TAG_BYTES = 16
KEY_BYTES = 32
SEPARATOR = ":"


class TamperOrCorruption(Exception):
    """
    The record failed authentication or is not a well-formed iv:tag:data record.
    """


class ProfileCipher:
    """
    AES-256-GCM over opaque payloads, bound to one fixed key.

    Records are encoded as ``<iv hex>:<tag hex>:<ciphertext hex>`` with a
    fresh 16-byte IV per call.
    """

    def __init__(self, key: bytes):
        if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_BYTES:
            raise ValueError("AES-256 key must be exactly 32 bytes")
        self._aes = AESGCM(bytes(key))

    def encrypt(self, plaintext: bytes) -> str:
        iv = os.urandom(IV_BYTES)
        sealed = self._aes.encrypt(iv, plaintext, None)

        # AESGCM appends the tag to the ciphertext
        ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
        return SEPARATOR.join((iv.hex(), tag.hex(), ciphertext.hex()))

    def decrypt(self, record: str) -> bytes:
        if not isinstance(record, str):
            raise TamperOrCorruption("record must be a string")

        parts = record.split(SEPARATOR)
        if len(parts) != 3:
            raise TamperOrCorruption("expected 3 fields, got %d" % len(parts))

        try:
            iv, tag, ciphertext = (bytes.fromhex(p) for p in parts)
        except ValueError as e:
            raise TamperOrCorruption("invalid hex field") from e

        if len(iv) != IV_BYTES or len(tag) != TAG_BYTES:
            raise TamperOrCorruption("bad iv or tag length")

        try:
            return self._aes.decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise TamperOrCorruption("authentication tag mismatch") from e

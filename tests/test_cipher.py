import os

import pytest

from save_server.core.cipher import ProfileCipher, TamperOrCorruption


PLAINTEXT = b'{"money": 100, "level": 3}'


def _flip_hex(field: str, index: int = 0) -> str:
    swapped = "1" if field[index] != "1" else "2"
    return field[:index] + swapped + field[index + 1:]


def test_encrypt_decrypt_round_trip(cipher):
    record = cipher.encrypt(PLAINTEXT)
    assert cipher.decrypt(record) == PLAINTEXT


def test_record_is_iv_tag_ciphertext_hex(cipher):
    iv, tag, data = cipher.encrypt(PLAINTEXT).split(":")

    assert len(iv) == 32
    assert len(tag) == 32
    assert len(data) == len(PLAINTEXT) * 2
    assert PLAINTEXT.hex() != data


def test_fresh_iv_per_call(cipher):
    first = cipher.encrypt(PLAINTEXT)
    second = cipher.encrypt(PLAINTEXT)

    assert first.split(":")[0] != second.split(":")[0]
    assert first != second


@pytest.mark.parametrize("field", [0, 1, 2])
def test_tampered_field_is_rejected(cipher, field):
    parts = cipher.encrypt(PLAINTEXT).split(":")
    parts[field] = _flip_hex(parts[field])

    with pytest.raises(TamperOrCorruption):
        cipher.decrypt(":".join(parts))


@pytest.mark.parametrize("record", [
    "",
    "abcd",
    "00:11",
    "00:11:22:33",
    "zz:" + "00" * 16 + ":00",
    "00" * 16 + ":" + "00" * 16 + ":not-hex",
    "00" * 8 + ":" + "00" * 16 + ":00",
])
def test_malformed_record_is_rejected(cipher, record):
    with pytest.raises(TamperOrCorruption):
        cipher.decrypt(record)


def test_wrong_key_is_rejected(cipher):
    record = cipher.encrypt(PLAINTEXT)
    other = ProfileCipher(os.urandom(32))

    with pytest.raises(TamperOrCorruption):
        other.decrypt(record)


@pytest.mark.parametrize("bad_len", [0, 16, 24, 31, 33])
def test_key_must_be_32_bytes(bad_len):
    with pytest.raises(ValueError):
        ProfileCipher(os.urandom(bad_len))

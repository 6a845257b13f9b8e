from __future__ import annotations

import pytest
from Crypto.Cipher import ARC4 as RefARC4

from arc4kit.crypto import ARC4, ARC4Engine, InvalidArgument, SBlock


def test_new_with_bytes_key_known_vector():
    engine = ARC4.new(b"Key")
    assert isinstance(engine, ARC4Engine)
    assert engine.process(b"Plaintext").hex() == "bbf316e8d940af0ad3"


def test_new_matches_pycryptodome():
    key = b"\x01\x02\x03\x04\x05\x06\x07\x08"
    data = bytes(range(200))
    assert ARC4.new(key).process(data) == RefARC4.new(key).encrypt(data)


def test_new_with_password_uses_encoding():
    password = "pässwörd"
    a = ARC4.new(password)
    b = ARC4.new(password.encode("utf-8"))
    c = ARC4.new(password, encoding="latin-1")
    ks = a.keystream(32)
    assert ks == b.keystream(32)
    assert ks != c.keystream(32)


def test_new_with_iv_and_sblock_agree():
    start = SBlock.from_salt(b"factory")
    a = ARC4.new(b"key", iv=start.to_bytes())
    b = ARC4.new(b"key", sblock=start)
    assert a.keystream(64) == b.keystream(64)


def test_new_rejects_iv_and_sblock_together():
    start = SBlock.identity()
    with pytest.raises(InvalidArgument):
        ARC4.new(b"key", iv=start.to_bytes(), sblock=start)


def test_new_rejects_invalid_iv():
    with pytest.raises(InvalidArgument):
        ARC4.new(b"key", iv=b"\x01" * 256)


def test_new_random_returns_matching_iv():
    engine, iv = ARC4.new_random("password")

    assert len(iv) == ARC4.SBLOCK_SIZE
    assert SBlock.is_valid_permutation(iv)
    assert engine.keystream(64) == ARC4.new("password", iv=iv).keystream(64)


def test_new_random_draws_fresh_ivs():
    _, iv1 = ARC4.new_random(b"key")
    _, iv2 = ARC4.new_random(b"key")
    assert iv1 != iv2


def test_new_random_rejects_empty_key():
    with pytest.raises(InvalidArgument):
        ARC4.new_random(b"")


@pytest.mark.parametrize("secret", ["", b"", bytearray(), 123, None])
def test_key_material_rejects(secret):
    with pytest.raises(InvalidArgument):
        ARC4.key_material(secret)


def test_key_material_unknown_encoding():
    with pytest.raises(InvalidArgument):
        ARC4.key_material("pw", encoding="no-such-codec")


def test_key_material_unencodable_password():
    with pytest.raises(InvalidArgument):
        ARC4.key_material("密码", encoding="ascii")


def test_key_material_returns_copy():
    src = bytearray(b"secret")
    out = ARC4.key_material(src)
    src[0] = 0
    assert out == b"secret"


def test_generate_salt():
    assert len(ARC4.generate_salt()) == ARC4.MIN_SALT_SIZE
    assert len(ARC4.generate_salt(16)) == 16
    assert ARC4.generate_salt(16) != ARC4.generate_salt(16)


@pytest.mark.parametrize("size", [0, 3, -1])
def test_generate_salt_rejects_small_sizes(size):
    with pytest.raises(InvalidArgument):
        ARC4.generate_salt(size)


def test_module_constants():
    assert ARC4.block_size == 1
    assert ARC4.SBLOCK_SIZE == 256
    assert 1 in ARC4.key_size and 256 in ARC4.key_size

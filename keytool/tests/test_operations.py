from pathlib import Path

import pytest

from digests import HashMode
from signature_algorithm import DecodingError, InvalidSignatureError, KeyFileError

from ..operations import decode_hex, generate_keys, load_keys, sign, verify


def flip(data: bytes, bit: int) -> bytes:
    i, j = divmod(bit, 8)
    return data[:i] + bytes([data[i] ^ (1 << j)]) + data[i + 1 :]


@pytest.fixture
def key_path(tmp_path: Path) -> Path:
    return tmp_path / 'keys.json'


def test_generate_keys(key_path: Path) -> None:
    key_pair = generate_keys(key_path)

    assert key_path.read_text() == key_pair.private_key_hex
    assert len(key_pair.private_key_hex) == 64  # noqa: PLR2004
    assert len(key_pair.public_key_hex) == 66  # noqa: PLR2004
    assert key_pair.private_key_hex == key_pair.private_key_hex.lower()
    assert key_pair.public_key_hex[:2] in ('02', '03')


def test_generate_keys_unwritable(tmp_path: Path) -> None:
    with pytest.raises(KeyFileError):
        generate_keys(tmp_path / 'missing' / 'keys.json')


def test_key_persistence(key_path: Path) -> None:
    key_pair = generate_keys(key_path)

    loaded = load_keys(key_path)
    assert loaded.private_key_hex == key_pair.private_key_hex
    assert loaded.public_key_hex == key_pair.public_key_hex

    result = sign(key_path, b'hello', HashMode.LEGACY)
    assert result.key_pair.public_key_hex == key_pair.public_key_hex


def test_round_trip(key_path: Path) -> None:
    key_pair = generate_keys(key_path)

    for mode in HashMode:
        for message in (b'', b'hello', b'\xff\x00' * 1000):
            result = sign(key_path, message, mode)
            assert verify(key_pair.public_key_hex, message, result.signature_hex, mode)


def test_sign_is_deterministic(key_path: Path) -> None:
    generate_keys(key_path)
    for mode in HashMode:
        assert sign(key_path, b'hello', mode).signature == sign(key_path, b'hello', mode).signature

    assert sign(key_path, b'hello', HashMode.PLAIN).signature != sign(key_path, b'hello', HashMode.LEGACY).signature


def test_hello_world(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    result = sign(key_path, b'hello world', HashMode.LEGACY)

    assert verify(key_pair.public_key_hex, b'hello world', result.signature_hex, HashMode.LEGACY)
    with pytest.raises(InvalidSignatureError):
        verify(key_pair.public_key_hex, b'hello World', result.signature_hex, HashMode.LEGACY)


def test_mode_mismatch(key_path: Path) -> None:
    key_pair = generate_keys(key_path)

    plain = sign(key_path, b'message', HashMode.PLAIN).signature_hex
    legacy = sign(key_path, b'message', HashMode.LEGACY).signature_hex

    with pytest.raises(InvalidSignatureError):
        verify(key_pair.public_key_hex, b'message', plain, HashMode.LEGACY)
    with pytest.raises(InvalidSignatureError):
        verify(key_pair.public_key_hex, b'message', legacy, HashMode.PLAIN)


def test_tampered_message(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    message = b'hello world'
    signature_hex = sign(key_path, message, HashMode.PLAIN).signature_hex

    for bit in range(len(message) * 8):
        with pytest.raises(InvalidSignatureError):
            verify(key_pair.public_key_hex, flip(message, bit), signature_hex, HashMode.PLAIN)


def test_tampered_signature(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    signature = sign(key_path, b'hello world', HashMode.LEGACY).signature

    for bit in range(len(signature) * 8):
        with pytest.raises((DecodingError, InvalidSignatureError)):
            verify(key_pair.public_key_hex, b'hello world', flip(signature, bit).hex(), HashMode.LEGACY)


def test_tampered_public_key(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    signature_hex = sign(key_path, b'hello world', HashMode.PLAIN).signature_hex
    public_key = bytes.fromhex(key_pair.public_key_hex)

    for bit in range(len(public_key) * 8):
        with pytest.raises((DecodingError, InvalidSignatureError)):
            verify(flip(public_key, bit).hex(), b'hello world', signature_hex, HashMode.PLAIN)


def test_other_key(key_path: Path, tmp_path: Path) -> None:
    generate_keys(key_path)
    other = generate_keys(tmp_path / 'other.json')
    signature_hex = sign(key_path, b'hello', HashMode.PLAIN).signature_hex

    with pytest.raises(InvalidSignatureError):
        verify(other.public_key_hex, b'hello', signature_hex, HashMode.PLAIN)


def test_malformed_input(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    signature_hex = sign(key_path, b'hello', HashMode.PLAIN).signature_hex

    for public_key_hex in ('', 'zz', key_pair.public_key_hex[:-1], key_pair.public_key_hex + '0', 'é' * 66, '02' + '00' * 32):
        with pytest.raises(DecodingError):
            verify(public_key_hex, b'hello', signature_hex, HashMode.PLAIN)

    for bad_signature_hex in ('', 'xyz', signature_hex[:-1], ' ' + signature_hex, signature_hex + '00', '3000'):
        with pytest.raises(DecodingError):
            verify(key_pair.public_key_hex, b'hello', bad_signature_hex, HashMode.PLAIN)


def test_decode_hex() -> None:
    assert decode_hex('00ff', 'test') == b'\x00\xff'
    assert decode_hex(b'00FF', 'test') == b'\x00\xff'
    assert decode_hex('', 'test') == b''

    for bad in ('0', 'gg', '00 ff', 'éé'):
        with pytest.raises(DecodingError):
            decode_hex(bad, 'test')


def test_bad_key_file(key_path: Path) -> None:
    with pytest.raises(KeyFileError):
        sign(key_path, b'hello', HashMode.PLAIN)

    for content in ('not hex', '0' * 63, '00' * 32, 'ff' * 32, '01' * 31, b'\xff\xfe'):
        if isinstance(content, bytes):
            key_path.write_bytes(content)
        else:
            key_path.write_text(content)
        with pytest.raises(DecodingError):
            sign(key_path, b'hello', HashMode.PLAIN)


def test_key_file_with_newline(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    key_path.write_text(key_pair.private_key_hex + '\n')

    result = sign(key_path, b'hello', HashMode.PLAIN)
    assert result.key_pair.public_key_hex == key_pair.public_key_hex


def test_uncompressed_public_key(key_path: Path) -> None:
    key_pair = generate_keys(key_path)
    signature_hex = sign(key_path, b'hello', HashMode.LEGACY).signature_hex

    uncompressed = key_pair.public_key.key.to_string('uncompressed').hex()
    assert verify(uncompressed, b'hello', signature_hex, HashMode.LEGACY)

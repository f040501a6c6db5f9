import binascii
import logging
from dataclasses import dataclass
from pathlib import Path

from digests import HashMode, digest
from ecdsa_secp256k1 import Secp256k1ECDSA, Secp256k1PrivateKey, Secp256k1PublicKey
from signature_algorithm import DecodingError, InvalidSignatureError

from .keyfile import read_private_key, write_private_key

logger = logging.getLogger(__name__)

ecdsa = Secp256k1ECDSA()


@dataclass(frozen=True)
class KeyPair:
    private_key: Secp256k1PrivateKey
    public_key: Secp256k1PublicKey

    @property
    def private_key_hex(self) -> str:
        return self.private_key.hex()

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()


@dataclass(frozen=True)
class SignResult:
    key_pair: KeyPair
    signature: bytes  # DER

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()


def decode_hex(text: str | bytes, what: str) -> bytes:
    # unhexlify rejects odd lengths and whitespace, unlike bytes.fromhex
    try:
        return binascii.unhexlify(text)
    except ValueError as exc:
        msg = f'malformed {what} hex: {exc}'
        raise DecodingError(msg) from exc


def generate_keys(path: str | Path) -> KeyPair:
    private_key, public_key = ecdsa.generate_key_pair()
    key_pair = KeyPair(private_key, public_key)
    logger.info('generated key pair with public key %s', key_pair.public_key_hex)

    write_private_key(path, key_pair.private_key_hex)
    return key_pair


def load_keys(path: str | Path) -> KeyPair:
    private_key = ecdsa.private_key_from_bytes(decode_hex(read_private_key(path), 'private key'))
    return KeyPair(private_key, private_key.public_key)


def sign(path: str | Path, message: bytes, mode: HashMode) -> SignResult:
    key_pair = load_keys(path)
    message_hash = digest(message, mode)
    signature = ecdsa.sign_digest(message_hash, key_pair.private_key)
    logger.debug('signed %d byte message with %s digest %s', len(message), mode.value, message_hash.hex())
    return SignResult(key_pair, signature)


def verify(public_key_hex: str, message: bytes, signature_hex: str, mode: HashMode) -> bool:
    # a signature made under the other HashMode is reported as invalid, not malformed
    public_key = ecdsa.public_key_from_bytes(decode_hex(public_key_hex, 'public key'))
    signature = decode_hex(signature_hex, 'signature')

    message_hash = digest(message, mode)
    if not ecdsa.verify_digest(message_hash, public_key, signature):
        logger.debug('signature rejected for %s digest %s', mode.value, message_hash.hex())
        msg = 'invalid signature'
        raise InvalidSignatureError(msg)

    logger.info('signature verified for public key %s', public_key.hex())
    return True

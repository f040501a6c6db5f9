import hashlib
from enum import Enum

from Crypto.Hash import RIPEMD160


class HashMode(Enum):
    # sha256(m), 32 bytes
    PLAIN = 'sha256'
    # ripemd160(sha256(m)), 20 bytes
    LEGACY = 'hash160'

    @classmethod
    def from_flag(cls, sha256: bool) -> 'HashMode':  # noqa: FBT001
        return cls.PLAIN if sha256 else cls.LEGACY


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


# https://en.bitcoin.it/wiki/Protocol_documentation#Hashes
def hash160(data: bytes) -> bytes:
    # hashlib only has ripemd160 when OpenSSL still ships it, pycryptodome always does
    return RIPEMD160.new(sha256(data)).digest()


_DIGESTS = {
    HashMode.PLAIN: sha256,
    HashMode.LEGACY: hash160,
}


def digest(message: bytes, mode: HashMode) -> bytes:
    # nothing in a signature records the mode, signer and verifier have to agree on it
    return _DIGESTS[mode](message)

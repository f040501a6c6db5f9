from dataclasses import dataclass
from hashlib import sha256
from typing import override

from ecdsa import SECP256k1, BadSignatureError, MalformedPointError, SigningKey, VerifyingKey
from ecdsa.der import UnexpectedDER
from ecdsa.ecdsa import RSZeroError
from ecdsa.keys import BadDigestError
from ecdsa.util import sigdecode_der, sigencode_der_canonize

from signature_algorithm import (
    DecodingError,
    KeyGenerationError,
    PrivateKey,
    PublicKey,
    SignatureAlgorithm,
    SigningError,
)

CURVE = SECP256k1

# SEC1 point encodings accepted when parsing a public key
PUBLIC_KEY_ENCODINGS = ('compressed', 'uncompressed')


@dataclass(frozen=True)
class Secp256k1PublicKey(PublicKey):
    key: VerifyingKey

    @override
    def to_bytes(self) -> bytes:
        return self.key.to_string('compressed')

    def hex(self) -> str:
        return self.to_bytes().hex()


@dataclass(frozen=True)
class Secp256k1PrivateKey(PrivateKey):
    key: SigningKey

    @override
    def to_bytes(self) -> bytes:
        # fixed width, big-endian
        return self.key.to_string()

    def hex(self) -> str:
        return self.to_bytes().hex()

    @property
    def public_key(self) -> Secp256k1PublicKey:
        return Secp256k1PublicKey(self.key.get_verifying_key())


# signs digests as given, DER encoded with RFC 6979 nonces and low-S
class Secp256k1ECDSA(SignatureAlgorithm):
    @override
    def generate_key_pair(self) -> tuple[Secp256k1PrivateKey, Secp256k1PublicKey]:
        try:
            signing_key = SigningKey.generate(curve=CURVE, hashfunc=sha256)
        except (OSError, NotImplementedError, RuntimeError, MalformedPointError) as exc:
            msg = f'cannot generate {CURVE.name} key pair: {exc}'
            raise KeyGenerationError(msg) from exc

        private_key = Secp256k1PrivateKey(signing_key)
        return private_key, private_key.public_key

    @override
    def private_key_from_bytes(self, data: bytes) -> Secp256k1PrivateKey:
        # rejects wrong lengths as well as scalars outside [1, n - 1]
        try:
            signing_key = SigningKey.from_string(data, curve=CURVE, hashfunc=sha256)
        except MalformedPointError as exc:
            msg = f'invalid private key: {exc}'
            raise DecodingError(msg) from exc
        return Secp256k1PrivateKey(signing_key)

    @override
    def public_key_from_bytes(self, data: bytes) -> Secp256k1PublicKey:
        try:
            verifying_key = VerifyingKey.from_string(data, curve=CURVE, hashfunc=sha256, valid_encodings=PUBLIC_KEY_ENCODINGS)
        except (MalformedPointError, ValueError) as exc:
            msg = f'invalid public key: {exc}'
            raise DecodingError(msg) from exc
        return Secp256k1PublicKey(verifying_key)

    def parse_signature(self, signature: bytes) -> tuple[int, int]:
        try:
            r, s = sigdecode_der(signature, CURVE.order)
        except UnexpectedDER as exc:
            msg = f'malformed DER signature: {exc}'
            raise DecodingError(msg) from exc

        if not (1 <= r < CURVE.order and 1 <= s < CURVE.order):
            msg = 'malformed DER signature: r and s must be in [1, n - 1]'
            raise DecodingError(msg)
        return r, s

    @override
    def sign_digest(self, digest: bytes, private_key: PrivateKey) -> bytes:
        if not isinstance(private_key, Secp256k1PrivateKey):
            msg = f'Excepted Secp256k1PrivateKey, but got: {type(private_key)}'
            raise TypeError(msg)

        try:
            return private_key.key.sign_digest_deterministic(digest, hashfunc=sha256, sigencode=sigencode_der_canonize)
        except (RSZeroError, BadDigestError) as exc:
            msg = f'cannot sign digest: {exc}'
            raise SigningError(msg) from exc

    @override
    def verify_digest(self, digest: bytes, public_key: PublicKey, signature: bytes) -> bool:
        if not isinstance(public_key, Secp256k1PublicKey):
            msg = f'Excepted Secp256k1PublicKey, but got: {type(public_key)}'
            raise TypeError(msg)

        # unparsable signatures raise DecodingError, a mismatch is just False
        self.parse_signature(signature)
        try:
            return public_key.key.verify_digest(signature, digest, sigdecode=sigdecode_der)
        except BadSignatureError:
            return False

class KeyToolError(Exception):
    pass


class KeyGenerationError(KeyToolError):
    pass


# IOError is OSError, so callers catching either will see this one
class KeyFileError(OSError, KeyToolError):
    pass


class ConfigError(KeyToolError):
    pass


class DecodingError(KeyToolError, ValueError):
    pass


class SigningError(KeyToolError):
    pass


class InvalidSignatureError(KeyToolError):
    pass


class PrivateKey:
    def to_bytes(self) -> bytes:
        raise NotImplementedError


class PublicKey:
    def to_bytes(self) -> bytes:
        raise NotImplementedError


class SignatureAlgorithm:
    def generate_key_pair(self) -> tuple[PrivateKey, PublicKey]:
        raise NotImplementedError

    def private_key_from_bytes(self, data: bytes) -> PrivateKey:
        raise NotImplementedError

    def public_key_from_bytes(self, data: bytes) -> PublicKey:
        raise NotImplementedError

    def sign_digest(self, digest: bytes, private_key: PrivateKey) -> bytes:
        raise NotImplementedError

    def verify_digest(self, digest: bytes, public_key: PublicKey, signature: bytes) -> bool:
        raise NotImplementedError

from .hash_selector import HashMode, digest, hash160, sha256

__all__ = [
    'HashMode',
    'digest',
    'hash160',
    'sha256',
]

from .operations import KeyPair, SignResult, generate_keys, load_keys, sign, verify

__all__ = [
    'KeyPair',
    'SignResult',
    'generate_keys',
    'load_keys',
    'sign',
    'verify',
]

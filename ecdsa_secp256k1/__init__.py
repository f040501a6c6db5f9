from .secp256k1 import CURVE, Secp256k1ECDSA, Secp256k1PrivateKey, Secp256k1PublicKey

__all__ = [
    'CURVE',
    'Secp256k1ECDSA',
    'Secp256k1PrivateKey',
    'Secp256k1PublicKey',
]

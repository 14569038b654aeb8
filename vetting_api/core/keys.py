"""
Sui Ed25519 key derivation and transaction signing.
"""
import base64
import hashlib

from bip_utils import Bip32Slip10Ed25519
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519
from eth_account.hdaccount import seed_from_mnemonic
from eth_utils import ValidationError

# Default Sui derivation path: m/44'/784'/0'/0'/0'
DEFAULT_DERIVATION_PATH = (44, 784, 0, 0, 0)

ED25519_SCHEME_FLAG = 0x00
# TransactionData intent: scope 0, version 0, app id 0 (Sui)
TRANSACTION_INTENT = bytes([0, 0, 0])


def _blake2b_256(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def format_derivation_path(path: tuple) -> str:
    """(44, 784, 0, 0, 0) -> "m/44'/784'/0'/0'/0'" (ed25519 only allows hardened levels)."""
    return "/".join(["m"] + [f"{index}'" for index in path])


def derive_private_key(seed: bytes, path: tuple = DEFAULT_DERIVATION_PATH) -> bytes:
    """SLIP-0010 ed25519 private key for `seed` along `path`."""
    context = Bip32Slip10Ed25519.FromSeed(seed)
    if path:
        context = context.DerivePath(format_derivation_path(path))
    return context.PrivateKey().Raw().ToBytes()


class Ed25519Keypair:
    """Signing identity used to authorize transactions."""

    def __init__(self, private_key: ed25519.Ed25519PrivateKey):
        self._private_key = private_key
        self._public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def derive_keypair(cls, mnemonic: str, path: tuple = DEFAULT_DERIVATION_PATH) -> "Ed25519Keypair":
        """
        Derive the keypair for a BIP-39 mnemonic along a Sui derivation path.

        Raises ValueError when the mnemonic is empty or not a valid phrase.
        """
        if not mnemonic or not mnemonic.strip():
            raise ValueError("Mnemonic is empty")
        words = " ".join(mnemonic.split())
        try:
            seed = seed_from_mnemonic(words, "")
        except ValidationError as e:
            raise ValueError("Invalid mnemonic phrase") from e
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(derive_private_key(seed, path)))

    @classmethod
    def from_secret_key(cls, secret: bytes) -> "Ed25519Keypair":
        return cls(ed25519.Ed25519PrivateKey.from_private_bytes(secret))

    @property
    def public_key_bytes(self) -> bytes:
        return self._public_bytes

    def sui_address(self) -> str:
        return "0x" + _blake2b_256(bytes([ED25519_SCHEME_FLAG]) + self._public_bytes).hex()

    def sign_transaction(self, tx_bytes: bytes) -> str:
        """Return the base64 serialized signature Sui expects for a transaction."""
        digest = _blake2b_256(TRANSACTION_INTENT + tx_bytes)
        signature = self._private_key.sign(digest)
        return base64.b64encode(bytes([ED25519_SCHEME_FLAG]) + signature + self._public_bytes).decode()

    def __repr__(self):
        return f"Ed25519Keypair(address={self.sui_address()})"

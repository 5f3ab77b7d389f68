"""
Ethereum Wallet Authentication Utilities

This module handles the wallet-specific cryptographic operations for login.
It implements the EIP-191 personal_sign challenge flow.

Authentication Flow:
1. Backend generates a random nonce -> generate_nonce()
2. Backend hands out the text to sign -> challenge_message()
3. Frontend signs the text with the wallet (personal_sign)
4. Frontend sends: address, signature
5. Backend recovers the signer -> recover_address()
   and compares it with the claimed address

The signature recovery uses eth-account, which hashes the message with the
"\\x19Ethereum Signed Message:\\n" prefix exactly like the wallets do.
"""

import binascii
import re
import secrets

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_keys.exceptions import BadSignature, ValidationError as EthKeysValidationError

from app.core.errors import InvalidSignatureFormat


NONCE_NUM_BYTES = 16  # 16 bytes = 128 bits = 32 hex characters
SIGNATURE_NUM_BYTES = 65  # r (32) + s (32) + v (1)
CHALLENGE_PREFIX = "Login to Etched"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def generate_nonce(num_bytes: int = NONCE_NUM_BYTES) -> str:
    """
    Generate a cryptographically secure random nonce for wallet authentication.

    Args:
        num_bytes: Number of random bytes to generate (default: 16 = 32 hex chars)

    Returns:
        Hex-encoded random string (e.g., "a1b2c3d4...")
    """
    if num_bytes <= 0:
        num_bytes = NONCE_NUM_BYTES
    return secrets.token_hex(num_bytes)


def normalize_address(address: str) -> str:
    return address.strip().lower() if address else ""


def is_valid_address(address: str) -> bool:
    """`0x` followed by 40 hex characters, any case."""
    if not address:
        return False
    return bool(_ADDRESS_RE.match(address.strip()))


def challenge_message(nonce: str) -> str:
    """The exact text the wallet must sign for a given nonce."""
    return f"{CHALLENGE_PREFIX}: {nonce}"


def _decode_signature(signature: str) -> bytes:
    """Helper: Decode a 0x-prefixed (or bare) hex signature to its 65 bytes."""
    value = (signature or "").strip()
    if value[:2].lower() == "0x":
        value = value[2:]
    try:
        raw = binascii.unhexlify(value.encode())
    except (binascii.Error, ValueError):
        raise InvalidSignatureFormat()
    if len(raw) != SIGNATURE_NUM_BYTES:
        raise InvalidSignatureFormat()
    return raw


def recover_address(message: str, signature: str) -> str:
    """
    Recover the lowercase address that signed `message`.

    Never raises anything other than InvalidSignatureFormat: either the
    signature yields an address, or it is reported as malformed. Whether the
    recovered address is the expected one is the caller's decision.

    Example:
        signer = recover_address(challenge_message(nonce), "0x4f2c...1b")
        if signer != normalize_address(claimed):
            # reject the login
    """
    raw = _decode_signature(signature)
    try:
        recovered = Account.recover_message(encode_defunct(text=message), signature=raw)
    except (BadSignature, EthKeysValidationError, ValueError, TypeError):
        raise InvalidSignatureFormat()
    return recovered.lower()

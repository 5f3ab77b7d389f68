"""
In-process store of pending login challenges.

One live nonce per wallet address. Issuing overwrites, consuming removes,
and both happen under the same lock so a nonce can be handed out to
exactly one verify attempt.
"""

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from app.core.wallet_auth import generate_nonce, normalize_address


class NonceStore:
    def __init__(
        self,
        expiry_seconds: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        # expiry_seconds <= 0 keeps nonces until they are consumed
        self._expiry_seconds = expiry_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._nonces: Dict[str, Tuple[str, float]] = {}

    def issue(self, address: str) -> str:
        key = normalize_address(address)
        nonce = generate_nonce()
        issued_at = self._clock()
        with self._lock:
            self._nonces[key] = (nonce, issued_at)
        return nonce

    def consume(self, address: str) -> Optional[str]:
        """Remove and return the nonce for `address`, None if unknown or expired."""
        key = normalize_address(address)
        with self._lock:
            entry = self._nonces.pop(key, None)
        if entry is None:
            return None
        nonce, issued_at = entry
        if self._expiry_seconds > 0 and self._clock() - issued_at >= self._expiry_seconds:
            return None
        return nonce

    def __len__(self) -> int:
        with self._lock:
            return len(self._nonces)

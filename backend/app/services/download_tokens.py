"""
Download token registry for deferred exports

A token maps to a generated file and can be redeemed once, within its
time-to-live. The export engine only depends on the DownloadTokenStore
interface so the in-memory registry can be replaced by a shared store.
"""
import time
import secrets
import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadToken:
    token: str
    filename: str
    expires_at: float
    expired: bool = False

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


class DownloadTokenStore:
    """put-with-expiry / get-and-invalidate"""

    def put(self, filename: str, ttl_seconds: float) -> DownloadToken:
        raise NotImplementedError

    def take(self, token: str) -> Optional[DownloadToken]:
        """
        Invalidate the token and return its entry, or None if unknown

        An entry past its expiry is returned with expired=True so the caller
        can discard the file it points to.
        """
        raise NotImplementedError

    def purge_expired(self) -> List[DownloadToken]:
        """Drop entries that expired without being redeemed and return them"""
        raise NotImplementedError


class InMemoryDownloadTokenStore(DownloadTokenStore):
    """
    Process-local token registry

    Tokens do not survive a restart and are invisible to other processes,
    so deferred downloads need session affinity when scaled out.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._tokens: Dict[str, DownloadToken] = {}

    def put(self, filename: str, ttl_seconds: float) -> DownloadToken:
        entry = DownloadToken(
            token=secrets.token_urlsafe(24),
            filename=filename,
            expires_at=self._clock() + ttl_seconds,
        )
        self._tokens[entry.token] = entry
        return entry

    def take(self, token: str) -> Optional[DownloadToken]:
        entry = self._tokens.pop(token, None)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            logger.info(f"Download token for {entry.filename} expired")
            return replace(entry, expired=True)

        return entry

    def purge_expired(self) -> List[DownloadToken]:
        now = self._clock()
        expired = [entry for entry in self._tokens.values() if entry.is_expired(now)]
        for entry in expired:
            del self._tokens[entry.token]
        return expired

    def __len__(self) -> int:
        return len(self._tokens)

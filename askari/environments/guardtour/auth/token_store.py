"""
Token Store - durable single-slot cache for the guard-tour access token.

File layout:
============
    {
      "access_token": {
        "token": "eyJhbGciOi...",
        "timestamp": "2025-01-31T09:30:00.000000+00:00"
      }
    }

Every read path is fail-safe: a missing, unreadable or corrupt file, or a
token whose claims cannot be decoded, is reported as "expired" so the
client signs in again instead of sending a broken credential.

Writes go to a temporary file in the same directory and are moved into
place with ``os.replace`` so a concurrent reader never sees a partial
record. Two requests refreshing at the same time both write; the last
one wins.
"""

import asyncio
import json
import logging
import os
import tempfile
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jose import JWTError, jwt

from askari.environments.base import Credential


logger = logging.getLogger("askari.guardtour.token_store")

EMPTY_RECORD: Dict[str, Any] = {"access_token": {}}


class TokenStore:
    """
    File-backed store for one bearer credential.

    All public methods are coroutines; file I/O runs in a worker thread.

    Example:
        store = TokenStore("data/auth_token.json")
        await store.ensure_initialized()

        if await store.is_expired():
            await store.save(await client.authenticate(user, password))
        token = await store.read()
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    async def ensure_initialized(self) -> None:
        """Create the backing file with an empty record if it does not exist."""
        await asyncio.to_thread(self._create_if_missing)

    async def exists(self) -> bool:
        return await asyncio.to_thread(self.path.exists)

    async def clear(self) -> None:
        """Reset the stored credential to an empty record."""
        await asyncio.to_thread(self._write_record, dict(EMPTY_RECORD))
        logger.info("Cleared stored access token")

    async def delete(self) -> None:
        """Remove the backing file. A file that is already gone is fine."""
        try:
            await asyncio.to_thread(self.path.unlink)
            logger.info(f"Deleted token file {self.path}")
        except FileNotFoundError:
            pass

    # -------------------------------------------------------------------------
    # READ / WRITE
    # -------------------------------------------------------------------------

    async def read(self) -> Optional[str]:
        """Return the stored token, or None if absent or unreadable."""
        credential = await self.read_credential()
        return credential.token if credential else None

    async def read_credential(self) -> Optional[Credential]:
        """Return the stored token together with its timestamp."""
        record = await asyncio.to_thread(self._read_record)
        if record is None:
            return None

        slot = record.get("access_token")
        if not isinstance(slot, dict) or not slot.get("token"):
            return None

        issued_at = None
        if slot.get("timestamp"):
            try:
                issued_at = datetime.fromisoformat(slot["timestamp"])
            except (TypeError, ValueError):
                issued_at = None

        return Credential(token=str(slot["token"]), issued_at=issued_at)

    async def save(self, token: str) -> None:
        """Overwrite the stored token and record a fresh issue timestamp."""
        record = {
            "access_token": {
                "token": token,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        }
        await asyncio.to_thread(self._write_record, record)
        logger.info("Saved new access token")

    # -------------------------------------------------------------------------
    # EXPIRY
    # -------------------------------------------------------------------------

    async def is_expired(self) -> bool:
        """
        Check whether the stored token must be replaced.

        Returns False only for a decodable token whose ``exp`` claim lies in
        the future. Never raises.
        """
        try:
            token = await self.read()
            if not token:
                return True
            return self.token_expired(token)
        except Exception as e:
            logger.warning(f"Could not check token expiry, treating as expired: {e}")
            return True

    @staticmethod
    def token_expired(token: str, now: Optional[float] = None) -> bool:
        """
        Decode the token's claims (signature is not verified) and compare
        ``exp`` with the current time.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return True

        exp = claims.get("exp")
        if exp is None:
            return True

        try:
            exp = float(exp)
        except (TypeError, ValueError):
            return True

        current = now if now is not None else time.time()
        return current >= exp

    # -------------------------------------------------------------------------
    # BLOCKING HELPERS (run in worker threads)
    # -------------------------------------------------------------------------

    def _create_if_missing(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        except FileExistsError:
            return

        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(EMPTY_RECORD, f, indent=2)
        logger.info(f"Created token file {self.path}")

    def _read_record(self) -> Optional[Dict[str, Any]]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return data if isinstance(data, dict) else None

    def _write_record(self, record: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise

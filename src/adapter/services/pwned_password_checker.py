import hashlib
import logging

import httpx

from src.app.services.password import PasswordStrengthChecker, has_valid_length

logger = logging.getLogger(__name__)


class PwnedPasswordChecker(PasswordStrengthChecker):
    """
    Length policy plus a breach corpus lookup.

    Uses the k-anonymity range API: only the first five hex characters of
    the password's SHA-1 leave the process. Lookup failures raise
    httpx.HTTPError; they are never treated as "not breached".
    """

    def __init__(self, client: httpx.AsyncClient, base_url: str, enabled: bool = True):
        self.client = client
        self.base_url = base_url
        self.enabled = enabled

    async def is_strong(self, password: str) -> bool:
        if not has_valid_length(password):
            return False
        if not self.enabled:
            return True
        return not await self.is_breached(password)

    async def is_breached(self, password: str) -> bool:
        digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
        prefix, suffix = digest[:5], digest[5:]

        response = await self.client.get(f"{self.base_url}{prefix}", headers={"Add-Padding": "true"})
        response.raise_for_status()

        for line in response.text.splitlines():
            candidate, _, count = line.strip().partition(":")
            if candidate == suffix and count.strip() not in ("", "0"):
                logger.info("Rejected password found in breach corpus")
                return True
        return False

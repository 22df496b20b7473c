"""
Verification Coordinator - relays one-time-code requests to the Telegram bot service.

The bot service owns the whole code lifecycle (generation, delivery,
expiry). This module only:
1. Validates that the caller supplied a handle (and code)
2. POSTs to the bot service's send/verify endpoints
3. Normalizes the reply into success or a domain error

Success is reported only when the bot service answered 2xx with a JSON
object whose "success" is exactly true. Connection errors, timeouts,
non-2xx statuses and unparseable bodies are all failures. There are no
retries and no timeout beyond httpx's default.
"""

from typing import Optional

import httpx

from student_records.errors import DeliveryFailed, InvalidCode, MissingHandle, MissingInput
from student_records.logging_config import get_logger, log_with_context

logger = get_logger("verification")

SEND_CODE_PATH = "/send-verification-code"
VERIFY_CODE_PATH = "/verify-code"


class BotServiceError(Exception):
    """The bot service could not be reached or sent an unusable reply."""


def _error_message(body) -> Optional[str]:
    """Pull a human-readable reason out of a bot service reply."""
    if not isinstance(body, dict):
        return None
    for key in ("error", "message"):
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


class VerificationCoordinator:
    """
    Forwards send/verify requests to the bot service.

    Args:
        base_url: Bot service root, e.g. http://127.0.0.1:3003
        transport: Optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(self, base_url: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def _post(self, path: str, payload: dict) -> tuple:
        """
        POST payload to the bot service.

        Returns (ok, body) where ok is True for a 2xx status. Raises
        BotServiceError on transport failure or a non-JSON body.
        """
        url = self.base_url + path
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise BotServiceError("{}: {}".format(type(e).__name__, e)) from e

        if not response.is_success:
            log_with_context(logger, "WARNING",
                             "Bot server responded with status: {}".format(response.status_code),
                             extra_data={"url": url, "status_code": response.status_code})
        try:
            body = response.json()
        except ValueError as e:
            raise BotServiceError("non-JSON reply (status {})".format(response.status_code)) from e
        return response.is_success, body

    async def request_code(self, handle: Optional[str]) -> dict:
        """Ask the bot service to send a code to handle."""
        if not handle:
            raise MissingHandle()

        log_with_context(logger, "INFO", "Sending verification code request to bot server",
                         context={"handle": handle})
        try:
            ok, body = await self._post(SEND_CODE_PATH, {"telegram": handle})
        except BotServiceError as e:
            log_with_context(logger, "ERROR", "Error sending verification code via Telegram",
                             context={"handle": handle}, extra_data={"error": str(e)})
            raise DeliveryFailed() from e

        if ok and isinstance(body, dict) and body.get("success") is True:
            log_with_context(logger, "INFO", "Verification code sent", context={"handle": handle})
            return {"success": True}

        message = _error_message(body)
        log_with_context(logger, "WARNING", "Bot server refused to send verification code",
                         context={"handle": handle}, extra_data={"error": message})
        raise DeliveryFailed(message)

    async def verify_code(self, handle: Optional[str], code: Optional[str]) -> dict:
        """Ask the bot service whether code is the pending code for handle."""
        if not handle or not code:
            raise MissingInput()

        log_with_context(logger, "INFO", "Verifying code with bot server",
                         context={"handle": handle})
        try:
            ok, body = await self._post(VERIFY_CODE_PATH, {"telegram": handle, "code": code})
        except BotServiceError as e:
            log_with_context(logger, "ERROR", "Error verifying code via Telegram",
                             context={"handle": handle}, extra_data={"error": str(e)})
            raise DeliveryFailed("Failed to verify code") from e

        if ok and isinstance(body, dict) and body.get("success") is True:
            log_with_context(logger, "INFO", "Verification code accepted", context={"handle": handle})
            return {"success": True}

        message = _error_message(body)
        log_with_context(logger, "WARNING", "Verification code rejected",
                         context={"handle": handle}, extra_data={"error": message})
        raise InvalidCode(message)

"""HTTP client for the remote account and progress API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .models import UserChallenge, UserProgress

DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


class ProgressAPIError(RuntimeError):
    """The progress API answered with a body that cannot be decoded."""


class ProgressClient:
    """Async client for fetching user progress and submitting challenges.

    Use as an async context manager so the underlying connection pool is closed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=httpx.Timeout(timeout), transport=transport)

    async def __aenter__(self) -> ProgressClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_user(self, address: str) -> UserProgress:
        """Fetch the remote progress record for an address."""
        logger.info("Fetching remote progress for %s", address)
        response = await self._client.get(f"/user/{address}")
        response.raise_for_status()
        return _progress_from_payload(address, _json_body(response))

    async def submit_challenge(self, challenge_name: str, address: str) -> dict[str, Any]:
        """Report a completed challenge for server-side verification."""
        logger.info("Submitting %s for %s", challenge_name, address)
        response = await self._client.post(
            "/submit",
            json={"challengeName": challenge_name, "userAddress": address},
        )
        response.raise_for_status()
        payload = _json_body(response)
        return payload if isinstance(payload, dict) else {}


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise ProgressAPIError(f"{response.request.url} returned invalid JSON: {exc}") from exc


def _progress_from_payload(address: str, payload: object) -> UserProgress:
    """Decode a user payload; unknown or malformed entries are skipped."""
    if not isinstance(payload, dict):
        raise ProgressAPIError("User payload must be a JSON object.")
    raw_challenges = payload.get("challenges") or []
    challenges: list[UserChallenge] = []
    for item in raw_challenges:
        if not isinstance(item, dict):
            continue
        name = item.get("challengeName", item.get("challenge_name"))
        status = item.get("status")
        if not isinstance(name, str) or not isinstance(status, str):
            logger.debug("Skipping malformed progress entry: %r", item)
            continue
        challenges.append(UserChallenge(challenge_name=name, status=status))
    return UserProgress(
        address=str(payload.get("address", address)),
        install_location=str(payload.get("installLocation", "")),
        challenges=tuple(challenges),
    )

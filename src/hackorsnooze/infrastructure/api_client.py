"""Hack or Snooze API Gateway client."""

import logging
from typing import Any
from urllib.parse import quote

import aiohttp
from aiohttp import ClientTimeout

from hackorsnooze.config import get_settings
from hackorsnooze.domain.errors import ApiError, AuthError, NetworkError
from hackorsnooze.domain.story import Story

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _to_story(record: Any) -> Story:
    try:
        return Story.from_api(record)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError(None, f"Malformed story record: {e!r}") from e


def _require(data: Any, key: str) -> Any:
    """Pull a required key out of a decoded response body."""
    if not isinstance(data, dict) or key not in data:
        raise ApiError(None, f"Malformed response: missing '{key}'")
    return data[key]


class HackOrSnoozeClient:
    """Async client for the Hack or Snooze REST API.

    Every call is a single attempt: transport failures raise NetworkError,
    non-2xx responses raise ApiError (AuthError for 401/403).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        """Initialize API client.

        Args:
            base_url: API base URL (defaults to config)
            timeout_seconds: Total request timeout in seconds (defaults to config)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = ClientTimeout(
            total=timeout_seconds or settings.request_timeout_seconds
        )
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HackOrSnoozeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        """Extract the server-provided message from an error response.

        The API answers errors with ``{"error": {"status", "title", "message"}}``.
        """
        try:
            data = await response.json(content_type=None)
        except (ValueError, aiohttp.ClientError):
            data = None

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                error = error.get("message") or error.get("title")
            if error and isinstance(error, str):
                return error
        return response.reason or f"HTTP {response.status}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and decode its JSON body.

        Args:
            method: HTTP method
            path: Path relative to base_url, starting with "/"
            json: Request body
            params: Query string parameters

        Returns:
            Decoded JSON body, or None when the body is empty
        """
        session = await self._get_session()
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {path}")

        try:
            async with session.request(
                method, url, json=json, params=params
            ) as response:
                if 200 <= response.status < 300:
                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise ApiError(
                            response.status, "Response body is not valid JSON"
                        ) from e

                message = await self._error_message(response)
                logger.warning(f"HTTP {response.status} for {method} {path}: {message}")
                if response.status in (401, 403):
                    raise AuthError(response.status, message)
                raise ApiError(response.status, message)
        except TimeoutError as e:
            logger.error(f"Timeout on {method} {path}")
            raise NetworkError(f"Timeout on {method} {path}") from e
        except aiohttp.ClientError as e:
            logger.error(f"Client error on {method} {path}: {e}")
            raise NetworkError(f"{method} {path} failed: {e}") from e

    # Stories

    async def list_stories(self) -> list[Story]:
        """Get every story, in server order."""
        data = await self._request("GET", "/stories")
        stories = [_to_story(record) for record in _require(data, "stories")]
        logger.info(f"Fetched {len(stories)} stories")
        return stories

    async def create_story(
        self, token: str, title: str, author: str, url: str
    ) -> Story:
        """Post a new story and return it as created by the server."""
        data = await self._request(
            "POST",
            "/stories",
            json={"token": token, "story": {"title": title, "author": author, "url": url}},
        )
        return _to_story(_require(data, "story"))

    async def delete_story(self, token: str, story_id: str) -> None:
        await self._request(
            "DELETE", f"/stories/{_segment(story_id)}", json={"token": token}
        )

    # Users

    async def signup(self, username: str, password: str, name: str) -> dict[str, Any]:
        """Register a user.

        Returns:
            Response body with "user" (UserRecord) and "token"
        """
        data = await self._request(
            "POST",
            "/signup",
            json={"user": {"username": username, "password": password, "name": name}},
        )
        _require(data, "user")
        _require(data, "token")
        return data

    async def login(self, username: str, password: str) -> dict[str, Any]:
        """Authenticate a user.

        Returns:
            Response body with "user" (UserRecord) and "token"
        """
        data = await self._request(
            "POST",
            "/login",
            json={"user": {"username": username, "password": password}},
        )
        _require(data, "user")
        _require(data, "token")
        return data

    async def get_user(self, token: str, username: str) -> dict[str, Any]:
        """Fetch a user's profile (UserRecord)."""
        data = await self._request(
            "GET", f"/users/{_segment(username)}", params={"token": token}
        )
        return _require(data, "user")

    async def add_favorite(self, token: str, username: str, story_id: str) -> None:
        await self._request(
            "POST",
            f"/users/{_segment(username)}/favorites/{_segment(story_id)}",
            json={"token": token},
        )

    async def remove_favorite(self, token: str, username: str, story_id: str) -> None:
        await self._request(
            "DELETE",
            f"/users/{_segment(username)}/favorites/{_segment(story_id)}",
            json={"token": token},
        )

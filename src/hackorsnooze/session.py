"""Application session: owns the story list and the current user."""

import logging

from hackorsnooze.domain.story_list import StoryList
from hackorsnooze.domain.user import User
from hackorsnooze.infrastructure.api_client import HackOrSnoozeClient

logger = logging.getLogger(__name__)


class AppSession:
    """Page-lifetime state handed to views by reference.

    Usage:
        async with AppSession() as app:
            await app.load_stories()
            await app.restore(token, username)
    """

    def __init__(self, client: HackOrSnoozeClient | None = None) -> None:
        self.client = client or HackOrSnoozeClient()
        self.story_list: StoryList | None = None
        self.user: User | None = None

    async def __aenter__(self) -> "AppSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    @property
    def is_logged_in(self) -> bool:
        return self.user is not None

    async def load_stories(self) -> StoryList:
        """Fetch all stories and make them the session's story list."""
        self.story_list = await StoryList.get_stories(self.client)
        return self.story_list

    async def signup(self, username: str, password: str, name: str) -> User:
        self.user = await User.signup(self.client, username, password, name)
        return self.user

    async def login(self, username: str, password: str) -> User:
        self.user = await User.login(self.client, username, password)
        return self.user

    async def restore(self, token: str | None, username: str | None) -> bool:
        """Log in from stored credentials, best effort.

        Returns:
            True if a user was restored
        """
        if not token or not username:
            return False
        self.user = await User.login_via_stored_credentials(self.client, token, username)
        return self.user is not None

    def logout(self) -> None:
        """Forget the current user. Credential storage is the caller's concern."""
        if self.user is not None:
            logger.info(f"Logged out user {self.user.username}")
        self.user = None

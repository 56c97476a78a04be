"""User domain entity: the current user and their story collections."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from hackorsnooze.config import get_settings
from hackorsnooze.domain.errors import ApiError, AuthError, HackOrSnoozeError
from hackorsnooze.domain.favorites import FavoriteSync
from hackorsnooze.domain.story import Story, parse_timestamp

if TYPE_CHECKING:
    from hackorsnooze.infrastructure.api_client import HackOrSnoozeClient

logger = logging.getLogger(__name__)


def _unique_stories(records: list[dict[str, Any]] | None) -> list[Story]:
    """Build Story instances, keeping the first occurrence of each storyId."""
    seen: set[str] = set()
    stories = []
    for record in records or []:
        story = Story.from_api(record)
        if story.story_id not in seen:
            seen.add(story.story_id)
            stories.append(story)
    return stories


@dataclass
class User:
    """The logged-in user.

    ``favorites`` and ``own_stories`` are mutated in place so that any view
    holding a reference to them keeps seeing the current state.
    """

    username: str
    name: str
    created_at: datetime
    login_token: str | None = field(default=None, repr=False)
    favorites: list[Story] = field(default_factory=list)
    own_stories: list[Story] = field(default_factory=list)
    client: "HackOrSnoozeClient | None" = field(default=None, repr=False, compare=False)
    favorite_sync: FavoriteSync | None = field(default=None, compare=False)
    _favorite_states: "dict[str, _FavoriteState]" = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _favorite_seq: int = field(default=0, init=False, repr=False, compare=False)

    @classmethod
    def from_api(
        cls,
        data: dict[str, Any],
        token: str | None,
        client: "HackOrSnoozeClient | None" = None,
    ) -> "User":
        """Create User from an API UserRecord and its credential token.

        The API's ``stories`` field becomes ``own_stories``.
        """
        return cls(
            username=data["username"],
            name=data["name"],
            created_at=parse_timestamp(data["createdAt"]),
            login_token=token,
            favorites=_unique_stories(data.get("favorites")),
            own_stories=_unique_stories(data.get("stories")),
            client=client,
        )

    # Authentication

    @classmethod
    async def signup(
        cls,
        client: "HackOrSnoozeClient",
        username: str,
        password: str,
        name: str,
    ) -> "User":
        """Register a new user with the API and return it.

        Raises:
            AuthError: username taken or fields rejected
            NetworkError: transport failure
        """
        try:
            data = await client.signup(username, password, name)
        except AuthError:
            raise
        except ApiError as e:
            if e.status is not None and 400 <= e.status < 500:
                raise AuthError(e.status, e.message) from e
            raise
        user = cls._from_auth_response(data, client)
        logger.info(f"Signed up user {username}")
        return user

    @classmethod
    async def login(
        cls,
        client: "HackOrSnoozeClient",
        username: str,
        password: str,
    ) -> "User":
        """Log an existing user in and return it.

        Raises:
            AuthError: credentials rejected
            NetworkError: transport failure
        """
        try:
            data = await client.login(username, password)
        except AuthError:
            raise
        except ApiError as e:
            if e.status is not None and 400 <= e.status < 500:
                raise AuthError(e.status, e.message) from e
            raise
        user = cls._from_auth_response(data, client)
        logger.info(f"Logged in user {username}")
        return user

    @classmethod
    def _from_auth_response(
        cls, data: dict[str, Any], client: "HackOrSnoozeClient"
    ) -> "User":
        try:
            return cls.from_api(data["user"], data["token"], client)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(None, f"Malformed user record: {e!r}") from e

    @classmethod
    async def login_via_stored_credentials(
        cls,
        client: "HackOrSnoozeClient",
        token: str,
        username: str,
    ) -> "User | None":
        """Rebuild a user from a previously issued token.

        Best effort: any failure is logged and yields None, meaning
        "not logged in".
        """
        try:
            record = await client.get_user(token, username)
            return cls.from_api(record, token, client)
        except Exception as e:
            logger.warning(f"Stored credentials for {username} rejected: {e!r}")
            return None

    def to_credentials(self) -> tuple[str | None, str]:
        """Return (token, username) for an external credential store."""
        return self.login_token, self.username

    # Favorites

    def is_favorite(self, story: Story) -> bool:
        """Check whether a story with the same id is in favorites."""
        return any(s.story_id == story.story_id for s in self.favorites)

    async def add_favorite(self, story: Story) -> None:
        """Mark a story as favorite locally and on the API Gateway."""
        await self._sync_favorite(story, favorite=True)

    async def remove_favorite(self, story: Story) -> None:
        """Unmark a story as favorite locally and on the API Gateway."""
        await self._sync_favorite(story, favorite=False)

    async def toggle_favorite(self, story: Story) -> bool:
        """Flip the favorite state of a story.

        Returns:
            True if the story is now a favorite
        """
        if self.is_favorite(story):
            await self.remove_favorite(story)
            return False
        await self.add_favorite(story)
        return True

    def _sync_mode(self) -> FavoriteSync:
        return self.favorite_sync or get_settings().favorite_sync

    def require_token(self) -> str:
        """Return the login token, or raise AuthError if there is none."""
        if not self.login_token:
            raise AuthError(None, f"User {self.username} has no login token")
        return self.login_token

    def _api(self) -> "HackOrSnoozeClient":
        if self.client is None:
            raise HackOrSnoozeError(f"User {self.username} is not bound to an API client")
        return self.client

    def _favorite_index(self, story_id: str) -> int | None:
        return next(
            (i for i, s in enumerate(self.favorites) if s.story_id == story_id),
            None,
        )

    def _set_favorite(self, story: Story, favorite: bool, position: int | None = None) -> bool:
        """Make the local collection agree with ``favorite``.

        Returns:
            True if the collection changed
        """
        index = self._favorite_index(story.story_id)
        if favorite and index is None:
            if position is None:
                self.favorites.append(story)
            else:
                self.favorites.insert(min(position, len(self.favorites)), story)
            return True
        if not favorite and index is not None:
            self.favorites[:] = [s for s in self.favorites if s.story_id != story.story_id]
            return True
        return False

    async def _sync_favorite(self, story: Story, favorite: bool) -> None:
        token = self.require_token()
        client = self._api()
        mode = self._sync_mode()
        request = client.add_favorite if favorite else client.remove_favorite
        story_id = story.story_id

        state = self._favorite_states.get(story_id)
        if state is None:
            index = self._favorite_index(story_id)
            state = _FavoriteState(
                confirmed=index is not None,
                position=index,
                original=self.favorites[index] if index is not None else None,
            )
            self._favorite_states[story_id] = state
        self._favorite_seq += 1
        seq = self._favorite_seq
        state.pending[seq] = favorite

        if mode is not FavoriteSync.PESSIMISTIC:
            self._set_favorite(story, favorite, state.position)

        try:
            await request(token, self.username, story_id)
        except HackOrSnoozeError:
            state.pending.pop(seq, None)
            if mode is FavoriteSync.ROLLBACK and self._set_favorite(
                state.original or story, state.target(), state.position
            ):
                logger.warning(f"Rolled back favorite change for story {story_id}")
            raise
        else:
            state.pending.pop(seq, None)
            if seq > state.confirmed_seq:
                state.confirmed, state.confirmed_seq = favorite, seq
                if mode is FavoriteSync.PESSIMISTIC:
                    self._set_favorite(story, favorite, state.position)
        finally:
            state.pending.pop(seq, None)
            if not state.pending and self._favorite_states.get(story_id) is state:
                del self._favorite_states[story_id]


@dataclass
class _FavoriteState:
    """Favorite bookkeeping for one story while its requests are in flight.

    ``confirmed`` is the result of the most recently issued request that
    succeeded (or the state before the first request). ``pending`` maps each
    in-flight request's sequence number to the state it asks for.
    """

    confirmed: bool
    confirmed_seq: int = 0
    position: int | None = None
    original: Story | None = None
    pending: dict[int, bool] = field(default_factory=dict)

    def target(self) -> bool:
        """State the local collection should show: newest pending intent wins."""
        if self.pending:
            return self.pending[max(self.pending)]
        return self.confirmed

"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hackorsnooze.config import get_settings
from hackorsnooze.domain.favorites import FavoriteSync
from hackorsnooze.domain.story import Story
from hackorsnooze.domain.user import User
from hackorsnooze.infrastructure.api_client import HackOrSnoozeClient


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so env patches take effect per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_story_record() -> Callable[..., dict[str, Any]]:
    """Factory for API StoryRecord dicts."""

    def _make(story_id: str = "s1", **overrides: Any) -> dict[str, Any]:
        record = {
            "storyId": story_id,
            "title": f"Story {story_id}",
            "author": "Ada Lovelace",
            "url": f"https://example.com/{story_id}",
            "username": "ada",
            "createdAt": "2024-03-01T12:00:00.000Z",
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def make_story(make_story_record) -> Callable[..., Story]:
    """Factory for Story instances."""

    def _make(story_id: str = "s1", **overrides: Any) -> Story:
        return Story.from_api(make_story_record(story_id, **overrides))

    return _make


@pytest.fixture
def user_record(make_story_record) -> dict[str, Any]:
    """A UserRecord with one own story and one favorite."""
    return {
        "username": "ada",
        "name": "Ada Lovelace",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "favorites": [make_story_record("fav1", username="bob")],
        "stories": [make_story_record("own1")],
    }


@pytest.fixture
def mock_client() -> AsyncMock:
    """API client double; every endpoint is an AsyncMock."""
    return AsyncMock(spec=HackOrSnoozeClient)


@pytest.fixture
def user(user_record, mock_client) -> User:
    """Logged-in user bound to the mock client, rolling back on failure."""
    u = User.from_api(user_record, "tok-123", mock_client)
    u.favorite_sync = FavoriteSync.ROLLBACK
    return u

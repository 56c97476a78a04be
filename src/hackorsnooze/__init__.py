"""Client-side data layer for the Hack or Snooze link-sharing API."""

from hackorsnooze.domain.errors import (
    ApiError,
    AuthError,
    HackOrSnoozeError,
    MalformedUrlError,
    NetworkError,
)
from hackorsnooze.domain.favorites import FavoriteSync
from hackorsnooze.domain.story import Story
from hackorsnooze.domain.story_list import StoryList
from hackorsnooze.domain.user import User
from hackorsnooze.infrastructure.api_client import HackOrSnoozeClient
from hackorsnooze.session import AppSession

__all__ = [
    "ApiError",
    "AppSession",
    "AuthError",
    "FavoriteSync",
    "HackOrSnoozeClient",
    "HackOrSnoozeError",
    "MalformedUrlError",
    "NetworkError",
    "Story",
    "StoryList",
    "User",
]

"""Story domain entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from hackorsnooze.domain.errors import MalformedUrlError

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


def parse_timestamp(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class Story:
    """Represents a single submitted link."""

    story_id: str
    title: str
    author: str
    url: str
    username: str
    created_at: datetime

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Story":
        """Create Story from an API StoryRecord."""
        return cls(
            story_id=data["storyId"],
            title=data["title"],
            author=data["author"],
            url=data["url"],
            username=data["username"],
            created_at=parse_timestamp(data["createdAt"]),
        )

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the API StoryRecord shape."""
        return {
            "storyId": self.story_id,
            "title": self.title,
            "author": self.author,
            "url": self.url,
            "username": self.username,
            "createdAt": self.created_at.isoformat(),
        }

    def get_host_name(self) -> str:
        """Parse the host out of the story URL.

        Follows the WHATWG ``URL.host`` result: lowercased hostname without
        credentials, with the port appended only when it is not the scheme
        default.

        Raises:
            MalformedUrlError: url has no scheme or host, or a bad port
        """
        try:
            parts = urlsplit(self.url.strip())
            port = parts.port
        except ValueError as e:
            raise MalformedUrlError(self.url, str(e)) from e

        host = parts.hostname
        if not parts.scheme or not host:
            raise MalformedUrlError(self.url)
        if any(c.isspace() for c in host):
            raise MalformedUrlError(self.url, "whitespace in host")

        if ":" in host:
            host = f"[{host}]"
        if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
            return f"{host}:{port}"
        return host

    @property
    def hostname(self) -> str:
        return self.get_host_name()

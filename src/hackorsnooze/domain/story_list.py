"""StoryList: the collection of all known stories."""

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from hackorsnooze.domain.errors import HackOrSnoozeError
from hackorsnooze.domain.story import Story
from hackorsnooze.domain.user import User

if TYPE_CHECKING:
    from hackorsnooze.infrastructure.api_client import HackOrSnoozeClient

logger = logging.getLogger(__name__)


def _without(stories: list[Story], story_id: str) -> list[Story]:
    return [s for s in stories if s.story_id != story_id]


class StoryList:
    """Ordered list of Story instances for views to render.

    Order is the server's after a fetch and most-recent-first after local
    additions. Every story_id appears at most once.
    """

    def __init__(
        self,
        stories: list[Story] | None = None,
        client: "HackOrSnoozeClient | None" = None,
    ) -> None:
        self.stories: list[Story] = []
        seen: set[str] = set()
        for story in stories or []:
            if story.story_id not in seen:
                seen.add(story.story_id)
                self.stories.append(story)
        self.client = client

    def __len__(self) -> int:
        return len(self.stories)

    def __iter__(self) -> Iterator[Story]:
        return iter(self.stories)

    def get(self, story_id: str) -> Story | None:
        """Look up a story by id."""
        return next((s for s in self.stories if s.story_id == story_id), None)

    @classmethod
    async def get_stories(cls, client: "HackOrSnoozeClient") -> "StoryList":
        """Fetch every story from the API and wrap them in a new StoryList.

        Errors propagate; no list is produced on failure.
        """
        stories = await client.list_stories()
        return cls(stories, client=client)

    def _api(self) -> "HackOrSnoozeClient":
        if self.client is None:
            raise HackOrSnoozeError("StoryList is not bound to an API client")
        return self.client

    async def add_story(self, user: User, new_story: Mapping[str, str]) -> Story:
        """Post a story as ``user`` and add it to the front of both lists.

        Args:
            user: The logged-in user posting the story
            new_story: Mapping with "title", "author" and "url"

        Returns:
            The Story as created by the server
        """
        token = user.require_token()
        story = await self._api().create_story(
            token,
            title=new_story["title"],
            author=new_story["author"],
            url=new_story["url"],
        )

        self.stories[:] = [story, *_without(self.stories, story.story_id)]
        user.own_stories[:] = [story, *_without(user.own_stories, story.story_id)]
        logger.info(f"Added story {story.story_id} by {user.username}")
        return story

    async def remove_story(self, user: User, story_id: str) -> None:
        """Delete a story on the API, then purge it from every local list.

        Nothing local changes if the request fails.
        """
        token = user.require_token()
        await self._api().delete_story(token, story_id)

        self.stories[:] = _without(self.stories, story_id)
        user.own_stories[:] = _without(user.own_stories, story_id)
        user.favorites[:] = _without(user.favorites, story_id)
        logger.info(f"Removed story {story_id}")

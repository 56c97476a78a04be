"""
Hack or Snooze CLI - browse stories and check stored credentials.

Usage:
    hackorsnooze stories [--limit N]           # List stories in server order
    hackorsnooze user USERNAME --token TOKEN   # Show a user's profile
"""

import argparse
import asyncio
import logging
import sys

from hackorsnooze.domain.errors import HackOrSnoozeError, MalformedUrlError
from hackorsnooze.domain.story import Story
from hackorsnooze.main import configure_logging
from hackorsnooze.session import AppSession

logger = logging.getLogger(__name__)


def format_story(story: Story) -> str:
    """One-line rendering: title (hostname) by author."""
    try:
        host = story.hostname
    except MalformedUrlError:
        host = "invalid url"
    return f"{story.title} ({host}) by {story.author}, posted by {story.username}"


async def cmd_stories(args) -> int:
    """List stories."""
    async with AppSession() as app:
        story_list = await app.load_stories()
    stories = story_list.stories[: args.limit] if args.limit else story_list.stories
    for story in stories:
        print(format_story(story))
    return 0


async def cmd_user(args) -> int:
    """Show a user restored from a token."""
    async with AppSession() as app:
        if not await app.restore(args.token, args.username):
            print(f"Could not restore {args.username}: token rejected", file=sys.stderr)
            return 1
        user = app.user
    print(f"{user.name} ({user.username}), member since {user.created_at:%Y-%m-%d}")
    print(f"  {len(user.own_stories)} stories, {len(user.favorites)} favorites")
    for story in user.favorites:
        print(f"  * {format_story(story)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hackorsnooze", description="Hack or Snooze CLI")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stories = subparsers.add_parser("stories", help="List stories")
    stories.add_argument("--limit", type=int, default=None)
    stories.set_defaults(func=cmd_stories)

    user = subparsers.add_parser("user", help="Show a user's profile")
    user.add_argument("username")
    user.add_argument("--token", required=True)
    user.set_defaults(func=cmd_user)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(args.func(args))
    except HackOrSnoozeError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

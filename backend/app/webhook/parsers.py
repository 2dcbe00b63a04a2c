"""Parsers for the markdown post batches produced by the n8n workflows.

The workflows emit human-readable markdown instead of JSON. Three shapes
exist:

* simple Reddit: blocks introduced by ``# Conversation N`` with
  ``**Field:** value`` lines, a ``## Body`` section and a ``[View Post](url)``
  link;
* grouped Reddit: ``## keyword`` groups holding ``### title`` posts with a
  ``**Discussion:**`` body, separated by ``---``;
* LinkedIn: ``### title`` posts with ``**Profile:**``, ``**Posted:**`` and
  ``**Post Content:**`` sections, separated by ``---``.

Every parser is a pure function that never raises: a block missing its title
or post URL is dropped.
"""

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

NO_CONVERSATIONS_SENTINEL = "no_conversations_found"

_CONVERSATION_SPLIT = re.compile(r"# Conversation \d+")
_SUBREDDIT_FIELD = re.compile(r"\*\*Subreddit:\*\* (.+)")
_TITLE_FIELD = re.compile(r"\*\*Title:\*\* (.+)")
_POSTED_FIELD = re.compile(r"\*\*Posted:\*\* (.+)")
_ASSESSMENT_FIELD = re.compile(r"\*\*Assessment:\*\* (.+)")
_BODY_SECTION = re.compile(r"## Body\n([\s\S]*?)\n\[View Post\]")
_VIEW_POST_LINK = re.compile(r"\[View (?:Post|Full Post)\]\((.+?)\)")
_SUBREDDIT_LINK = re.compile(r"\[r/(\w+)\]")
_SUBREDDIT_PLAIN = re.compile(r"(?:^|\s)r/(\w+)")
_LINK_TARGET = re.compile(r"\]\(([^)]+)\)")
_LINK_TEXT = re.compile(r"\[([^\]]*)\]\(")

_HUMAN_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%m/%d/%Y",
)


class ParsedPost(BaseModel):
    """A post extracted from a workflow payload."""

    title: str = ""
    body: str = ""
    post_url: str = ""
    subreddit: str | None = None
    author: str | None = None
    author_profile_url: str | None = None
    created_at: str = ""
    keyword: str | None = None
    assessment: str | None = None
    upvotes: int = 0
    comments: int = 0
    relevance_score: float | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.post_url)


class ParserState(str, Enum):
    """States of the line-oriented parsers."""

    SEEKING_HEADER = "seeking_header"
    IN_POST = "in_post"
    IN_BODY = "in_body"


def parse_flexible_date(value: Any) -> datetime:
    """Best-effort conversion of a workflow date string to an aware UTC datetime.

    Falls back to the current time when nothing matches.
    """
    now = datetime.now(timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return now

    text = value.strip()
    parsed: datetime | None = None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    if parsed is None:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            parsed = None

    if parsed is None:
        for fmt in _HUMAN_DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.warning(f"Failed to parse date: {value!r}")
        return now

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        logger.warning(f"Date out of range: {value!r}")
        return now


def is_no_results(value: Any) -> bool:
    return isinstance(value, str) and value.strip() == NO_CONVERSATIONS_SENTINEL


def _resolve_subreddit(text: str) -> str | None:
    """Bare subreddit name from ``[r/name](...)`` or ``r/name``."""
    link = _SUBREDDIT_LINK.search(text)
    if link:
        return link.group(1)
    plain = _SUBREDDIT_PLAIN.search(text)
    if plain:
        return plain.group(1)
    stripped = text.strip()
    return stripped or None


def _field_value(line: str, prefix: str) -> str:
    return line[len(prefix):].strip()


def _link_target(line: str) -> str | None:
    match = _LINK_TARGET.search(line)
    return match.group(1).strip() if match else None


def _is_body_line(stripped: str) -> bool:
    return bool(stripped) and not stripped.startswith("**") and not stripped.startswith("[")


def parse_simple_reddit_markdown(markdown: str) -> list[ParsedPost]:
    """Parse the ``# Conversation N`` format."""
    posts: list[ParsedPost] = []

    for block in _CONVERSATION_SPLIT.split(markdown):
        if not block.strip():
            continue

        post = ParsedPost()

        subreddit = _SUBREDDIT_FIELD.search(block)
        if subreddit:
            post.subreddit = _resolve_subreddit(subreddit.group(1))

        title = _TITLE_FIELD.search(block)
        if title:
            post.title = title.group(1).strip()

        posted = _POSTED_FIELD.search(block)
        if posted:
            post.created_at = posted.group(1).strip()

        assessment = _ASSESSMENT_FIELD.search(block)
        if assessment:
            post.assessment = assessment.group(1).strip()

        body = _BODY_SECTION.search(block)
        if body:
            post.body = body.group(1).strip()

        url = _VIEW_POST_LINK.search(block)
        if url:
            post.post_url = url.group(1).strip()

        if post.is_complete:
            posts.append(post)

    return posts


def parse_grouped_reddit_markdown(markdown: str) -> list[ParsedPost]:
    """Parse the keyword-grouped format (``## keyword`` / ``### title``)."""
    posts: list[ParsedPost] = []
    state = ParserState.SEEKING_HEADER
    keyword = ""
    current: ParsedPost | None = None

    def flush() -> None:
        if current is not None and current.is_complete:
            posts.append(current)

    for line in markdown.split("\n"):
        stripped = line.strip()

        if line.startswith("## "):
            keyword = _field_value(line, "## ")
        elif line.startswith("### "):
            flush()
            current = ParsedPost(keyword=keyword or None, title=_field_value(line, "### "))
            state = ParserState.IN_POST
        elif state is ParserState.SEEKING_HEADER or current is None:
            continue
        elif stripped == "---":
            flush()
            current = None
            state = ParserState.SEEKING_HEADER
        elif line.startswith("**Subreddit:**"):
            current.subreddit = _resolve_subreddit(_field_value(line, "**Subreddit:**"))
        elif line.startswith("**Posted:**"):
            current.created_at = _field_value(line, "**Posted:**")
        elif line.startswith("**Discussion:**"):
            state = ParserState.IN_BODY
        elif line.startswith("[View Full Post]") or line.startswith("[View Post]"):
            current.post_url = _link_target(line) or current.post_url
        elif state is ParserState.IN_BODY and _is_body_line(stripped):
            current.body += line + "\n"

    flush()
    return posts


def parse_linkedin_markdown(markdown: str) -> list[ParsedPost]:
    """Parse the LinkedIn post format."""
    posts: list[ParsedPost] = []
    state = ParserState.SEEKING_HEADER
    current: ParsedPost | None = None

    def flush() -> None:
        if current is not None and current.is_complete:
            posts.append(current)

    for line in markdown.split("\n"):
        stripped = line.strip()

        if line.startswith("### "):
            flush()
            current = ParsedPost(title=_field_value(line, "### "))
            state = ParserState.IN_POST
        elif state is ParserState.SEEKING_HEADER or current is None:
            continue
        elif stripped == "---":
            flush()
            current = None
            state = ParserState.SEEKING_HEADER
        elif line.startswith("**Profile:**"):
            current.author_profile_url = _link_target(line)
            author = _LINK_TEXT.search(line)
            if author and author.group(1).strip():
                current.author = author.group(1).strip()
        elif line.startswith("**Posted:**"):
            current.created_at = _field_value(line, "**Posted:**")
        elif line.startswith("**Post Content:**"):
            state = ParserState.IN_BODY
        elif line.startswith("[View Full Post]"):
            current.post_url = _link_target(line) or current.post_url
        elif state is ParserState.IN_BODY and _is_body_line(stripped):
            current.body += line + "\n"

    flush()
    return posts


def parse_reddit_markdown(markdown: str) -> list[ParsedPost]:
    """Detect the Reddit format and parse it."""
    if "## " in markdown and "### " in markdown:
        return parse_grouped_reddit_markdown(markdown)
    return parse_simple_reddit_markdown(markdown)


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def post_from_mapping(data: Any) -> ParsedPost | None:
    """Normalize an already-structured post object sent by the workflow."""
    if not isinstance(data, dict):
        return None

    engagement = data.get("engagement") if isinstance(data.get("engagement"), dict) else {}
    post = ParsedPost(
        title=_as_text(data.get("title")) or "",
        body=_as_text(data.get("body") or data.get("excerpt")) or "",
        post_url=_as_text(data.get("postUrl") or data.get("url")) or "",
        subreddit=_as_text(data.get("subreddit")),
        author=_as_text(data.get("author")),
        created_at=_as_text(data.get("createdAt")) or "",
        keyword=_as_text(data.get("keyword")),
        assessment=_as_text(data.get("assessment")),
        upvotes=_as_int(data.get("upvotes") or engagement.get("upvotes")),
        comments=_as_int(data.get("comments") or engagement.get("comments")),
        relevance_score=_as_float(data.get("relevanceScore")),
    )
    return post if post.is_complete else None


def parse_passed_posts(passed_posts: Any) -> list[ParsedPost]:
    """Flatten a ``passedPosts`` payload into posts.

    Accepts a markdown string, or a list of ``{"passed_post": ...}`` items
    whose value is a markdown string or a list of structured posts. The
    no-results sentinel yields nothing in either position.
    """
    if not passed_posts:
        return []

    if isinstance(passed_posts, str):
        if is_no_results(passed_posts):
            return []
        return parse_reddit_markdown(passed_posts.strip())

    if not isinstance(passed_posts, list):
        logger.warning(f"Ignoring passedPosts of type {type(passed_posts).__name__}")
        return []

    posts: list[ParsedPost] = []
    for item in passed_posts:
        if not isinstance(item, dict) or not item.get("passed_post"):
            continue

        inner = item["passed_post"]
        if isinstance(inner, str):
            if is_no_results(inner):
                continue
            posts.extend(parse_reddit_markdown(inner.strip()))
        elif isinstance(inner, list):
            posts.extend(p for p in map(post_from_mapping, inner) if p is not None)

    return posts

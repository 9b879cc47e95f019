"""Filtering and summaries over loaded conversations.

Mirrors the explorer's sidebar: a regex search scoped by speaker and
position, sentiment toggles, intent and tool pickers, who-ended-the-call,
and turn-count/duration ranges. A query is plain data; evaluating it never
raises, and a malformed regex simply matches nothing.
"""

import logging
import re
from functools import cached_property
from pathlib import Path
from typing import Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field

from callsynth.schema.transcript import SENTIMENTS, Conversation, Document, Sentiment, Turn
from callsynth.sink import write_document


logger = logging.getLogger(__name__)

ANY = "any"


class ConversationQuery(BaseModel):
    """Filter criteria; every criterion must hold for a conversation to match."""
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(default="", description="Case-insensitive regex over turn text")
    scope: Literal["conversation", "caller", "bot"] = Field(
        default="conversation",
        description="Which speaker's turns the pattern and sentiments apply to"
    )
    position: Literal["anywhere", "first", "last"] = Field(
        default="anywhere",
        description="Which turn positions the pattern and sentiments apply to"
    )
    sentiments: set[Sentiment] = Field(
        default_factory=lambda: set(SENTIMENTS),
        description="Accepted sentiments; missing sentiment counts as neutral"
    )
    intent: str = Field(default=ANY, description="Intent some turn must have")
    tool: str = Field(default=ANY, description="Tool some action must name")
    ended_by: Literal["any", "caller", "bot"] = Field(default=ANY)
    min_turns: int = Field(default=0, ge=0, le=200)
    max_turns: int = Field(default=200, ge=0, le=200)
    min_seconds: int = Field(default=0, ge=0, le=3600)
    max_seconds: int = Field(default=3600, ge=0, le=3600)

    @cached_property
    def compiled_pattern(self) -> re.Pattern | None:
        if not self.pattern:
            return None
        try:
            return re.compile(self.pattern, re.IGNORECASE)
        except re.error as e:
            logger.warning("Ignoring invalid pattern %r: %s", self.pattern, e)
            return None

    @property
    def pattern_error(self) -> bool:
        """True when a pattern was given but does not compile."""
        return bool(self.pattern) and self.compiled_pattern is None

    def _in_scope(self, turn: Turn) -> bool:
        if self.scope == "conversation":
            return True
        return turn.role == self.scope

    def _at_position(self, idx: int, length: int) -> bool:
        if self.position == "first":
            return idx == 0
        if self.position == "last":
            return idx == length - 1
        return True

    def _selected_turns(self, conversation: Conversation) -> list[Turn]:
        n = len(conversation.turns)
        return [
            turn for idx, turn in enumerate(conversation.turns)
            if self._in_scope(turn) and self._at_position(idx, n)
        ]

    def matches(self, conversation: Conversation) -> bool:
        """Evaluate this query against one conversation."""
        turns = conversation.turns
        if not self.min_turns <= len(turns) <= self.max_turns:
            return False
        if not self.min_seconds <= conversation.duration_seconds <= self.max_seconds:
            return False

        if self.ended_by != ANY and conversation.ended_by() != self.ended_by:
            return False

        if self.intent != ANY and not any(t.intent == self.intent for t in turns):
            return False

        selected = self._selected_turns(conversation)
        if not any(t.sentiment in self.sentiments for t in selected):
            return False

        if self.pattern:
            regex = self.compiled_pattern
            if regex is None:
                return False
            if not any(regex.search(t.text or "") for t in selected):
                return False

        if self.tool != ANY and not any(self.tool in t.tool_names() for t in turns):
            return False

        return True


def filter_conversations(
    conversations: Iterable[Conversation],
    query: ConversationQuery,
) -> list[Conversation]:
    """Return the conversations matching ``query``, in their original order."""
    return [c for c in conversations if query.matches(c)]


def available_intents(conversations: Iterable[Conversation]) -> list[str]:
    """Options for the intent picker: "any" followed by every intent seen."""
    intents = {t.intent for c in conversations for t in c.turns if t.intent}
    return [ANY, *sorted(intents)]


def available_tools(conversations: Iterable[Conversation]) -> list[str]:
    """Options for the tool picker: "any" followed by every tool seen."""
    tools = {name for c in conversations for t in c.turns for name in t.tool_names()}
    return [ANY, *sorted(tools)]


class SentimentShare(BaseModel):
    name: Sentiment
    count: int
    percent: int


def _shares(turns: list[Turn]) -> list[SentimentShare]:
    counts = {s: 0 for s in SENTIMENTS}
    for turn in turns:
        counts[turn.sentiment] += 1
    total = len(turns)
    return [
        SentimentShare(
            name=name,
            count=count,
            percent=round(count / total * 100) if total else 0,
        )
        for name, count in counts.items()
    ]


def sentiment_breakdown(conversations: Iterable[Conversation]) -> list[SentimentShare]:
    """Sentiment shares across every turn of the given conversations."""
    return _shares([t for c in conversations for t in c.turns])


def conversation_sentiment(conversation: Conversation) -> list[SentimentShare]:
    """Sentiment shares within a single conversation."""
    return _shares(conversation.turns)


def total_duration(conversations: Iterable[Conversation]) -> int:
    return sum(c.duration_seconds or 0 for c in conversations)


def format_duration(seconds: int) -> str:
    """Format seconds as "1h 2m 3s", omitting zero hours and minutes."""
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


def export_selection(conversations: Iterable[Conversation], path: Path) -> int:
    """Write the selected conversations as a standalone document.

    Returns:
        Number of conversations written
    """
    document = Document(conversations=list(conversations))
    write_document(document, path)
    logger.info("Exported %d conversations to %s", len(document.conversations), path)
    return len(document.conversations)

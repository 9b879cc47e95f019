"""Constructors for turns and actions.

These are internal factories: they shape records but do not validate
business rules. Callers are responsible for passing sensible values.
"""

from datetime import datetime, timezone
from typing import Any

from callsynth.schema.actions import (
    Action,
    AgentInvocation,
    PersistentStorage,
    ToolCall,
    ToolOutput,
)
from callsynth.schema.transcript import Role, Sentiment, Turn


def as_datetime(timestamp: datetime | int | float) -> datetime:
    """Render a datetime or epoch milliseconds as an aware UTC datetime."""
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)


def make_turn(
    idx: int,
    role: Role,
    text: str,
    timestamp: datetime | int | float,
    intent: str = "general",
    sentiment: Sentiment = "neutral",
    agentic_action: list[Action] | None = None,
    ended_call: bool = False,
) -> Turn:
    """Build a single turn.

    Args:
        idx: Provisional turn id (renumbered once the conversation is final)
        role: "caller" or "bot"
        text: Utterance text
        timestamp: Datetime, or epoch milliseconds
        intent: Intent label
        sentiment: Turn sentiment
        agentic_action: Actions performed on this turn; omitted if empty
        ended_call: Whether this turn ends the call

    Returns:
        The turn
    """
    return Turn(
        role=role,
        turn_id=idx,
        text=text,
        timestamp=as_datetime(timestamp),
        intent=intent,
        sentiment=sentiment,
        ended_call=ended_call,
        agentic_action=list(agentic_action) if agentic_action else None,
    )


def tool_call(name: str, payload: dict[str, Any]) -> ToolCall:
    return ToolCall(tool_name=name, request=payload)


def tool_output(name: str, payload: dict[str, Any]) -> ToolOutput:
    return ToolOutput(tool_name=name, response=payload)


def persistent_storage(payload: dict[str, Any]) -> PersistentStorage:
    """A conversation-memory write."""
    return PersistentStorage(response=payload)


def agent_invocation(description: str) -> AgentInvocation:
    return AgentInvocation(description=description)

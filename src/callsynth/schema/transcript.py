"""Turn, conversation and document models.

A document is the unit handed to consumers (the explorer, fixtures,
analytics). Every generated conversation satisfies:
- turn ids run 1..n without gaps
- timestamps strictly increase
- exactly one turn has ``ended_call`` set, and it is the last turn

Loaded documents are validated for shape only; the structural checks live
in ``callsynth.generator.invariants``.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)

from callsynth.schema.actions import Action


Role = Literal["caller", "bot"]
Sentiment = Literal["positive", "neutral", "negative"]

SENTIMENTS: tuple[Sentiment, ...] = ("positive", "neutral", "negative")


class Turn(BaseModel):
    """One utterance in a conversation, plus the bot's actions for it."""
    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who is speaking")
    turn_id: int = Field(ge=1, description="1-based position in the conversation")
    text: str = Field(default="", description="The utterance, may be empty")
    timestamp: datetime = Field(description="When the turn happened (UTC)")
    intent: str = Field(default="general", description="Intent label")
    sentiment: Sentiment = Field(default="neutral", description="Turn sentiment")
    ended_call: bool = Field(default=False, description="Whether this turn ends the call")
    agentic_action: list[Action] | None = Field(
        default=None,
        description="Tool and memory actions, absent when the turn has none"
    )

    @field_validator("timestamp")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("text", "intent", "sentiment", "ended_call", mode="before")
    @classmethod
    def _null_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("agentic_action", mode="before")
    @classmethod
    def _empty_actions_are_absent(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)) and not value:
            return None
        return value

    @model_serializer(mode="wrap")
    def _omit_absent_actions(self, handler) -> dict[str, Any]:
        data = handler(self)
        if self.agentic_action is None:
            data.pop("agentic_action", None)
        return data

    @property
    def actions(self) -> list[Action]:
        """The turn's actions, empty when it has none."""
        return list(self.agentic_action or [])

    def tool_names(self) -> list[str]:
        """Names of the tools this turn touched, in action order."""
        return [a.tool_name for a in self.actions if getattr(a, "tool_name", None)]


class Conversation(BaseModel):
    """A complete call transcript."""
    conversation_id: str = Field(description="Unique conversation identifier (e.g., 'conv_ext_001')")
    duration_seconds: int = Field(ge=0, description="Seconds from first to last turn, at least 60 when generated")
    turns: list[Turn] = Field(description="Turns in call order")

    @property
    def last_turn(self) -> Turn | None:
        return self.turns[-1] if self.turns else None

    def terminal_turns(self) -> list[Turn]:
        """Return all turns flagged as ending the call."""
        return [t for t in self.turns if t.ended_call]

    def ended_by(self) -> Role | None:
        """Return which side ended the call, or None if it is still open.

        A bot turn with intent ``conversation_end`` counts as the bot hanging
        up even when the flag is missing.
        """
        last = self.last_turn
        if last is None:
            return None
        if last.ended_call:
            return last.role
        if last.role == "bot" and last.intent == "conversation_end":
            return "bot"
        return None


class Document(BaseModel):
    """Top-level container of conversations in presentation order."""
    conversations: list[Conversation] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> "Document":
        seen: set[str] = set()
        for conversation in self.conversations:
            if conversation.conversation_id in seen:
                raise ValueError(
                    f"Duplicate conversation_id: {conversation.conversation_id}"
                )
            seen.add(conversation.conversation_id)
        return self

    def get(self, conversation_id: str) -> Conversation | None:
        """Look up a conversation by id."""
        for conversation in self.conversations:
            if conversation.conversation_id == conversation_id:
                return conversation
        return None

"""Generation configuration and environment settings.

``GenerationConfig`` describes the randomized ranges the composer draws
from. It is checked once, when a generator is built, so an impossible
window is reported as a ``ConfigurationError`` instead of surfacing as a
broken transcript mid-batch.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from callsynth.errors import ConfigurationError


# Authentication (6) + Conclusion (3)
MIN_CONVERSATION_TURNS = 9

CLOSING_BLOCK_TURNS = 3

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class BlockKind(str, Enum):
    """Body blocks the composer can choose between."""
    KNOWLEDGE_LOOKUP = "knowledge_lookup"
    BENEFIT_CHANGE = "benefit_change"
    PAYROLL_INQUIRY = "payroll_inquiry"
    STATUS_UPDATE = "status_update"


def _uniform_blocks() -> dict[BlockKind, float]:
    return {kind: 1.0 for kind in BlockKind}


class GenerationConfig(BaseModel):
    """Randomized ranges and identifiers for a batch of conversations."""
    count: int = Field(default=500, description="Number of conversations to generate")
    seed: int | None = Field(default=None, description="Master random seed")
    min_turns_range: tuple[int, int] = Field(
        default=(10, 18),
        description="Inclusive range the per-conversation minimum is drawn from"
    )
    max_turns_range: tuple[int, int] = Field(
        default=(20, 30),
        description="Inclusive range the per-conversation maximum is drawn from"
    )
    body_iterations: tuple[int, int] = Field(
        default=(2, 4),
        description="Inclusive range of body blocks per conversation"
    )
    escalation_probability: float = Field(
        default=0.25,
        description="Chance of a case reroute after each body block"
    )
    body_blocks: dict[BlockKind, float] = Field(
        default_factory=_uniform_blocks,
        description="Selection weight per enabled body block"
    )
    id_prefix: str = Field(default="conv_ext_", description="Conversation id prefix")
    id_width: int = Field(default=3, description="Zero-padding width of the id suffix")
    base_time: datetime = Field(
        default=datetime(2025, 9, 20, 8, 0, 0, tzinfo=timezone.utc),
        description="Earliest possible call start"
    )
    start_day_span: int = Field(default=14, description="Days after base_time a call may start")
    start_minute_span: int = Field(default=9 * 60, description="Minutes into the day a call may start")

    def check(self) -> "GenerationConfig":
        """Raise ConfigurationError if this configuration is unusable.

        Returns:
            The configuration itself, for chaining
        """
        min_lo, min_hi = self.min_turns_range
        max_lo, max_hi = self.max_turns_range
        iter_lo, iter_hi = self.body_iterations

        if self.count < 1:
            raise ConfigurationError(f"count must be positive, got {self.count}")
        if min_lo > min_hi:
            raise ConfigurationError(f"min_turns_range is inverted: {self.min_turns_range}")
        if max_lo > max_hi:
            raise ConfigurationError(f"max_turns_range is inverted: {self.max_turns_range}")
        if max_lo <= min_hi:
            raise ConfigurationError(
                f"max_turns_range {self.max_turns_range} must lie strictly above "
                f"min_turns_range {self.min_turns_range}"
            )
        if max_lo < MIN_CONVERSATION_TURNS:
            raise ConfigurationError(
                f"max_turns must be at least {MIN_CONVERSATION_TURNS}, "
                f"got range {self.max_turns_range}"
            )
        if iter_lo < 1 or iter_lo > iter_hi:
            raise ConfigurationError(f"body_iterations is invalid: {self.body_iterations}")
        if not 0.0 <= self.escalation_probability <= 1.0:
            raise ConfigurationError(
                f"escalation_probability must be in [0, 1], got {self.escalation_probability}"
            )
        if any(weight < 0 for weight in self.body_blocks.values()):
            raise ConfigurationError("body block weights must not be negative")
        if not any(weight > 0 for weight in self.body_blocks.values()):
            raise ConfigurationError("at least one body block must be enabled")
        if self.id_width < 1:
            raise ConfigurationError(f"id_width must be positive, got {self.id_width}")
        if self.start_day_span < 0 or self.start_minute_span < 0:
            raise ConfigurationError("start spans must not be negative")
        return self

    def format_id(self, index: int) -> str:
        """Conversation id for a 0-based batch position."""
        return f"{self.id_prefix}{index + 1:0{self.id_width}d}"


class Settings(BaseSettings):
    """Command-line defaults, overridable with CALLSYNTH_* variables."""
    output_path: Path = Field(
        Path("data") / "sample_input_ext.json",
        description="Where generated documents are written"
    )
    count: int = Field(500, description="Conversations per generated document")
    seed: int | None = Field(None, description="Master random seed")
    log_level: LogLevel = Field("INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_prefix="CALLSYNTH_",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

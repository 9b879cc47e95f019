"""Conversation composition engine for callsynth.

The engine composes interaction blocks into complete call transcripts:
authentication first, a random run of body blocks with occasional
escalations, then two repair passes that force the turn count into the
conversation's window without ever sacrificing or displacing the close.
"""

import logging
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterator, NamedTuple

from callsynth.config import CLOSING_BLOCK_TURNS, BlockKind, GenerationConfig
from callsynth.errors import TranscriptInvariantError
from callsynth.generator.blocks import CallerIdentity, ConversationBuilder
from callsynth.generator.invariants import MIN_DURATION_SECONDS, check_conversation
from callsynth.schema.transcript import Conversation, Document
from callsynth.sink import write_document


logger = logging.getLogger(__name__)


BODY_BLOCKS: dict[BlockKind, Callable[[ConversationBuilder], None]] = {
    BlockKind.KNOWLEDGE_LOOKUP: ConversationBuilder.knowledge_lookup,
    BlockKind.BENEFIT_CHANGE: ConversationBuilder.benefit_change,
    BlockKind.PAYROLL_INQUIRY: ConversationBuilder.payroll_inquiry,
    BlockKind.STATUS_UPDATE: ConversationBuilder.status_update,
}


class TurnWindow(NamedTuple):
    """Inclusive bounds on a conversation's turn count."""
    min_turns: int
    max_turns: int


class ConversationGenerator:
    """Generates conversations from a configuration with controlled randomization."""

    def __init__(self, config: GenerationConfig | None = None, seed: int | None = None):
        """Initialize the generator.

        Args:
            config: Generation ranges; defaults are used when omitted
            seed: Master seed, overriding ``config.seed``

        Raises:
            ConfigurationError: If the configuration cannot produce valid calls
        """
        self.config = (config if config is not None else GenerationConfig()).check()
        self.rng = random.Random(seed if seed is not None else self.config.seed)
        enabled = [(k, w) for k, w in self.config.body_blocks.items() if w > 0]
        self._kinds = [k for k, _ in enabled]
        self._weights = [w for _, w in enabled]

    # --- Per-conversation draws ---

    def draw_window(self, rng: random.Random) -> TurnWindow:
        return TurnWindow(
            min_turns=rng.randint(*self.config.min_turns_range),
            max_turns=rng.randint(*self.config.max_turns_range),
        )

    def draw_start(self, rng: random.Random) -> datetime:
        """Pick a call start time within the configured span."""
        return self.config.base_time + timedelta(
            days=rng.randint(0, self.config.start_day_span),
            minutes=rng.randint(0, self.config.start_minute_span),
        )

    def choose_body_block(self, rng: random.Random) -> BlockKind:
        """Sample a body block from the configured weights."""
        return rng.choices(self._kinds, weights=self._weights, k=1)[0]

    # --- Composition ---

    def compose(
        self,
        conversation_id: str,
        rng: random.Random,
        window: TurnWindow | None = None,
    ) -> Conversation:
        """Compose a single conversation.

        Args:
            conversation_id: Id to give the conversation
            rng: Random source owned by this conversation
            window: Turn-count bounds; drawn from the config when omitted

        Returns:
            The finished conversation

        Raises:
            TranscriptInvariantError: If the result breaks a structural
                invariant (a composer bug)
        """
        if window is None:
            window = self.draw_window(rng)
        identity = CallerIdentity.random(rng)
        builder = ConversationBuilder(rng=rng, identity=identity, start=self.draw_start(rng))

        builder.authentication()

        iterations = rng.randint(*self.config.body_iterations)
        for _ in range(iterations):
            kind = self.choose_body_block(rng)
            BODY_BLOCKS[kind](builder)
            if rng.random() < self.config.escalation_probability:
                builder.case_reroute()

        # Pass 1: bring the body into the window before closing
        builder.small_talk_padding(window.min_turns)
        builder.truncate(window.max_turns)

        builder.conclusion()

        # Pass 2: the close may push past the maximum again
        builder.trim_keeping_close(window.max_turns, CLOSING_BLOCK_TURNS)
        builder.pad_before_close(window.min_turns)

        builder.ensure_terminal()

        turns = builder.renumbered()
        elapsed = turns[-1].timestamp - builder.start
        conversation = Conversation(
            conversation_id=conversation_id,
            duration_seconds=max(MIN_DURATION_SECONDS, round(elapsed.total_seconds())),
            turns=turns,
        )

        violations = check_conversation(conversation, window.min_turns, window.max_turns)
        if violations:
            raise TranscriptInvariantError(conversation_id, violations)

        logger.debug(
            "Composed %s: %d turns (window %d-%d), %d body blocks",
            conversation_id, len(turns), window.min_turns, window.max_turns, iterations,
        )
        return conversation

    def iter_composed(self, count: int | None = None) -> Iterator[tuple[Conversation, TurnWindow]]:
        """Yield conversations together with the window each was built for.

        Every conversation gets its own random source seeded from the
        master generator, so results depend only on the seed and the
        batch position.
        """
        if count is None:
            count = self.config.count
        for index in range(count):
            rng = random.Random(self.rng.getrandbits(64))
            window = self.draw_window(rng)
            conversation_id = self.config.format_id(index)
            yield self.compose(conversation_id, rng, window), window

    def iter_conversations(self, count: int | None = None) -> Iterator[Conversation]:
        for conversation, _ in self.iter_composed(count):
            yield conversation

    def generate(self, count: int | None = None) -> Document:
        """Generate a document of ``count`` conversations in id order."""
        return Document(conversations=list(self.iter_conversations(count)))


def generate_dataset(
    output_path: Path,
    config: GenerationConfig | None = None,
    seed: int | None = None,
) -> int:
    """Generate a document and write it to disk.

    Args:
        output_path: Path to write the JSON document
        config: Generation ranges and conversation count
        seed: Random seed for reproducibility

    Returns:
        Number of conversations written
    """
    generator = ConversationGenerator(config, seed=seed)
    document = generator.generate()
    write_document(document, output_path)
    logger.info("Wrote %d conversations to %s", len(document.conversations), output_path)
    return len(document.conversations)

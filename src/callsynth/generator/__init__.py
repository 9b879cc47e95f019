"""Conversation generation: blocks, composition and batch driving."""

from callsynth.generator.blocks import CallerIdentity, ConversationBuilder
from callsynth.generator.engine import (
    BODY_BLOCKS,
    ConversationGenerator,
    TurnWindow,
    generate_dataset,
)
from callsynth.generator.factories import (
    make_turn,
    tool_call,
    tool_output,
    persistent_storage,
    agent_invocation,
)
from callsynth.generator.invariants import check_conversation, check_document

__all__ = [
    "CallerIdentity",
    "ConversationBuilder",
    "BODY_BLOCKS",
    "ConversationGenerator",
    "TurnWindow",
    "generate_dataset",
    "make_turn",
    "tool_call",
    "tool_output",
    "persistent_storage",
    "agent_invocation",
    "check_conversation",
    "check_document",
]

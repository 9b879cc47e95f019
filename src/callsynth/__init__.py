"""callsynth: synthetic phone-support transcripts with tool calls and memory writes."""

__version__ = "0.1.0"

from callsynth.schema.transcript import Turn, Conversation, Document
from callsynth.schema.actions import (
    Action,
    ToolCall,
    ToolOutput,
    PersistentStorage,
    AgentInvocation,
)
from callsynth.config import BlockKind, GenerationConfig
from callsynth.errors import (
    CallsynthError,
    ConfigurationError,
    InvalidDocumentError,
    TranscriptInvariantError,
)
from callsynth.generator.engine import ConversationGenerator, generate_dataset

__all__ = [
    "Turn",
    "Conversation",
    "Document",
    "Action",
    "ToolCall",
    "ToolOutput",
    "PersistentStorage",
    "AgentInvocation",
    "BlockKind",
    "GenerationConfig",
    "CallsynthError",
    "ConfigurationError",
    "InvalidDocumentError",
    "TranscriptInvariantError",
    "ConversationGenerator",
    "generate_dataset",
]

"""Schema models for callsynth transcripts."""

from callsynth.schema.actions import (
    Action,
    ToolCall,
    ToolOutput,
    PersistentStorage,
    AgentInvocation,
    MEMORY_TOOL_NAME,
)
from callsynth.schema.transcript import (
    Turn,
    Conversation,
    Document,
    Role,
    Sentiment,
    SENTIMENTS,
)

__all__ = [
    "Action",
    "ToolCall",
    "ToolOutput",
    "PersistentStorage",
    "AgentInvocation",
    "MEMORY_TOOL_NAME",
    "Turn",
    "Conversation",
    "Document",
    "Role",
    "Sentiment",
    "SENTIMENTS",
]

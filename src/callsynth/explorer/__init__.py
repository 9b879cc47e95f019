"""Loading and querying generated conversation documents."""

from callsynth.explorer.query import (
    ConversationQuery,
    SentimentShare,
    available_intents,
    available_tools,
    conversation_sentiment,
    export_selection,
    filter_conversations,
    format_duration,
    sentiment_breakdown,
    total_duration,
)
from callsynth.explorer.store import DocumentStore

__all__ = [
    "ConversationQuery",
    "SentimentShare",
    "available_intents",
    "available_tools",
    "conversation_sentiment",
    "export_selection",
    "filter_conversations",
    "format_duration",
    "sentiment_breakdown",
    "total_duration",
    "DocumentStore",
]

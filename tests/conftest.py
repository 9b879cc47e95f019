"""Shared fixtures for callsynth tests."""

import json
import random
from datetime import datetime, timezone

import pytest

from callsynth.generator.blocks import CallerIdentity, ConversationBuilder


START = datetime(2025, 9, 22, 10, 30, 0, tzinfo=timezone.utc)


SAMPLE_DOCUMENT = {
    "conversations": [
        {
            "conversation_id": "conv_001",
            "duration_seconds": 45,
            "turns": [
                {"role": "caller", "turn_id": 1, "text": "I need to set a new address",
                 "timestamp": "2025-09-25T09:01:00Z", "intent": "address_change",
                 "sentiment": "neutral", "ended_call": False},
                {"role": "bot", "turn_id": 2,
                 "text": "Let me help with that. I have updated your address.",
                 "timestamp": "2025-09-25T09:01:05Z", "intent": "address_change",
                 "sentiment": "neutral",
                 "agentic_action": [
                     {"type": "tool_call", "tool_name": "update_database",
                      "request": {"field": "address", "new_value": "TBD"}},
                     {"type": "tool_output", "tool_name": "update_database",
                      "response": {"status": "success", "updated_field": "address"}},
                 ]},
                {"role": "caller", "turn_id": 3, "text": "",
                 "timestamp": "2025-09-25T09:01:25Z", "intent": "None",
                 "sentiment": "neutral", "ended_call": True},
            ],
        },
        {
            "conversation_id": "conv_002",
            "duration_seconds": 70,
            "turns": [
                {"role": "caller", "turn_id": 1,
                 "text": "Your service is terrible, I want to speak to a human!",
                 "timestamp": "2025-09-25T10:05:00Z", "intent": "complaint",
                 "sentiment": "negative", "ended_call": False},
                {"role": "bot", "turn_id": 2,
                 "text": "I am transferring you to an agent. Please hold on.",
                 "timestamp": "2025-09-25T10:05:10Z", "intent": "routing",
                 "sentiment": "neutral",
                 "agentic_action": [
                     {"type": "tool_call", "tool_name": "forward_to_human",
                      "request": {"routing_target": "customer_service_team"}},
                     {"type": "agent_invocation", "description": ""},
                 ]},
                {"role": "caller", "turn_id": 3, "text": "",
                 "timestamp": "2025-09-25T10:05:20Z", "intent": "None",
                 "sentiment": "neutral", "ended_call": True},
            ],
        },
        {
            "conversation_id": "conv_003",
            "duration_seconds": 65,
            "turns": [
                {"role": "caller", "turn_id": 1, "text": "What are your opening hours tomorrow?",
                 "timestamp": "2025-09-25T11:15:00Z", "intent": "faq_query",
                 "sentiment": "neutral", "ended_call": False},
                {"role": "bot", "turn_id": 2,
                 "text": "Let me check our knowledge base. We are open from 9 AM to 5 PM tomorrow.",
                 "timestamp": "2025-09-25T11:15:05Z", "intent": "faq_query",
                 "sentiment": "neutral",
                 "agentic_action": [
                     {"type": "tool_call", "tool_name": "query_knowledgebase",
                      "request": {"query": "opening hours tomorrow"}},
                     {"type": "tool_output", "tool_name": "query_knowledgebase",
                      "response": {"hours": "09:00-17:00"}},
                 ]},
                {"role": "caller", "turn_id": 3, "text": "Perfect, thank you!",
                 "timestamp": "2025-09-25T11:15:15Z", "intent": "gratitude",
                 "sentiment": "positive", "ended_call": True},
            ],
        },
        {
            "conversation_id": "conv_004",
            "duration_seconds": 120,
            "turns": [
                {"role": "caller", "turn_id": 1, "text": "Hello?",
                 "timestamp": "2025-09-26T08:00:00Z", "intent": "greeting"},
                {"role": "bot", "turn_id": 2, "text": "Goodbye for now.",
                 "timestamp": "2025-09-26T08:02:00Z", "intent": "conversation_end",
                 "agentic_action": []},
            ],
        },
    ]
}


@pytest.fixture
def sample_text() -> str:
    return json.dumps(SAMPLE_DOCUMENT)


@pytest.fixture
def identity() -> CallerIdentity:
    return CallerIdentity(name="Riley", employee_id="EMP12345", pin_fragment="42")


@pytest.fixture
def builder(identity) -> ConversationBuilder:
    return ConversationBuilder(rng=random.Random(11), identity=identity, start=START)


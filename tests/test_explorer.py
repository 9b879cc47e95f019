"""Tests for the document store and conversation queries."""

import json

import pytest
from pydantic import ValidationError

from callsynth.errors import InvalidDocumentError
from callsynth.explorer import (
    ConversationQuery,
    DocumentStore,
    available_intents,
    available_tools,
    conversation_sentiment,
    export_selection,
    filter_conversations,
    format_duration,
    sentiment_breakdown,
    total_duration,
)
from callsynth.sink import load_document


@pytest.fixture
def store(sample_text):
    store = DocumentStore()
    store.load_text(sample_text, source="sample")
    return store


def _ids(store, **criteria):
    query = ConversationQuery(**criteria)
    return [c.conversation_id for c in filter_conversations(store.conversations, query)]


class TestDocumentStore:
    def test_starts_empty(self):
        assert DocumentStore().conversations == []

    def test_load(self, store):
        assert len(store.conversations) == 4
        assert store.source == "sample"

    def test_invalid_document_keeps_previous(self, store):
        before = store.document
        with pytest.raises(InvalidDocumentError):
            store.load_text("{broken")
        with pytest.raises(InvalidDocumentError):
            store.load_text('{"conversations": "nope"}')
        assert store.document is before
        assert store.source == "sample"

    def test_null_optional_fields_are_tolerated(self, sample_text):
        data = json.loads(sample_text)
        turn = data["conversations"][0]["turns"][0]
        turn.update(sentiment=None, text=None, intent=None, ended_call=None)
        store = DocumentStore()
        store.load_text(json.dumps(data), source="nulls")
        loaded = store.conversations[0].turns[0]
        assert (loaded.sentiment, loaded.text, loaded.intent, loaded.ended_call) == (
            "neutral", "", "general", False
        )

    def test_load_path(self, tmp_path, sample_text):
        path = tmp_path / "doc.json"
        path.write_text(sample_text)
        store = DocumentStore()
        store.load_path(path)
        assert store.source == str(path)


class TestQuery:
    def test_default_matches_everything(self, store):
        assert _ids(store) == ["conv_001", "conv_002", "conv_003", "conv_004"]

    def test_pattern_is_case_insensitive(self, store):
        assert _ids(store, pattern="HUMAN") == ["conv_002"]
        assert _ids(store, pattern="goodbye|terrible") == ["conv_002", "conv_004"]

    def test_invalid_pattern_matches_nothing(self, store):
        query = ConversationQuery(pattern="(unclosed")
        assert query.pattern_error
        assert filter_conversations(store.conversations, query) == []

    def test_valid_pattern_has_no_error(self):
        assert not ConversationQuery(pattern=r"\brefund(s)?\b").pattern_error
        assert not ConversationQuery().pattern_error

    def test_query_is_immutable(self, store):
        query = ConversationQuery(pattern="HUMAN")
        assert query.compiled_pattern is not None
        with pytest.raises(ValidationError):
            query.pattern = "goodbye"
        assert [c.conversation_id for c in filter_conversations(store.conversations, query)] == [
            "conv_002"
        ]

    @pytest.mark.parametrize("criteria", [
        {"min_turns": -1},
        {"max_turns": 201},
        {"min_seconds": -5},
        {"max_seconds": 3601},
    ])
    def test_ranges_are_bounded(self, criteria):
        with pytest.raises(ValidationError):
            ConversationQuery(**criteria)

    def test_scope(self, store):
        assert _ids(store, pattern="terrible", scope="bot") == []
        assert _ids(store, pattern="terrible", scope="caller") == ["conv_002"]

    def test_position(self, store):
        assert _ids(store, pattern="thank", position="last") == ["conv_003"]
        assert _ids(store, pattern="opening", position="last") == []
        assert _ids(store, pattern="opening", position="first") == ["conv_003"]

    def test_sentiments(self, store):
        assert _ids(store, sentiments={"negative"}) == ["conv_002"]
        assert _ids(store, sentiments={"positive"}) == ["conv_003"]
        # conv_004 has no sentiment fields at all
        assert "conv_004" in _ids(store, sentiments={"neutral"})

    def test_intent_and_tool(self, store):
        assert _ids(store, intent="faq_query") == ["conv_003"]
        assert _ids(store, tool="forward_to_human") == ["conv_002"]
        assert _ids(store, tool="update_database") == ["conv_001"]

    def test_ended_by(self, store):
        assert _ids(store, ended_by="bot") == ["conv_004"]
        assert _ids(store, ended_by="caller") == ["conv_001", "conv_002", "conv_003"]

    def test_ranges(self, store):
        assert _ids(store, min_seconds=60) == ["conv_002", "conv_003", "conv_004"]
        assert _ids(store, max_seconds=60) == ["conv_001"]
        assert _ids(store, max_turns=2) == ["conv_004"]
        assert _ids(store, min_turns=3, max_turns=3) == ["conv_001", "conv_002", "conv_003"]


class TestSummaries:
    def test_pickers(self, store):
        assert available_tools(store.conversations) == [
            "any", "forward_to_human", "query_knowledgebase", "update_database",
        ]
        intents = available_intents(store.conversations)
        assert intents[0] == "any"
        assert intents[1:] == sorted(intents[1:])
        assert "conversation_end" in intents

    def test_sentiment_breakdown(self, store):
        shares = {s.name: s for s in sentiment_breakdown(store.conversations)}
        assert shares["positive"].count == 1
        assert shares["negative"].count == 1
        assert shares["neutral"].count == 9
        assert shares["positive"].percent == 9

    def test_conversation_sentiment(self, store):
        shares = {s.name: s.percent for s in conversation_sentiment(store.conversations[2])}
        assert shares == {"positive": 33, "neutral": 67, "negative": 0}

    def test_empty_breakdown(self):
        assert all(s.percent == 0 for s in sentiment_breakdown([]))

    def test_total_duration(self, store):
        assert total_duration(store.conversations) == 45 + 70 + 65 + 120

    @pytest.mark.parametrize("seconds,expected", [
        (45, "45s"),
        (60, "1m 0s"),
        (3725, "1h 2m 5s"),
        (3605, "1h 5s"),
    ])
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_export_selection(self, tmp_path, store):
        selection = filter_conversations(store.conversations, ConversationQuery(ended_by="caller"))
        path = tmp_path / "filtered_conversations.json"
        assert export_selection(selection, path) == 3
        assert [c.conversation_id for c in load_document(path).conversations] == [
            "conv_001", "conv_002", "conv_003",
        ]

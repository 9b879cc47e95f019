"""Tests for writing and loading documents."""

import json

import pytest

from callsynth.config import GenerationConfig
from callsynth.errors import InvalidDocumentError
from callsynth.generator.engine import ConversationGenerator, generate_dataset
from callsynth.sink import dump_document, load_document, parse_document, write_document


@pytest.fixture(scope="module")
def document():
    return ConversationGenerator(GenerationConfig(count=40, seed=17)).generate()


def _structure(document):
    return [
        (c.conversation_id, len(c.turns), [t.ended_call for t in c.turns])
        for c in document.conversations
    ]


def test_structural_round_trip(document):
    parsed = parse_document(dump_document(document))
    assert _structure(parsed) == _structure(document)


def test_round_trip_preserves_turns(document):
    parsed = parse_document(dump_document(document, indent=None))
    assert parsed == document


def test_json_shape(document):
    data = json.loads(dump_document(document))
    assert list(data) == ["conversations"]
    for conversation in data["conversations"]:
        assert set(conversation) == {"conversation_id", "duration_seconds", "turns"}
        for turn in conversation["turns"]:
            assert turn["timestamp"].endswith("Z")
            if "agentic_action" in turn:
                assert isinstance(turn["agentic_action"], list)
                assert turn["agentic_action"]


def test_actionless_turns_have_no_action_key(document):
    data = json.loads(dump_document(document))
    first_turn = data["conversations"][0]["turns"][0]
    assert "agentic_action" not in first_turn
    assert first_turn["ended_call"] is False


def test_write_and_load(tmp_path, document):
    path = write_document(document, tmp_path / "out" / "calls.json")
    assert path.exists()
    assert _structure(load_document(path)) == _structure(document)


def test_generate_dataset(tmp_path):
    path = tmp_path / "sample.json"
    total = generate_dataset(path, GenerationConfig(count=12), seed=4)
    assert total == 12
    assert len(load_document(path).conversations) == 12


@pytest.mark.parametrize("text", [
    "not json",
    "[]",
    '{"items": []}',
    '{"conversations": [{"conversation_id": "a"}]}',
    '{"conversations": [{"conversation_id": "a", "duration_seconds": 60, "turns": []},'
    ' {"conversation_id": "a", "duration_seconds": 60, "turns": []}]}',
])
def test_invalid_documents(text):
    with pytest.raises(InvalidDocumentError):
        parse_document(text)


def test_missing_file(tmp_path):
    with pytest.raises(InvalidDocumentError):
        load_document(tmp_path / "nope.json")


def test_loads_viewer_sample(sample_text):
    document = parse_document(sample_text)
    assert [c.conversation_id for c in document.conversations] == [
        "conv_001", "conv_002", "conv_003", "conv_004",
    ]

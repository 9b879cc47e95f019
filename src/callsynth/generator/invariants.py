"""Structural checks for generated conversations.

Each check returns human-readable violations rather than raising, so the
same code serves the composer (which raises on any violation), the
``validate`` command and the tests.
"""

from collections import Counter

from callsynth.config import MIN_CONVERSATION_TURNS
from callsynth.schema.transcript import Conversation, Document


GREETING_INTENTS = frozenset({"greeting"})

MIN_DURATION_SECONDS = 60


def expected_duration(conversation: Conversation) -> int:
    """Seconds between first and last turn, floored at one minute."""
    if not conversation.turns:
        return MIN_DURATION_SECONDS
    elapsed = conversation.turns[-1].timestamp - conversation.turns[0].timestamp
    return max(MIN_DURATION_SECONDS, round(elapsed.total_seconds()))


def check_conversation(
    conversation: Conversation,
    min_turns: int | None = None,
    max_turns: int | None = None,
) -> list[str]:
    """Check one conversation against the transcript invariants.

    Args:
        conversation: The conversation to check
        min_turns: Lower bound of the conversation's window, if known
        max_turns: Upper bound of the conversation's window, if known

    Returns:
        List of violations; empty if the conversation is well formed
    """
    turns = conversation.turns
    if not turns:
        return ["conversation has no turns"]

    violations = []
    n = len(turns)

    if n < MIN_CONVERSATION_TURNS:
        violations.append(f"{n} turns is below the minimum of {MIN_CONVERSATION_TURNS}")
    if min_turns is not None and n < min_turns:
        violations.append(f"{n} turns is below the window minimum {min_turns}")
    if max_turns is not None and n > max_turns:
        violations.append(f"{n} turns is above the window maximum {max_turns}")

    ids = [t.turn_id for t in turns]
    if ids != list(range(1, n + 1)):
        violations.append(f"turn ids are not 1..{n}: {ids}")

    for prev, turn in zip(turns, turns[1:]):
        if turn.timestamp <= prev.timestamp:
            violations.append(
                f"turn {turn.turn_id} timestamp {turn.timestamp.isoformat()} "
                f"does not follow {prev.timestamp.isoformat()}"
            )
            break

    terminal = [i for i, t in enumerate(turns) if t.ended_call]
    if len(terminal) != 1:
        violations.append(f"expected exactly one ended_call turn, found {len(terminal)}")
    elif terminal[0] != n - 1:
        violations.append(f"ended_call turn is at position {terminal[0] + 1}, not last")

    first = turns[0]
    if first.role != "caller" or first.intent not in GREETING_INTENTS:
        violations.append(
            f"first turn is {first.role}/{first.intent}, expected a caller greeting"
        )

    expected = expected_duration(conversation)
    if conversation.duration_seconds != expected:
        violations.append(
            f"duration_seconds is {conversation.duration_seconds}, expected {expected}"
        )

    return violations


def check_document(document: Document) -> dict[str, list[str]]:
    """Check every conversation in a document.

    Documents built without validation can repeat an id; each repeat is
    reported under that id.

    Returns:
        Mapping of conversation id to its violations, only for
        conversations that have any
    """
    report: dict[str, list[str]] = {}
    counts = Counter(c.conversation_id for c in document.conversations)
    for conversation in document.conversations:
        violations = check_conversation(conversation)
        if violations:
            report.setdefault(conversation.conversation_id, []).extend(violations)
    for conversation_id, n in counts.items():
        if n > 1:
            report.setdefault(conversation_id, []).append(
                f"conversation id appears {n} times"
            )
    return report

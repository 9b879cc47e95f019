"""Conversation build state and the interaction blocks appended to it.

``ConversationBuilder`` owns everything one in-flight conversation needs:
the turn buffer, the clock cursor, the caller identity and the knowledge
topics already discussed. Blocks only append. The repair operations at
the bottom of the class are the only code allowed to drop, insert or
re-stamp turns, and they never move the terminal turn from last place.

The first turn of a conversation is stamped at the start time. Every
later turn advances the clock by a random whole number of seconds, so
timestamps strictly increase.
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from callsynth.generator import catalog
from callsynth.generator.factories import (
    agent_invocation,
    make_turn,
    persistent_storage,
    tool_call,
    tool_output,
)
from callsynth.schema.actions import Action
from callsynth.schema.transcript import Role, Sentiment, Turn


logger = logging.getLogger(__name__)

Delay = tuple[int, int]


@dataclass
class CallerIdentity:
    """Who is calling; threaded through blocks that reference the caller."""
    name: str
    employee_id: str
    pin_fragment: str

    @classmethod
    def random(cls, rng: random.Random) -> "CallerIdentity":
        return cls(
            name=rng.choice(catalog.CALLERS),
            employee_id=f"EMP{rng.randint(10000, 99999)}",
            pin_fragment=f"{rng.randint(10, 99)}",
        )


@dataclass
class ConversationBuilder:
    """Mutable build state for a single conversation."""
    rng: random.Random
    identity: CallerIdentity
    start: datetime
    turns: list[Turn] = field(default_factory=list)
    used_topics: set[str] = field(default_factory=set)
    clock: datetime | None = None

    def __post_init__(self):
        if self.clock is None:
            self.clock = self.start

    def __len__(self) -> int:
        return len(self.turns)

    # --- Clock and turn buffer ---

    def _tick(self, delay: Delay) -> datetime:
        """Advance the clock by a random delay and return the new time."""
        self.clock += timedelta(seconds=self.rng.randint(*delay))
        return self.clock

    def _next_timestamp(self, delay: Delay) -> datetime:
        if not self.turns:
            return self.clock
        return self._tick(delay)

    def _add(
        self,
        role: Role,
        text: str,
        intent: str,
        sentiment: Sentiment,
        delay: Delay,
        actions: list[Action] | None = None,
        ended_call: bool = False,
    ) -> Turn:
        turn = make_turn(
            idx=len(self.turns) + 1,
            role=role,
            text=text,
            timestamp=self._next_timestamp(delay),
            intent=intent,
            sentiment=sentiment,
            agentic_action=actions,
            ended_call=ended_call,
        )
        self.turns.append(turn)
        return turn

    # --- Blocks ---

    def authentication(self) -> None:
        """Greeting, employee id and PIN check, then a verified identity."""
        delay = (6, 18)
        employee_id = self.identity.employee_id
        pin = self.identity.pin_fragment

        self._add(
            "caller",
            f"Hi, this is {self.identity.name}. I need help verifying my account details.",
            "greeting", "neutral", delay,
        )
        self._add(
            "bot",
            "Thanks for calling. To get started, may I have your employee ID?",
            "authentication", "neutral", delay,
        )
        self._add("caller", f"Sure, it's {employee_id}.", "provide_employee_id", "neutral", delay)
        self._add(
            "bot",
            "Thank you. For security, can you confirm the first two digits of your PIN?",
            "authentication", "neutral", delay,
        )
        self._add("caller", f"They are {pin}.", "provide_pin_digits", "neutral", delay)

        tool = "verify_employee_identity"
        self._add(
            "bot",
            "Great, I've confirmed your identity. How can I assist you today?",
            "authentication_success", "positive", delay,
            actions=[
                tool_call(tool, {"employee_id": employee_id, "pin_prefix": pin}),
                tool_output(tool, {"status": "verified", "employee": employee_id}),
                persistent_storage({"key": "last_verified_user", "value": employee_id}),
            ],
        )

    def pick_topic(self) -> str:
        """Choose a knowledge topic not yet discussed in this call.

        Once every topic has been used the full list is eligible again.
        """
        unused = [t for t in catalog.KNOWLEDGE_TOPICS if t not in self.used_topics]
        if not unused:
            logger.debug("All knowledge topics used, falling back to the full list")
            unused = catalog.KNOWLEDGE_TOPICS
        return self.rng.choice(unused)

    def knowledge_lookup(self, topic: str | None = None) -> None:
        """Caller question, knowledge base lookup, answer."""
        delay = (7, 16)
        if topic is None:
            topic = self.pick_topic()
        self.used_topics.add(topic)

        self._add(
            "caller",
            self.rng.choice(catalog.KNOWLEDGE_QUESTIONS).format(topic=topic),
            "knowledge_request", "neutral", delay,
        )
        tool = "query_knowledgebase"
        self._add(
            "bot",
            self.rng.choice(catalog.KNOWLEDGE_LOOKUPS).format(topic=topic),
            "knowledge_lookup", "neutral", delay,
            actions=[
                tool_call(tool, {"query": topic, "locale": "en-US"}),
                tool_output(tool, {
                    "article_id": f"kb_{self.rng.randint(100, 999)}",
                    "summary": f"Summary for {topic}",
                    "confidence": round(self.rng.random() * 0.3 + 0.6, 2),
                }),
            ],
        )
        self._add(
            "bot",
            f"The knowledge base recommends the following: {topic} guidance is now on your email.",
            "knowledge_response", "positive", delay,
        )

    def case_reroute(self) -> None:
        """Escalate to a human team and record the ticket."""
        delay = (5, 15)
        target = self.rng.choice(catalog.DEPARTMENTS)
        ticket_id = f"case_{self.rng.randint(10000, 99999)}"

        self._add(
            "bot",
            "This might require a specialist. I'll escalate it for you now.",
            "escalation", "neutral", delay,
            actions=[
                tool_call("forward_to_human", {"routing_target": target, "ticket_id": ticket_id}),
                agent_invocation(f"Escalated to {target}"),
                persistent_storage({"key": "last_ticket_id", "value": ticket_id}),
            ],
        )
        self._add(
            "caller",
            "Okay, I'll wait for the specialist.",
            "acknowledge_escalation", "neutral", delay,
        )

    def status_update(self) -> None:
        delay = (6, 12)
        order_id = f"order_{self.rng.randint(2000, 7000)}"
        tool = "query_order_system"

        self._add(
            "caller",
            f"Can you tell me the status of order {order_id}?",
            "order_status_request", "neutral", delay,
        )
        self._add(
            "bot",
            "I'll look that up for you.",
            "order_status_lookup", "neutral", delay,
            actions=[
                tool_call(tool, {"order_id": order_id}),
                tool_output(tool, {
                    "order_id": order_id,
                    "status": self.rng.choice(catalog.ORDER_STATUSES),
                    "eta_days": self.rng.randint(1, 7),
                }),
            ],
        )
        self._add(
            "bot",
            f"The order {order_id} is currently being processed. "
            "I'll send you updates as it progresses.",
            "order_status_response", "positive", delay,
        )

    def benefit_change(self) -> None:
        delay = (6, 15)
        benefit = self.rng.choice(catalog.BENEFIT_TYPES)
        plan = self.rng.choice(catalog.BENEFIT_PLANS)
        tool = "update_benefits_portal"

        self._add(
            "caller",
            f"I need to update my {benefit} plan enrollment.",
            "benefits_change_request", "neutral", delay,
        )
        self._add(
            "bot",
            "Absolutely, I'll process that now.",
            "benefits_change_process", "neutral", delay,
            actions=[
                tool_call(tool, {"benefit_type": benefit, "plan": plan}),
                tool_output(tool, {"benefit_type": benefit, "plan": plan, "status": "submitted"}),
                persistent_storage({"key": "last_benefit_change", "value": f"{benefit}_{plan}"}),
            ],
        )
        self._add(
            "bot",
            f"Your {benefit} plan has been updated to {plan}.",
            "benefits_change_confirm", "positive", delay,
        )

    def payroll_inquiry(self) -> None:
        """Missing overtime: look up the payroll record, then file a correction."""
        delay = (5, 12)
        month = self.rng.choice(catalog.PAYROLL_MONTHS)
        payroll_id = f"pay_{self.rng.randint(1000, 9999)}"

        self._add(
            "caller",
            f"I think my {month} paycheck is missing overtime hours.",
            "payroll_issue", "negative", delay,
        )
        lookup = "payroll_system_lookup"
        self._add(
            "bot",
            "Let me review the payroll record.",
            "payroll_lookup", "neutral", delay,
            actions=[
                tool_call(lookup, {"payroll_id": payroll_id, "month": month}),
                tool_output(lookup, {
                    "payroll_id": payroll_id,
                    "overtime_hours": self.rng.randint(0, 10),
                    "status": "reviewed",
                }),
            ],
        )
        adjustment = "submit_payroll_adjustment"
        self._add(
            "bot",
            "I see the overtime was not captured. I'll submit a correction request now.",
            "payroll_resolution", "neutral", delay,
            actions=[
                tool_call(adjustment, {"payroll_id": payroll_id, "adjustment": "add_overtime"}),
                tool_output(adjustment, {
                    "payroll_id": payroll_id,
                    "status": "pending_manager_review",
                    "expected_completion_days": self.rng.randint(1, 3),
                }),
            ],
        )

    def small_talk_padding(self, min_turns: int) -> None:
        """Append bot check-in / caller acknowledgment pairs until min_turns."""
        while len(self.turns) < min_turns:
            self._add(
                "bot",
                self.rng.choice(catalog.SMALL_TALK_CHECK_INS),
                "status_update", "neutral", (5, 10),
            )
            self._add(
                "caller",
                self.rng.choice(catalog.SMALL_TALK_REPLIES),
                "acknowledgement", "neutral", (5, 9),
            )

    def conclusion(self) -> None:
        """Thanks, farewell with a case-closed memory write, caller hangs up."""
        delay = (5, 10)
        self._add(
            "caller",
            "That covers everything, thank you!",
            "gratitude", "positive", delay,
        )
        self._add(
            "bot",
            "Happy to help. Have a great day!",
            "farewell", "positive", delay,
            actions=[persistent_storage({"key": "final_summary", "value": "case_closed"})],
        )
        self._add("caller", "Goodbye.", "farewell", "positive", delay, ended_call=True)

    # --- Repair ---

    def truncate(self, max_turns: int) -> None:
        """Keep the earliest max_turns turns and rewind the clock to match."""
        if len(self.turns) <= max_turns:
            return
        logger.debug("Truncating %d turns to %d", len(self.turns), max_turns)
        del self.turns[max_turns:]
        if self.turns:
            self.clock = self.turns[-1].timestamp

    def trim_keeping_close(self, max_turns: int, closing_turns: int) -> None:
        """Drop interior turns so the closing block survives intact.

        Keeps the earliest ``max_turns - closing_turns`` turns before the
        close, followed by the last ``closing_turns`` turns.
        """
        if len(self.turns) <= max_turns:
            return
        logger.debug(
            "Trimming %d turns to %d, keeping the last %d",
            len(self.turns), max_turns, closing_turns,
        )
        body = self.turns[:-closing_turns]
        ending = self.turns[-closing_turns:]
        self.turns = body[:max(max_turns - closing_turns, 0)] + ending

    def pad_before_close(self, min_turns: int) -> None:
        """Insert check-in pairs before the final turn until min_turns.

        The final turn stays last and is re-stamped after the inserted
        turns so time keeps moving forward.
        """
        if len(self.turns) >= min_turns or not self.turns:
            return
        close = self.turns.pop()
        self.clock = self.turns[-1].timestamp if self.turns else self.start
        while len(self.turns) + 1 < min_turns:
            self._add(
                "bot",
                "Just confirming if you need anything else today.",
                "check_in", "neutral", (6, 12),
            )
            self._add(
                "caller",
                "No, that's all. Thanks.",
                "acknowledgement", "positive", (6, 10),
            )
        timestamp = self._tick((5, 10)) if self.turns else self.clock
        self.turns.append(close.model_copy(update={"timestamp": timestamp}))

    def ensure_terminal(self) -> None:
        """Append a caller farewell if the call has no proper ending."""
        if self.turns and self.turns[-1].ended_call:
            return
        logger.debug("Conversation lacks a terminal turn, appending a farewell")
        self.clock = self.turns[-1].timestamp if self.turns else self.start
        timestamp = self._tick((5, 10))
        self.turns.append(make_turn(
            idx=len(self.turns) + 1,
            role="caller",
            text="Thanks again, bye!",
            timestamp=timestamp,
            intent="farewell",
            sentiment="positive",
            ended_call=True,
        ))

    def renumbered(self) -> list[Turn]:
        """The turns with ids rewritten to their 1-based positions."""
        return [
            turn if turn.turn_id == i else turn.model_copy(update={"turn_id": i})
            for i, turn in enumerate(self.turns, start=1)
        ]

"""Exception types raised by callsynth."""


class CallsynthError(Exception):
    """Base class for all callsynth errors."""


class ConfigurationError(CallsynthError, ValueError):
    """The generation configuration cannot produce valid transcripts."""


class InvalidDocumentError(CallsynthError):
    """A conversation document could not be parsed or validated."""


class TranscriptInvariantError(CallsynthError):
    """A composed conversation broke a structural invariant.

    This indicates a bug in the composer, not bad input.
    """

    def __init__(self, conversation_id: str, violations: list[str]):
        self.conversation_id = conversation_id
        self.violations = violations
        super().__init__(
            f"{conversation_id}: " + "; ".join(violations)
        )

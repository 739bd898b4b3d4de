"""Error taxonomy for editor config evaluation.

Every failure surfaced to a host is an ``EditorConfigError``. The ``stage``
names the step that failed so callers can report it without parsing messages.
"""


class EditorConfigError(Exception):
    """Editor config evaluation failed."""

    def __init__(self, message: str, stage: str | None = None, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.original = original


class ThreadSpawnError(EditorConfigError):
    """The isolated worker thread could not be created."""


class ScriptEvaluationError(EditorConfigError):
    """The script failed to parse, or threw while loading or inside a contract call."""


class SerializationError(EditorConfigError):
    """JSON marshaling between host and script failed in either direction."""


class ThreadPanicError(EditorConfigError):
    """The worker died with an unexpected exception instead of returning a result."""


class ScriptTimeoutError(EditorConfigError):
    """The worker did not finish within the configured join timeout."""

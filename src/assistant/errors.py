"""
Error taxonomy for turn handling

Failures are contained at the task level wherever possible; only a failed
synthesis is visible to the user, and then only as the fallback apology.
"""


class AssistantError(Exception):
    """Base class for Baklava Bot errors"""


class ClassificationParseFailure(AssistantError):
    """The classifier output was not a JSON object with a ``tasks`` list"""


class TaskValidationError(AssistantError):
    """A task parameter could not be coerced to its expected type"""


class UnresolvedReference(AssistantError):
    """No event in memory matches the id, title or index of a task"""


class CollaboratorFailure(AssistantError):
    """A calendar, search, fetch or model call failed"""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service


class TaskTimeout(CollaboratorFailure):
    """An external call did not finish within the task timeout"""

    def __init__(self, service: str, timeout: float):
        super().__init__(service, f"timed out after {timeout:g}s")
        self.timeout = timeout


class SynthesisFailure(AssistantError):
    """The final reply could not be generated"""

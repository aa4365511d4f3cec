"""Domain errors raised by the roadmap, task and coaching services.

Routes translate these into HTTP responses; ``AdvisoryUnavailable`` never
leaves the service layer because every advisory caller has a fallback.
"""


class RampLOError(Exception):
    """Base class for domain errors."""


class NotFound(RampLOError):
    """A referenced id does not exist (or is not visible to the caller)."""

    def __init__(self, kind: str, ref):
        self.kind = kind
        self.ref = ref
        super().__init__(f"{kind} not found: {ref}")


class TaskNotFound(NotFound):
    def __init__(self, task_id):
        super().__init__("Task", task_id)


class SprintNotFound(NotFound):
    def __init__(self, sprint_id):
        super().__init__("Roadmap", sprint_id)


class TemplateNotFound(NotFound):
    def __init__(self, template_id):
        super().__init__("Template", template_id)


class ProfileNotFound(NotFound):
    def __init__(self, user_id):
        super().__init__("Profile", user_id)


class AlreadyCompleted(RampLOError):
    """Raised when a task that is already completed is completed again."""

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already completed")


class AlreadyOnboarded(RampLOError):
    """Raised when onboarding is submitted for a user who already has a profile."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"User {user_id} has already completed onboarding")


class AdvisoryUnavailable(RampLOError):
    """The advisory call failed, timed out or returned an unusable response."""

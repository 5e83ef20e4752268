from app.models import TaskPayload, TaskStatus


class ValidationFailure(Exception):
    """A payload rejected before any storage call, tied to one field."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field} {reason}")
        self.field = field
        self.reason = reason


def validate_task(payload: TaskPayload) -> None:
    """Check a create/update payload, raising on the first failing field."""
    if not payload.title:
        raise ValidationFailure("title", "is required")
    if not payload.description:
        raise ValidationFailure("description", "is required")
    # An empty status is defaulted later; anything else must be a member.
    if payload.status and not TaskStatus.is_valid(payload.status):
        allowed = ", ".join(status.value for status in TaskStatus)
        raise ValidationFailure("status", f"must be one of {allowed}, got {payload.status!r}")

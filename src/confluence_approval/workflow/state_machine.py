"""Approval pipeline transitions: Draft → JSC review → BU review → Published."""

from dataclasses import dataclass

from confluence_approval.workflow.states import Action, Status


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an action to a status."""

    allowed: bool
    next_status: Status | None = None


NOT_ALLOWED = Transition(allowed=False)

# (current status, action) -> next status. Pairs absent from the table are not allowed.
TRANSITIONS: dict[tuple[Status, Action], Status] = {
    (Status.DRAFT, Action.APPROVE): Status.PENDING_INTERNAL_REVIEW,
    (Status.PENDING_INTERNAL_REVIEW, Action.APPROVE): Status.PENDING_BUSINESS_REVIEW,
    (Status.PENDING_INTERNAL_REVIEW, Action.REJECT): Status.DRAFT,
    (Status.PENDING_BUSINESS_REVIEW, Action.APPROVE): Status.PUBLISHED,
    (Status.PENDING_BUSINESS_REVIEW, Action.REJECT): Status.PENDING_INTERNAL_REVIEW,
    (Status.PUBLISHED, Action.REJECT): Status.PENDING_BUSINESS_REVIEW,
}


def transition(current: Status | None, action: Action) -> Transition:
    """Compute where ``action`` moves a page currently in ``current``."""
    if current is None:
        return NOT_ALLOWED
    if action is Action.RE_REQUEST_REVIEW:
        return Transition(allowed=True, next_status=Status.PENDING_INTERNAL_REVIEW)
    next_status = TRANSITIONS.get((current, action))
    if next_status is None:
        return NOT_ALLOWED
    return Transition(allowed=True, next_status=next_status)

from enum import Enum


class Status(str, Enum):
    """Approval stage of an SOP page, valued by its Confluence state name."""

    DRAFT = "Draft"
    PENDING_INTERNAL_REVIEW = "Pending JSC Review"
    PENDING_BUSINESS_REVIEW = "Pending BU Review"
    PUBLISHED = "Published"

    @classmethod
    def parse(cls, name: str | None) -> "Status | None":
        """Match a Confluence state name case-insensitively. Unknown names give None."""
        if not name:
            return None
        wanted = name.strip().lower()
        for status in cls:
            if status.value.lower() == wanted:
                return status
        return None


class Action(str, Enum):
    """Button pressed on the page."""

    APPROVE = "approve"
    REJECT = "reject"
    RE_REQUEST_REVIEW = "re-review"

    @classmethod
    def parse(cls, name: str | None) -> "Action | None":
        if not name:
            return None
        wanted = name.strip().lower()
        for action in cls:
            if action.value == wanted:
                return action
        return None

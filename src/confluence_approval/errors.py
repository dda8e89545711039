"""Exception types shared across the workflow service."""


class ApprovalWorkflowError(Exception):
    """Base class for errors raised by this service."""


class ConfigurationError(ApprovalWorkflowError):
    """Raised when Confluence credentials are missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "Missing Confluence configuration in environment variables: "
            + ", ".join(missing)
        )


class InvalidEventError(ApprovalWorkflowError):
    """Raised when a webhook event lacks a field its event type needs."""


class ConfluenceError(ApprovalWorkflowError):
    """Raised when a Confluence REST call fails."""

    def __init__(self, operation: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"{operation}: {message}")


class ConfluenceNotFoundError(ConfluenceError):
    """Raised on 404 from Confluence."""


class GroupNotFoundError(ConfluenceError):
    """Raised when a group search returns no match."""

    def __init__(self, group_name: str):
        self.group_name = group_name
        super().__init__("search_groups", f"Group not found: {group_name}")


class StateNotFoundError(ConfluenceError):
    """Raised when a content state name is not defined in a space."""

    def __init__(self, state_name: str, space_key: str):
        self.state_name = state_name
        self.space_key = space_key
        super().__init__(
            "set_content_state",
            f'State "{state_name}" not found in space "{space_key}"',
        )


class EventProcessingError(ApprovalWorkflowError):
    """Wraps a failure that happened while handling a webhook event."""

    def __init__(self, event_type: str, cause: Exception):
        self.event_type = event_type
        self.cause = cause
        super().__init__(str(cause) or cause.__class__.__name__)

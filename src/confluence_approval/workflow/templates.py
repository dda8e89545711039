"""Email bodies for each approval step."""

from confluence_approval.workflow.states import Action, Status

PAGE_LINK_TOKEN = "[link]"
PAGE_TITLE_TOKEN = "[SOP Name]"

SENT_TO_INTERNAL_REVIEWER = """Dear internal reviewer,

SOP "[SOP Name]" has been UPDATED and sent for your review. Please review and provide your approval/reject for this to proceed further.
If you want to reject, leave your comments and click "Reject" button in the page.
If you want to approve, click "Approve" for it to move forward.

In case you want to know where the changes are, you can either confirm with the editor or look up in the version history.
Please review the SOP by click below link:
[link]

Regards,
JSC Knowledge Center"""

SENT_TO_BUSINESS_REVIEWER = """Dear BU reviewer,

SOP "[SOP Name]" has been UPDATED, approved by internal reviewer and sent for your review. Please review and provide your approval/reject for this to proceed further.
If you want to reject, leave your comments and click "Reject" button in the page.
If you want to approve, click "Approve" for it to move forward.

In case you want to know where the changes are, you can either confirm with the editor or look up in the version history.

Please review the SOP by click below link:
[link]

Regards,
JSC Knowledge Center"""

REJECTED_BY_INTERNAL_REVIEWER = """Dear SOP Draft Editor,

SOP "[SOP Name]" has been REJECTED by Internal reviewer. Please review and update the SOP accordingly before submit it again.

You can find the comments for rejection from the reviewer. Connect with reviewer if nothing's been left.

Please review the SOP by click below link:
[link]

Regards,
JSC Knowledge Center"""

REJECTED_BY_BUSINESS_REVIEWER = """Dear SOP Draft Editor,

SOP "[SOP Name]" has been REJECTED by BU reviewer. Please review and update the SOP accordingly before submit it again.

You can find the comments for rejection from the reviewer. Connect with reviewer if nothing's been left.

Please review the SOP by click below link:
[link]

Regards,
JSC Knowledge Center"""

PUBLISHED = """Dear all,

SOP "[SOP Name]" has been updated and Approved by all approver.

It's now officially PUBLISHED.

You may visit the SOP by click below link:
[link]

Regards,
JSC Knowledge Center"""

# Keyed by (action, status the page was in when the button was pressed)
EMAIL_TEMPLATES: dict[tuple[Action, Status], str] = {
    (Action.APPROVE, Status.DRAFT): SENT_TO_INTERNAL_REVIEWER,
    (Action.APPROVE, Status.PENDING_INTERNAL_REVIEW): SENT_TO_BUSINESS_REVIEWER,
    (Action.APPROVE, Status.PENDING_BUSINESS_REVIEW): PUBLISHED,
    (Action.REJECT, Status.PENDING_INTERNAL_REVIEW): REJECTED_BY_INTERNAL_REVIEWER,
    (Action.REJECT, Status.PENDING_BUSINESS_REVIEW): REJECTED_BY_BUSINESS_REVIEWER,
}


def select_template(action: Action | None, origin: Status | None) -> str:
    """Pick the email body for an action. Unmatched combinations give ""."""
    if action is Action.RE_REQUEST_REVIEW:
        return SENT_TO_INTERNAL_REVIEWER
    if action is None or origin is None:
        return ""
    return EMAIL_TEMPLATES.get((action, origin), "")


def render_template(body: str, page_title: str, page_link: str) -> str:
    """Substitute the first link and title placeholders."""
    return body.replace(PAGE_LINK_TOKEN, page_link, 1).replace(PAGE_TITLE_TOKEN, page_title, 1)


def build_email_body(
    action: Action | None, origin: Status | None, page_title: str, page_link: str
) -> str:
    return render_template(select_template(action, origin), page_title, page_link)

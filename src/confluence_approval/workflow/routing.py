"""Decide who gets emailed after a page changes state."""

import asyncio
import logging
from dataclasses import dataclass, field

from confluence_approval.confluence.client import ConfluenceClient
from confluence_approval.errors import GroupNotFoundError
from confluence_approval.workflow.group_naming import (
    extract_parenthesized,
    join_ancestor_titles,
)
from confluence_approval.workflow.states import Status

logger = logging.getLogger(__name__)

EDITOR_SUFFIX = "_Editor"
INTERNAL_REVIEWER_SUFFIX = "_JSC Approver"
BUSINESS_REVIEWER_SUFFIX = "_BU Approver"


@dataclass(frozen=True)
class ReviewGroups:
    """The three Confluence groups attached to one SOP area."""

    editor: str
    internal_reviewer: str
    business_reviewer: str

    @classmethod
    def for_token(cls, token: str) -> "ReviewGroups":
        return cls(
            editor=token + EDITOR_SUFFIX,
            internal_reviewer=token + INTERNAL_REVIEWER_SUFFIX,
            business_reviewer=token + BUSINESS_REVIEWER_SUFFIX,
        )


@dataclass(frozen=True)
class RecipientGroups:
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)


@dataclass
class RecipientPlan:
    """Groups to notify for one page, before emails are resolved."""

    to_groups: list[str]
    cc_groups: list[str]
    page_title: str
    current_status: Status | None
    page_url: str | None = None


@dataclass
class ResolvedRecipients:
    # One comma-separated email list per group
    to_emails: list[str]
    cc_emails: list[str]


def route_groups(
    current: Status | None, origin: Status | None, groups: ReviewGroups
) -> RecipientGroups:
    """Pick to/cc groups from the page's state after the transition.

    ``origin`` only matters for Draft, where it tells which review stage
    sent the page back.
    """
    if current is Status.PENDING_INTERNAL_REVIEW:
        return RecipientGroups(to=[groups.internal_reviewer], cc=[groups.editor])
    if current is Status.PENDING_BUSINESS_REVIEW:
        return RecipientGroups(to=[groups.business_reviewer], cc=[groups.internal_reviewer])
    if current is Status.PUBLISHED:
        return RecipientGroups(
            to=[groups.editor, groups.internal_reviewer, groups.business_reviewer]
        )
    if current is Status.DRAFT:
        if origin is Status.PENDING_INTERNAL_REVIEW:
            return RecipientGroups(to=[groups.editor], cc=[groups.internal_reviewer])
        if origin is Status.PENDING_BUSINESS_REVIEW:
            return RecipientGroups(
                to=[groups.editor],
                cc=[groups.business_reviewer, groups.internal_reviewer],
            )
    return RecipientGroups()


def exclude_duplicate_channels(to_emails: list[str], cc_emails: list[str]) -> list[str]:
    """Drop cc lists that are exactly the same as one of the to lists."""
    return [emails for emails in cc_emails if emails not in to_emails]


class NotificationResolver:
    def __init__(self, client: ConfluenceClient, group_naming: str = "parentheses") -> None:
        self._client = client
        self._group_naming = group_naming
        if group_naming == "ancestors":
            logger.warning(
                "Ancestor-title group naming is deprecated, use parentheses in page titles"
            )

    def _group_token(self, title_path: list[str]) -> str:
        if self._group_naming == "ancestors":
            return join_ancestor_titles(title_path)
        return extract_parenthesized(title_path[-1])

    async def resolve_recipients(self, page_id: str, origin: Status | None) -> RecipientPlan:
        """Work out to/cc groups from the page's current state and title."""
        state = await self._client.get_content_state(page_id)
        page = await self._client.get_page(page_id)
        current = Status.parse(state.name) if state else None

        token = self._group_token(page.title_path)
        recipients = route_groups(current, origin, ReviewGroups.for_token(token))
        logger.debug(
            "Page %s in state %s routes to=%s cc=%s",
            page_id, current, recipients.to, recipients.cc,
        )
        return RecipientPlan(
            to_groups=recipients.to,
            cc_groups=recipients.cc,
            page_title=page.title,
            current_status=current,
            page_url=page.url,
        )

    async def resolve_group_emails(self, group_name: str) -> str:
        """Comma-separated emails of the group named exactly ``group_name``.

        The group picker matches on substrings, so near-miss names are
        ignored. Members with a hidden email are skipped.
        """
        wanted = group_name.lower()
        groups = await self._client.search_groups(group_name)
        group = next((g for g in groups if g["name"].lower() == wanted), None)
        if group is None:
            raise GroupNotFoundError(group_name)

        members = await self._client.get_group_members(group["id"])
        emails = [member["email"] for member in members if member.get("email")]
        if len(emails) < len(members):
            logger.warning(
                "Group '%s' has %d member(s) without a visible email",
                group_name, len(members) - len(emails),
            )
        return ",".join(emails)

    async def resolve_emails(self, plan: RecipientPlan) -> ResolvedRecipients:
        """Look up all groups concurrently. Any missing group fails the whole lookup."""
        names = plan.to_groups + plan.cc_groups
        emails = await asyncio.gather(
            *(self.resolve_group_emails(n) for n in names), return_exceptions=True
        )
        failures = [(n, e) for n, e in zip(names, emails) if isinstance(e, Exception)]
        for name, exc in failures:
            logger.error("Could not resolve emails for group '%s': %s", name, exc)
        if failures:
            raise failures[0][1]

        to_emails = list(emails[: len(plan.to_groups)])
        cc_emails = list(emails[len(plan.to_groups):])
        return ResolvedRecipients(
            to_emails=to_emails,
            cc_emails=exclude_duplicate_channels(to_emails, cc_emails),
        )

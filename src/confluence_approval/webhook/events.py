"""Event processing: route a webhook event to the matching workflow step."""

import logging

from confluence_approval.config import Settings
from confluence_approval.confluence.client import ConfluenceClient
from confluence_approval.errors import EventProcessingError, InvalidEventError
from confluence_approval.webhook.models import WebhookEvent
from confluence_approval.workflow.routing import NotificationResolver
from confluence_approval.workflow.state_machine import transition
from confluence_approval.workflow.states import Action, Status
from confluence_approval.workflow.templates import build_email_body

logger = logging.getLogger(__name__)


def _status_value(status: Status | None) -> str | None:
    return status.value if status else None


class EventProcessor:
    def __init__(self, client: ConfluenceClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self._resolver = NotificationResolver(client, settings.group_naming)
        self._handlers = {
            "page_updated_get_emails": self._page_updated_get_emails,
            "get_all_states": self._get_all_states,
            "is_page_changed": self._is_page_changed,
            "change_status_if_page_changed": self._change_status_if_page_changed,
            "get_page_labels": self._get_page_labels,
        }

    async def handle(self, event: WebhookEvent) -> dict:
        """Run the handler for ``event.event_type``.

        Unknown event types are reported, not rejected. Failures from
        Confluence are logged and re-raised as EventProcessingError.
        """
        handler = self._handlers.get(event.event_type)
        if handler is None:
            logger.info("Ignoring event type: %s", event.event_type)
            return {
                "handled": False,
                "message": f"Unhandled event type: {event.event_type}",
            }

        try:
            return await handler(event)
        except InvalidEventError:
            raise
        except Exception as exc:
            logger.exception("Error handling %s event", event.event_type)
            raise EventProcessingError(event.event_type, exc) from exc

    # -- validation helpers --

    def _require_page_id(self, event: WebhookEvent) -> str:
        if event.page is None:
            raise InvalidEventError(f"Event {event.event_type} requires a page")
        return event.page.id

    def _require_space_key(self, event: WebhookEvent) -> str:
        space_key = event.space_key
        if not space_key and event.page and event.page.space:
            space_key = event.page.space.key
        space_key = space_key or self._settings.confluence_default_space_key
        if not space_key:
            raise InvalidEventError(f"Event {event.event_type} requires a spaceKey")
        return space_key

    @staticmethod
    def _parse_action(event: WebhookEvent) -> Action | None:
        if event.button_type is None:
            return None
        action = Action.parse(event.button_type)
        if action is None:
            raise InvalidEventError(f"Unknown buttonType: {event.button_type}")
        return action

    # -- handlers --

    async def _page_updated_get_emails(self, event: WebhookEvent) -> dict:
        page_id = self._require_page_id(event)
        action = self._parse_action(event)
        origin = Status.parse(event.origin_state)
        space_key = None
        if event.actions or action:
            space_key = self._require_space_key(event)

        status_change = None
        if event.actions:
            target = event.actions.change_status_to
            await self._client.set_content_state(page_id, target, space_key)
            status_change = {
                "from": _status_value(origin),
                "to": target,
                "allowed": True,
                "applied": True,
            }
        elif action:
            status_change, origin = await self._apply_transition(
                page_id, action, origin, space_key
            )

        if event.comment:
            await self._client.add_footer_comment(page_id, event.comment)

        plan = await self._resolver.resolve_recipients(page_id, origin)
        recipients = await self._resolver.resolve_emails(plan)
        page_link = (event.page.url if event.page else None) or plan.page_url or ""

        return {
            "toEmails": recipients.to_emails,
            "ccEmails": recipients.cc_emails,
            "toGroups": plan.to_groups,
            "ccGroups": plan.cc_groups,
            "authorName": event.author_name,
            "pageTitle": plan.page_title,
            "currentStatus": _status_value(plan.current_status),
            "statusChange": status_change,
            "emailTemplate": build_email_body(action, origin, plan.page_title, page_link),
        }

    async def _apply_transition(
        self, page_id: str, action: Action, origin: Status | None, space_key: str
    ) -> tuple[dict, Status | None]:
        """Move the page as ``action`` requires.

        The transition starts from ``origin`` when the event names one,
        otherwise from the page's current state. Returns the change report
        and the status the transition started from.
        """
        state = await self._client.get_content_state(page_id)
        current = Status.parse(state.name) if state else None
        source = origin or current

        outcome = transition(source, action)
        change = {
            "from": _status_value(source),
            "to": _status_value(outcome.next_status),
            "allowed": outcome.allowed,
            "applied": False,
        }
        if not outcome.allowed:
            logger.info(
                "Action %s not allowed from %s on page %s", action.value, source, page_id
            )
            return change, source

        if current is not outcome.next_status:
            await self._client.set_content_state(
                page_id, outcome.next_status.value, space_key
            )
            change["applied"] = True
        else:
            logger.debug("Page %s already in %s", page_id, outcome.next_status.value)
        return change, source

    async def _get_all_states(self, event: WebhookEvent) -> dict:
        space_key = self._require_space_key(event)
        return {"allStates": await self._client.get_space_states(space_key)}

    async def _is_page_changed(self, event: WebhookEvent) -> dict:
        page_id = self._require_page_id(event)
        return {"isChanged": await self._client.is_page_changed(page_id)}

    async def _change_status_if_page_changed(self, event: WebhookEvent) -> dict:
        page_id = self._require_page_id(event)
        space_key = self._require_space_key(event)

        changed = await self._client.is_page_changed(page_id)
        if changed:
            logger.info("Page %s content changed, moving back to Draft", page_id)
            await self._client.set_content_state(page_id, Status.DRAFT.value, space_key)
        return {"isChanged": changed, "statusChanged": changed}

    async def _get_page_labels(self, event: WebhookEvent) -> dict:
        page_id = self._require_page_id(event)
        labels = await self._client.get_page_labels(page_id)
        return {"labels": [label["name"] for label in labels]}

import logging

import httpx

from confluence_approval.config import ConfluenceConfig
from confluence_approval.confluence.models import ContentState, Page
from confluence_approval.errors import (
    ConfluenceError,
    ConfluenceNotFoundError,
    StateNotFoundError,
)

logger = logging.getLogger(__name__)

PAGE_EXPAND = "body.storage,version,space,ancestors"


class ConfluenceClient:
    def __init__(
        self,
        config: ConfluenceConfig,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=config.wiki_url,
            auth=(config.username, config.api_token),
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, url: str, **kwargs) -> dict:
        """Make a request and return the decoded JSON body."""
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise ConfluenceError(operation, f"{method} {url} failed: {exc}") from exc

        if resp.status_code == 404:
            raise ConfluenceNotFoundError(operation, f"Not found: {url}", 404)
        if resp.is_error:
            raise ConfluenceError(
                operation,
                f"{method} {url} returned {resp.status_code}: {resp.text}",
                resp.status_code,
            )
        if not resp.content:
            return {}
        return resp.json()

    async def list_pages(self) -> dict:
        return await self._request("list_pages", "GET", "/api/v2/pages")

    async def list_groups(self) -> dict:
        return await self._request("list_groups", "GET", "/rest/api/group")

    async def search_groups(self, query: str) -> list[dict]:
        """Find groups whose name matches ``query``."""
        data = await self._request(
            "search_groups", "GET", "/rest/api/group/picker", params={"query": query}
        )
        return data["results"]

    async def get_group_members(self, group_id: str) -> list[dict]:
        data = await self._request(
            "get_group_members", "GET", f"/rest/api/group/{group_id}/membersByGroupId"
        )
        return data["results"]

    async def get_page(
        self,
        page_id: str,
        *,
        version: int | None = None,
        body_format: str | None = None,
    ) -> Page:
        params = {"status": "current", "expand": PAGE_EXPAND}
        if version is not None:
            params["version"] = version
        if body_format:
            params["body-format"] = body_format
        data = await self._request(
            "get_page", "GET", f"/rest/api/content/{page_id}", params=params
        )
        return Page.from_api(data)

    async def list_content_states(self) -> dict:
        return await self._request("list_content_states", "GET", "/rest/api/content-states")

    async def get_content_state(self, page_id: str) -> ContentState | None:
        """Current state of a page, or None when no state is set."""
        data = await self._request(
            "get_content_state", "GET", f"/rest/api/content/{page_id}/state"
        )
        state = data.get("contentState")
        return ContentState.from_api(state) if state else None

    async def get_space_states(self, space_key: str) -> dict:
        return await self._request(
            "get_space_states", "GET", f"/rest/api/space/{space_key}/state/settings"
        )

    async def set_content_state(self, page_id: str, state_name: str, space_key: str) -> dict:
        """Move a page to the space state called ``state_name``."""
        settings = await self.get_space_states(space_key)
        wanted = state_name.lower()
        state_id = next(
            (
                state["id"]
                for state in settings.get("spaceContentStates") or []
                if state["name"].lower() == wanted
            ),
            None,
        )
        if state_id is None:
            raise StateNotFoundError(state_name, space_key)

        logger.info("Setting page %s state to '%s' (id %s)", page_id, state_name, state_id)
        return await self._request(
            "set_content_state",
            "PUT",
            f"/rest/api/content/{page_id}/state",
            params={"status": "current"},
            json={"id": state_id},
        )

    async def get_page_labels(self, page_id: str) -> list[dict]:
        data = await self._request(
            "get_page_labels", "GET", f"/api/v2/pages/{page_id}/labels"
        )
        return data["results"]

    async def add_footer_comment(self, page_id: str, body: str) -> dict:
        """Post a footer comment in storage representation."""
        payload = {
            "pageId": page_id,
            "body": {"storage": {"value": body, "representation": "storage"}},
        }
        return await self._request(
            "add_footer_comment", "POST", "/api/v2/footer-comments", json=payload
        )

    async def is_page_changed(self, page_id: str) -> bool:
        """Compare the storage body of the current version with the one before it."""
        current = await self.get_page(page_id, body_format="storage")
        if current.version <= 1:
            return False
        previous = await self.get_page(
            page_id, version=current.version - 1, body_format="storage"
        )
        return current.body_storage != previous.body_storage

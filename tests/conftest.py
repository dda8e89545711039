"""In-memory Confluence served through httpx.MockTransport."""

import json
import re

import httpx
import pytest

from confluence_approval.config import ConfluenceConfig
from confluence_approval.confluence.client import ConfluenceClient

BASE_URL = "https://example.atlassian.net"

SPACE_STATES = [
    {"id": 11, "name": "Draft", "color": "#ffc400"},
    {"id": 12, "name": "Pending JSC Review", "color": "#2684ff"},
    {"id": 13, "name": "Pending BU Review", "color": "#6554c0"},
    {"id": 14, "name": "Published", "color": "#57d9a3"},
]


class FakeConfluence:
    def __init__(self) -> None:
        self.space_key = "SOP"
        self.pages: dict[str, dict] = {}
        self.states: dict[str, int | None] = {}
        self.groups: dict[str, list[str | None]] = {}
        self.labels: dict[str, list[str]] = {}
        self.comments: list[dict] = []
        self.requests: list[httpx.Request] = []

    # -- setup helpers --

    def add_page(
        self,
        page_id: str,
        title: str,
        state: str | None = None,
        bodies: list[str] | None = None,
        ancestors: list[str] | None = None,
    ) -> None:
        bodies = bodies or ["<p>v1</p>"]
        self.pages[page_id] = {
            "title": title,
            "versions": {i + 1: body for i, body in enumerate(bodies)},
            "ancestors": ancestors or [],
        }
        self.states[page_id] = self._state_id(state) if state else None

    def add_group(self, name: str, emails: list[str | None]) -> None:
        self.groups[name] = emails

    def add_review_groups(self, token: str) -> None:
        self.add_group(f"{token}_Editor", [f"editor@{token.lower()}.com"])
        self.add_group(f"{token}_JSC Approver", [f"jsc1@{token.lower()}.com", f"jsc2@{token.lower()}.com"])
        self.add_group(f"{token}_BU Approver", [f"bu@{token.lower()}.com"])

    def state_name(self, page_id: str) -> str | None:
        state_id = self.states[page_id]
        return next((s["name"] for s in SPACE_STATES if s["id"] == state_id), None)

    def state_changes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    @staticmethod
    def _state_id(name: str) -> int:
        return next(s["id"] for s in SPACE_STATES if s["name"] == name)

    # -- transport --

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/wiki")
        method = request.method

        if method == "GET" and path == "/api/v2/pages":
            return httpx.Response(
                200,
                json={"results": [{"id": pid, "title": p["title"]} for pid, p in self.pages.items()]},
            )
        if method == "GET" and path == "/rest/api/group":
            return httpx.Response(200, json={"results": self._group_list(self.groups)})
        if method == "GET" and path == "/rest/api/group/picker":
            query = request.url.params.get("query", "")
            matches = {n: e for n, e in self.groups.items() if query.lower() in n.lower()}
            return httpx.Response(200, json={"results": self._group_list(matches)})
        if method == "GET" and path == "/rest/api/content-states":
            return httpx.Response(200, json={"spaceContentStates": SPACE_STATES})
        if method == "POST" and path == "/api/v2/footer-comments":
            payload = json.loads(request.content)
            self.comments.append(payload)
            return httpx.Response(200, json={"id": str(len(self.comments)), **payload})

        m = re.fullmatch(r"/rest/api/group/([^/]+)/membersByGroupId", path)
        if m and method == "GET":
            emails = self.groups.get(m.group(1))
            if emails is None:
                return httpx.Response(404)
            return httpx.Response(200, json={"results": [{"email": e} for e in emails]})

        m = re.fullmatch(r"/rest/api/space/([^/]+)/state/settings", path)
        if m and method == "GET":
            if m.group(1) != self.space_key:
                return httpx.Response(404)
            return httpx.Response(200, json={"spaceContentStates": SPACE_STATES})

        m = re.fullmatch(r"/rest/api/content/([^/]+)/state", path)
        if m and m.group(1) in self.pages:
            page_id = m.group(1)
            if method == "GET":
                state_id = self.states[page_id]
                state = next((s for s in SPACE_STATES if s["id"] == state_id), None)
                return httpx.Response(200, json={"contentState": state})
            if method == "PUT":
                self.states[page_id] = json.loads(request.content)["id"]
                return httpx.Response(200, json={"contentState": {"id": self.states[page_id]}})

        m = re.fullmatch(r"/rest/api/content/([^/]+)", path)
        if m and method == "GET" and m.group(1) in self.pages:
            return httpx.Response(200, json=self._page_json(m.group(1), request))

        m = re.fullmatch(r"/api/v2/pages/([^/]+)/labels", path)
        if m and method == "GET":
            names = self.labels.get(m.group(1), [])
            return httpx.Response(
                200, json={"results": [{"id": str(i), "name": n} for i, n in enumerate(names)]}
            )

        return httpx.Response(404, json={"message": f"No route for {method} {path}"})

    @staticmethod
    def _group_list(groups: dict[str, list[str]]) -> list[dict]:
        return [{"id": name, "name": name, "type": "group"} for name in groups]

    def _page_json(self, page_id: str, request: httpx.Request) -> dict:
        page = self.pages[page_id]
        latest = max(page["versions"])
        version = int(request.url.params.get("version", latest))
        return {
            "id": page_id,
            "type": "page",
            "title": page["title"],
            "version": {"number": version},
            "space": {"key": self.space_key},
            "body": {"storage": {"value": page["versions"][version], "representation": "storage"}},
            "ancestors": [{"id": f"a{i}", "title": t} for i, t in enumerate(page["ancestors"])],
            "_links": {"base": f"{BASE_URL}/wiki", "webui": f"/spaces/{self.space_key}/pages/{page_id}"},
        }


CONFIG = ConfluenceConfig(base_url=BASE_URL, username="bot@example.com", api_token="token")


@pytest.fixture
def fake_confluence() -> FakeConfluence:
    return FakeConfluence()


@pytest.fixture
async def client(fake_confluence):
    c = ConfluenceClient(CONFIG, transport=httpx.MockTransport(fake_confluence.handler))
    yield c
    await c.close()

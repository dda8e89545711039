from dataclasses import dataclass, field


@dataclass
class ContentState:
    id: int | str
    name: str
    color: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> "ContentState":
        return cls(id=data["id"], name=data["name"], color=data.get("color"))


@dataclass
class Page:
    """A Confluence page as returned by the v1 content API."""

    id: str
    title: str
    version: int
    space_key: str | None = None
    body_storage: str | None = None
    ancestor_titles: list[str] = field(default_factory=list)
    url: str | None = None

    @property
    def title_path(self) -> list[str]:
        """Titles from the space root down to this page."""
        return [*self.ancestor_titles, self.title]

    @classmethod
    def from_api(cls, data: dict) -> "Page":
        body = data.get("body") or {}
        storage = body.get("storage") or {}
        space = data.get("space") or {}
        links = data.get("_links") or {}
        url = None
        if links.get("webui"):
            url = f"{links.get('base', '')}{links['webui']}"
        return cls(
            id=str(data["id"]),
            title=data["title"],
            version=data["version"]["number"],
            space_key=space.get("key"),
            body_storage=storage.get("value"),
            ancestor_titles=[a["title"] for a in data.get("ancestors") or []],
            url=url,
        )

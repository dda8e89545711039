"""Pydantic models for Confluence automation webhook payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class SpaceRef(_CamelModel):
    key: str | None = None
    name: str | None = None


class VersionRef(_CamelModel):
    number: int | None = None


class PageRef(_CamelModel):
    id: str
    title: str | None = None
    status: str | None = None
    url: str | None = None
    space: SpaceRef | None = None
    version: VersionRef | None = None


class UserRef(_CamelModel):
    display_name: str | None = Field(None, alias="displayName")
    user_key: str | None = Field(None, alias="userKey")
    email: str | None = None


class GroupRef(_CamelModel):
    id: str | None = None
    name: str | None = None


class StatusChangeRequest(_CamelModel):
    change_status_to: str = Field(alias="changeStatusTo")


class WebhookEvent(_CamelModel):
    """A single event sent by a Confluence automation rule.

    Only ``eventType`` is always required; which other fields matter
    depends on the event type.
    """

    event_type: str = Field(alias="eventType", min_length=1)
    page: PageRef | None = None
    user: UserRef | None = None
    group: GroupRef | None = None
    button_type: str | None = Field(None, alias="buttonType")
    space_key: str | None = Field(None, alias="spaceKey")
    origin_state: str | None = Field(None, alias="originState")
    author_name: str | None = Field(None, alias="authorName")
    actions: StatusChangeRequest | None = None
    comment: str | None = None

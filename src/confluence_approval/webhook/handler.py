"""Webhook endpoint for receiving Confluence automation events."""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from confluence_approval.config import ConfluenceConfig, Settings
from confluence_approval.confluence.client import ConfluenceClient
from confluence_approval.errors import (
    ConfigurationError,
    EventProcessingError,
    InvalidEventError,
)
from confluence_approval.webhook.events import EventProcessor
from confluence_approval.webhook.models import WebhookEvent

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "Confluence SOP Approval Workflow"
SUPPORTED_METHODS = ["GET", "POST"]

ClientFactory = Callable[[ConfluenceConfig, Settings], ConfluenceClient]


def _default_client_factory(config: ConfluenceConfig, settings: Settings) -> ConfluenceClient:
    return ConfluenceClient(config, timeout=settings.http_timeout)


# These will be injected at app startup
_settings: Settings | None = None
_client_factory: ClientFactory = _default_client_factory


def configure(settings: Settings, client_factory: ClientFactory | None = None) -> None:
    global _settings, _client_factory
    _settings = settings
    _client_factory = client_factory or _default_client_factory


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def health_payload() -> dict:
    return {
        "message": "Confluence Webhook Service is running",
        "timestamp": _now(),
        "service": SERVICE_NAME,
        "supportedMethods": SUPPORTED_METHODS,
    }


@router.api_route(
    "/webhook", methods=["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
)
async def handle_webhook(request: Request) -> JSONResponse:
    """Handle incoming Confluence webhook events."""
    logger.info("Webhook %s request for %s", request.method, request.url.path)
    try:
        if request.method == "GET":
            return JSONResponse(content=health_payload())
        if request.method == "POST":
            return await _handle_post(request)
        return JSONResponse(
            status_code=405,
            content={
                "error": f"Method {request.method} not allowed",
                "supportedMethods": SUPPORTED_METHODS,
            },
            headers={"Allow": ", ".join(SUPPORTED_METHODS)},
        )
    except Exception as exc:
        logger.exception("Unexpected error handling webhook")
        return _error(500, "Internal server error", details=str(exc))


async def _handle_post(request: Request) -> JSONResponse:
    body = await request.body()
    if not body.strip():
        return _error(400, "Empty request body")

    try:
        data = json.loads(body)
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return _error(400, "Invalid JSON in request body")

    if not isinstance(data, dict) or not data.get("eventType"):
        return _error(400, "Missing eventType in webhook data")

    try:
        event = WebhookEvent.model_validate(data)
    except ValidationError as exc:
        return _error(
            400,
            "Invalid webhook event",
            details=exc.errors(include_url=False, include_context=False, include_input=False),
        )

    logger.info("Webhook event type: %s", event.event_type)

    settings = _settings or Settings()
    try:
        config = ConfluenceConfig.from_settings(settings)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return _error(500, "Confluence service configuration error", details=str(exc))

    client = _client_factory(config, settings)
    try:
        result = await EventProcessor(client, settings).handle(event)
    except InvalidEventError as exc:
        return _error(400, "Invalid webhook event", eventType=event.event_type, details=str(exc))
    except EventProcessingError as exc:
        return _error(
            500,
            "Error processing webhook event",
            eventType=exc.event_type,
            details=str(exc),
        )
    finally:
        await client.close()

    return JSONResponse(
        content={
            "message": "Webhook processed successfully",
            "timestamp": _now(),
            "eventType": event.event_type,
            "result": result,
        }
    )

"""HTTP gateway: liveness check and the TradingView alert webhook."""

import json

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from newsbot.bus.events import OutboundMessage, WebhookAlert
from newsbot.bus.queue import MessageBus
from newsbot.config.schema import GatewayConfig

LIVENESS_TEXT = "Server is running."


class AlertPayload(BaseModel):
    """JSON body posted by the charting service. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    strategy_name: str | None = Field(default=None, alias="strategyName")
    ticker: str | None = None
    price: float | None = None
    message: str | None = None

    def to_alert(self) -> WebhookAlert:
        return WebhookAlert(
            strategy_name=self.strategy_name or "",
            ticker=self.ticker or "",
            price=self.price or 0.0,
            message=self.message or "",
        )


def decode_alert(body: bytes) -> WebhookAlert:
    """Decode a webhook body. Raises ValueError if it is not a valid alert object."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValueError(f"body is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("body is not a JSON object")
    try:
        return AlertPayload.model_validate(data).to_alert()
    except ValidationError as e:
        raise ValueError(f"unexpected alert fields: {e}") from e


def format_alert(alert: WebhookAlert) -> str:
    return (
        "TradingView alert\n"
        f"Strategy: {alert.strategy_name}\n"
        f"Ticker: {alert.ticker}\n"
        f"Price: {alert.price}\n"
        f"Message: {alert.message}"
    )


def create_app(bus: MessageBus, alert_chat_id: int | None, webhook_path: str = "/webhook") -> FastAPI:
    """Build the gateway app. Alerts are queued on the bus for ``alert_chat_id``."""
    app = FastAPI(title="newsbot gateway", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get("/", response_class=PlainTextResponse)
    async def liveness() -> str:
        return LIVENESS_TEXT

    # Only POST is routed, so other methods on this path get 405 from the router.
    @app.post(webhook_path, response_class=PlainTextResponse)
    async def tradingview_webhook(request: Request) -> PlainTextResponse:
        body = await request.body()
        logger.info(f"Received webhook payload: {body[:500]!r}")

        try:
            alert = decode_alert(body)
        except ValueError as e:
            logger.warning(f"Rejected webhook payload: {e}")
            return PlainTextResponse("Invalid alert payload", status_code=400)

        if alert_chat_id is None:
            logger.error("Webhook alert received but telegram.alert_chat_id is not configured")
            return PlainTextResponse("Alert destination not configured", status_code=503)

        await bus.publish_outbound(OutboundMessage(chat_id=alert_chat_id, content=format_alert(alert)))
        return PlainTextResponse("Alert forwarded")

    return app


def build_server(app: FastAPI, config: GatewayConfig) -> uvicorn.Server:
    """uvicorn server for ``app``; run it with ``await server.serve()``."""
    server_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_config=None,  # Records go through the loguru intercept handler
        access_log=False,
    )
    return uvicorn.Server(server_config)

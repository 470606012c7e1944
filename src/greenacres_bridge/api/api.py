#!/usr/bin/env python3
"""
Webhook API for the Green-Acres CRM Lead Bridge.

This module provides the FastAPI application that receives lead
notifications from an automation service (subject plus HTML body), runs
them through the lead bridge and reports whether the CRM accepted the lead.
"""

import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from greenacres_bridge import __version__
from greenacres_bridge.config import config
from greenacres_bridge.pipeline.assembler import LeadParsingError
from greenacres_bridge.pipeline.bridge import LeadBridge
from greenacres_bridge.utils.logger import get_logger

logger = get_logger("api")

LIVENESS_MESSAGE = "Green-Acres CRM Worker is running"
MISSING_BODY_ERROR = "No body_html provided"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

app = FastAPI(
    title="Green-Acres CRM Lead Bridge",
    description="Receives Green-Acres lead notifications and forwards them to the CRM",
    version=__version__,
)


#----------------
# Pydantic Models
#----------------

class WebhookPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    subject: Optional[str] = None
    body_html: Optional[str] = None
    content: Optional[str] = None
    sender: Optional[str] = Field(None, alias="from")

    @property
    def subject_line(self) -> str:
        return self.subject or ""

    @property
    def html_body(self) -> str:
        return self.body_html or self.content or ""


class LeadSummary(BaseModel):
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    city: Optional[str] = None
    property_category: Optional[str] = None
    price: Optional[str] = None


class WebhookResponse(BaseModel):
    success: bool
    lead: LeadSummary


class HealthStatus(BaseModel):
    status: str
    version: str
    uptime: float
    timestamp: datetime


#---------------------
# Dependency Injection
#---------------------

@lru_cache
def get_bridge() -> LeadBridge:
    """Get or create the lead bridge."""
    return LeadBridge(config=config)


def get_start_time() -> float:
    """Get the server start time."""
    if not hasattr(get_start_time, "start_time"):
        get_start_time.start_time = time.time()
    return get_start_time.start_time


# Uptime counts from import, whichever server loads the app
get_start_time()


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def read_payload(request: Request) -> Dict[str, Any]:
    """Read the webhook body as form data or JSON depending on its content type."""
    content_type = request.headers.get("content-type", "")
    if any(form_type in content_type for form_type in FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("Webhook payload must be a JSON object")
    return data


#----------
# Endpoints
#----------

@app.get("/", response_class=PlainTextResponse)
async def liveness() -> str:
    """Trivial health check used by uptime monitors."""
    return LIVENESS_MESSAGE


@app.get("/api/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Detailed health status."""
    start_time = get_start_time()
    return HealthStatus(
        status="ok",
        version=__version__,
        uptime=time.time() - start_time,
        timestamp=datetime.now(timezone.utc),
    )


@app.post("/", response_model=WebhookResponse)
async def receive_lead(request: Request, bridge: LeadBridge = Depends(get_bridge)):
    """
    Parse a lead notification and post it to the CRM.

    Accepts JSON, urlencoded or multipart bodies with ``subject`` and
    ``body_html`` (or ``content``).
    """
    try:
        payload = WebhookPayload.model_validate(await read_payload(request))
    except ValueError as e:
        logger.warning(f"[HTTP] Invalid payload: {str(e)}")
        return error_response(f"Invalid payload: {str(e)}", status.HTTP_400_BAD_REQUEST)

    logger.info(f"[HTTP] Processing: {payload.subject_line}")

    if not payload.html_body:
        return error_response(MISSING_BODY_ERROR, status.HTTP_400_BAD_REQUEST)

    try:
        result = await run_in_threadpool(bridge.process, payload.html_body, payload.subject_line)
    except LeadParsingError as e:
        logger.warning(f"[HTTP] Could not parse lead: {str(e)}")
        return error_response(str(e), status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.error(f"[HTTP] Error: {str(e)}", exc_info=True)
        return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return WebhookResponse(
        success=result.success,
        lead=LeadSummary(**result.lead.summary()),
    )


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the webhook with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=host or config.api_host,
        port=port or config.api_port,
        log_level="debug" if config.debug_mode else "info",
    )


if __name__ == "__main__":
    run()

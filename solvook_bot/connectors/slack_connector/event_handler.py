"""
Slack Event Handler Module

This module provides FastAPI routes for receiving Slack deliveries over HTTP:
Events API callbacks, interactive component payloads and slash commands.
Requests are verified with the signing secret, handed to the dispatcher, and
acknowledged immediately; processing continues after the response is sent.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from slack_sdk.signature import SignatureVerifier

from solvook_bot.dispatch.dispatcher import Dispatcher
from solvook_bot.events.classifier import EVENTS_API, INTERACTIVE, SLASH_COMMANDS
from solvook_bot.utils.logger import setup_logger

# Initialize logger
logger = setup_logger(__name__)

# Create router
router = APIRouter(tags=["slack"])


# Dependencies
def get_dispatcher(request: Request) -> Dispatcher:
    """Dependency to get the dispatcher built at startup."""
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise HTTPException(status_code=503, detail="Bot is not ready")
    return dispatcher


async def verify_slack_request(request: Request) -> bytes:
    """
    Dependency that checks the Slack signature and returns the raw body.

    Raises:
        HTTPException: 401 if the signature or timestamp is invalid
    """
    body = await request.body()
    verifier: SignatureVerifier = request.app.state.signature_verifier

    if not verifier.is_valid_request(body, dict(request.headers)):
        logger.warning("Invalid Slack signature")
        raise HTTPException(status_code=401, detail="Invalid Slack request")

    return body


def _acknowledge(ack: Optional[Dict[str, Any]]) -> Response:
    # An empty 200 is a plain acknowledgment
    if ack is None:
        return Response(status_code=200)
    return JSONResponse(content=ack)


@router.post("/slack/events")
async def slack_events(
    body: bytes = Depends(verify_slack_request),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    Handle incoming Slack events.

    Answers the URL verification challenge; event callbacks are acknowledged
    with an empty 200 and processed in the background.
    """
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        logger.error("Failed to parse JSON body")
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    # Handle URL verification
    if payload.get("type") == "url_verification":
        logger.info("Handling Slack URL verification")
        return {"challenge": payload.get("challenge")}

    if payload.get("type") == "event_callback":
        event_type = (payload.get("event") or {}).get("type")
        logger.info(f"Received Slack event: {event_type}")
        dispatcher.dispatch(EVENTS_API, payload)
    else:
        logger.warning(f"Unhandled Slack request type: {payload.get('type')}")

    # Return a 200 OK response immediately to acknowledge receipt
    return Response(status_code=200)


@router.post("/slack/interactions")
async def slack_interactions(
    request: Request,
    _: bytes = Depends(verify_slack_request),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    Handle Slack interactive components (buttons, shortcuts, modal submissions).

    Modal submissions may be acknowledged with a ``response_action`` body.
    """
    form_data = await request.form()
    payload = form_data.get("payload")

    if not payload:
        logger.error("Missing payload in Slack interaction")
        raise HTTPException(status_code=400, detail="Missing payload")

    try:
        interaction_data = json.loads(payload)
    except json.JSONDecodeError:
        logger.error("Failed to parse interaction payload")
        raise HTTPException(status_code=400, detail="Invalid payload format")

    logger.info(f"Received Slack interaction: {interaction_data.get('type')}")
    return _acknowledge(dispatcher.dispatch(INTERACTIVE, interaction_data))


@router.post("/slack/commands")
async def slack_commands(
    request: Request,
    _: bytes = Depends(verify_slack_request),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """
    Handle Slack slash commands.

    The command is acknowledged with an empty 200; the reply is posted once
    processing finishes.
    """
    form_data = dict(await request.form())

    if not form_data.get("command"):
        logger.error("Missing command in Slack slash command")
        raise HTTPException(status_code=400, detail="Missing command")

    logger.info(f"Received Slack slash command: {form_data['command']} {form_data.get('text', '')}")
    return _acknowledge(dispatcher.dispatch(SLASH_COMMANDS, form_data))

"""Small Block Kit builders shared by the response policy."""

from typing import Any, Dict, List, Optional

Block = Dict[str, Any]


def plain_text(text: str, emoji: bool = True) -> Dict[str, Any]:
    return {"type": "plain_text", "text": text, "emoji": emoji}


def mrkdwn(text: str) -> Dict[str, Any]:
    return {"type": "mrkdwn", "text": text}


def header(text: str) -> Block:
    return {"type": "header", "text": plain_text(text)}


def section(text: str, markdown: bool = True) -> Block:
    return {"type": "section", "text": mrkdwn(text) if markdown else plain_text(text)}


def fields_section(fields: List[str]) -> Block:
    return {"type": "section", "fields": [mrkdwn(field) for field in fields]}


def divider() -> Block:
    return {"type": "divider"}


def context(text: str) -> Block:
    return {"type": "context", "elements": [mrkdwn(text)]}


def button(text: str, action_id: str, value: Optional[str] = None, style: Optional[str] = None) -> Dict[str, Any]:
    element: Dict[str, Any] = {"type": "button", "text": plain_text(text), "action_id": action_id}
    if value is not None:
        element["value"] = value
    if style:
        element["style"] = style
    return element


def actions(*elements: Dict[str, Any]) -> Block:
    return {"type": "actions", "elements": list(elements)}


def option(text: str, value: str) -> Dict[str, Any]:
    return {"text": plain_text(text), "value": value}


def user_mention(user_id: Optional[str]) -> str:
    return f"<@{user_id}>"


def channel_mention(channel_id: Optional[str]) -> str:
    return f"<#{channel_id}>"

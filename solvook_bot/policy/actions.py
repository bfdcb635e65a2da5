"""
Outbound Actions

Each ``OutboundAction`` variant describes exactly one side-effecting Slack Web
API call. The response policy only ever builds these values; the connector is
the one place that performs them.

``ModalDefinition`` describes a modal view. Its ``callback_id`` is the
correlation identifier Slack round-trips on submission, which is how a
``view_submission`` finds its way back to the handler that opened the modal.
"""

import enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from solvook_bot.errors import ActionValidationError
from solvook_bot.policy.blocks import Block, option, plain_text

# Slack limits
MODAL_TITLE_MAX = 24
PRIVATE_METADATA_MAX = 3000


class ActionKind(str, enum.Enum):
    """Type tag of an outbound action."""
    POST_MESSAGE = "post_message"
    UPDATE_MESSAGE = "update_message"
    ADD_REACTION = "add_reaction"
    OPEN_MODAL = "open_modal"
    UPDATE_MODAL = "update_modal"
    POST_EPHEMERAL = "post_ephemeral"


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class PostMessage(_Action):
    kind: Literal[ActionKind.POST_MESSAGE] = ActionKind.POST_MESSAGE
    channel: str = Field(..., min_length=1)
    text: str
    blocks: Optional[List[Block]] = None
    thread_ts: Optional[str] = None


class UpdateMessage(_Action):
    kind: Literal[ActionKind.UPDATE_MESSAGE] = ActionKind.UPDATE_MESSAGE
    channel: str = Field(..., min_length=1)
    ts: str = Field(..., min_length=1)
    text: str
    blocks: Optional[List[Block]] = None


class AddReaction(_Action):
    kind: Literal[ActionKind.ADD_REACTION] = ActionKind.ADD_REACTION
    channel: str = Field(..., min_length=1)
    timestamp: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class OpenModal(_Action):
    kind: Literal[ActionKind.OPEN_MODAL] = ActionKind.OPEN_MODAL
    trigger_id: str = Field(..., min_length=1)
    view: Dict[str, Any]


class UpdateModal(_Action):
    kind: Literal[ActionKind.UPDATE_MODAL] = ActionKind.UPDATE_MODAL
    view_id: str = Field(..., min_length=1)
    view: Dict[str, Any]
    hash: Optional[str] = None


class PostEphemeral(_Action):
    kind: Literal[ActionKind.POST_EPHEMERAL] = ActionKind.POST_EPHEMERAL
    channel: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    text: str
    blocks: Optional[List[Block]] = None


OutboundAction = Annotated[
    Union[PostMessage, UpdateMessage, AddReaction, OpenModal, UpdateModal, PostEphemeral],
    Field(discriminator="kind"),
]


class FieldKind(str, enum.Enum):
    """Input element types a modal field can render as."""
    PLAIN_TEXT = "plain_text"
    MULTILINE = "multiline"
    STATIC_SELECT = "static_select"
    USERS_SELECT = "users_select"
    CONVERSATIONS_SELECT = "conversations_select"
    DATEPICKER = "datepicker"


class ModalField(BaseModel):
    """One input block of a modal."""
    model_config = ConfigDict(frozen=True)

    block_id: str
    action_id: str
    label: str
    kind: FieldKind = FieldKind.PLAIN_TEXT
    required: bool = True
    placeholder: Optional[str] = None
    options: Tuple[Tuple[str, str], ...] = Field(default=(), description="(label, value) pairs")
    initial_value: Optional[str] = None
    max_length: Optional[int] = Field(default=None, ge=1, le=3000, description="Character limit of text inputs")

    def element(self) -> Dict[str, Any]:
        """Render the Block Kit input element."""
        if self.kind in (FieldKind.PLAIN_TEXT, FieldKind.MULTILINE):
            element: Dict[str, Any] = {"type": "plain_text_input", "action_id": self.action_id}
            if self.kind == FieldKind.MULTILINE:
                element["multiline"] = True
            if self.max_length:
                element["max_length"] = self.max_length
            if self.initial_value:
                element["initial_value"] = self.initial_value
        elif self.kind == FieldKind.STATIC_SELECT:
            element = {
                "type": "static_select",
                "action_id": self.action_id,
                "options": [option(text, value) for text, value in self.options],
            }
            for text, value in self.options:
                if value == self.initial_value:
                    element["initial_option"] = option(text, value)
        elif self.kind == FieldKind.USERS_SELECT:
            element = {"type": "users_select", "action_id": self.action_id}
            if self.initial_value:
                element["initial_user"] = self.initial_value
        elif self.kind == FieldKind.CONVERSATIONS_SELECT:
            element = {"type": "conversations_select", "action_id": self.action_id}
            if self.initial_value:
                element["initial_conversation"] = self.initial_value
        else:
            element = {"type": "datepicker", "action_id": self.action_id}
            if self.initial_value:
                element["initial_date"] = self.initial_value

        if self.placeholder:
            element["placeholder"] = plain_text(self.placeholder)
        return element

    def block(self) -> Block:
        """Render the input block."""
        return {
            "type": "input",
            "block_id": self.block_id,
            "label": plain_text(self.label),
            "element": self.element(),
            "optional": not self.required,
        }


class ModalDefinition(BaseModel):
    """A modal view and the correlation identifier its submission is routed by."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, max_length=MODAL_TITLE_MAX)
    callback_id: Optional[str] = None
    submit_label: Optional[str] = None
    close_label: str = "Close"
    intro_blocks: List[Block] = Field(default_factory=list)
    fields: List[ModalField] = Field(default_factory=list)
    private_metadata: str = Field("", max_length=PRIVATE_METADATA_MAX)

    def to_view(self) -> Dict[str, Any]:
        """Render the Slack view payload."""
        view: Dict[str, Any] = {
            "type": "modal",
            "title": plain_text(self.title),
            "close": plain_text(self.close_label),
            "blocks": list(self.intro_blocks) + [field.block() for field in self.fields],
        }
        if self.callback_id:
            view["callback_id"] = self.callback_id
        if self.submit_label:
            view["submit"] = plain_text(self.submit_label)
        if self.private_metadata:
            view["private_metadata"] = self.private_metadata
        return view


def open_modal(trigger_id: Optional[str], modal: ModalDefinition) -> OpenModal:
    """
    Build an ``OpenModal`` action.

    Slack rejects ``views.open`` without a fresh interaction token, so a missing
    token is reported here instead of being sent to the platform.

    Args:
        trigger_id: Interaction token from the triggering event
        modal: The modal to open

    Returns:
        OpenModal: The action

    Raises:
        ActionValidationError: If the trigger id is missing or blank
    """
    if not trigger_id or not trigger_id.strip():
        raise ActionValidationError(f"Cannot open modal '{modal.title}' without an interaction token")
    try:
        return OpenModal(trigger_id=trigger_id, view=modal.to_view())
    except ValidationError as e:
        raise ActionValidationError(str(e)) from e


def update_modal(view_id: Optional[str], modal: ModalDefinition, view_hash: Optional[str] = None) -> UpdateModal:
    """
    Build an ``UpdateModal`` action for a view that is still open.

    Raises:
        ActionValidationError: If the view id is missing
    """
    if not view_id:
        raise ActionValidationError(f"Cannot update modal '{modal.title}' without a view id")
    return UpdateModal(view_id=view_id, view=modal.to_view(), hash=view_hash)

"""
Modal workflows.

The task workflow spans two modal steps:

    Idle --(create_task shortcut)--> task_modal --(submit)--> task_confirm --(submit)--> Idle

Nothing is stored server-side. The step is identified by the view's
``callback_id`` and the answers from step one travel in the step-two view's
``private_metadata``. A workflow the user never submits simply never finishes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from solvook_bot.errors import ActionValidationError
from solvook_bot.events.models import ClassifiedEvent
from solvook_bot.policy import blocks
from solvook_bot.policy.actions import (
    FieldKind,
    ModalDefinition,
    ModalField,
    OutboundAction,
    PostMessage,
    UpdateMessage,
    open_modal,
    update_modal,
)
from solvook_bot.policy.responses import BOT_NAME

# Correlation identifiers
TASK_MODAL_ID = "task_modal"
TASK_CONFIRM_ID = "task_confirm"

# Block / action identifiers of the task modal
TITLE_BLOCK, TITLE_INPUT = "task_title", "title_input"
DESCRIPTION_BLOCK, DESCRIPTION_INPUT = "task_description", "description_input"
PRIORITY_BLOCK, PRIORITY_SELECT = "task_priority", "priority_select"
ASSIGNEE_BLOCK, ASSIGNEE_SELECT = "task_assignee", "assignee_select"
DUE_DATE_BLOCK, DUE_DATE_SELECT = "task_due_date", "due_date_select"
SHARE_BLOCK, SHARE_SELECT = "task_share", "share_channel_select"

TASK_DONE_ACTION = "task_done"
START_TASK_ACTION = "start_task"

PRIORITIES = (
    ("🔴 High", "high"),
    ("🟡 Medium", "medium"),
    ("🟢 Low", "low"),
)
PRIORITY_LABELS = {value: label for label, value in PRIORITIES}

# Slack caps button values at 2000 characters
BUTTON_VALUE_MAX = 2000

# Keeps the step-one draft inside private_metadata and the summary inside one section
TITLE_MAX = 150
DESCRIPTION_MAX = 1000


class TaskDraft(BaseModel):
    """Answers collected by the first step of the task workflow."""
    title: str
    description: Optional[str] = None
    priority: Optional[str] = None
    assignee: Optional[str] = None

    def summary_lines(self) -> List[str]:
        lines = [f"*{self.title}*"]
        if self.priority:
            lines.append(f"Priority: {PRIORITY_LABELS.get(self.priority, self.priority)}")
        if self.assignee:
            lines.append(f"Assignee: {blocks.user_mention(self.assignee)}")
        if self.description:
            lines.append(f"Description: {self.description}")
        return lines


# Help modal

def help_modal() -> ModalDefinition:
    return ModalDefinition(
        title="Bot Help Guide",
        close_label="Close",
        intro_blocks=[
            blocks.header(f"Welcome to {BOT_NAME}!"),
            blocks.section("This bot helps you with various tasks in your Slack workspace."),
            blocks.divider(),
            blocks.section("*📝 Slash Commands*"),
            blocks.section(
                "• /hello - Receive a personalized greeting\n"
                "• /ping - Test bot responsiveness\n"
                "• /help - Display available commands",
                markdown=False,
            ),
            blocks.divider(),
            blocks.section("*💬 Interactions*"),
            blocks.section(
                "• Mention the bot to get its attention\n"
                "• Send direct messages for private help\n"
                "• The bot reacts to urgent keywords",
                markdown=False,
            ),
            blocks.divider(),
            blocks.section("*🎯 Tips*"),
            blocks.section(
                "• Use thread replies to keep conversations organized\n"
                '• Check bot status with "status" mentions\n'
                '• Get quick help by typing "help" in DM',
                markdown=False,
            ),
            blocks.actions(blocks.button("Create a Task", START_TASK_ACTION, style="primary")),
        ],
    )


def view_help_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    return [open_modal(classified.event.trigger_id, help_modal())]


# Task workflow, step one

def task_modal() -> ModalDefinition:
    return ModalDefinition(
        title="Create New Task",
        callback_id=TASK_MODAL_ID,
        submit_label="Next",
        close_label="Cancel",
        fields=[
            ModalField(
                block_id=TITLE_BLOCK, action_id=TITLE_INPUT, label="Task Title",
                placeholder="Enter task title", max_length=TITLE_MAX,
            ),
            ModalField(
                block_id=DESCRIPTION_BLOCK, action_id=DESCRIPTION_INPUT, label="Description",
                kind=FieldKind.MULTILINE, required=False, placeholder="Describe your task",
                max_length=DESCRIPTION_MAX,
            ),
            ModalField(
                block_id=PRIORITY_BLOCK, action_id=PRIORITY_SELECT, label="Priority",
                kind=FieldKind.STATIC_SELECT, placeholder="Select priority", options=PRIORITIES,
            ),
            ModalField(
                block_id=ASSIGNEE_BLOCK, action_id=ASSIGNEE_SELECT, label="Assign To",
                kind=FieldKind.USERS_SELECT, required=False, placeholder="Select a user",
            ),
        ],
    )


def create_task_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    """The ``create_task`` shortcut opens step one."""
    return [open_modal(classified.event.trigger_id, task_modal())]


def start_task_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    """The help modal's button swaps the open help view for step one."""
    event = classified.event
    return [update_modal(event.view_id, task_modal(), view_hash=event.view_hash)]


def _text_value(values: Dict[str, Any], action_id: str) -> Optional[str]:
    value = values.get(action_id)
    if isinstance(value, str):
        value = value.strip()
    return value or None


def draft_from_submission(values: Dict[str, Any]) -> Optional[TaskDraft]:
    """Build the step-one draft, or None if the title is blank."""
    title = _text_value(values, TITLE_INPUT)
    if not title:
        return None
    return TaskDraft(
        title=title,
        description=_text_value(values, DESCRIPTION_INPUT),
        priority=_text_value(values, PRIORITY_SELECT),
        assignee=_text_value(values, ASSIGNEE_SELECT),
    )


def confirm_modal(draft: TaskDraft) -> ModalDefinition:
    return ModalDefinition(
        title="Confirm Task",
        callback_id=TASK_CONFIRM_ID,
        submit_label="Create",
        close_label="Cancel",
        intro_blocks=[
            blocks.section("\n".join(draft.summary_lines())),
            blocks.divider(),
        ],
        fields=[
            ModalField(
                block_id=DUE_DATE_BLOCK, action_id=DUE_DATE_SELECT, label="Due Date",
                kind=FieldKind.DATEPICKER, required=False, placeholder="Pick a date",
            ),
            ModalField(
                block_id=SHARE_BLOCK, action_id=SHARE_SELECT, label="Share In Channel",
                kind=FieldKind.CONVERSATIONS_SELECT, required=False, placeholder="Select a channel",
            ),
        ],
        private_metadata=draft.model_dump_json(exclude_none=True),
    )


def task_step_one_ack(classified: ClassifiedEvent) -> Dict[str, Any]:
    """
    Acknowledge the first submission.

    A blank or overlong answer keeps the modal open with an inline error;
    otherwise the open view is replaced by step two.
    """
    draft = draft_from_submission(classified.event.values)
    if draft is None:
        return {"response_action": "errors", "errors": {TITLE_BLOCK: "Please enter a task title"}}

    errors = {}
    if len(draft.title) > TITLE_MAX:
        errors[TITLE_BLOCK] = f"Titles can be at most {TITLE_MAX} characters"
    if draft.description and len(draft.description) > DESCRIPTION_MAX:
        errors[DESCRIPTION_BLOCK] = f"Descriptions can be at most {DESCRIPTION_MAX} characters"
    if errors:
        return {"response_action": "errors", "errors": errors}
    return {"response_action": "update", "view": confirm_modal(draft).to_view()}


# Task workflow, step two

def draft_from_metadata(private_metadata: str) -> TaskDraft:
    """
    Recover the step-one answers carried in the step-two view.

    Raises:
        ActionValidationError: If the metadata is missing or not a task draft
    """
    if not private_metadata:
        raise ActionValidationError("Task confirmation is missing its draft")
    try:
        return TaskDraft.model_validate_json(private_metadata)
    except ValidationError as e:
        raise ActionValidationError(f"Task confirmation carries an invalid draft: {e}") from e


def task_created_replies(classified: ClassifiedEvent) -> List[OutboundAction]:
    """
    Actions after the final submission: a DM to the submitter, a DM to the
    assignee (if someone else), and a shareable message in the chosen channel.
    """
    event = classified.event
    draft = draft_from_metadata(event.private_metadata)
    due_date = _text_value(event.values, DUE_DATE_SELECT)
    share_channel = _text_value(event.values, SHARE_SELECT)

    lines = draft.summary_lines()
    lines.append(f"Due date: {due_date or 'None'}")
    summary = "\n".join(lines)

    actions: List[OutboundAction] = [
        PostMessage(channel=event.user_id, text=f"Task created: {summary}")
    ]
    if draft.assignee and draft.assignee != event.user_id:
        actions.append(
            PostMessage(
                channel=draft.assignee,
                text=f"{blocks.user_mention(event.user_id)} assigned you a task: {summary}",
            )
        )
    if share_channel:
        actions.append(
            PostMessage(
                channel=share_channel,
                text=f"New task from {blocks.user_mention(event.user_id)}: {draft.title}",
                blocks=[
                    blocks.section(f"📋 New task from {blocks.user_mention(event.user_id)}\n{summary}"),
                    blocks.actions(
                        blocks.button("Mark Done", TASK_DONE_ACTION, value=draft.title[:BUTTON_VALUE_MAX])
                    ),
                ],
            )
        )
    return actions


def task_done_reply(classified: ClassifiedEvent) -> List[OutboundAction]:
    """Replace a shared task message with its completed form."""
    event = classified.event
    if not event.channel_id or not event.ts:
        raise ActionValidationError("Cannot complete a task without its message")
    title = event.value or "Task"
    completed_by = blocks.user_mention(event.user_id)
    return [
        UpdateMessage(
            channel=event.channel_id,
            ts=event.ts,
            text=f"✅ {title} completed by {completed_by}",
            blocks=[blocks.section(f"✅ ~{title}~\nCompleted by {completed_by}")],
        )
    ]

"""Tests for decoding and classifying inbound Slack deliveries."""

from solvook_bot.events.classifier import classify, decode, form_values, is_direct_message
from solvook_bot.events.models import (
    ButtonClick,
    EventCategory,
    MemberJoined,
    Mention,
    Message,
    ModalSubmit,
    ShortcutInvoke,
    SlashCommand,
)
from tests.conftest import BOT_USER_ID, EVENTS_API, INTERACTIVE, SLASH_COMMANDS, SlackPayloadFactory


class TestDecode:
    """Raw payloads become closed event variants."""

    def test_mention(self):
        event = decode(EVENTS_API, SlackPayloadFactory.mention(text="<@UBOT> status", user="U2"))

        assert isinstance(event, Mention)
        assert event.category == EventCategory.MENTION
        assert event.user_id == "U2"
        assert event.channel_id == "C1"
        assert event.ts == "1700000000.000200"

    def test_message_keeps_subtype_and_channel_type(self):
        event = decode(EVENTS_API, SlackPayloadFactory.message(subtype="message_changed", channel_type="channel"))

        assert isinstance(event, Message)
        assert event.subtype == "message_changed"
        assert event.channel_type == "channel"

    def test_member_joined(self):
        event = decode(EVENTS_API, SlackPayloadFactory.member_joined(user="U3", channel="C9"))

        assert isinstance(event, MemberJoined)
        assert event.user_id == "U3"
        assert event.channel_id == "C9"

    def test_slash_command(self):
        event = decode(SLASH_COMMANDS, SlackPayloadFactory.slash_command("/ping", text="now", user="U1"))

        assert isinstance(event, SlashCommand)
        assert event.command == "/ping"
        assert event.text == "now"
        assert event.trigger_id == "trigger-1"

    def test_button_click_uses_first_action(self):
        payload = SlackPayloadFactory.button("channel_info", value="C5")
        payload["actions"].append({"action_id": "other", "value": "ignored"})

        event = decode(INTERACTIVE, payload)

        assert isinstance(event, ButtonClick)
        assert event.action_id == "channel_info"
        assert event.value == "C5"
        assert event.channel_id == "C1"
        assert event.ts == "1700000000.000300"

    def test_button_click_in_modal_has_view_id_and_no_channel(self):
        event = decode(INTERACTIVE, SlackPayloadFactory.button("start_task", channel=None, view_id="V9", view_hash="h9"))

        assert isinstance(event, ButtonClick)
        assert event.view_id == "V9"
        assert event.view_hash == "h9"
        assert event.channel_id is None

    def test_button_click_without_actions_is_dropped(self):
        payload = SlackPayloadFactory.button()
        payload["actions"] = []

        assert decode(INTERACTIVE, payload) is None

    def test_shortcut(self):
        event = decode(INTERACTIVE, SlackPayloadFactory.shortcut("create_task"))

        assert isinstance(event, ShortcutInvoke)
        assert event.callback_id == "create_task"
        assert event.trigger_id == "trigger-3"

    def test_view_submission_flattens_state(self):
        state = {
            "task_title": {"title_input": {"type": "plain_text_input", "value": "Write docs"}},
            "task_priority": {"priority_select": {"type": "static_select", "selected_option": {"value": "high"}}},
            "task_assignee": {"assignee_select": {"type": "users_select", "selected_user": "U7"}},
        }

        event = decode(INTERACTIVE, SlackPayloadFactory.view_submission("task_modal", state, private_metadata="{}"))

        assert isinstance(event, ModalSubmit)
        assert event.callback_id == "task_modal"
        assert event.view_id == "V1"
        assert event.private_metadata == "{}"
        assert event.values == {"title_input": "Write docs", "priority_select": "high", "assignee_select": "U7"}

    def test_unsupported_shapes_are_dropped(self):
        assert decode(EVENTS_API, SlackPayloadFactory.event("reaction_added", user="U1")) is None
        assert decode(INTERACTIVE, {"type": "message_action"}) is None
        assert decode("hello", {"type": "hello"}) is None
        assert decode(EVENTS_API, None) is None

    def test_malformed_payloads_are_dropped(self):
        # A slash command without a command name fails validation
        assert decode(SLASH_COMMANDS, {"user_id": "U1"}) is None
        # ``event`` is not a mapping
        assert decode(EVENTS_API, {"type": "event_callback", "event": "oops"}) is None


class TestFormValues:
    """Submitted view state is flattened per action id."""

    def test_element_types(self):
        values = form_values({
            "a": {"text": {"value": "x"}},
            "b": {"empty_select": {"selected_option": None}},
            "c": {"multi": {"selected_options": [{"value": "1"}, {"value": "2"}]}},
            "d": {"conversation": {"selected_conversation": "C2"}},
            "e": {"date": {"selected_date": "2024-01-31"}},
            "f": {"unknown": {"type": "checkboxes"}},
        })

        assert values == {
            "text": "x",
            "empty_select": None,
            "multi": ["1", "2"],
            "conversation": "C2",
            "date": "2024-01-31",
            "unknown": None,
        }


class TestClassify:
    """Normalization and the drop rules."""

    def test_message_from_the_bot_itself_is_dropped(self):
        event = decode(EVENTS_API, SlackPayloadFactory.message(text="hello", user=BOT_USER_ID))

        assert classify(event, BOT_USER_ID) is None

    def test_message_with_bot_id_is_dropped(self):
        event = decode(EVENTS_API, SlackPayloadFactory.message(text="urgent", bot_id="B1"))

        assert classify(event, BOT_USER_ID) is None

    def test_message_with_subtype_is_dropped(self):
        for subtype in ("message_changed", "message_deleted", "channel_join"):
            event = decode(EVENTS_API, SlackPayloadFactory.message(text="urgent", subtype=subtype))
            assert classify(event, BOT_USER_ID) is None

    def test_message_without_text_is_dropped(self):
        event = decode(EVENTS_API, SlackPayloadFactory.message(text=None))

        assert classify(event, BOT_USER_ID) is None

    def test_mention_from_a_bot_is_dropped(self):
        event = decode(EVENTS_API, SlackPayloadFactory.mention(bot_id="B2"))

        assert classify(event, BOT_USER_ID) is None

    def test_text_is_lower_cased(self):
        event = decode(EVENTS_API, SlackPayloadFactory.mention(text="<@UBOT> STATUS Please"))

        classified = classify(event, BOT_USER_ID)

        assert classified.text == "<@ubot> status please"
        assert classified.event.text == "<@UBOT> STATUS Please"
        assert classified.is_from_bot is False

    def test_direct_message_detection(self):
        by_type = decode(EVENTS_API, SlackPayloadFactory.direct_message(channel="C77"))
        by_channel = decode(EVENTS_API, SlackPayloadFactory.message(channel="D42"))
        in_channel = decode(EVENTS_API, SlackPayloadFactory.message(channel="C42"))

        assert is_direct_message(by_type)
        assert is_direct_message(by_channel)
        assert not is_direct_message(in_channel)
        assert classify(by_type, BOT_USER_ID).is_direct_message is True

    def test_unknown_bot_identity_keeps_user_messages(self):
        event = decode(EVENTS_API, SlackPayloadFactory.message(text="hello", user="U1"))

        assert classify(event, None) is not None

    def test_user_initiated_categories(self):
        command = classify(decode(SLASH_COMMANDS, SlackPayloadFactory.slash_command()), BOT_USER_ID)
        button = classify(decode(INTERACTIVE, SlackPayloadFactory.button()), BOT_USER_ID)
        shortcut = classify(decode(INTERACTIVE, SlackPayloadFactory.shortcut()), BOT_USER_ID)
        message = classify(decode(EVENTS_API, SlackPayloadFactory.message()), BOT_USER_ID)

        assert command.user_initiated
        assert button.user_initiated
        assert not shortcut.user_initiated
        assert not message.user_initiated

    def test_classify_is_idempotent(self):
        payloads = [
            (EVENTS_API, SlackPayloadFactory.mention(text="Hello <@UBOT>")),
            (EVENTS_API, SlackPayloadFactory.direct_message(text="URGENT: help")),
            (SLASH_COMMANDS, SlackPayloadFactory.slash_command("/hello", text="World")),
            (INTERACTIVE, SlackPayloadFactory.button("channel_info", value="C1")),
        ]
        for envelope_type, payload in payloads:
            event = decode(envelope_type, payload)
            first = classify(event, BOT_USER_ID)
            second = classify(event, BOT_USER_ID)

            assert first == second
            assert decode(envelope_type, payload) == event

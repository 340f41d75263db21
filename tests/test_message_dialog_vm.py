"""Tests for the message dialog view model."""

import asyncio

import pytest
from conftest import Observer, make_backing_query, make_project_query

from kickstarter_pamphlet.api.errors import GraphQLError, KickstarterAPIError
from kickstarter_pamphlet.api.ids import encode_id
from kickstarter_pamphlet.api.mock_service import MockService
from kickstarter_pamphlet.api.query_data import (
    message_from_mutation,
    project_and_backing_from_query,
    project_pamphlet_data_from_query,
)
from kickstarter_pamphlet.models.backing import Backing
from kickstarter_pamphlet.models.message import (
    Message,
    MessageDialogContext,
    MessageSubject,
    MessageThread,
)
from kickstarter_pamphlet.models.user import User
from kickstarter_pamphlet.viewmodels.environment import Environment
from kickstarter_pamphlet.viewmodels.message_dialog_vm import (
    DEFAULT_ERROR_MESSAGE,
    MessageDialogViewModel,
)

THREAD = MessageThread(id=1, participant=User(id=2, name="Blobber"))


class RecordingTracker:
    def __init__(self):
        self.messages_sent = []

    def track_project_viewed(self, project, ref_tag):
        pass

    def track_message_sent(self, context):
        self.messages_sent.append(context)


class Outputs:
    def __init__(self, vm):
        self.loading_view_is_hidden = Observer(vm.loading_view_is_hidden)
        self.post_button_enabled = Observer(vm.post_button_enabled)
        self.posted = Observer(vm.notify_presenter_comment_was_posted_successfully)
        self.dismissal = Observer(vm.notify_presenter_dialog_wants_dismissal)
        self.recipient_name = Observer(vm.recipient_name)
        self.keyboard_is_visible = Observer(vm.keyboard_is_visible)
        self.alert = Observer(vm.show_alert_message)


def make_vm(service=None, tracker=None):
    env = Environment(api_service=service or MockService(), tracker=tracker or RecordingTracker())
    vm = MessageDialogViewModel(env)
    return vm, Outputs(vm)


@pytest.mark.parametrize(
    "subject,expected",
    [
        (MessageSubject.of_thread(THREAD), "Blobber"),
        (
            MessageSubject.of_project(
                project_pamphlet_data_from_query(make_project_query()).project
            ),
            "Peppermint Fox",
        ),
        (
            MessageSubject.of_backing(
                project_and_backing_from_query(make_backing_query()).backing
            ),
            "Backer McGee",
        ),
    ],
)
def test_recipient_name(subject, expected):
    async def scenario():
        vm, out = make_vm()
        vm.configure_with(subject, MessageDialogContext.MESSAGES)
        vm.view_did_load()
        assert out.recipient_name.values == [expected]

    asyncio.run(scenario())


def test_recipient_name_fetches_backer():
    async def scenario():
        service = MockService(fetch_user_result=User(id=5, name="Fetched Backer"))
        vm, out = make_vm(service)
        vm.configure_with(
            MessageSubject.of_backing(Backing(id=1, backer_id=5)),
            MessageDialogContext.BACKER_MODAL,
        )
        vm.view_did_load()
        assert out.recipient_name.values == []

        await vm.wait_until_idle()
        assert out.recipient_name.values == ["Fetched Backer"]
        assert service.calls == [("fetch_user", 5)]

    asyncio.run(scenario())


def test_view_did_load_initial_outputs():
    async def scenario():
        vm, out = make_vm()
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()

        assert out.loading_view_is_hidden.values == [True]
        assert out.post_button_enabled.values == [False]
        assert out.keyboard_is_visible.values == [True]

    asyncio.run(scenario())


def test_post_button_enabled():
    async def scenario():
        vm, out = make_vm()
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()

        vm.body_text_changed("HELLO")
        vm.body_text_changed("HELLO!")
        vm.body_text_changed("")
        vm.body_text_changed("   ")
        vm.body_text_changed("  hi")

        assert out.post_button_enabled.values == [False, True, False, True]

    asyncio.run(scenario())


def test_cancel_button():
    async def scenario():
        vm, out = make_vm()
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()
        vm.cancel_button_pressed()

        assert out.keyboard_is_visible.values == [True, False]
        assert len(out.dismissal) == 1
        assert out.posted.values == []

    asyncio.run(scenario())


def test_posting_message():
    async def scenario():
        message = Message(id=1, body="HELLO")
        service = MockService(send_message_result=message)
        tracker = RecordingTracker()
        vm, out = make_vm(service, tracker)
        subject = MessageSubject.of_thread(THREAD)
        vm.configure_with(subject, MessageDialogContext.PROJECT_MESSAGES)
        vm.view_did_load()

        vm.body_text_changed("HELLO")
        vm.post_button_pressed()
        assert out.loading_view_is_hidden.values == [True, False]
        assert out.posted.values == []

        await vm.wait_until_idle()

        assert out.loading_view_is_hidden.values == [True, False, True]
        assert out.keyboard_is_visible.values == [True, False]
        assert out.posted.values == [message]
        assert len(out.dismissal) == 1
        assert out.alert.values == []
        assert service.calls == [("send_message", ("HELLO", subject))]
        assert tracker.messages_sent == [MessageDialogContext.PROJECT_MESSAGES]

    asyncio.run(scenario())


def test_second_post_while_sending_is_ignored():
    async def scenario():
        service = MockService(send_message_result=Message(id=1, body="HELLO"), delay=0.01)
        vm, out = make_vm(service)
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()

        vm.body_text_changed("HELLO")
        vm.post_button_pressed()
        vm.post_button_pressed()
        await vm.wait_until_idle()

        assert service.call_count("send_message") == 1
        assert len(out.posted) == 1

    asyncio.run(scenario())


@pytest.mark.parametrize(
    "error,alert",
    [
        (GraphQLError([{"message": "Recipient has blocked you"}]), "Recipient has blocked you"),
        (KickstarterAPIError(500, ""), DEFAULT_ERROR_MESSAGE),
    ],
)
def test_posting_message_error(error, alert):
    async def scenario():
        tracker = RecordingTracker()
        vm, out = make_vm(MockService(send_message_result=error), tracker)
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()

        vm.body_text_changed("HELLO")
        vm.post_button_pressed()
        await vm.wait_until_idle()

        assert out.loading_view_is_hidden.values == [True, False, True]
        assert out.alert.values == [alert]
        assert out.posted.values == []
        assert out.dismissal.values == []
        assert out.keyboard_is_visible.values == [True]
        assert tracker.messages_sent == []

    asyncio.run(scenario())


class RawMutationService(MockService):
    """Runs the real mutation adapter over a raw GraphQL ``data`` document."""

    def __init__(self, data):
        super().__init__()
        self.data = data

    async def send_message(self, body, subject):
        self.calls.append(("send_message", (body, subject)))
        return message_from_mutation(self.data)


def test_malformed_send_response_shows_alert():
    async def scenario():
        data = {"sendMessage": {"message": {"id": encode_id("Message", 1), "body": ["HELLO"]}}}
        vm, out = make_vm(RawMutationService(data))
        vm.configure_with(MessageSubject.of_thread(THREAD), MessageDialogContext.MESSAGES)
        vm.view_did_load()

        vm.body_text_changed("HELLO")
        vm.post_button_pressed()
        await vm.wait_until_idle()

        assert out.loading_view_is_hidden.values == [True, False, True]
        assert out.alert.values == ["Could not parse response"]
        assert out.posted.values == []

    asyncio.run(scenario())

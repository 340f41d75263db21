"""View model for the dialog that composes a new message."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from kickstarter_pamphlet.api.errors import KickstarterAPIError
from kickstarter_pamphlet.models.message import Message, MessageDialogContext, MessageSubject
from kickstarter_pamphlet.viewmodels.environment import Environment
from kickstarter_pamphlet.viewmodels.signal import Signal

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong, please try again."


class MessageDialogViewModel:
    def __init__(self, environment: Optional[Environment] = None):
        self.env = environment or Environment()

        self.loading_view_is_hidden: Signal[bool] = Signal("loading_view_is_hidden")
        self.post_button_enabled: Signal[bool] = Signal("post_button_enabled")
        self.notify_presenter_comment_was_posted_successfully: Signal[Message] = Signal(
            "notify_presenter_comment_was_posted_successfully"
        )
        self.notify_presenter_dialog_wants_dismissal: Signal[None] = Signal(
            "notify_presenter_dialog_wants_dismissal"
        )
        self.recipient_name: Signal[str] = Signal("recipient_name")
        self.keyboard_is_visible: Signal[bool] = Signal("keyboard_is_visible")
        self.show_alert_message: Signal[str] = Signal("show_alert_message")

        self._subject: Optional[MessageSubject] = None
        self._context = MessageDialogContext.MESSAGES
        self._body = ""
        self._post_enabled: Optional[bool] = None
        self._recipient_task: Optional[asyncio.Task] = None
        self._post_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def configure_with(self, message_subject: MessageSubject, context: MessageDialogContext):
        self._subject = message_subject
        self._context = context

    def view_did_load(self):
        self.loading_view_is_hidden.send(True)
        self._set_post_enabled(False)
        self.keyboard_is_visible.send(True)
        self._emit_recipient_name()

    def body_text_changed(self, text: str):
        self._body = text
        self._set_post_enabled(bool(text.strip()))

    def post_button_pressed(self):
        if self._subject is None:
            return
        if self._post_task is not None and not self._post_task.done():
            logger.debug("Ignoring post while a message is being sent")
            return
        self.loading_view_is_hidden.send(False)
        self._post_task = asyncio.get_running_loop().create_task(
            self._send(self._body, self._subject)
        )

    def cancel_button_pressed(self):
        self.keyboard_is_visible.send(False)
        self.notify_presenter_dialog_wants_dismissal.send(None)

    async def wait_until_idle(self):
        tasks = [t for t in (self._recipient_task, self._post_task) if t is not None]
        await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_post_enabled(self, enabled: bool):
        if enabled == self._post_enabled:
            return
        self._post_enabled = enabled
        self.post_button_enabled.send(enabled)

    def _emit_recipient_name(self):
        subject = self._subject
        if subject is None:
            return
        if subject.message_thread is not None:
            self.recipient_name.send(subject.message_thread.participant.name)
        elif subject.project is not None:
            self.recipient_name.send(subject.project.creator.name)
        elif subject.backing.backer is not None:
            self.recipient_name.send(subject.backing.backer.name)
        elif subject.backing.backer_id is not None:
            self._recipient_task = asyncio.get_running_loop().create_task(
                self._fetch_backer_name(subject.backing.backer_id)
            )

    async def _fetch_backer_name(self, backer_id: int):
        try:
            backer = await self.env.api_service.fetch_user(backer_id)
        except KickstarterAPIError as e:
            logger.warning(f"Could not fetch backer {backer_id}: {e}")
            return
        self.recipient_name.send(backer.name)

    async def _send(self, body: str, subject: MessageSubject):
        try:
            message = await self.env.api_service.send_message(body, subject)
        except KickstarterAPIError as e:
            logger.warning(f"Sending message failed: {e}")
            self.loading_view_is_hidden.send(True)
            self.show_alert_message.send(e.message or DEFAULT_ERROR_MESSAGE)
            return

        self.env.tracker.track_message_sent(self._context)
        self.loading_view_is_hidden.send(True)
        self.keyboard_is_visible.send(False)
        self.notify_presenter_comment_was_posted_successfully.send(message)
        self.notify_presenter_dialog_wants_dismissal.send(None)

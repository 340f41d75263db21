"""Messaging records used by the message dialog."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import model_validator

from kickstarter_pamphlet.models.backing import Backing
from kickstarter_pamphlet.models.base import DomainModel
from kickstarter_pamphlet.models.project import Project
from kickstarter_pamphlet.models.user import User


class Message(DomainModel):
    id: int
    body: str
    created_at: Optional[float] = None
    sender: Optional[User] = None
    recipient: Optional[User] = None


class MessageThread(DomainModel):
    id: int
    participant: User
    project: Optional[Project] = None
    last_message: Optional[Message] = None
    unread_messages_count: int = 0
    closed: bool = False


class MessageSubject(DomainModel):
    """What a new message is about: a thread, a backing or a project."""

    message_thread: Optional[MessageThread] = None
    backing: Optional[Backing] = None
    project: Optional[Project] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "MessageSubject":
        given = [v for v in (self.message_thread, self.backing, self.project) if v is not None]
        if len(given) != 1:
            raise ValueError("MessageSubject needs exactly one of message_thread, backing, project")
        return self

    @property
    def recipient_id(self) -> Optional[int]:
        if self.message_thread is not None:
            return self.message_thread.participant.id
        if self.backing is not None:
            return self.backing.backer.id if self.backing.backer else self.backing.backer_id
        return self.project.creator.id

    @property
    def project_id(self) -> Optional[int]:
        if self.message_thread is not None:
            return self.message_thread.project.id if self.message_thread.project else None
        if self.backing is not None:
            return self.backing.project_id
        return self.project.id

    @classmethod
    def of_thread(cls, thread: MessageThread) -> "MessageSubject":
        return cls(message_thread=thread)

    @classmethod
    def of_backing(cls, backing: Backing) -> "MessageSubject":
        return cls(backing=backing)

    @classmethod
    def of_project(cls, project: Project) -> "MessageSubject":
        return cls(project=project)


class MessageDialogContext(str, Enum):
    BACKER_MODAL = "backer_modal"
    CREATOR_ACTIVITY = "creator_activity"
    MESSAGES = "messages"
    PROJECT_MESSAGES = "project_messages"
    PROJECT_PAGE = "project_page"

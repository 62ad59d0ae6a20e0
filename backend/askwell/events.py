"""
Askwell Backend — Domain Events
===============================

What:  Facts emitted by write paths for side-effect consumers.
How:   Write services build an event after their own mutation has been
       flushed and hand it to `notification_dispatcher.dispatch(db, event)`
       in the same session, so the side effect commits or rolls back with
       the write that caused it.

    AnswerService.create_answer ──▶ AnswerCreated  ──┐
                                                     ├──▶ NotificationDispatcher
    AcceptanceService.accept_answer ▶ AnswerAccepted ┘
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DomainEvent:
    """Base for events; carries the ids every consumer needs."""

    question_id: int
    answer_id: int
    question_author_id: str
    answer_author_id: str


@dataclass(frozen=True)
class AnswerCreated(DomainEvent):
    """A new answer was posted. The actor is the answer's author."""


@dataclass(frozen=True)
class AnswerAccepted(DomainEvent):
    """An answer became the accepted one. The actor is the question's author."""

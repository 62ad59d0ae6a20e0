"""
Askwell Backend — ORM Models
============================

Importing this package registers every table on `Base.metadata`, which is
what Alembic autogenerate and the test suite's `create_all` read.
"""

from askwell.models.user import User
from askwell.models.question import Question
from askwell.models.answer import Answer
from askwell.models.tag import QuestionTag, Tag
from askwell.models.vote import TargetType, Vote, VoteType
from askwell.models.notification import Notification, NotificationType

__all__ = [
    "Answer",
    "Notification",
    "NotificationType",
    "Question",
    "QuestionTag",
    "Tag",
    "TargetType",
    "User",
    "Vote",
    "VoteType",
]

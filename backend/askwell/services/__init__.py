"""
Askwell Backend — Services Layer
================================

What:  Business rules between the routes (HTTP) and the ORM models.
How:   Each service is a stateless class with a module-level singleton.
       Every coroutine takes the request's AsyncSession first, flushes its
       writes and leaves commit/rollback to `get_db_session`.

Service Inventory:
    - TagService:          tag normalization, the tag counter, tag directory
    - VoteService:         the vote ledger and derived vote counters
    - AcceptanceService:   accepted-answer exclusivity and ownership
    - NotificationService: notification read side
    - NotificationDispatcher: domain events → notification rows
    - QueryService:        read-side question/answer aggregates
    - QuestionService:     asking a question (question + tags)
    - AnswerService:       answering a question (answer + notification)
    - UserService:         user directory and statistics
"""

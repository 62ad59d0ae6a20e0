"""
Askwell Backend — Tag Service (the tag counter)
===============================================

What:  Normalizes tag names, links tags to new questions while keeping
       `tags.question_count` in step with `question_tags`, and serves the
       tag directory (list, popular, search, manual create).
Who:   `resolve_tags_for_question` is called only by QuestionService, inside
       the question's transaction. The directory methods back /api/tags.

Resolution per normalized name:
    UPDATE tags SET question_count = question_count + 1 WHERE name = :name
      ├─ 1 row  → existing tag, counted
      └─ 0 rows → INSERT new tag (question_count = 1) inside a SAVEPOINT
                    └─ IntegrityError (a concurrent request inserted it
                       first) → savepoint rolled back, UPDATE again
    INSERT question_tags (question_id, tag_id)
"""

import logging
import zlib
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.config import settings
from askwell.exceptions import ConflictError, ValidationError
from askwell.models.tag import QuestionTag, Tag
from askwell.schemas.tag import TagRead
from askwell.services.base import translate_db_errors

logger = logging.getLogger(__name__)

TAG_PALETTE = (
    "#3B82F6",  # blue
    "#10B981",  # emerald
    "#8B5CF6",  # violet
    "#F59E0B",  # amber
    "#EF4444",  # red
    "#06B6D4",  # cyan
    "#84CC16",  # lime
    "#F97316",  # orange
    "#EC4899",  # pink
    "#6366F1",  # indigo
)

SEARCH_RESULT_LIMIT = 10


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    """Trim and lowercase, drop empties, dedupe keeping the first occurrence."""
    seen = set()
    normalized = []
    for raw in names:
        name = (raw or "").strip().lower()
        if name and name not in seen:
            seen.add(name)
            normalized.append(name)
    return normalized


def tag_color(name: str) -> str:
    """Stable palette colour for a tag name."""
    return TAG_PALETTE[zlib.crc32(name.encode("utf-8")) % len(TAG_PALETTE)]


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class TagService:
    """Tag counter and tag directory."""

    def validate_tag_names(self, names: Iterable[str]) -> List[str]:
        """
        Normalize and check tag names for a new question.

        Runs before any write, so a rejected question touches nothing.

        Raises:
            ValidationError: no usable tag, more than the configured maximum,
                             or a name longer than the tag column allows
        """
        if isinstance(names, str):
            raise ValidationError("Tags must be a list of names", field="tags")

        normalized = normalize_tag_names(names)
        if not normalized:
            raise ValidationError("At least one tag is required", field="tags")
        if len(normalized) > settings.max_tags_per_question:
            raise ValidationError(
                f"A question can have at most {settings.max_tags_per_question} tags",
                field="tags",
                context={"received": len(normalized)},
            )
        too_long = [n for n in normalized if len(n) > settings.max_tag_length]
        if too_long:
            raise ValidationError(
                f"Tag names can be at most {settings.max_tag_length} characters",
                field="tags",
                context={"tags": too_long},
            )
        return normalized

    async def resolve_tags_for_question(
        self,
        db: AsyncSession,
        question_id: int,
        tag_names: List[str],
    ) -> List[Tag]:
        """
        Count and link each (already normalized) tag name to a question.

        Returns the Tag rows in the order the names were given.
        """
        tags = []
        async with translate_db_errors("resolve_tags", question_id=question_id):
            for name in tag_names:
                tag = await self._count_tag(db, name)
                db.add(QuestionTag(question_id=question_id, tag_id=tag.id))
                tags.append(tag)
            await db.flush()

        logger.info(
            "Question %s tagged with %s", question_id, ", ".join(t.name for t in tags),
        )
        return tags

    async def _count_tag(self, db: AsyncSession, name: str) -> Tag:
        if not await self._increment(db, name):
            try:
                async with db.begin_nested():
                    db.add(Tag(name=name, color=tag_color(name), question_count=1))
                logger.debug("Created tag '%s'", name)
            except IntegrityError:
                logger.info("Tag '%s' was created concurrently; counting existing row", name)
                await self._increment(db, name)

        result = await db.execute(
            select(Tag)
            .where(Tag.name == name)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _increment(self, db: AsyncSession, name: str) -> bool:
        result = await db.execute(
            update(Tag)
            .where(Tag.name == name)
            .values(question_count=Tag.question_count + 1)
        )
        return result.rowcount > 0

    # ── Directory ─────────────────────────────────────────────────────────

    async def list_tags(self, db: AsyncSession) -> List[TagRead]:
        async with translate_db_errors("list_tags"):
            result = await db.execute(
                select(Tag).order_by(Tag.name).execution_options(populate_existing=True)
            )
            return [TagRead.model_validate(t) for t in result.scalars()]

    async def popular_tags(self, db: AsyncSession, limit: Optional[int] = None) -> List[TagRead]:
        limit = limit or settings.popular_tags_limit
        async with translate_db_errors("popular_tags"):
            result = await db.execute(
                select(Tag)
                .order_by(Tag.question_count.desc(), Tag.name)
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            return [TagRead.model_validate(t) for t in result.scalars()]

    async def search_tags(self, db: AsyncSession, query: str) -> List[TagRead]:
        """Case-insensitive substring match, most used first."""
        term = (query or "").strip().lower()
        if not term:
            return []
        async with translate_db_errors("search_tags"):
            result = await db.execute(
                select(Tag)
                .where(Tag.name.ilike(f"%{_escape_like(term)}%", escape="\\"))
                .order_by(Tag.question_count.desc(), Tag.name)
                .limit(SEARCH_RESULT_LIMIT)
                .execution_options(populate_existing=True)
            )
            return [TagRead.model_validate(t) for t in result.scalars()]

    async def create_tag(
        self,
        db: AsyncSession,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
    ) -> TagRead:
        """
        Create a tag outside of question creation. It starts with no questions.

        Raises:
            ValidationError: empty or over-long name
            ConflictError:   a tag with the same normalized name exists
        """
        normalized = normalize_tag_names([name])
        if not normalized:
            raise ValidationError("Tag name cannot be empty", field="name")
        tag_name = normalized[0]
        if len(tag_name) > settings.max_tag_length:
            raise ValidationError(
                f"Tag names can be at most {settings.max_tag_length} characters",
                field="name",
            )

        async with translate_db_errors("create_tag", name=tag_name):
            existing = await db.scalar(select(Tag.id).where(Tag.name == tag_name))
            if existing is not None:
                raise ConflictError(
                    message=f"Tag '{tag_name}' already exists",
                    context={"tag_id": existing},
                )
            tag = Tag(
                name=tag_name,
                description=description,
                color=color or tag_color(tag_name),
                question_count=0,
            )
            db.add(tag)
            await db.flush()

        logger.info("Tag '%s' created (id=%s)", tag.name, tag.id)
        return TagRead.model_validate(tag)


# Module-level singleton
tag_service = TagService()

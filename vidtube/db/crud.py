"""Store-level primitives shared by the handlers and read models.

Nothing here commits; the caller owns the transaction so multi-step writes
(cascading deletes, toggles) land atomically.
"""

import logging
import uuid
from typing import Any, TypeVar

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.models import Base, User, Video, WatchHistoryEntry
from vidtube.errors import BadRequest, NotFound, UnexpectedError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def parse_id(value: str | None, name: str = "id") -> str:
    """Validate an identifier and return its canonical form.

    Raises:
        BadRequest: If the value is missing or not a UUID
    """
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, TypeError, AttributeError):
        raise BadRequest(f"{name} is invalid")


def require_text(**fields: str | None) -> dict[str, str]:
    """Trim each field and reject missing or blank ones.

    Returns:
        The trimmed values keyed by field name
    """
    cleaned = {}
    for name, value in fields.items():
        value = value.strip() if isinstance(value, str) else ""
        if not value:
            raise BadRequest(f"{name} is required")
        cleaned[name] = value
    return cleaned


async def get_or_404(
    db: AsyncSession, model: type[ModelT], entity_id: str, label: str
) -> ModelT:
    """Load a row by primary key or raise NotFound."""
    entity = await db.get(model, entity_id)
    if entity is None:
        raise NotFound(f"{label} not found")
    return entity


async def get_user_by_id(db: AsyncSession, user_id: str) -> User | None:
    """Get a user by their ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_login(
    db: AsyncSession, username: str | None, email: str | None
) -> User | None:
    """Find the user matching either the username or the email."""
    clauses = []
    if username:
        clauses.append(User.username == username.strip().lower())
    if email:
        clauses.append(User.email == email.strip().lower())
    if not clauses:
        return None
    result = await db.execute(select(User).where(or_(*clauses)).limit(1))
    return result.scalar_one_or_none()


def _dialect_insert(db: AsyncSession):
    name = db.get_bind().dialect.name
    if name == "sqlite":
        return sqlite.insert
    if name == "postgresql":
        return postgresql.insert
    return None


async def insert_if_absent(db: AsyncSession, model: type[Base], **values: Any) -> bool:
    """Insert a row unless it would violate a uniqueness constraint.

    Returns:
        True if a row was written, False if an equivalent row already existed
    """
    dialect_insert = _dialect_insert(db)
    if dialect_insert is not None:
        stmt = dialect_insert(model).values(**values).on_conflict_do_nothing()
        result = await db.execute(stmt)
        return result.rowcount > 0

    # Generic backends: let the unique constraint decide inside a savepoint
    try:
        async with db.begin_nested():
            await db.execute(insert(model).values(**values))
    except IntegrityError:
        return False
    return True


async def delete_where(db: AsyncSession, model: type[Base], *criteria) -> int:
    """Delete matching rows and return how many went away."""
    result = await db.execute(delete(model).where(*criteria))
    return result.rowcount


async def toggle_row(db: AsyncSession, model: type[Base], **key: Any) -> bool:
    """Flip the presence of the row identified by ``key``.

    Deletes the row if present, otherwise inserts it. Each step is a single
    conditional statement, so concurrent toggles never produce duplicates.

    Returns:
        True if the row exists afterwards, False if it was removed
    """
    criteria = [getattr(model, column) == value for column, value in key.items()]
    if await delete_where(db, model, *criteria):
        return False
    await insert_if_absent(db, model, **key)
    return True


async def increment_views(db: AsyncSession, video_id: str, *criteria) -> bool:
    """Atomically bump the view counter of a video.

    Extra criteria guard the update (e.g. visibility); returns False when no
    row matched.
    """
    result = await db.execute(
        update(Video)
        .where(Video.id == video_id, *criteria)
        .values(views=Video.views + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def add_to_watch_history(db: AsyncSession, user_id: str, video_id: str) -> bool:
    """Add a video to the user's watch history with set semantics."""
    return await insert_if_absent(
        db, WatchHistoryEntry, user_id=user_id, video_id=video_id
    )


async def commit_or_fail(db: AsyncSession, action: str) -> None:
    """Commit the current transaction, mapping store failures to a 500.

    Integrity errors are left to the caller, which knows whether they mean a
    conflict.
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError:
        await db.rollback()
        logger.error(f"Database write failed while trying to {action}", exc_info=True)
        raise UnexpectedError(f"Could not {action}")

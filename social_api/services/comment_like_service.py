"""
Comment-like service: toggling a user's like on a comment.

Design notes
------------
- ``toggle_comment_like`` owns its unit of work.  It opens a session from
  the injected factory and runs every read and write inside one
  ``session.begin()`` block, so the like row, the post's engagement
  score and the notification commit together or not at all.  The
  session is closed on every exit path.
- The comment row is read ``FOR UPDATE``.  Toggles on the same comment
  therefore queue behind each other, which rules out two inserts for the
  same (comment, user) pair.  The composite primary key on
  ``comment_likes`` still backs this up; a violation surfaces as
  ``ConflictError`` rather than a double count.
- ``engagement_score`` is changed with ``SET col = col + :delta`` so
  concurrent likes from different users never overwrite each other.
- Nothing here retries.  A failed toggle is reported and the caller may
  try again.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.errors import (
    AuthenticationError,
    InternalError,
    NotFoundError,
    ServiceError,
    ValidationError,
    error_from_integrity,
)
from social_api.models import Comment, CommentLike, Notification, NotificationType, Post

logger = logging.getLogger(__name__)

ENGAGEMENT_SCORES = {
    "COMMENT_LIKE": 1,
}

COMMENT_LIKE_MESSAGE = "Your comment received a new like."


@dataclass(frozen=True)
class LikeToggleResult:
    liked: bool
    like_count: int


# ---------------------------------------------------------------------------
# Transaction steps
# ---------------------------------------------------------------------------

async def _adjust_engagement(db: AsyncSession, post_id: str, delta: int) -> None:
    result = await db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(engagement_score=Post.engagement_score + delta)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Comment or post not found")


async def count_comment_likes(db: AsyncSession, comment_id: str) -> int:
    q = select(func.count()).select_from(CommentLike).where(CommentLike.comment_id == comment_id)
    return (await db.execute(q)).scalar_one()


async def _toggle(db: AsyncSession, comment_id: str, user_id: str) -> LikeToggleResult:
    comment = (
        await db.execute(select(Comment).where(Comment.id == comment_id).with_for_update())
    ).scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")

    existing = await db.get(CommentLike, (comment_id, user_id))
    weight = ENGAGEMENT_SCORES["COMMENT_LIKE"]

    if existing is not None:
        await db.delete(existing)
        await db.flush()
        await _adjust_engagement(db, comment.post_id, -weight)
        liked = False
    else:
        db.add(CommentLike(comment_id=comment_id, user_id=user_id))
        await db.flush()
        await _adjust_engagement(db, comment.post_id, weight)

        # No notification for liking your own comment.
        if comment.author_id != user_id:
            db.add(
                Notification(
                    user_id=comment.author_id,
                    actor_id=user_id,
                    message=COMMENT_LIKE_MESSAGE,
                    type=NotificationType.COMMENT_LIKE,
                    comment_id=comment.id,
                )
            )
            await db.flush()
        liked = True

    like_count = await count_comment_likes(db, comment_id)
    return LikeToggleResult(liked=liked, like_count=like_count)


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def toggle_comment_like(
    session_factory: async_sessionmaker[AsyncSession],
    comment_id: str | None,
    user_id: str | None,
) -> LikeToggleResult:
    """
    Flip *user_id*'s like on *comment_id* and return the new state.

    Input and identity are checked before any session is opened.  The
    returned ``like_count`` is read inside the same transaction, after
    the mutation.

    Raises ``ValidationError``, ``AuthenticationError``, ``NotFoundError``,
    ``InvalidReferenceError``, ``ConflictError`` or ``InternalError``.
    """
    if comment_id is None or not comment_id.strip():
        raise ValidationError("Missing commentId")
    if not user_id:
        raise AuthenticationError("Authentication required")

    try:
        async with session_factory() as db:
            async with db.begin():
                result = await _toggle(db, comment_id, user_id)
    except ServiceError:
        raise
    except IntegrityError as exc:
        error = error_from_integrity(exc)
        if isinstance(error, InternalError):
            logger.exception("Comment like failed on an unexpected constraint")
        else:
            logger.info(
                "Comment like rejected for comment=%s user=%s: %s",
                comment_id,
                user_id,
                error.kind.value,
            )
        raise error from exc
    except SQLAlchemyError as exc:
        logger.exception("Comment like error for comment=%s user=%s", comment_id, user_id)
        raise InternalError() from exc

    logger.debug(
        "Comment %s %s by %s (count=%d)",
        comment_id,
        "liked" if result.liked else "unliked",
        user_id,
        result.like_count,
    )
    return result


async def get_like_status(db: AsyncSession, comment_id: str, user_id: str | None) -> dict:
    """
    Return whether *user_id* likes *comment_id*; ``liked`` is None for
    anonymous callers.

    Raises ``NotFoundError`` when the comment does not exist.  The count
    itself is resolved by the caller (cache-aside, see the router).
    """
    exists = (
        await db.execute(select(Comment.id).where(Comment.id == comment_id))
    ).scalar_one_or_none()
    if exists is None:
        raise NotFoundError("Comment not found")

    liked = None
    if user_id:
        liked = (await db.get(CommentLike, (comment_id, user_id))) is not None
    return {"comment_id": comment_id, "liked": liked}

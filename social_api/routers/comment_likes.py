from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from social_api.auth import get_current_user_id
from social_api.cache import cache
from social_api.database import get_db, get_session_factory
from social_api.schemas import CommentLikeStatus, ErrorResponse, LikeCommentRequest, LikeCommentResponse
from social_api.services import comment_like_service

router = APIRouter(tags=["comment-likes"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/like-comment", response_model=LikeCommentResponse, responses=_ERROR_RESPONSES)
async def like_comment(
    data: LikeCommentRequest,
    user_id: str | None = Depends(get_current_user_id),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    result = await comment_like_service.toggle_comment_like(
        session_factory, data.comment_id, user_id
    )
    # Committed; start a new cache generation for the read-side count.
    await cache.invalidate_like_count(data.comment_id)
    return LikeCommentResponse(liked=result.liked, like_count=result.like_count)


@router.get(
    "/comments/{comment_id}/likes",
    response_model=CommentLikeStatus,
    responses={404: {"model": ErrorResponse}},
)
async def get_comment_likes(
    comment_id: str,
    user_id: str | None = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    status = await comment_like_service.get_like_status(db, comment_id, user_id)

    # Generation first, so a toggle committed meanwhile orphans this write.
    generation = await cache.like_count_generation(comment_id)
    like_count = await cache.get_like_count(comment_id, generation)
    if like_count is None:
        like_count = await comment_like_service.count_comment_likes(db, comment_id)
        await cache.set_like_count(comment_id, generation, like_count)

    return CommentLikeStatus(
        comment_id=comment_id,
        like_count=like_count,
        liked=status["liked"],
    )

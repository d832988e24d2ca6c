from pydantic import BaseModel, ConfigDict, Field


# --- Comment likes ---

class LikeCommentRequest(BaseModel):
    # Optional so that a missing id is reported as 400 by the service, not 422
    comment_id: str | None = Field(None, alias="commentId")
    model_config = ConfigDict(populate_by_name=True)


class LikeCommentResponse(BaseModel):
    liked: bool
    like_count: int = Field(alias="likeCount")
    model_config = ConfigDict(populate_by_name=True)


class CommentLikeStatus(BaseModel):
    comment_id: str = Field(alias="commentId")
    like_count: int = Field(alias="likeCount")
    liked: bool | None = None
    model_config = ConfigDict(populate_by_name=True)


# --- Errors ---

class ErrorResponse(BaseModel):
    detail: str

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from blogspace.dependencies import get_current_user, get_db
from blogspace.errors import bad_request, internal_error, not_found
from blogspace.responses import respond
from blogspace.security import TokenClaims
from blogspace.serializers import serialize_comment
from blogspace.services import blogs as blog_service
from blogspace.services import comments as comment_service
from blogspace.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["comments"])

MIN_COMMENT_LENGTH = 3
MAX_COMMENT_LENGTH = 5000


class CommentCreate(BaseModel):
    content: str = Field(min_length=MIN_COMMENT_LENGTH, max_length=MAX_COMMENT_LENGTH)


class CommentUpdate(BaseModel):
    content: str = Field(min_length=MIN_COMMENT_LENGTH, max_length=MAX_COMMENT_LENGTH)


class CommentDeleteRequest(BaseModel):
    comment_id: int = Field(gt=0)


def clean_content(content: str) -> str:
    content = content.strip()
    if len(content) < MIN_COMMENT_LENGTH:
        raise bad_request("Invalid content", f"comment must be at least {MIN_COMMENT_LENGTH} characters")
    return content


@router.get("/api/blog/{blog_id}/comments")
def get_blog_comments(
    blog_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        if not blog_service.get_blog(db, blog_id):
            raise not_found("Blog not found")
        comments = comment_service.list_comments(db, blog_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error fetching comments for blog %s", blog_id)
        raise internal_error("Error fetching comments", e)

    return respond(
        status.HTTP_200_OK,
        "Comments fetched successfully",
        {"comments": [serialize_comment(c) for c in comments]},
    )


@router.post("/api/blog/{blog_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    blog_id: int,
    data: CommentCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    content = clean_content(data.content)

    try:
        if not blog_service.get_blog(db, blog_id):
            raise not_found("Blog not found")

        author = user_service.get_user(db, current_user.user_id)
        if not author:
            raise not_found("User not found")

        comment = comment_service.create_comment(
            db,
            blog_id=blog_id,
            user_id=author.id,
            author=author.username,
            content=content,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error creating comment on blog %s", blog_id)
        db.rollback()
        raise internal_error("Failed to create comment", e)

    return respond(status.HTTP_201_CREATED, "Comment created successfully", {"comment": serialize_comment(comment)})


@router.get("/api/comment/{comment_id}")
def get_comment_by_id(
    comment_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        comment = comment_service.get_comment(db, comment_id)
    except Exception as e:
        logger.exception("Error fetching comment %s", comment_id)
        raise internal_error("Error fetching comment", e)

    if not comment:
        raise not_found("Comment not found")

    return respond(status.HTTP_200_OK, "Comment fetched successfully", {"comment": serialize_comment(comment)})


@router.put("/api/comment/{comment_id}")
def update_comment(
    comment_id: int,
    data: CommentUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Owner-only edit. Someone else's comment looks exactly like a missing one."""
    content = clean_content(data.content)

    try:
        updated = comment_service.update_comment(db, comment_id, current_user.user_id, content)
        if not updated:
            raise not_found("Comment not found or not owned by user")
        comment = comment_service.get_comment(db, comment_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error updating comment %s", comment_id)
        db.rollback()
        raise internal_error("Failed to update comment", e)

    return respond(status.HTTP_200_OK, "Comment updated successfully", {"comment": serialize_comment(comment)})


def _delete_owned_comment(db: Session, comment_id: int, user_id: int):
    try:
        deleted = comment_service.delete_comment(db, comment_id, user_id)
    except Exception as e:
        logger.exception("Error deleting comment %s", comment_id)
        db.rollback()
        raise internal_error("Failed to delete comment", e)

    if not deleted:
        raise not_found("Comment not found or not owned by user")

    return respond(status.HTTP_200_OK, "Comment deleted successfully")


@router.delete("/api/comment/{comment_id}")
def delete_comment(
    comment_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _delete_owned_comment(db, comment_id, current_user.user_id)


@router.delete("/api/comment")
def delete_comment_by_body(
    data: CommentDeleteRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Body-addressed variant of the delete route; the owner always comes from the session."""
    return _delete_owned_comment(db, data.comment_id, current_user.user_id)

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.dependencies import get_current_user, get_db
from blogspace.errors import conflict, internal_error, not_found
from blogspace.responses import respond
from blogspace.security import TokenClaims
from blogspace.services import blogs as blog_service
from blogspace.services import likes as like_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["likes"])


class LikeRequest(BaseModel):
    blog_id: int = Field(gt=0)


@router.post("/like")
def like_blog(
    request: LikeRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        if not blog_service.get_blog(db, request.blog_id):
            raise not_found("Blog not found")

        if like_service.get_like_by_user_and_blog(db, current_user.user_id, request.blog_id):
            raise conflict("You have already liked this blog")

        like_service.like_blog(db, current_user.user_id, request.blog_id)
        total_likes = like_service.get_likes_for_blog(db, request.blog_id)
    except HTTPException:
        raise
    except IntegrityError as e:
        db.rollback()
        # The unique (user, blog) constraint caught a concurrent duplicate
        if like_service.get_like_by_user_and_blog(db, current_user.user_id, request.blog_id):
            raise conflict("You have already liked this blog")
        logger.exception("Integrity error liking blog %s", request.blog_id)
        raise internal_error("Failed to like blog", e)
    except Exception as e:
        logger.exception("Error liking blog %s", request.blog_id)
        db.rollback()
        raise internal_error("Failed to like blog", e)

    return respond(status.HTTP_200_OK, "Blog liked successfully", {"liked": True, "total_likes": total_likes})


@router.delete("/unlike")
def unlike_blog(
    request: LikeRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        removed = like_service.unlike_blog(db, current_user.user_id, request.blog_id)
        if not removed:
            raise not_found("You have not liked this blog")
        total_likes = like_service.get_likes_for_blog(db, request.blog_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error unliking blog %s", request.blog_id)
        db.rollback()
        raise internal_error("Failed to unlike blog", e)

    return respond(status.HTTP_200_OK, "Blog unliked successfully", {"liked": False, "total_likes": total_likes})


@router.get("/{blog_id}/likes")
def get_blog_likes(
    blog_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Like count for a blog and whether the caller has liked it"""
    try:
        if not blog_service.get_blog(db, blog_id):
            raise not_found("Blog not found")
        total_likes = like_service.get_likes_for_blog(db, blog_id)
        user_liked = like_service.get_like_by_user_and_blog(db, current_user.user_id, blog_id) is not None
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error getting likes for blog %s", blog_id)
        raise internal_error("Failed to get likes", e)

    return respond(
        status.HTTP_200_OK,
        "Likes fetched successfully",
        {"blog_id": blog_id, "total_likes": total_likes, "user_liked": user_liked},
    )

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from blogspace.dependencies import get_current_user, get_db
from blogspace.errors import bad_request, internal_error, not_found
from blogspace.responses import respond
from blogspace.security import TokenClaims
from blogspace.serializers import sanitize_user, serialize_blog
from blogspace.services import blogs as blog_service
from blogspace.services import users as user_service
from blogspace.services import views as view_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/blog", tags=["blog"])


class BlogCreate(BaseModel):
    title: str = Field(min_length=1, max_length=225)
    content: str = Field(min_length=1)


class BlogUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=225)
    content: str | None = Field(default=None, min_length=1)


def serialize_blogs(db: Session, blogs) -> list[dict]:
    counts = blog_service.get_blog_counts(db, [b.id for b in blogs])
    return [serialize_blog(b, **counts[b.id]) for b in blogs]


def clean_blog_fields(fields: dict) -> dict:
    cleaned = {}
    for name, value in fields.items():
        value = value.strip()
        if not value:
            raise bad_request("Invalid blog data", f"{name} must not be empty")
        cleaned[name] = value
    return cleaned


@router.get("")
@router.get("/all")
def get_all_blogs(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    user_id: int | None = Query(None, description="Only blogs written by this user"),
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List blogs, newest first"""
    try:
        blogs = blog_service.list_blogs(db, limit=limit, offset=offset, user_id=user_id)
        payload = serialize_blogs(db, blogs)
    except Exception as e:
        logger.exception("Error fetching blogs")
        raise internal_error("Failed to fetch blogs", e)

    return respond(status.HTTP_200_OK, "Blogs fetched successfully", {"blogs": payload})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_blog(
    data: BlogCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    fields = clean_blog_fields(data.model_dump())

    try:
        # The author name comes from the stored user, not the token, so a
        # renamed account never writes a stale display name.
        author = user_service.get_user(db, current_user.user_id)
        if not author:
            raise not_found("User not found")

        blog = blog_service.create_blog(
            db,
            user_id=author.id,
            author=author.username,
            title=fields["title"],
            content=fields["content"],
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error creating blog")
        db.rollback()
        raise internal_error("Failed to create blog", e)

    return respond(status.HTTP_201_CREATED, "Blog created successfully", {"blog": serialize_blog(blog)})


@router.get("/b/{blog_id}")
def get_blog_by_id(
    blog_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        blog = blog_service.get_blog(db, blog_id)
        if not blog:
            raise not_found("Blog not found")
        payload = serialize_blogs(db, [blog])[0]
        author = user_service.get_user(db, blog.user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error fetching blog %s", blog_id)
        raise internal_error("Error fetching blog", e)

    return respond(
        status.HTTP_200_OK,
        "Blog fetched successfully",
        {"blog": payload, "user": sanitize_user(author) if author else None},
    )


@router.put("/b/{blog_id}")
def update_blog(
    blog_id: int,
    data: BlogUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update title and/or content of one of the caller's own blogs."""
    fields = clean_blog_fields(data.model_dump(exclude_none=True))
    if not fields:
        raise bad_request("No fields to update")

    try:
        blog = blog_service.update_blog(db, blog_id, fields, owner_id=current_user.user_id)
        if not blog:
            raise not_found("Blog not found or not owned by user")
        payload = serialize_blogs(db, [blog])[0]
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error updating blog %s", blog_id)
        db.rollback()
        raise internal_error("Failed to update blog", e)

    return respond(status.HTTP_200_OK, "Blog updated successfully", {"blog": payload})


@router.delete("/b/{blog_id}")
def delete_blog(
    blog_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        deleted = blog_service.delete_blog(db, blog_id, owner_id=current_user.user_id)
    except Exception as e:
        logger.exception("Error deleting blog %s", blog_id)
        db.rollback()
        raise internal_error("Failed to delete blog", e)

    if not deleted:
        raise not_found("Blog not found or not owned by user")

    return respond(status.HTTP_200_OK, "Blog deleted successfully")


@router.post("/{blog_id}/view")
def record_view(
    blog_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Count the caller as a viewer of the blog; repeat views are not double-counted."""
    try:
        if not blog_service.get_blog(db, blog_id):
            raise not_found("Blog not found")
        _, created = view_service.record_view(db, current_user.user_id, blog_id)
        total = view_service.count_views(db, blog_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error recording view on blog %s", blog_id)
        db.rollback()
        raise internal_error("Could not update view", e)

    message = "View updated successfully" if created else "View already recorded"
    return respond(status.HTTP_200_OK, message, {"views": total, "created": created})

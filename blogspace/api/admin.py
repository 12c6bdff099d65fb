import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.api.auth import USERNAME_PATTERN
from blogspace.api.blogs import clean_blog_fields, serialize_blogs
from blogspace.api.comments import MAX_COMMENT_LENGTH, MIN_COMMENT_LENGTH, clean_content
from blogspace.dependencies import get_db, require_admin
from blogspace.errors import bad_request, conflict, internal_error, not_found
from blogspace.responses import respond
from blogspace.security import TokenClaims
from blogspace.serializers import sanitize_user, serialize_comment
from blogspace.services import admin as admin_service
from blogspace.services import blogs as blog_service
from blogspace.services import comments as comment_service
from blogspace.services import users as user_service

logger = logging.getLogger(__name__)

# Every route below requires an authenticated admin
router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


class AdminUserUpdate(BaseModel):
    id: int = Field(gt=0)
    username: str | None = Field(default=None, min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: EmailStr | None = None
    role: Literal["author", "admin"] | None = None


class AdminBlogUpdate(BaseModel):
    id: int = Field(gt=0)
    title: str | None = Field(default=None, min_length=1, max_length=225)
    content: str | None = Field(default=None, min_length=1)


class AdminCommentUpdate(BaseModel):
    id: int = Field(gt=0)
    content: str = Field(min_length=MIN_COMMENT_LENGTH, max_length=MAX_COMMENT_LENGTH)


@router.get("/dashboard")
def get_dashboard(db: Session = Depends(get_db)):
    try:
        dashboard = admin_service.get_dashboard_data(db)
    except Exception as e:
        logger.exception("Error building admin dashboard")
        raise internal_error("Error fetching dashboard data", e)

    return respond(status.HTTP_200_OK, "Dashboard data fetched successfully", {"dashboard": dashboard})


# Users

@router.get("/users")
def get_all_users(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    try:
        users = user_service.list_users(db, limit=limit, offset=offset)
    except Exception as e:
        logger.exception("Error listing users for admin")
        raise internal_error("Error fetching users", e)

    return respond(status.HTTP_200_OK, "Users fetched successfully", {"users": [sanitize_user(u) for u in users]})


@router.get("/user/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        user = user_service.get_user(db, user_id)
    except Exception as e:
        logger.exception("Error fetching user %s for admin", user_id)
        raise internal_error("Error fetching user", e)

    if not user:
        raise not_found("User not found")

    return respond(status.HTTP_200_OK, "User fetched successfully", {"user": sanitize_user(user)})


@router.put("/user")
def update_user(
    data: AdminUserUpdate,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Update a user's username, email or role. Passwords are never set here.
    A role change takes effect at the user's next login.
    """
    fields = data.model_dump(exclude={"id"}, exclude_none=True)
    if not fields:
        raise bad_request("No fields to update")
    if "username" in fields:
        fields["username"] = fields["username"].strip()

    try:
        if "email" in fields:
            other = user_service.get_user_by_email(db, fields["email"])
            if other and other.id != data.id:
                raise conflict("Email already taken")
        if "username" in fields:
            other = user_service.get_user_by_username(db, fields["username"])
            if other and other.id != data.id:
                raise conflict("Username already taken")

        user = admin_service.update_user(db, data.id, fields)
        if not user:
            raise not_found("User not found")
    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise conflict("Username/Email already taken")
    except Exception as e:
        logger.exception("Error updating user %s as admin", data.id)
        db.rollback()
        raise internal_error("Error updating user", e)

    logger.info("Admin %s updated user %s: %s", admin.user_id, data.id, sorted(fields))
    return respond(status.HTTP_200_OK, "User updated successfully", {"user": sanitize_user(user)})


@router.delete("/user/{user_id}")
def delete_user(
    user_id: int,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        deleted = user_service.delete_user(db, user_id)
    except Exception as e:
        logger.exception("Error deleting user %s as admin", user_id)
        db.rollback()
        raise internal_error("Error deleting user", e)

    if not deleted:
        raise not_found("User not found")

    logger.info("Admin %s deleted user %s", admin.user_id, user_id)
    return respond(status.HTTP_200_OK, "User deleted successfully")


# Blogs

@router.get("/blogs")
def get_all_blogs(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    try:
        blogs = blog_service.list_blogs(db, limit=limit, offset=offset)
        payload = serialize_blogs(db, blogs)
    except Exception as e:
        logger.exception("Error listing blogs for admin")
        raise internal_error("Error fetching blogs", e)

    return respond(status.HTTP_200_OK, "Blogs fetched successfully", {"blogs": payload})


@router.get("/blog/{blog_id}")
def get_blog(blog_id: int, db: Session = Depends(get_db)):
    try:
        blog = blog_service.get_blog(db, blog_id)
        if not blog:
            raise not_found("Blog not found")
        payload = serialize_blogs(db, [blog])[0]
        author = user_service.get_user(db, blog.user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error fetching blog %s for admin", blog_id)
        raise internal_error("Error fetching blog", e)

    return respond(
        status.HTTP_200_OK,
        "Blog fetched successfully",
        {"blog": payload, "user": sanitize_user(author) if author else None},
    )


@router.put("/blog")
def update_blog(data: AdminBlogUpdate, db: Session = Depends(get_db)):
    fields = clean_blog_fields(data.model_dump(exclude={"id"}, exclude_none=True))
    if not fields:
        raise bad_request("No fields to update")

    try:
        blog = blog_service.update_blog(db, data.id, fields)
        if not blog:
            raise not_found("Blog not found")
        payload = serialize_blogs(db, [blog])[0]
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error updating blog %s as admin", data.id)
        db.rollback()
        raise internal_error("Error updating blog", e)

    return respond(status.HTTP_200_OK, "Blog updated successfully", {"blog": payload})


@router.delete("/blog/{blog_id}")
def delete_blog(
    blog_id: int,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        deleted = blog_service.delete_blog(db, blog_id)
    except Exception as e:
        logger.exception("Error deleting blog %s as admin", blog_id)
        db.rollback()
        raise internal_error("Error deleting blog", e)

    if not deleted:
        raise not_found("Blog not found")

    logger.info("Admin %s deleted blog %s", admin.user_id, blog_id)
    return respond(status.HTTP_200_OK, "Blog deleted successfully")


# Comments

@router.get("/comments")
def get_all_comments(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    try:
        comments = comment_service.list_all_comments(db, limit=limit, offset=offset)
    except Exception as e:
        logger.exception("Error listing comments for admin")
        raise internal_error("Error fetching comments", e)

    return respond(
        status.HTTP_200_OK,
        "Comments fetched successfully",
        {"comments": [serialize_comment(c) for c in comments]},
    )


@router.put("/comment")
def update_comment(data: AdminCommentUpdate, db: Session = Depends(get_db)):
    content = clean_content(data.content)

    try:
        comment = admin_service.update_comment(db, data.id, content)
    except Exception as e:
        logger.exception("Error updating comment %s as admin", data.id)
        db.rollback()
        raise internal_error("Error updating comment", e)

    if not comment:
        raise not_found("Comment not found")

    return respond(status.HTTP_200_OK, "Comment updated successfully", {"comment": serialize_comment(comment)})


@router.delete("/comment/{comment_id}")
def delete_comment(
    comment_id: int,
    admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        deleted = admin_service.delete_comment(db, comment_id)
    except Exception as e:
        logger.exception("Error deleting comment %s as admin", comment_id)
        db.rollback()
        raise internal_error("Error deleting comment", e)

    if not deleted:
        raise not_found("Comment not found")

    logger.info("Admin %s deleted comment %s", admin.user_id, comment_id)
    return respond(status.HTTP_200_OK, "Comment deleted successfully")

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.api.auth import USERNAME_PATTERN, check_password_length, clear_session_cookie, set_session_cookie
from blogspace.config import Settings
from blogspace.dependencies import get_current_user, get_db, get_settings
from blogspace.errors import bad_request, conflict, internal_error, not_found
from blogspace.responses import respond
from blogspace.security import TokenClaims, create_access_token, hash_password
from blogspace.serializers import sanitize_user
from blogspace.services import follows as follow_service
from blogspace.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["users"])


class UserUpdateRequest(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: EmailStr | None = None
    pfp: str | None = Field(default=None, max_length=500)
    password: str | None = Field(default=None, min_length=6)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return check_password_length(value)


@router.get("")
def get_current_user_profile(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = user_service.get_user(db, current_user.user_id)
    except Exception as e:
        logger.exception("Error fetching current user")
        raise internal_error("Database error", e)

    if not user:
        raise not_found("User not found")

    return respond(status.HTTP_200_OK, "User fetched successfully", {"user": sanitize_user(user)})


@router.put("")
def update_current_user(
    data: UserUpdateRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Update the caller's own account. Only username, email, pfp and password
    can change; role changes go through the admin routes.

    A fresh session cookie is issued so the token claims match the new values.
    """
    fields = data.model_dump(exclude_none=True)
    if not fields:
        raise bad_request("No fields to update")

    if "username" in fields:
        fields["username"] = fields["username"].strip()
    if "password" in fields:
        fields["password"] = hash_password(fields["password"])

    try:
        if "email" in fields:
            other = user_service.get_user_by_email(db, fields["email"])
            if other and other.id != current_user.user_id:
                raise conflict("Email already taken")
        if "username" in fields:
            other = user_service.get_user_by_username(db, fields["username"])
            if other and other.id != current_user.user_id:
                raise conflict("Username already taken")

        user = user_service.update_user(db, current_user.user_id, fields)
        if not user:
            raise not_found("User not found")
    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise conflict("Username/Email already taken")
    except Exception as e:
        logger.exception("Error updating user %s", current_user.user_id)
        db.rollback()
        raise internal_error("Error updating user", e)

    response = respond(status.HTTP_200_OK, "User updated successfully", {"user": sanitize_user(user)})
    set_session_cookie(response, create_access_token(user, settings), settings)
    return response


@router.delete("")
def delete_current_user(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Permanently delete the caller's account together with everything they own."""
    try:
        deleted = user_service.delete_user(db, current_user.user_id)
    except Exception as e:
        logger.exception("Error deleting user %s", current_user.user_id)
        db.rollback()
        raise internal_error("Failed to delete user", e)

    if not deleted:
        raise not_found("User not found")

    response = respond(status.HTTP_200_OK, "User deleted successfully")
    clear_session_cookie(response, settings)
    return response


@router.post("/logout")
def logout_user(
    current_user: TokenClaims = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    response = respond(status.HTTP_200_OK, "Logged out successfully")
    clear_session_cookie(response, settings)
    logger.info("User %s logged out", current_user.user_id)
    return response


@router.get("/all")
def get_users(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        users = user_service.list_users(db, limit=limit, offset=offset)
    except Exception as e:
        logger.exception("Error listing users")
        raise internal_error("Database error", e)

    return respond(
        status.HTTP_200_OK,
        "Users fetched successfully",
        {"users": [sanitize_user(u) for u in users]},
    )


@router.get("/{user_id}")
def get_user_by_id(
    user_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        user = user_service.get_user(db, user_id)
    except Exception as e:
        logger.exception("Error fetching user %s", user_id)
        raise internal_error("Database error", e)

    if not user:
        raise not_found("User not found")

    return respond(status.HTTP_200_OK, "User fetched successfully", {"user": sanitize_user(user)})


@router.post("/follow/{user_id}")
def follow_user(
    user_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Toggle following `user_id`: follows when not yet following, unfollows otherwise."""
    if user_id == current_user.user_id:
        raise bad_request("You cannot follow yourself")

    try:
        if not user_service.get_user(db, user_id):
            raise not_found("User not found")
        following = follow_service.toggle_follow(db, current_user.user_id, user_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error toggling follow %s -> %s", current_user.user_id, user_id)
        db.rollback()
        raise internal_error("Failed to update follow", e)

    message = "User followed successfully" if following else "User unfollowed successfully"
    return respond(status.HTTP_200_OK, message, {"following": following})


@router.delete("/unfollow/{user_id}")
def unfollow_user(
    user_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if user_id == current_user.user_id:
        raise bad_request("You cannot unfollow yourself")

    try:
        removed = follow_service.unfollow_user(db, current_user.user_id, user_id)
    except Exception as e:
        logger.exception("Error unfollowing %s -> %s", current_user.user_id, user_id)
        db.rollback()
        raise internal_error("Failed to unfollow user", e)

    if not removed:
        raise not_found("You are not following this user")

    return respond(status.HTTP_200_OK, "User unfollowed successfully", {"following": False})

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.config import Settings
from blogspace.dependencies import COOKIE_NAME, get_db, get_settings
from blogspace.errors import bad_request, conflict, internal_error, unauthorized
from blogspace.responses import respond
from blogspace.security import create_access_token, hash_password, verify_password
from blogspace.serializers import sanitize_user
from blogspace.services import users as user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

# No "@" so a login identifier is never ambiguous between username and email
USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_length(password: str | None) -> str | None:
    if password is not None and len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=100, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6)
    pfp: str | None = Field(default=None, max_length=500)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        return check_password_length(value)


class LoginRequest(BaseModel):
    identifier: str = Field(validation_alias=AliasChoices("identifier", "email", "username"), min_length=1)
    password: str = Field(min_length=1)


def set_session_cookie(response: JSONResponse, token: str, settings: Settings):
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.token_max_age,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_session_cookie(response: JSONResponse, settings: Settings):
    response.delete_cookie(
        key=COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an author account. The password hash is never echoed back."""
    username = data.username.strip()
    if len(username) < 3:
        raise bad_request("Validation failed", "username must be at least 3 characters")

    try:
        if user_service.get_user_by_email(db, data.email) or user_service.get_user_by_username(db, username):
            logger.info("Registration rejected, username/email already taken: %s", data.email)
            raise conflict("Username/Email already taken")

        user = user_service.create_user(
            db,
            username=username,
            email=data.email,
            password_hash=hash_password(data.password),
            pfp=data.pfp,
        )
    except HTTPException:
        raise
    except IntegrityError:
        db.rollback()
        raise conflict("Username/Email already taken")
    except Exception as e:
        logger.exception("Error creating user")
        db.rollback()
        raise internal_error("Error creating user", e)

    return respond(
        status.HTTP_201_CREATED,
        "User signed up successfully",
        {"user": sanitize_user(user)},
    )


@router.post("/login")
def login_user(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Verify credentials and set the HTTP-only session cookie."""
    try:
        user = user_service.get_user_by_identifier(db, data.identifier.strip())
    except Exception as e:
        logger.exception("Error looking up user for login")
        raise internal_error("Internal server error", e)

    # Unknown identifier and wrong password are indistinguishable to the caller
    if not user or not verify_password(data.password, user.password):
        raise unauthorized("Invalid credentials")

    token = create_access_token(user, settings)
    response = respond(
        status.HTTP_200_OK,
        "Login successful",
        {"user": sanitize_user(user), "role": user.role},
    )
    set_session_cookie(response, token, settings)
    logger.info("User %s logged in", user.id)
    return response

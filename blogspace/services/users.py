import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from blogspace.models.blog import Blog
from blogspace.models.comment import Comment
from blogspace.models.user import User

logger = logging.getLogger(__name__)

# Fields a user may change on their own account
USER_UPDATABLE_FIELDS = ("username", "email", "pfp", "password")


def _with_follow_graph(db: Session):
    return db.query(User).options(
        selectinload(User.follower_links),
        selectinload(User.following_links),
    )


def create_user(db: Session, username: str, email: str, password_hash: str, pfp: str | None = None) -> User:
    """Insert a user. IntegrityError propagates when username/email is taken."""
    user = User(username=username, email=email.lower(), password=password_hash, pfp=pfp)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("[DATABASE] User %s created", user.id)
    return user


def get_user(db: Session, user_id: int) -> User | None:
    return _with_follow_graph(db).filter(User.id == user_id).first()


def user_exists(db: Session, user_id: int) -> bool:
    return db.query(User.id).filter(User.id == user_id).first() is not None


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def get_user_by_identifier(db: Session, identifier: str) -> User | None:
    """Resolve a login identifier, which is either an email or a username."""
    if "@" in identifier:
        return get_user_by_email(db, identifier)
    return get_user_by_username(db, identifier)


def list_users(db: Session, limit: int = 100, offset: int = 0) -> list[User]:
    return _with_follow_graph(db).order_by(User.id).offset(offset).limit(limit).all()


def count_users(db: Session) -> int:
    return db.query(User).count()


def update_user(db: Session, user_id: int, fields: dict, allowed=USER_UPDATABLE_FIELDS) -> User | None:
    """
    Apply a partial update restricted to `allowed` fields.
    Returns None when the user does not exist.
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return None

    renamed = "username" in allowed and fields.get("username") not in (None, user.username)

    for name, value in fields.items():
        if name not in allowed or value is None:
            continue
        if name == "email":
            value = value.lower()
        setattr(user, name, value)

    if renamed:
        # Keep the denormalized display name on existing posts in step
        db.query(Blog).filter(Blog.user_id == user_id).update(
            {Blog.author: user.username}, synchronize_session=False
        )
        db.query(Comment).filter(Comment.user_id == user_id).update(
            {Comment.author: user.username}, synchronize_session=False
        )

    db.commit()
    db.refresh(user)
    logger.info("[DATABASE] User %s updated", user_id)
    return user


def delete_user(db: Session, user_id: int) -> bool:
    """Hard-delete a user; blogs, comments, likes, views and follows go with it."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.info("[DATABASE] No user found with ID %s to delete", user_id)
        return False

    db.delete(user)
    db.commit()
    logger.info("[DATABASE] User %s permanently deleted", user_id)
    return True

import logging

from sqlalchemy.orm import Session

from blogspace.models.comment import Comment

logger = logging.getLogger(__name__)


def create_comment(db: Session, blog_id: int, user_id: int, author: str, content: str) -> Comment:
    comment = Comment(blog_id=blog_id, user_id=user_id, author=author, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def get_comment(db: Session, comment_id: int) -> Comment | None:
    return db.query(Comment).filter(Comment.id == comment_id).first()


def list_comments(db: Session, blog_id: int) -> list[Comment]:
    """All comments on a blog, oldest first."""
    return db.query(Comment).filter(Comment.blog_id == blog_id).order_by(Comment.id.asc()).all()


def list_all_comments(db: Session, limit: int = 100, offset: int = 0) -> list[Comment]:
    return db.query(Comment).order_by(Comment.id.desc()).offset(offset).limit(limit).all()


def count_comments(db: Session) -> int:
    return db.query(Comment).count()


def update_comment(db: Session, comment_id: int, owner_id: int, content: str) -> bool:
    """Owner-scoped update. False means the comment is missing or not the owner's."""
    updated = db.query(Comment).filter(
        Comment.id == comment_id,
        Comment.user_id == owner_id,
    ).update({Comment.content: content}, synchronize_session=False)
    db.commit()
    return updated > 0


def delete_comment(db: Session, comment_id: int, owner_id: int) -> bool:
    """Owner-scoped delete. False means the comment is missing or not the owner's."""
    deleted = db.query(Comment).filter(
        Comment.id == comment_id,
        Comment.user_id == owner_id,
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info("[DATABASE] Comment %s deleted by user %s", comment_id, owner_id)
    return deleted > 0

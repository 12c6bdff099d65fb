import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from blogspace.models.blog import Blog
from blogspace.models.like import Like
from blogspace.models.view import View

logger = logging.getLogger(__name__)

BLOG_UPDATABLE_FIELDS = ("title", "content")


def create_blog(db: Session, user_id: int, author: str, title: str, content: str) -> Blog:
    blog = Blog(user_id=user_id, author=author, title=title, content=content)
    db.add(blog)
    db.commit()
    db.refresh(blog)
    logger.info("[DATABASE] Blog %s created by user %s", blog.id, user_id)
    return blog


def get_blog(db: Session, blog_id: int) -> Blog | None:
    return db.query(Blog).filter(Blog.id == blog_id).first()


def list_blogs(db: Session, limit: int = 100, offset: int = 0, user_id: int | None = None) -> list[Blog]:
    query = db.query(Blog)
    if user_id is not None:
        query = query.filter(Blog.user_id == user_id)
    return query.order_by(Blog.id.desc()).offset(offset).limit(limit).all()


def count_blogs(db: Session) -> int:
    return db.query(Blog).count()


def update_blog(db: Session, blog_id: int, fields: dict, owner_id: int | None = None) -> Blog | None:
    """
    Partially update title/content.

    With `owner_id` the update only touches the caller's own blog; a missing
    blog and someone else's blog both come back as None.
    """
    query = db.query(Blog).filter(Blog.id == blog_id)
    if owner_id is not None:
        query = query.filter(Blog.user_id == owner_id)
    blog = query.first()
    if not blog:
        return None

    for name in BLOG_UPDATABLE_FIELDS:
        value = fields.get(name)
        if value is not None:
            setattr(blog, name, value)

    db.commit()
    db.refresh(blog)
    return blog


def delete_blog(db: Session, blog_id: int, owner_id: int | None = None) -> bool:
    query = db.query(Blog).filter(Blog.id == blog_id)
    if owner_id is not None:
        query = query.filter(Blog.user_id == owner_id)
    deleted = query.delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info("[DATABASE] Blog %s deleted", blog_id)
    return deleted > 0


def get_blog_counts(db: Session, blog_ids: list[int]) -> dict[int, dict[str, int]]:
    """Like and view totals for each blog id, zero-filled."""
    counts = {blog_id: {"likes": 0, "views": 0} for blog_id in blog_ids}
    if not blog_ids:
        return counts

    likes = db.query(Like.blog_id, func.count(Like.id)).filter(
        Like.blog_id.in_(blog_ids)
    ).group_by(Like.blog_id).all()
    views = db.query(View.blog_id, func.count(View.id)).filter(
        View.blog_id.in_(blog_ids)
    ).group_by(View.blog_id).all()

    for blog_id, total in likes:
        counts[blog_id]["likes"] = total
    for blog_id, total in views:
        counts[blog_id]["views"] = total
    return counts

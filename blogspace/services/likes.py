from sqlalchemy.orm import Session

from blogspace.models.like import Like


def get_likes_for_blog(db: Session, blog_id: int) -> int:
    return db.query(Like).filter(Like.blog_id == blog_id).count()


def get_like(db: Session, like_id: int) -> Like | None:
    return db.query(Like).filter(Like.id == like_id).first()


def get_like_by_user_and_blog(db: Session, user_id: int, blog_id: int) -> Like | None:
    return db.query(Like).filter(Like.user_id == user_id, Like.blog_id == blog_id).first()


def like_blog(db: Session, user_id: int, blog_id: int) -> Like:
    """Insert a like. The (user, blog) unique constraint raises IntegrityError on repeats."""
    like = Like(user_id=user_id, blog_id=blog_id)
    db.add(like)
    db.commit()
    db.refresh(like)
    return like


def unlike_blog(db: Session, user_id: int, blog_id: int) -> bool:
    deleted = db.query(Like).filter(
        Like.user_id == user_id,
        Like.blog_id == blog_id,
    ).delete(synchronize_session=False)
    db.commit()
    return deleted > 0


def delete_like(db: Session, like_id: int) -> bool:
    deleted = db.query(Like).filter(Like.id == like_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.models.view import View


def record_view(db: Session, user_id: int, blog_id: int) -> tuple[View, bool]:
    """
    Get-or-create the (user, blog) view row.
    Returns the row and whether this call created it.
    """
    if not user_id or not blog_id:
        raise ValueError("invalid blog ID or user ID")

    existing = db.query(View).filter(View.user_id == user_id, View.blog_id == blog_id).first()
    if existing:
        return existing, False

    view = View(user_id=user_id, blog_id=blog_id)
    db.add(view)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent request for the same pair
        db.rollback()
        existing = db.query(View).filter(View.user_id == user_id, View.blog_id == blog_id).first()
        if existing is None:
            raise
        return existing, False

    db.refresh(view)
    return view, True


def count_views(db: Session, blog_id: int) -> int:
    return db.query(View).filter(View.blog_id == blog_id).count()

from sqlalchemy.orm import Session

from blogspace.models.comment import Comment
from blogspace.models.user import User
from blogspace.services import blogs, comments, users

# Admins may additionally change a user's role, but never their password
ADMIN_USER_FIELDS = ("username", "email", "role")


def get_dashboard_data(db: Session) -> dict:
    """Three independent totals for the admin dashboard."""
    return {
        "total_users": users.count_users(db),
        "total_blogs": blogs.count_blogs(db),
        "total_comments": comments.count_comments(db),
    }


def update_user(db: Session, user_id: int, fields: dict) -> User | None:
    return users.update_user(db, user_id, fields, allowed=ADMIN_USER_FIELDS)


def update_comment(db: Session, comment_id: int, content: str) -> Comment | None:
    comment = comments.get_comment(db, comment_id)
    if not comment:
        return None
    comment.content = content
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: int) -> bool:
    deleted = db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)
    db.commit()
    return deleted > 0

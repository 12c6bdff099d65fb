import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from blogspace.models.follow import Follow

logger = logging.getLogger(__name__)


class SelfFollowError(ValueError):
    pass


def is_following(db: Session, follower_id: int, followed_id: int) -> bool:
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.followed_id == followed_id,
    ).first() is not None


def follow_user(db: Session, follower_id: int, followed_id: int) -> Follow:
    """Create a follow edge. IntegrityError propagates if it already exists."""
    if follower_id == followed_id:
        raise SelfFollowError("a user cannot follow themselves")

    follow = Follow(follower_id=follower_id, followed_id=followed_id)
    db.add(follow)
    db.commit()
    db.refresh(follow)
    logger.info("[DATABASE] User %s followed user %s", follower_id, followed_id)
    return follow


def unfollow_user(db: Session, follower_id: int, followed_id: int) -> bool:
    deleted = db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.followed_id == followed_id,
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info("[DATABASE] User %s unfollowed user %s", follower_id, followed_id)
    return deleted > 0


def toggle_follow(db: Session, follower_id: int, followed_id: int) -> bool:
    """Flip the follow state and return whether the follower now follows."""
    if follower_id == followed_id:
        raise SelfFollowError("a user cannot follow themselves")

    if unfollow_user(db, follower_id, followed_id):
        return False

    try:
        follow_user(db, follower_id, followed_id)
    except IntegrityError:
        db.rollback()
        # Only a concurrent insert of the same edge counts as success
        if not is_following(db, follower_id, followed_id):
            raise
    return True

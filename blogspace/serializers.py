"""Convert ORM rows into JSON-safe dicts. Password hashes never leave here."""

USER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _iso(value):
    return value.isoformat() if value else None


def sanitize_user(user) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "pfp": user.pfp,
        "role": user.role,
        "created_at": user.created_at.strftime(USER_TIME_FORMAT) if user.created_at else None,
        "followers": sorted(link.follower_id for link in user.follower_links),
        "following": sorted(link.followed_id for link in user.following_links),
    }


def serialize_blog(blog, likes: int = 0, views: int = 0) -> dict:
    return {
        "id": blog.id,
        "title": blog.title,
        "content": blog.content,
        "user_id": blog.user_id,
        "author": blog.author,
        "likes": likes,
        "views": views,
        "created_at": _iso(blog.created_at),
        "updated_at": _iso(blog.updated_at),
    }


def serialize_comment(comment) -> dict:
    return {
        "id": comment.id,
        "content": comment.content,
        "user_id": comment.user_id,
        "author": comment.author,
        "blog_id": comment.blog_id,
        "created_at": _iso(comment.created_at),
        "updated_at": _iso(comment.updated_at),
    }

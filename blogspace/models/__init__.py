from blogspace.models.user import User, ROLE_ADMIN, ROLE_AUTHOR, ROLES
from blogspace.models.blog import Blog
from blogspace.models.comment import Comment
from blogspace.models.like import Like
from blogspace.models.view import View
from blogspace.models.follow import Follow

__all__ = ["User", "Blog", "Comment", "Like", "View", "Follow", "ROLE_ADMIN", "ROLE_AUTHOR", "ROLES"]

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from blogspace.database import Base

ROLE_AUTHOR = "author"
ROLE_ADMIN = "admin"
ROLES = (ROLE_AUTHOR, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, nullable=False, index=True)
    # Stored lowercased so lookups and the unique index are case-insensitive
    email = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)
    role = Column(String(50), nullable=False, default=ROLE_AUTHOR, server_default=ROLE_AUTHOR)
    pfp = Column(String(500))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    blogs = relationship("Blog", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("Like", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    views = relationship("View", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    following_links = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    follower_links = relationship(
        "Follow",
        foreign_keys="Follow.followed_id",
        back_populates="followed",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

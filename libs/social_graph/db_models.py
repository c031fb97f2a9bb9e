"""
Database Models for Social Graph Storage

This module defines SQLAlchemy models backing the SQL repository:
- SocialUser: Stores user display data and account activity
- SocialFollow: Stores directed follow/friendship rows with a status
"""

from datetime import datetime
from typing import Dict, Any
from sqlalchemy import Column, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from libs.storage.db import Base
from .models import FriendshipStatus, Relationship, UserProfile


class SocialUser(Base):
    """Database model for storing user information"""

    __tablename__ = 'social_users'

    id = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False, unique=True)
    first_name = Column(String(255), default="")
    last_name = Column(String(255), default="")
    avatar = Column(Text)
    bio = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    following = relationship(
        "SocialFollow",
        foreign_keys="SocialFollow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    followers = relationship(
        "SocialFollow",
        foreign_keys="SocialFollow.following_id",
        back_populates="followed",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('idx_social_users_active', 'is_active'),
    )

    def to_profile(self) -> UserProfile:
        return UserProfile(
            id=self.id,
            username=self.username,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
            avatar=self.avatar,
            bio=self.bio,
            is_active=bool(self.is_active),
        )

    @classmethod
    def from_profile(cls, profile: UserProfile) -> 'SocialUser':
        return cls(
            id=profile.id,
            username=profile.username,
            first_name=profile.first_name,
            last_name=profile.last_name,
            avatar=profile.avatar,
            bio=profile.bio,
            is_active=profile.is_active,
        )


class SocialFollow(Base):
    """Database model for a directed follow/friendship row"""

    __tablename__ = 'social_follows'

    id = Column(String(64), primary_key=True)
    follower_id = Column(String(64), ForeignKey('social_users.id', ondelete="CASCADE"), nullable=False)
    following_id = Column(String(64), ForeignKey('social_users.id', ondelete="CASCADE"), nullable=False)
    # "<lower id>|<higher id>"; unique so A->B and B->A cannot both be stored
    pair_key = Column(String(160), nullable=False)
    status = Column(String(32), nullable=False, default=FriendshipStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    follower = relationship("SocialUser", foreign_keys=[follower_id], back_populates="following")
    followed = relationship("SocialUser", foreign_keys=[following_id], back_populates="followers")

    __table_args__ = (
        UniqueConstraint('follower_id', 'following_id', name='uq_social_follows_pair'),
        UniqueConstraint('pair_key', name='uq_social_follows_undirected'),
        CheckConstraint('follower_id <> following_id', name='ck_social_follows_not_self'),
        Index('idx_social_follows_status', 'status'),
        Index('idx_social_follows_follower_status', 'follower_id', 'status'),
        Index('idx_social_follows_following_status', 'following_id', 'status'),
    )

    @staticmethod
    def pair_key_for(a: str, b: str) -> str:
        low, high = sorted((str(a), str(b)))
        return f"{low}|{high}"

    def to_relationship(self) -> Relationship:
        return Relationship(
            follower_id=self.follower_id,
            following_id=self.following_id,
            status=self.status,
            created_at=self.created_at or datetime.utcnow(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'follower': self.follower_id,
            'following': self.following_id,
            'status': self.status,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

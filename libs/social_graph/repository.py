"""
Repositories supplying users and relationship rows to the graph service.

The graph engine never reaches for a global connection; the service is handed
one of these and reads a point-in-time view per query.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Iterable

from sqlalchemy import func, or_, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from .errors import NotFoundError, ValidationError
from .models import FriendshipStatus, Relationship, UserProfile

logger = logging.getLogger(__name__)


class SocialRepository(ABC):
    """Narrow read/write interface over the user and relationship store"""

    @abstractmethod
    def accepted_relationships(self) -> List[Relationship]:
        ...

    @abstractmethod
    def count_relationships(self, status: FriendshipStatus) -> int:
        ...

    @abstractmethod
    def active_user_ids(self) -> List[str]:
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[UserProfile]:
        ...

    @abstractmethod
    def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        ...

    @abstractmethod
    def search_users(self, query: str, limit: int = 10) -> List[UserProfile]:
        ...

    @abstractmethod
    def add_user(self, profile: UserProfile) -> UserProfile:
        ...

    @abstractmethod
    def add_relationship(self, follower_id: str, following_id: str,
                         status: FriendshipStatus = FriendshipStatus.PENDING) -> Relationship:
        ...

    @abstractmethod
    def set_relationship_status(self, follower_id: str, following_id: str,
                                status: FriendshipStatus) -> Relationship:
        ...

    def count_active_users(self) -> int:
        return len(self.active_user_ids())

    def user_exists(self, user_id: str) -> bool:
        return self.get_user(user_id) is not None

    def _check_new_relationship(self, follower_id: str, following_id: str):
        if follower_id == following_id:
            raise ValidationError("Users cannot form a relationship with themselves", field="following")
        for uid in (follower_id, following_id):
            if not self.user_exists(uid):
                raise NotFoundError("User", uid)


def _matches(profile: UserProfile, needle: str) -> bool:
    return any(needle in (value or "").lower() for value in (profile.username, profile.first_name, profile.last_name))


def _like_pattern(query: str) -> str:
    """Substring LIKE pattern matching the query literally (escape char is a backslash)"""
    needle = query.strip().lower()
    for ch in ("\\", "%", "_"):
        needle = needle.replace(ch, "\\" + ch)
    return f"%{needle}%"


class InMemoryRepository(SocialRepository):
    """Dict-backed repository for tests, the CLI and local experiments"""

    def __init__(self, users: Optional[Iterable[UserProfile]] = None,
                 relationships: Optional[Iterable[Relationship]] = None):
        self.users: Dict[str, UserProfile] = {}
        self.relationships: List[Relationship] = []
        for profile in users or []:
            self.users[profile.id] = profile
        for rel in relationships or []:
            self.relationships.append(rel)

    def accepted_relationships(self) -> List[Relationship]:
        return [rel for rel in self.relationships if rel.is_accepted]

    def count_relationships(self, status: FriendshipStatus) -> int:
        status = FriendshipStatus.parse(status)
        return sum(1 for rel in self.relationships if rel.status == status)

    def active_user_ids(self) -> List[str]:
        return [uid for uid, profile in self.users.items() if profile.is_active]

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        return self.users.get(str(user_id))

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        return {uid: self.users[uid] for uid in user_ids if uid in self.users}

    def search_users(self, query: str, limit: int = 10) -> List[UserProfile]:
        needle = query.strip().lower()
        found = [p for p in self.users.values() if p.is_active and _matches(p, needle)]
        found.sort(key=lambda p: p.username)
        return found[:limit]

    def add_user(self, profile: UserProfile) -> UserProfile:
        if profile.id in self.users:
            raise ValidationError(f"User already exists: {profile.id}", field="id")
        self.users[profile.id] = profile
        return profile

    def _find(self, a: str, b: str) -> Optional[Relationship]:
        for rel in self.relationships:
            if rel.involves(a) and rel.involves(b):
                return rel
        return None

    def add_relationship(self, follower_id: str, following_id: str,
                         status: FriendshipStatus = FriendshipStatus.PENDING) -> Relationship:
        follower_id, following_id = str(follower_id), str(following_id)
        self._check_new_relationship(follower_id, following_id)
        if self._find(follower_id, following_id) is not None:
            raise ValidationError("Relationship already exists", details={"follower": follower_id, "following": following_id})

        rel = Relationship(follower_id=follower_id, following_id=following_id, status=status)
        self.relationships.append(rel)
        return rel

    def set_relationship_status(self, follower_id: str, following_id: str,
                                status: FriendshipStatus) -> Relationship:
        rel = self._find(str(follower_id), str(following_id))
        if rel is None:
            raise NotFoundError("Relationship", f"{follower_id}-{following_id}")
        rel.status = FriendshipStatus.parse(status)
        return rel


class SqlAlchemyRepository(SocialRepository):
    """Repository backed by the social_users / social_follows tables"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def accepted_relationships(self) -> List[Relationship]:
        from .db_models import SocialFollow

        with self._session() as session:
            rows = (
                session.query(SocialFollow)
                .filter(SocialFollow.status == FriendshipStatus.ACCEPTED.value)
                .order_by(SocialFollow.created_at, SocialFollow.id)
                .all()
            )
            return [row.to_relationship() for row in rows]

    def count_relationships(self, status: FriendshipStatus) -> int:
        from .db_models import SocialFollow

        status = FriendshipStatus.parse(status)
        with self._session() as session:
            return session.query(func.count(SocialFollow.id)).filter(
                SocialFollow.status == status.value
            ).scalar() or 0

    def active_user_ids(self) -> List[str]:
        from .db_models import SocialUser

        with self._session() as session:
            rows = session.query(SocialUser.id).filter(SocialUser.is_active.is_(True)).order_by(SocialUser.created_at, SocialUser.id).all()
            return [row[0] for row in rows]

    def count_active_users(self) -> int:
        from .db_models import SocialUser

        with self._session() as session:
            return session.query(func.count(SocialUser.id)).filter(SocialUser.is_active.is_(True)).scalar() or 0

    def get_user(self, user_id: str) -> Optional[UserProfile]:
        from .db_models import SocialUser

        with self._session() as session:
            row = session.get(SocialUser, str(user_id))
            return row.to_profile() if row else None

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, UserProfile]:
        from .db_models import SocialUser

        ids = [str(uid) for uid in user_ids]
        if not ids:
            return {}
        with self._session() as session:
            rows = session.query(SocialUser).filter(SocialUser.id.in_(ids)).all()
            return {row.id: row.to_profile() for row in rows}

    def search_users(self, query: str, limit: int = 10) -> List[UserProfile]:
        from .db_models import SocialUser

        pattern = _like_pattern(query)
        with self._session() as session:
            rows = (
                session.query(SocialUser)
                .filter(SocialUser.is_active.is_(True))
                .filter(or_(
                    func.lower(SocialUser.username).like(pattern, escape="\\"),
                    func.lower(SocialUser.first_name).like(pattern, escape="\\"),
                    func.lower(SocialUser.last_name).like(pattern, escape="\\"),
                ))
                .order_by(SocialUser.username)
                .limit(limit)
                .all()
            )
            return [row.to_profile() for row in rows]

    def add_user(self, profile: UserProfile) -> UserProfile:
        from .db_models import SocialUser

        try:
            with self._session() as session:
                session.add(SocialUser.from_profile(profile))
        except IntegrityError as e:
            raise ValidationError(f"User already exists: {profile.id}", field="id",
                                  details={"error_type": e.__class__.__name__})
        return profile

    def _find(self, session: Session, a: str, b: str):
        from .db_models import SocialFollow

        return session.query(SocialFollow).filter(or_(
            and_(SocialFollow.follower_id == a, SocialFollow.following_id == b),
            and_(SocialFollow.follower_id == b, SocialFollow.following_id == a),
        )).first()

    def add_relationship(self, follower_id: str, following_id: str,
                         status: FriendshipStatus = FriendshipStatus.PENDING) -> Relationship:
        from .db_models import SocialFollow

        follower_id, following_id = str(follower_id), str(following_id)
        self._check_new_relationship(follower_id, following_id)
        status = FriendshipStatus.parse(status)

        details = {"follower": follower_id, "following": following_id}
        try:
            with self._session() as session:
                if self._find(session, follower_id, following_id) is not None:
                    raise ValidationError("Relationship already exists", details=details)
                row = SocialFollow(
                    id=uuid.uuid4().hex,
                    follower_id=follower_id,
                    following_id=following_id,
                    pair_key=SocialFollow.pair_key_for(follower_id, following_id),
                    status=status.value,
                )
                session.add(row)
                session.flush()
                rel = row.to_relationship()
        except IntegrityError as e:
            # a concurrent insert of the same pair, in either direction, won the race
            raise ValidationError("Relationship already exists",
                                  details={**details, "error_type": e.__class__.__name__})

        logger.debug("Recorded %s relationship %s -> %s", status.value, follower_id, following_id)
        return rel

    def set_relationship_status(self, follower_id: str, following_id: str,
                                status: FriendshipStatus) -> Relationship:
        status = FriendshipStatus.parse(status)
        with self._session() as session:
            row = self._find(session, str(follower_id), str(following_id))
            if row is None:
                raise NotFoundError("Relationship", f"{follower_id}-{following_id}")
            row.status = status.value
            session.flush()
            return row.to_relationship()

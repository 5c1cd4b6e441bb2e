from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from lido_social.domain import PrincipalId
from lido_social.errors import translate_store_errors
from lido_social.models import FollowEdge, Profile
from lido_social.repositories.conflict_insert import insert_ignoring_conflicts


class FollowsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def insert_if_absent(self, follower_id: PrincipalId, following_id: PrincipalId) -> bool:
        """Returns True only when a new edge was written."""
        with translate_store_errors(self.session, "follow user"):
            created = insert_ignoring_conflicts(
                self.session,
                FollowEdge,
                {
                    "follower_id": follower_id,
                    "following_id": following_id,
                    "created_at": datetime.now(UTC),
                },
                index_elements=["follower_id", "following_id"],
            )
            self.session.commit()
        return created

    def delete(self, follower_id: PrincipalId, following_id: PrincipalId) -> bool:
        stmt = delete(FollowEdge).where(
            FollowEdge.follower_id == follower_id,
            FollowEdge.following_id == following_id,
        )
        with translate_store_errors(self.session, "unfollow user"):
            result = self.session.execute(stmt)
            self.session.commit()
        return max(getattr(result, "rowcount", 0), 0) > 0

    def exists(self, follower_id: PrincipalId, following_id: PrincipalId) -> bool:
        stmt = select(FollowEdge.id).where(
            FollowEdge.follower_id == follower_id,
            FollowEdge.following_id == following_id,
        )
        return self.session.scalars(stmt).first() is not None

    def following_ids(self, follower_id: PrincipalId) -> list[str]:
        stmt = select(FollowEdge.following_id).where(FollowEdge.follower_id == follower_id)
        return list(self.session.scalars(stmt).all())

    def list_followers(
        self, principal_id: PrincipalId, limit: int, cursor: datetime | None = None
    ) -> list[tuple[FollowEdge, Profile]]:
        stmt = (
            select(FollowEdge, Profile)
            .join(Profile, Profile.id == FollowEdge.follower_id)
            .where(FollowEdge.following_id == principal_id)
        )
        if cursor is not None:
            stmt = stmt.where(FollowEdge.created_at > cursor)
        stmt = stmt.order_by(FollowEdge.created_at.asc(), FollowEdge.id.asc()).limit(limit)
        return [(edge, profile) for edge, profile in self.session.execute(stmt).all()]

    def list_following(
        self, principal_id: PrincipalId, limit: int, cursor: datetime | None = None
    ) -> list[tuple[FollowEdge, Profile]]:
        stmt = (
            select(FollowEdge, Profile)
            .join(Profile, Profile.id == FollowEdge.following_id)
            .where(FollowEdge.follower_id == principal_id)
        )
        if cursor is not None:
            stmt = stmt.where(FollowEdge.created_at > cursor)
        stmt = stmt.order_by(FollowEdge.created_at.asc(), FollowEdge.id.asc()).limit(limit)
        return [(edge, profile) for edge, profile in self.session.execute(stmt).all()]

    def count_followers(self, principal_id: PrincipalId) -> int:
        stmt = select(func.count()).select_from(FollowEdge).where(
            FollowEdge.following_id == principal_id
        )
        return self.session.execute(stmt).scalar_one()

    def count_following(self, principal_id: PrincipalId) -> int:
        stmt = select(func.count()).select_from(FollowEdge).where(
            FollowEdge.follower_id == principal_id
        )
        return self.session.execute(stmt).scalar_one()

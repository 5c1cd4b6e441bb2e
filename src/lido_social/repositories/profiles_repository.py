from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from lido_social.domain import PrincipalId
from lido_social.errors import translate_store_errors
from lido_social.models import Profile


class ProfilesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, principal_id: PrincipalId) -> Profile | None:
        return self.session.get(Profile, principal_id)

    def get_by_username(self, username: str) -> Profile | None:
        stmt = select(Profile).where(Profile.username == username)
        return self.session.scalars(stmt).first()

    def search(self, term: str, limit: int) -> list[Profile]:
        """Case-insensitive substring match on username or display name."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        stmt = (
            select(Profile)
            .where(
                or_(
                    Profile.username.ilike(pattern, escape="\\"),
                    Profile.display_name.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Profile.username.asc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt).all())

    def create(
        self,
        id: PrincipalId,
        username: str,
        display_name: str | None = None,
        avatar_url: str | None = None,
        bio: str | None = None,
    ) -> Profile:
        profile = Profile(
            id=id,
            username=username,
            display_name=display_name,
            avatar_url=avatar_url,
            bio=bio,
            level=1,
            xp_points=0,
        )
        with translate_store_errors(self.session, "create profile"):
            self.session.add(profile)
            self.session.commit()
            self.session.refresh(profile)
        return profile

from collections.abc import Iterator
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from lido_social.database import Base
from lido_social.dependencies.db import get_db_session
from lido_social.main import app
from lido_social.models import (
    ActivityEvent,
    Book,
    FollowEdge,
    Notification,
    Profile,
    PublishedBook,
    Review,
    Vibe,
    XPEvent,
)


class DataFactory:
    def __init__(self, session: Session):
        self.session = session

    def create_profile(self, id: str, username: str | None = None, **kwargs) -> Profile:
        p = Profile(id=id, username=username or id.lower().replace("-", "_"), **kwargs)
        self.session.add(p)
        return p

    def create_book(self, id: str, title: str = "Test Book", **kwargs) -> Book:
        kwargs.setdefault("authors", ["Test Author"])
        b = Book(id=id, title=title, **kwargs)
        self.session.add(b)
        return b

    def publish_book(self, book_id: str, author_id: str) -> PublishedBook:
        pb = PublishedBook(book_id=book_id, author_id=author_id)
        self.session.add(pb)
        return pb

    def create_vibe(self, slug: str, name: str | None = None, emoji: str = "") -> Vibe:
        v = Vibe(slug=slug, name=name or slug.title(), emoji=emoji)
        self.session.add(v)
        return v

    def create_follow(self, follower_id: str, following_id: str, **kwargs) -> FollowEdge:
        f = FollowEdge(follower_id=follower_id, following_id=following_id, **kwargs)
        self.session.add(f)
        return f

    def create_review(self, user_id: str, book_id: str, rating: int = 4, **kwargs) -> Review:
        r = Review(user_id=user_id, book_id=book_id, rating=rating, **kwargs)
        self.session.add(r)
        return r

    def create_event(
        self, user_id: str | None, activity_type: str, created_at: datetime, **kwargs
    ) -> ActivityEvent:
        kwargs.setdefault("metadata_", {})
        e = ActivityEvent(
            user_id=user_id, activity_type=activity_type, created_at=created_at, **kwargs
        )
        self.session.add(e)
        return e

    def get_notifications(self, user_id: str) -> list[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id).order_by(Notification.id)
        return list(self.session.scalars(stmt).all())

    def get_events(self, activity_type: str | None = None) -> list[ActivityEvent]:
        stmt = select(ActivityEvent).order_by(ActivityEvent.id)
        if activity_type is not None:
            stmt = stmt.where(ActivityEvent.activity_type == activity_type)
        return list(self.session.scalars(stmt).all())

    def get_xp_events(self, user_id: str) -> list[XPEvent]:
        stmt = select(XPEvent).where(XPEvent.user_id == user_id).order_by(XPEvent.id)
        return list(self.session.scalars(stmt).all())

    def commit(self):
        self.session.commit()


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Iterator[None]:
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def db_engine() -> Engine:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine) -> Iterator[Session]:
    connection = db_engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def test_data(db_session: Session) -> DataFactory:
    return DataFactory(db_session)


@pytest.fixture
def client(db_session: Session) -> Iterator[TestClient]:
    def override_get_db_session() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session

    with TestClient(app) as test_client:
        yield test_client

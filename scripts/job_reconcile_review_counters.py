import argparse
import logging
from collections.abc import Callable
from contextlib import AbstractContextManager
from typing import TypedDict

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from lido_social.database import SessionLocal
from lido_social.models import Review, ReviewComment, ReviewLike

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class CounterDrift(TypedDict):
    review_id: str
    likes_count: int
    live_likes: int
    comments_count: int
    live_comments: int


def find_drift(session: Session) -> list[CounterDrift]:
    likes = (
        select(ReviewLike.review_id, func.count().label("n"))
        .group_by(ReviewLike.review_id)
        .subquery()
    )
    comments = (
        select(ReviewComment.review_id, func.count().label("n"))
        .group_by(ReviewComment.review_id)
        .subquery()
    )
    live_likes = func.coalesce(likes.c.n, 0)
    live_comments = func.coalesce(comments.c.n, 0)
    stmt = (
        select(
            Review.id,
            Review.likes_count,
            live_likes,
            Review.comments_count,
            live_comments,
        )
        .outerjoin(likes, likes.c.review_id == Review.id)
        .outerjoin(comments, comments.c.review_id == Review.id)
        .where((Review.likes_count != live_likes) | (Review.comments_count != live_comments))
        .order_by(Review.id)
    )
    return [
        CounterDrift(
            review_id=row[0],
            likes_count=row[1],
            live_likes=row[2],
            comments_count=row[3],
            live_comments=row[4],
        )
        for row in session.execute(stmt).all()
    ]


def reconcile_review_counters(
    session_factory: Callable[[], AbstractContextManager[Session]] = SessionLocal,
    dry_run: bool = False,
) -> list[CounterDrift]:
    """
    Administrative correction: rewrite likes_count/comments_count from live rows.

    Only reviews whose counters disagree with their like/comment rows are touched.
    """
    logger.info("Scanning review counters (dry_run=%s)...", dry_run)

    with session_factory() as session:
        drifted = find_drift(session)
        if not drifted:
            logger.info("All review counters match their rows.")
            return []

        for drift in drifted:
            logger.warning(
                "Counter drift review=%s likes %s->%s comments %s->%s",
                drift["review_id"],
                drift["likes_count"],
                drift["live_likes"],
                drift["comments_count"],
                drift["live_comments"],
            )
            if not dry_run:
                session.execute(
                    update(Review)
                    .where(Review.id == drift["review_id"])
                    .values(
                        likes_count=drift["live_likes"],
                        comments_count=drift["live_comments"],
                    )
                    .execution_options(synchronize_session=False)
                )

        if not dry_run:
            session.commit()

        logger.info(f"{'Found' if dry_run else 'Fixed'} {len(drifted)} drifted reviews.")
        return drifted


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reconcile review like/comment counters.")
    parser.add_argument("--dry-run", action="store_true", help="Report drift without writing")
    args = parser.parse_args()
    reconcile_review_counters(dry_run=args.dry_run)

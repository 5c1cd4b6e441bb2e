import logging

from lido_social.domain import PrincipalId, XPEventType
from lido_social.errors import LidoError
from lido_social.models import XPEvent
from lido_social.repositories.xp_repository import XPRepository

logger = logging.getLogger(__name__)


class XPLedger:
    """
    Append-only experience point ledger.

    The ledger does not deduplicate: callers award once per logical trigger
    (a new review, a transition into ``read``). Failures are logged and never
    reach the caller.
    """

    def __init__(self, repo: XPRepository, xp_per_level: int = 1000) -> None:
        self.repo = repo
        self.xp_per_level = xp_per_level

    def award(
        self,
        principal_id: PrincipalId,
        event_type: XPEventType,
        amount: int,
        book_id: str | None = None,
    ) -> XPEvent | None:
        if amount <= 0:
            logger.debug("Ignoring non-positive XP award %s for %s", amount, principal_id)
            return None

        try:
            event = self.repo.append_and_increment(
                user_id=principal_id,
                event_type=event_type,
                amount=amount,
                book_id=book_id,
                xp_per_level=self.xp_per_level,
            )
        except LidoError:
            logger.exception(
                "Failed to award XP user=%s event=%s amount=%s", principal_id, event_type, amount
            )
            return None

        logger.info(
            "XP awarded user=%s event=%s amount=%s book=%s",
            principal_id,
            event_type,
            amount,
            book_id,
        )
        return event

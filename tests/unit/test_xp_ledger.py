from unittest.mock import create_autospec

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from lido_social.errors import Unavailable
from lido_social.models import XPEvent
from lido_social.repositories.xp_repository import XPRepository
from lido_social.services.xp_ledger import XPLedger


@pytest.fixture
def repo() -> XPRepository:
    return create_autospec(XPRepository, instance=True)


def test_award_appends_with_configured_level_size(repo: XPRepository) -> None:
    repo.append_and_increment.return_value = XPEvent(
        id=1, user_id="reader", event_type="review", xp_amount=10
    )
    ledger = XPLedger(repo, xp_per_level=500)

    event = ledger.award("reader", "review", 10, "b1")

    assert event is not None
    repo.append_and_increment.assert_called_once_with(
        user_id="reader", event_type="review", amount=10, book_id="b1", xp_per_level=500
    )


@pytest.mark.parametrize("amount", [0, -5])
def test_award_ignores_non_positive_amounts(repo: XPRepository, amount: int) -> None:
    ledger = XPLedger(repo)

    assert ledger.award("reader", "review", amount) is None
    repo.append_and_increment.assert_not_called()


def test_award_swallows_store_failures(repo: XPRepository) -> None:
    repo.append_and_increment.side_effect = Unavailable("Failed to award xp")
    ledger = XPLedger(repo)

    assert ledger.award("reader", "finish_book", 20, "b1") is None


def test_award_swallows_failure_reloading_the_event() -> None:
    # Given: the write commits but reading the row back loses the connection
    session = create_autospec(Session, instance=True)
    session.refresh.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))
    ledger = XPLedger(XPRepository(session))

    # When
    result = ledger.award("reader", "review", 10, "b1")

    # Then
    assert result is None
    session.commit.assert_called_once()
    session.rollback.assert_called_once()

import pytest

from tests.conftest import DataFactory


@pytest.fixture
def readers(test_data: DataFactory) -> dict[str, str]:
    test_data.create_profile("user-alice", username="alice", display_name="Alice")
    test_data.create_profile("user-bob", username="bob", display_name="Bob")
    test_data.create_profile("user-carol", username="carol", display_name="Carol")
    test_data.commit()
    return {"alice": "user-alice", "bob": "user-bob", "carol": "user-carol"}


@pytest.fixture
def books(test_data: DataFactory) -> dict[str, str]:
    test_data.create_book("book-1", title="Dom Casmurro", authors=["Machado de Assis"])
    test_data.create_book("book-2", title="Vidas Secas", authors=["Graciliano Ramos"])
    test_data.create_book("book-indie", title="Small Press Poems")
    test_data.commit()
    return {"classic": "book-1", "second": "book-2", "indie": "book-indie"}


@pytest.fixture
def vibes(test_data: DataFactory) -> dict[str, int]:
    cozy = test_data.create_vibe("cozy", emoji="☕")
    dark = test_data.create_vibe("dark")
    test_data.commit()
    return {"cozy": cozy.id, "dark": dark.id}

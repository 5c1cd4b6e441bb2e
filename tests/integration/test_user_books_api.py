from fastapi.testclient import TestClient

from tests.conftest import DataFactory

ALICE = {"X-User-Id": "user-alice"}


def test_shelf_lifecycle(
    client: TestClient, test_data: DataFactory, readers: dict[str, str], books: dict[str, str]
) -> None:
    # When
    wanted = client.post(
        "/user-books", json={"book_id": "book-1", "status": "want-to-read"}, headers=ALICE
    )
    client.post("/user-books", json={"book_id": "book-2", "status": "reading"}, headers=ALICE)

    # Then
    assert wanted.status_code == 200
    assert wanted.json()["success"] is True
    assert wanted.json()["data"]["status"] == "want_to_read"
    assert wanted.json()["data"]["book"]["title"] == "Dom Casmurro"

    filtered = client.get("/user-books", params={"status": "want-to-read"}, headers=ALICE)
    assert [e["book"]["id"] for e in filtered.json()["books"]] == ["book-1"]
    assert len(client.get("/user-books", headers=ALICE).json()["books"]) == 2

    # When
    removed = client.delete("/user-books", params={"book_id": "book-1"}, headers=ALICE)

    # Then
    assert removed.json() == {"success": True}
    remaining = client.get("/user-books", headers=ALICE).json()["books"]
    assert [e["book"]["id"] for e in remaining] == ["book-2"]
    assert [e.activity_type for e in test_data.get_events()] == [
        "user_added_to_list",
        "user_started_reading",
    ]


def test_finishing_a_book_awards_xp(
    client: TestClient, readers: dict[str, str], books: dict[str, str]
) -> None:
    client.post("/user-books", json={"book_id": "book-1", "status": "read"}, headers=ALICE)
    client.post("/user-books", json={"book_id": "book-1", "status": "read"}, headers=ALICE)

    assert client.get("/me", headers=ALICE).json()["xp_points"] == 20


def test_shelf_errors(client: TestClient, readers: dict[str, str], books: dict[str, str]) -> None:
    bad_status = client.post(
        "/user-books", json={"book_id": "book-1", "status": "abandoned"}, headers=ALICE
    )
    unknown_book = client.post(
        "/user-books", json={"book_id": "ghost", "status": "reading"}, headers=ALICE
    )
    anonymous = client.get("/user-books")

    assert bad_status.status_code == 400
    assert bad_status.json() == {"error": "Unknown reading status: abandoned"}
    assert unknown_book.status_code == 404
    assert anonymous.status_code == 401

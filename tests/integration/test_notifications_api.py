from fastapi.testclient import TestClient

from tests.conftest import DataFactory

ALICE = {"X-User-Id": "user-alice"}
BOB = {"X-User-Id": "user-bob"}


def test_notifications_list_and_mark_read(
    client: TestClient, test_data: DataFactory, readers: dict[str, str]
) -> None:
    # Given: two people follow bob
    client.post("/follows", json={"user_id": "user-bob"}, headers=ALICE)
    client.post("/follows", json={"user_id": "user-bob"}, headers={"X-User-Id": "user-carol"})

    # When
    listed = client.get("/notifications", headers=BOB)

    # Then
    assert listed.status_code == 200
    body = listed.json()
    assert body["unreadCount"] == 2
    assert {n["type"] for n in body["notifications"]} == {"new_follower"}
    assert {n["actor"]["username"] for n in body["notifications"]} == {"alice", "carol"}

    # When: one is marked read
    first_id = body["notifications"][0]["id"]
    patched = client.patch("/notifications", json={"notification_id": first_id}, headers=BOB)

    # Then
    assert patched.json() == {"success": True}
    assert client.get("/notifications", headers=BOB).json()["unreadCount"] == 1

    # When: everything is marked read
    client.patch("/notifications", json={"mark_all_read": True}, headers=BOB)

    # Then
    after = client.get("/notifications", headers=BOB).json()
    assert after["unreadCount"] == 0
    assert all(n["read"] for n in after["notifications"])


def test_mark_read_only_touches_own_notifications(
    client: TestClient, test_data: DataFactory, readers: dict[str, str]
) -> None:
    client.post("/follows", json={"user_id": "user-bob"}, headers=ALICE)
    bobs = test_data.get_notifications("user-bob")

    client.patch("/notifications", json={"notification_id": bobs[0].id}, headers=ALICE)

    assert client.get("/notifications", headers=BOB).json()["unreadCount"] == 1


def test_notifications_limit(client: TestClient, readers: dict[str, str]) -> None:
    client.post("/follows", json={"user_id": "user-bob"}, headers=ALICE)
    client.post("/follows", json={"user_id": "user-bob"}, headers={"X-User-Id": "user-carol"})

    body = client.get("/notifications", params={"limit": 1}, headers=BOB).json()

    assert len(body["notifications"]) == 1
    assert body["unreadCount"] == 2


def test_patch_requires_target(client: TestClient, readers: dict[str, str]) -> None:
    response = client.patch("/notifications", json={}, headers=BOB)

    assert response.status_code == 400
    assert response.json() == {"error": "notification_id is required"}


def test_notifications_require_authentication(client: TestClient) -> None:
    assert client.get("/notifications").status_code == 401

# This file tests category and editorial endpoints against an in-memory SQLite database.
# Both entities share the same rules: unique names, a status flag, and guarded deletes.

from __future__ import annotations

import pytest

from tests.api.support import create_book, create_category, create_editorial, library_test_client

COLLECTIONS = [
    ("/api/v1/categories", "category_id"),
    ("/api/v1/editorials", "editorial_id"),
]


@pytest.mark.parametrize(("path", "id_field"), COLLECTIONS)
def test_create_applies_defaults(sqlite_db, path: str, id_field: str) -> None:
    with library_test_client(sqlite_db) as client:
        response = client.post(path, json={"name": "Poetry"})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data[id_field] >= 1
    assert data["description"] == "No description"
    assert data["status"] == "active"


@pytest.mark.parametrize(("path", "id_field"), COLLECTIONS)
def test_duplicate_name_is_rejected(sqlite_db, path: str, id_field: str) -> None:
    with library_test_client(sqlite_db) as client:
        client.post(path, json={"name": "Poetry"})
        response = client.post(path, json={"name": "Poetry"})

    assert response.status_code == 400
    assert response.json()["error_code"] == "DUPLICATE_RECORD"


@pytest.mark.parametrize(("path", "id_field"), COLLECTIONS)
def test_invalid_status_is_rejected(sqlite_db, path: str, id_field: str) -> None:
    with library_test_client(sqlite_db) as client:
        response = client.post(path, json={"name": "Poetry", "status": "archived"})

    assert response.status_code == 422


@pytest.mark.parametrize(("path", "id_field"), COLLECTIONS)
def test_filter_by_status_and_update(sqlite_db, path: str, id_field: str) -> None:
    with library_test_client(sqlite_db) as client:
        first = client.post(path, json={"name": "Poetry"}).json()["data"]
        client.post(path, json={"name": "Essays", "status": "inactive"})
        updated = client.patch(f"{path}/{first[id_field]}", json={"description": "Verse"})
        inactive = client.get(f"{path}?status=inactive").json()

    assert updated.status_code == 200
    assert updated.json()["data"]["description"] == "Verse"
    assert updated.json()["data"]["name"] == "Poetry"
    assert [row["name"] for row in inactive["data"]] == ["Essays"]
    assert inactive["pagination"]["total_count"] == 1


def test_rename_category_to_existing_name_is_rejected(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        create_category(client, name="Novel")
        other = create_category(client, name="Drama")
        response = client.patch(
            f"/api/v1/categories/{other['category_id']}", json={"name": "Novel"}
        )

    assert response.status_code == 400
    assert response.json()["error_code"] == "DUPLICATE_RECORD"
    assert "category" in response.json()["message"]


def test_delete_category_and_editorial_guarded_by_books(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        category = create_category(client)
        editorial = create_editorial(client)
        create_book(
            client,
            category_id=category["category_id"],
            editorial_id=editorial["editorial_id"],
        )
        category_response = client.delete(f"/api/v1/categories/{category['category_id']}")
        editorial_response = client.delete(f"/api/v1/editorials/{editorial['editorial_id']}")
        unused = create_editorial(client, name="Alfaguara")
        unused_response = client.delete(f"/api/v1/editorials/{unused['editorial_id']}")

    assert category_response.status_code == 400
    assert category_response.json()["error_code"] == "REFERENCE_CONSTRAINT"
    assert editorial_response.status_code == 400
    assert unused_response.status_code == 200


def test_missing_category_returns_404(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        response = client.get("/api/v1/categories/404")

    assert response.status_code == 404

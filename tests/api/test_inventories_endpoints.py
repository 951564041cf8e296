# This file tests inventory endpoints against an in-memory SQLite database.
# It checks that available units always equal purchased minus loaned units.

from __future__ import annotations

from tests.api.support import create_book, create_inventory, library_test_client


def test_create_inventory_derives_available_units(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"], units_purchased=4)

    assert inventory["units_purchased"] == 4
    assert inventory["units_loaned"] == 0
    assert inventory["units_available"] == 4


def test_create_inventory_defaults_to_one_unit(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        response = client.post("/api/v1/inventories", json={"book_id": book["book_id"]})

    assert response.status_code == 201
    assert response.json()["data"]["units_available"] == 1


def test_create_inventory_rejects_missing_book_and_duplicates(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        missing_book = client.post("/api/v1/inventories", json={"book_id": 404})
        book = create_book(client)
        create_inventory(client, book_id=book["book_id"])
        duplicate = client.post("/api/v1/inventories", json={"book_id": book["book_id"]})

    assert missing_book.status_code == 400
    assert missing_book.json()["error_code"] == "REFERENCE_NOT_FOUND"
    assert duplicate.status_code == 400
    assert duplicate.json()["error_code"] == "DUPLICATE_RECORD"


def test_purchase_loan_and_return_units(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"], units_purchased=2)
        base = f"/api/v1/inventories/{inventory['inventory_id']}"

        purchased = client.patch(f"{base}/purchase", json={"units": 3}).json()["data"]
        loaned = client.patch(f"{base}/loan", json={"units": 4}).json()["data"]
        returned = client.patch(f"{base}/return", json={"units": 1}).json()["data"]

    assert (purchased["units_purchased"], purchased["units_available"]) == (5, 5)
    assert (loaned["units_loaned"], loaned["units_available"]) == (4, 1)
    assert (returned["units_loaned"], returned["units_available"]) == (3, 2)


def test_loan_more_than_available_is_rejected(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"], units_purchased=2)
        base = f"/api/v1/inventories/{inventory['inventory_id']}"

        too_many = client.patch(f"{base}/loan", json={"units": 3})
        client.patch(f"{base}/loan", json={"units": 2})
        none_left = client.patch(f"{base}/loan", json={"units": 1})
        after = client.get(base).json()["data"]

    assert too_many.status_code == 400
    assert too_many.json()["error_code"] == "NO_UNITS_AVAILABLE"
    assert none_left.status_code == 400
    assert none_left.json()["error_code"] == "NO_UNITS_AVAILABLE"
    assert after["units_loaned"] == 2
    assert after["units_available"] == 0


def test_return_more_than_loaned_is_rejected(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"], units_purchased=2)
        base = f"/api/v1/inventories/{inventory['inventory_id']}"
        client.patch(f"{base}/loan", json={"units": 1})
        response = client.patch(f"{base}/return", json={"units": 2})

    assert response.status_code == 400
    assert response.json()["error_code"] == "NOTHING_TO_RETURN"


def test_unit_movements_require_positive_units(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"])
        response = client.patch(
            f"/api/v1/inventories/{inventory['inventory_id']}/purchase", json={"units": 0}
        )

    assert response.status_code == 422


def test_lookup_inventory_by_book(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        bare_book = create_book(client, name="Without Stock")
        inventory = create_inventory(client, book_id=book["book_id"])
        found = client.get(f"/api/v1/inventories/book/{book['book_id']}")
        not_stocked = client.get(f"/api/v1/inventories/book/{bare_book['book_id']}")

    assert found.status_code == 200
    assert found.json()["data"]["inventory_id"] == inventory["inventory_id"]
    assert not_stocked.status_code == 404


def test_list_inventories_sorted_by_available_units(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        for name, units in (("Alpha Book", 5), ("Beta Book", 1), ("Gamma Book", 3)):
            book = create_book(client, name=name)
            create_inventory(client, book_id=book["book_id"], units_purchased=units)
        payload = client.get("/api/v1/inventories?sort=units_available:desc&page_size=5").json()

    assert [row["units_available"] for row in payload["data"]] == [5, 3, 1]


def test_delete_inventory_blocked_while_units_on_loan(sqlite_db) -> None:
    with library_test_client(sqlite_db) as client:
        book = create_book(client)
        inventory = create_inventory(client, book_id=book["book_id"])
        base = f"/api/v1/inventories/{inventory['inventory_id']}"
        client.patch(f"{base}/loan", json={"units": 1})
        blocked = client.delete(base)
        client.patch(f"{base}/return", json={"units": 1})
        removed = client.delete(base)
        missing = client.get(base)

    assert blocked.status_code == 400
    assert blocked.json()["error_code"] == "INVENTORY_IN_USE"
    assert removed.status_code == 200
    assert missing.status_code == 404

from __future__ import annotations

import pytest

from expense_tracker import store


def expense(**fields):
    data = {
        "title": "Coffee",
        "amount": 4.5,
        "type": "expense",
        "category": "Food & Dining",
        "date": "2024-03-01",
    }
    data.update(fields)
    return data


@pytest.fixture()
def users(db):
    alice = store.create_user(db, "Alice", "alice@example.com", "hash")
    bob = store.create_user(db, "Bob", "bob@example.com", "hash")
    return alice, bob


def test_create_user_rejects_duplicate_email_case_insensitively(db, users):
    with pytest.raises(store.DuplicateEmail):
        store.create_user(db, "Other Alice", "ALICE@example.com", "hash")


def test_update_user_only_touches_given_fields(db, users):
    alice, _ = users
    updated = store.update_user(db, alice.id, {"name": "Alice Liddell", "email": None})
    assert updated.name == "Alice Liddell"
    assert updated.email == "alice@example.com"

    with pytest.raises(store.DuplicateEmail):
        store.update_user(db, alice.id, {"email": "bob@example.com"})


def test_created_expense_is_owned_and_populated(db, users):
    alice, _ = users
    created = store.create_expense(db, alice.id, expense(description="latte"))
    assert created.user_id == alice.id
    assert created.owner == {"id": alice.id, "name": "Alice", "email": "alice@example.com"}
    assert created.description == "latte"
    assert created.created_at == created.updated_at


def test_list_orders_by_date_then_creation(db, users):
    alice, _ = users
    older = store.create_expense(db, alice.id, expense(title="older", date="2024-02-01"))
    first_same_day = store.create_expense(db, alice.id, expense(title="first", date="2024-03-01"))
    second_same_day = store.create_expense(db, alice.id, expense(title="second", date="2024-03-01"))

    listed = store.list_for_user(db, alice.id)
    assert [e.id for e in listed] == [second_same_day.id, first_same_day.id, older.id]


def test_list_filters(db, users):
    alice, _ = users
    store.create_expense(db, alice.id, expense(title="salary", type="income", category="Other", date="2024-01-31", amount=3000))
    store.create_expense(db, alice.id, expense(title="bus", category="Transportation", date="2024-02-15"))
    store.create_expense(db, alice.id, expense(title="lunch", date="2024-03-01"))
    store.create_expense(db, alice.id, expense(title="dinner", date="2024-03-31"))

    def titles(**filters):
        return sorted(e.title for e in store.list_for_user(db, alice.id, filters=filters))

    assert titles(type="income") == ["salary"]
    assert titles(category="Food & Dining") == ["dinner", "lunch"]
    assert titles(start_date="2024-02-15", end_date="2024-03-01") == ["bus", "lunch"]
    assert titles(start_date="2024-03-01") == ["dinner", "lunch"]
    assert titles(end_date="2024-01-31") == ["salary"]
    assert titles(type="expense", category="Transportation", start_date=None) == ["bus"]
    assert store.count_for_user(db, alice.id, {"category": "Food & Dining"}) == 2


def test_list_is_scoped_to_owner(db, users):
    alice, bob = users
    store.create_expense(db, alice.id, expense())
    assert store.list_for_user(db, bob.id) == []
    assert store.count_for_user(db, bob.id) == 0


def test_pagination_slices_and_reports(db, users):
    alice, _ = users
    for day in range(1, 26):
        store.create_expense(db, alice.id, expense(title=f"day {day}", date=f"2024-03-{day:02d}"))

    total = store.count_for_user(db, alice.id)
    assert total == 25

    third = store.list_for_user(db, alice.id, page=3, limit=10)
    assert [e.title for e in third] == [f"day {d}" for d in range(5, 0, -1)]

    for page in (1, 2, 3):
        meta = store.pagination(page, 10, total)
        assert meta["totalPages"] == 3
        assert meta["hasNextPage"] == (page < meta["totalPages"])
        assert meta["hasPrevPage"] == (page > 1)
        assert meta["currentPage"] * meta["itemsPerPage"] <= meta["totalItems"] + meta["itemsPerPage"] - 1


def test_pagination_of_empty_set():
    assert store.pagination(1, 10, 0) == {
        "currentPage": 1,
        "totalPages": 0,
        "totalItems": 0,
        "itemsPerPage": 10,
        "hasNextPage": False,
        "hasPrevPage": False,
    }


def test_sum_by_type_on_empty_set(db, users):
    alice, _ = users
    assert store.sum_by_type(db, alice.id) == {"income": 0, "expense": 0}
    assert store.sum_by_category(db, alice.id) == []


def test_sums(db, users):
    alice, bob = users
    store.create_expense(db, alice.id, expense(type="income", category="Other", amount=1000, date="2024-03-01"))
    store.create_expense(db, alice.id, expense(amount=20.25, date="2024-03-02"))
    store.create_expense(db, alice.id, expense(amount=30.5, category="Housing", date="2024-03-03"))
    store.create_expense(db, alice.id, expense(amount=9.75, date="2024-04-01"))
    store.create_expense(db, bob.id, expense(amount=500, date="2024-03-02"))

    totals = store.sum_by_type(db, alice.id)
    assert totals == {"income": 1000, "expense": pytest.approx(60.5)}

    march = store.sum_by_type(db, alice.id, start_date="2024-03-01", end_date="2024-03-31")
    assert march["expense"] == pytest.approx(50.75)

    by_category = store.sum_by_category(db, alice.id)
    assert [c["category"] for c in by_category] == ["Other", "Housing", "Food & Dining"]
    assert by_category[2] == {"category": "Food & Dining", "total": pytest.approx(30.0), "count": 2}


def test_update_expense_keeps_unsent_description(db, users):
    alice, _ = users
    created = store.create_expense(db, alice.id, expense(description="latte"))
    updated = store.update_expense(db, created.id, expense(title="Espresso", amount=3))
    assert updated.title == "Espresso"
    assert updated.amount == 3
    assert updated.description == "latte"
    assert updated.updated_at >= created.updated_at


def test_delete_one_and_all(db, users):
    alice, bob = users
    first = store.create_expense(db, alice.id, expense())
    store.create_expense(db, alice.id, expense())
    store.create_expense(db, bob.id, expense())

    assert store.delete_expense(db, first.id) is True
    assert store.delete_expense(db, first.id) is False
    assert store.get_expense(db, first.id) is None

    assert store.delete_all_for_user(db, alice.id) == 1
    assert store.count_for_user(db, alice.id) == 0
    assert store.count_for_user(db, bob.id) == 1

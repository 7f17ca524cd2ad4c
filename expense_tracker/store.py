# expense_tracker/store.py
#
# Query helpers over the users / expenses tables. Every function takes the
# sqlite3 connection first; callers get it from db.get_db().
import math
import sqlite3
from datetime import datetime, timezone

from .db import execute_db, query_db
from .models import Expense, User

EXPENSE_COLUMNS = ("title", "amount", "type", "category", "date", "description")

EXPENSE_SELECT = """
    SELECT e.*, u.name AS user_name, u.email AS user_email
    FROM expenses e JOIN users u ON u.id = e.user_id
"""


class DuplicateEmail(Exception):
    pass


def utcnow():
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _where(user_id, filters):
    """WHERE clause for one user's records; filters are trusted (validated upstream)"""
    filters = filters or {}
    clauses, args = ["e.user_id = ?"], [user_id]
    if filters.get("type"):
        clauses.append("e.type = ?")
        args.append(filters["type"])
    if filters.get("category"):
        clauses.append("e.category = ?")
        args.append(filters["category"])
    if filters.get("start_date"):
        clauses.append("e.date >= ?")
        args.append(filters["start_date"])
    if filters.get("end_date"):
        clauses.append("e.date <= ?")
        args.append(filters["end_date"])
    return " AND ".join(clauses), args


# ---------------- Users ----------------
def get_user(db, user_id):
    row = query_db(db, "SELECT * FROM users WHERE id=?", (user_id,), one=True)
    return User.from_row(row) if row else None


def get_user_by_email(db, email):
    row = query_db(db, "SELECT * FROM users WHERE email=?", (email,), one=True)
    return User.from_row(row) if row else None


def create_user(db, name, email, password_hash):
    now = utcnow()
    try:
        user_id, _ = execute_db(
            db,
            "INSERT INTO users (name, email, password_hash, created_at, updated_at) VALUES (?,?,?,?,?)",
            (name, email, password_hash, now, now),
        )
    except sqlite3.IntegrityError as exc:
        raise DuplicateEmail(email) from exc
    return get_user(db, user_id)


def update_user(db, user_id, fields):
    fields = {k: v for k, v in fields.items() if k in ("name", "email") and v is not None}
    if fields:
        assignments = ", ".join(f"{k}=?" for k in fields)
        try:
            execute_db(
                db,
                f"UPDATE users SET {assignments}, updated_at=? WHERE id=?",
                (*fields.values(), utcnow(), user_id),
            )
        except sqlite3.IntegrityError as exc:
            raise DuplicateEmail(fields.get("email")) from exc
    return get_user(db, user_id)


def update_password(db, user_id, password_hash):
    execute_db(
        db,
        "UPDATE users SET password_hash=?, updated_at=? WHERE id=?",
        (password_hash, utcnow(), user_id),
    )


# ---------------- Expenses ----------------
def get_expense(db, expense_id):
    row = query_db(db, EXPENSE_SELECT + " WHERE e.id=?", (expense_id,), one=True)
    return Expense.from_row(row) if row else None


def list_for_user(db, user_id, page=1, limit=10, filters=None):
    """One page of records, newest date first, ties by newest creation"""
    where, args = _where(user_id, filters)
    rows = query_db(
        db,
        EXPENSE_SELECT + f" WHERE {where} ORDER BY e.date DESC, e.created_at DESC, e.id DESC LIMIT ? OFFSET ?",
        (*args, limit, (page - 1) * limit),
    )
    return [Expense.from_row(r) for r in rows]


def count_for_user(db, user_id, filters=None):
    where, args = _where(user_id, filters)
    row = query_db(db, f"SELECT COUNT(*) AS count FROM expenses e WHERE {where}", args, one=True)
    return row["count"]


def pagination(page, limit, total):
    total_pages = math.ceil(total / limit)
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def sum_by_type(db, user_id, start_date=None, end_date=None):
    where, args = _where(user_id, {"start_date": start_date, "end_date": end_date})
    rows = query_db(
        db,
        f"SELECT e.type AS type, ROUND(SUM(e.amount), 2) AS total FROM expenses e WHERE {where} GROUP BY e.type",
        args,
    )
    totals = {"income": 0, "expense": 0}
    for r in rows:
        totals[r["type"]] = r["total"] or 0
    return totals


def sum_by_category(db, user_id, start_date=None, end_date=None):
    where, args = _where(user_id, {"start_date": start_date, "end_date": end_date})
    rows = query_db(
        db,
        f"""
        SELECT e.category AS category, ROUND(SUM(e.amount), 2) AS total, COUNT(*) AS count
        FROM expenses e WHERE {where}
        GROUP BY e.category
        ORDER BY total DESC, e.category
        """,
        args,
    )
    return [dict(r) for r in rows]


def create_expense(db, user_id, data):
    now = utcnow()
    expense_id, _ = execute_db(
        db,
        """INSERT INTO expenses (user_id, title, amount, type, category, date, description, created_at, updated_at)
           VALUES (?,?,?,?,?,?,?,?,?)""",
        (user_id, data["title"], data["amount"], data["type"], data["category"],
         data["date"], data.get("description"), now, now),
    )
    return get_expense(db, expense_id)


def update_expense(db, expense_id, data):
    fields = {k: data[k] for k in EXPENSE_COLUMNS if k in data}
    if fields:
        assignments = ", ".join(f"{k}=?" for k in fields)
        execute_db(
            db,
            f"UPDATE expenses SET {assignments}, updated_at=? WHERE id=?",
            (*fields.values(), utcnow(), expense_id),
        )
    return get_expense(db, expense_id)


def delete_expense(db, expense_id):
    _, count = execute_db(db, "DELETE FROM expenses WHERE id=?", (expense_id,))
    return count > 0


def delete_all_for_user(db, user_id):
    _, count = execute_db(db, "DELETE FROM expenses WHERE user_id=?", (user_id,))
    return count

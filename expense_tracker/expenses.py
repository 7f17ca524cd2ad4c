# expense_tracker/expenses.py
import logging
import sqlite3

from flask import Blueprint, g
from flask_jwt_extended import current_user, jwt_required

from . import store
from .db import get_db
from .middleware import check_ownership
from .responses import failure, success
from .validators import DateRangeQuery, ExpensePayload, ExpenseQuery, validate_args, validate_json

logger = logging.getLogger("expense-backend.expenses")

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.before_request
@jwt_required()
def protect():
    """Every expense route needs an authenticated caller"""


@expenses_bp.route("", methods=["GET"])
@validate_args(ExpenseQuery)
def list_expenses(query):
    filters = query.filters()
    try:
        db = get_db()
        expenses = store.list_for_user(db, current_user.id, query.page, query.limit, filters)
        total = store.count_for_user(db, current_user.id, filters)
    except sqlite3.Error:
        logger.exception("Get expenses failed")
        return failure("Failed to fetch expenses", 500)

    return success({
        "expenses": [e.to_dict() for e in expenses],
        "pagination": store.pagination(query.page, query.limit, total),
    })


@expenses_bp.route("/stats", methods=["GET"])
@validate_args(DateRangeQuery)
def stats(query):
    date_range = query.date_range()
    try:
        db = get_db()
        totals = store.sum_by_type(db, current_user.id, **date_range)
        by_category = store.sum_by_category(db, current_user.id, **date_range)
    except sqlite3.Error:
        logger.exception("Get stats failed")
        return failure("Failed to fetch statistics", 500)

    summary = {
        "income": totals["income"],
        "expenses": totals["expense"],
        "balance": round(totals["income"] - totals["expense"], 2),
    }
    return success({"summary": summary, "byCategory": by_category})


@expenses_bp.route("", methods=["POST"])
@validate_json(ExpensePayload)
def create_expense(payload):
    try:
        expense = store.create_expense(get_db(), current_user.id, payload.to_record())
    except sqlite3.Error:
        logger.exception("Create expense failed")
        return failure("Failed to create expense", 500)

    logger.info("User %s created expense %s", current_user.id, expense.id)
    return success({"expense": expense.to_dict()}, message="Expense created successfully", status=201)


@expenses_bp.route("/<int:expense_id>", methods=["GET"])
@check_ownership
def get_expense(expense_id):
    return success({"expense": g.expense.to_dict()})


@expenses_bp.route("/<int:expense_id>", methods=["PUT"])
@check_ownership
@validate_json(ExpensePayload)
def update_expense(expense_id, payload):
    try:
        expense = store.update_expense(get_db(), expense_id, payload.to_record())
    except sqlite3.Error:
        logger.exception("Update expense %s failed", expense_id)
        return failure("Failed to update expense", 500)

    return success({"expense": expense.to_dict()}, message="Expense updated successfully")


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@check_ownership
def delete_expense(expense_id):
    try:
        store.delete_expense(get_db(), expense_id)
    except sqlite3.Error:
        logger.exception("Delete expense %s failed", expense_id)
        return failure("Failed to delete expense", 500)

    return success(message="Expense deleted successfully")


@expenses_bp.route("", methods=["DELETE"])
def delete_all_expenses():
    try:
        deleted = store.delete_all_for_user(get_db(), current_user.id)
    except sqlite3.Error:
        logger.exception("Delete all expenses failed")
        return failure("Failed to delete expenses", 500)

    logger.info("User %s deleted %s expenses", current_user.id, deleted)
    return success({"deletedCount": deleted}, message=f"Deleted {deleted} expenses successfully")

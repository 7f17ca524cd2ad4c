# expense_tracker/middleware.py
#
# Request guards. A protected request walks
#   no token -> token present -> {valid, expired, invalid} -> user lookup -> {found, not found}
# and every state except "found" ends in a 401 envelope. check_ownership runs
# after that and decides 404 / 403 for record-specific routes.
import logging
import sqlite3
from functools import wraps

from flask import g
from flask_jwt_extended import current_user

from . import store
from .db import get_db
from .errors import ApiError, Forbidden, NotFound
from .responses import failure

logger = logging.getLogger("expense-backend.auth")

SQLITE_MAX_INTEGER = 2**63 - 1


def register_jwt_callbacks(jwt):
    @jwt.unauthorized_loader
    def missing_token(reason):
        return failure("You are not logged in. Please log in to get access.", 401)

    @jwt.invalid_token_loader
    def invalid_token(reason):
        logger.info("Rejected invalid token: %s", reason)
        return failure("Invalid token. Please log in again.", 401)

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return failure("Your token has expired. Please log in again.", 401)

    @jwt.user_lookup_loader
    def load_user(jwt_header, jwt_data):
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return store.get_user(get_db(), user_id)

    @jwt.user_lookup_error_loader
    def user_not_found(jwt_header, jwt_data):
        return failure("The user belonging to this token no longer exists.", 401)


def check_ownership(view):
    """Load the expense named by expense_id and make sure the caller owns it"""

    @wraps(view)
    def wrapper(*args, **kwargs):
        # no row can carry an id past SQLite's INTEGER range
        if kwargs["expense_id"] > SQLITE_MAX_INTEGER:
            raise NotFound()
        try:
            expense = store.get_expense(get_db(), kwargs["expense_id"])
        except sqlite3.Error:
            logger.exception("Ownership lookup failed")
            raise ApiError("Error checking resource ownership")
        if expense is None:
            raise NotFound()
        if expense.user_id != current_user.id:
            logger.warning("User %s denied access to expense %s", current_user.id, expense.id)
            raise Forbidden()
        g.expense = expense
        return view(*args, **kwargs)

    return wrapper

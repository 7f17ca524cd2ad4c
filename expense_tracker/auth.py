# expense_tracker/auth.py
import logging
import sqlite3

from flask import Blueprint
from flask_jwt_extended import current_user, jwt_required

from . import store
from .db import get_db
from .errors import Unauthenticated, ValidationFailure
from .responses import failure, success
from .security import hash_password, issue_token, verify_password
from .validators import (
    ChangePasswordPayload,
    LoginPayload,
    ProfilePayload,
    RegisterPayload,
    validate_json,
)

logger = logging.getLogger("expense-backend.auth")

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
@validate_json(RegisterPayload)
def register(payload):
    try:
        user = store.create_user(get_db(), payload.name, payload.email, hash_password(payload.password))
    except store.DuplicateEmail:
        raise ValidationFailure([{"field": "email", "message": "User with this email already exists"}])
    except sqlite3.Error:
        logger.exception("Register failed")
        return failure("Failed to register user", 500)

    logger.info("Registered user %s", user.id)
    return success(
        {"user": user.to_dict(), "token": issue_token(user.id)},
        message="User registered successfully",
        status=201,
    )


@auth_bp.route("/login", methods=["POST"])
@validate_json(LoginPayload)
def login(payload):
    try:
        user = store.get_user_by_email(get_db(), payload.email)
    except sqlite3.Error:
        logger.exception("Login lookup failed")
        return failure("Failed to log in", 500)

    # same answer for unknown email and wrong password
    if user is None or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Invalid email or password")

    logger.info("User %s logged in", user.id)
    return success(
        {"user": user.to_dict(), "token": issue_token(user.id)},
        message="Login successful",
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return success({"user": current_user.to_dict()})


@auth_bp.route("/profile", methods=["PUT"])
@jwt_required()
@validate_json(ProfilePayload)
def update_profile(payload):
    try:
        user = store.update_user(get_db(), current_user.id, payload.model_dump(exclude_none=True))
    except store.DuplicateEmail:
        raise ValidationFailure([{"field": "email", "message": "Email is already taken"}])
    except sqlite3.Error:
        logger.exception("Profile update failed")
        return failure("Failed to update profile", 500)

    return success({"user": user.to_dict()}, message="Profile updated successfully")


@auth_bp.route("/change-password", methods=["PUT"])
@jwt_required()
@validate_json(ChangePasswordPayload)
def change_password(payload):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise ValidationFailure([{"field": "currentPassword", "message": "Current password is incorrect"}])

    try:
        store.update_password(get_db(), current_user.id, hash_password(payload.new_password))
    except sqlite3.Error:
        logger.exception("Password change failed")
        return failure("Failed to change password", 500)

    logger.info("User %s changed password", current_user.id)
    return success({"token": issue_token(current_user.id)}, message="Password changed successfully")

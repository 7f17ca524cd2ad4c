# expense_tracker/security.py
from flask import current_app
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash


class TokenExpired(Exception):
    pass


class TokenInvalid(Exception):
    pass


def hash_password(plain):
    """Salted slow hash; method and cost come from PASSWORD_HASH_METHOD"""
    return generate_password_hash(plain, method=current_app.config["PASSWORD_HASH_METHOD"])


def verify_password(plain, password_hash):
    if not plain or not password_hash:
        return False
    return check_password_hash(password_hash, plain)


def issue_token(user_id, expires_delta=None):
    """
    Signed (HS256) token carrying the user id as subject.
    Lifetime defaults to JWT_ACCESS_TOKEN_EXPIRES: 7 days in production, 30 otherwise.
    """
    kwargs = {}
    if expires_delta is not None:
        kwargs["expires_delta"] = expires_delta
    return create_access_token(identity=str(user_id), **kwargs)


def verify_token(token):
    """
    Return the user id carried by token or raise TokenExpired / TokenInvalid.

    Standalone verifier for code outside a request (scripts, tests). HTTP
    requests are checked by flask-jwt-extended, whose loaders in
    middleware.register_jwt_callbacks map the same expired / invalid cases
    onto 401 responses.
    """
    try:
        payload = decode_token(token)
    except ExpiredSignatureError as exc:
        raise TokenExpired("Token has expired") from exc
    except (InvalidTokenError, JWTExtendedException) as exc:
        raise TokenInvalid("Token is invalid") from exc

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TokenInvalid("Token subject is not a user id") from exc

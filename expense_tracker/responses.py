# expense_tracker/responses.py
from flask import jsonify


def success(data=None, message=None, status=200, extra=None):
    body = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra or {})
    return jsonify(body), status


def failure(message, status, errors=None, **extra):
    body = {"status": "error", "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return jsonify(body), status

# expense_tracker/db.py
import logging
import os
import sqlite3

from flask import current_app, g

logger = logging.getLogger("expense-backend.db")

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), "schema.sql")


class Database:
    """Store handle built once by the app factory and shared by every request"""

    def __init__(self, path):
        self.path = path

    def connect(self):
        # ensure directory exists
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def init_schema(self):
        """
        Create tables and indexes from schema.sql.
        Idempotent (IF NOT EXISTS everywhere) so it is safe at every startup.
        """
        if not os.path.exists(SCHEMA_FILE):
            raise FileNotFoundError(f"schema.sql not found at expected path: {SCHEMA_FILE}")

        conn = self.connect()
        try:
            with open(SCHEMA_FILE, "r", encoding="utf-8") as f:
                conn.executescript(f.read())
            conn.commit()
        finally:
            conn.close()
        logger.info("Database schema ready at %s", self.path)


def init_app(app):
    database = Database(app.config["DB_PATH"])
    database.init_schema()
    app.extensions["database"] = database
    app.teardown_appcontext(close_db)
    return database


def get_db():
    """Connection bound to the current app context"""
    conn = getattr(g, "_database", None)
    if conn is None:
        conn = g._database = current_app.extensions["database"].connect()
    return conn


def close_db(exception=None):
    conn = g.pop("_database", None)
    if conn is not None:
        try:
            conn.close()
        except sqlite3.Error:
            logger.exception("Error closing DB connection")


def query_db(conn, query, args=(), one=False):
    cur = conn.execute(query, args)
    rv = cur.fetchall()
    cur.close()
    return (rv[0] if rv else None) if one else rv


def execute_db(conn, query, args=()):
    """Run a write statement and commit; returns (lastrowid, rowcount)"""
    cur = conn.cursor()
    try:
        cur.execute(query, args)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    last, count = cur.lastrowid, cur.rowcount
    cur.close()
    return last, count

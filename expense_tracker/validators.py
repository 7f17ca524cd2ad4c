"""Request schemas for the auth and expense endpoints.

Every body or query string goes through :func:`validate` before a handler
touches the store. Failures come back as a list of ``{field, message}``
pairs so the client can highlight the offending inputs; filter values that
reach the store accessor are therefore always one of the known enums.
"""
import datetime as dt
from functools import wraps
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

from .errors import ValidationFailure
from .models import CATEGORIES, TYPES

ExpenseType = Literal[TYPES]
Category = Literal[CATEGORIES]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MAX_AMOUNT = 999_999_999
# keeps (page - 1) * limit inside SQLite's 64-bit INTEGER
MAX_PAGE = 1_000_000_000

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]
Email = Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, pattern=EMAIL_PATTERN)]


def parse_iso_date(value: Any) -> Any:
    """Accept a calendar date or a full ISO-8601 timestamp, keep the date part"""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date) or value is None:
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.strip()).date()
        except ValueError:
            pass
    raise ValueError("not an ISO-8601 date")


class RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # client-facing field name -> message reported for any violation on it
    messages: ClassVar[Dict[str, str]] = {}

    @classmethod
    def message_for(cls, field: str, error: Dict[str, Any]) -> str:
        return cls.messages.get(field, error["msg"])


# ---------------- Expenses ----------------
class ExpensePayload(RequestSchema):
    title: Title
    amount: float = Field(..., ge=0.01, le=MAX_AMOUNT, allow_inf_nan=False)
    type: ExpenseType
    category: Category
    date: dt.date
    description: Optional[Description] = None

    messages: ClassVar[Dict[str, str]] = {
        "title": "Title must be between 1 and 100 characters",
        "amount": "Amount must be a positive number",
        "type": 'Type must be either "income" or "expense"',
        "category": "Please select a valid category",
        "date": "Please provide a valid date",
        "description": "Description cannot exceed 500 characters",
    }

    parse_date = field_validator("date", mode="before")(parse_iso_date)

    @field_validator("amount", mode="before")
    @classmethod
    def reject_bool_amount(cls, value):
        # lax float mode would turn true into 1.0
        if isinstance(value, bool):
            raise ValueError("amount must be a number")
        return value

    @classmethod
    def message_for(cls, field, error):
        if field == "amount" and error["type"] == "less_than_equal":
            return "Amount cannot exceed 999,999,999"
        return super().message_for(field, error)

    def to_record(self) -> Dict[str, Any]:
        # unset optional fields stay out so an update keeps their stored value
        data = self.model_dump(exclude_unset=True)
        data["date"] = self.date.isoformat()
        return data


class DateRangeQuery(RequestSchema):
    start_date: Optional[dt.date] = Field(None, alias="startDate")
    end_date: Optional[dt.date] = Field(None, alias="endDate")

    messages: ClassVar[Dict[str, str]] = {
        "startDate": "Start date must be a valid date",
        "endDate": "End date must be a valid date",
    }

    parse_dates = field_validator("start_date", "end_date", mode="before")(parse_iso_date)

    def date_range(self) -> Dict[str, Optional[str]]:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }


class ExpenseQuery(DateRangeQuery):
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(10, ge=1, le=100)
    type: Optional[ExpenseType] = None
    category: Optional[Category] = None

    messages: ClassVar[Dict[str, str]] = {
        **DateRangeQuery.messages,
        "page": "Page must be a positive integer",
        "limit": "Limit must be between 1 and 100",
        "type": 'Type must be either "income" or "expense"',
        "category": "Please select a valid category",
    }

    def filters(self) -> Dict[str, Optional[str]]:
        return {"type": self.type, "category": self.category, **self.date_range()}


# ---------------- Auth ----------------
class RegisterPayload(RequestSchema):
    name: Name
    email: Email
    password: str = Field(..., min_length=6)

    messages: ClassVar[Dict[str, str]] = {
        "name": "Name must be between 2 and 50 characters",
        "email": "Please provide a valid email",
        "password": "Password must be at least 6 characters long",
    }


class LoginPayload(RequestSchema):
    email: Email
    password: str = Field(..., min_length=1)

    messages: ClassVar[Dict[str, str]] = {
        "email": "Please provide a valid email",
        "password": "Password is required",
    }


class ProfilePayload(RequestSchema):
    name: Optional[Name] = None
    email: Optional[Email] = None

    messages: ClassVar[Dict[str, str]] = {
        "name": "Name must be between 2 and 50 characters",
        "email": "Please provide a valid email",
    }


class ChangePasswordPayload(RequestSchema):
    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(..., min_length=6, alias="newPassword")

    messages: ClassVar[Dict[str, str]] = {
        "currentPassword": "Current password is required",
        "newPassword": "New password must be at least 6 characters long",
    }


def validate(schema, data):
    """Build schema from data or raise ValidationFailure with field-level errors"""
    if not isinstance(data, dict):
        raise ValidationFailure([{"field": "body", "message": "Request body must be a JSON object"}])

    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        errors: List[Dict[str, str]] = []
        seen = set()
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            if field in seen:
                continue
            seen.add(field)
            errors.append({"field": field, "message": schema.message_for(field, error)})
        raise ValidationFailure(errors) from exc


def validate_json(schema):
    """Validate the JSON body before the view runs; the view receives it as payload"""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["payload"] = validate(schema, request.get_json(force=True, silent=True))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def validate_args(schema):
    """Same as validate_json for the query string; the view receives it as query"""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["query"] = validate(schema, request.args.to_dict())
            return view(*args, **kwargs)

        return wrapper

    return decorator

# expense_tracker/models.py
# lightweight model classes (not DB-bound ORM)
from datetime import date as date_cls

TYPES = ("income", "expense")

CATEGORIES = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Healthcare",
    "Education",
    "Housing",
    "Utilities",
    "Insurance",
    "Other",
)


class User:
    def __init__(self, id, name, email, password_hash, created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.email = email
        self.password_hash = password_hash
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def from_row(cls, row):
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def to_dict(self):
        # password hash never leaves the server
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class Expense:
    def __init__(self, id, user_id, title, amount, type, category, date,
                 description=None, created_at=None, updated_at=None, owner=None):
        self.id = id
        self.user_id = user_id
        self.title = title
        self.amount = amount
        self.type = type
        self.category = category
        self.date = date
        self.description = description
        self.created_at = created_at
        self.updated_at = updated_at
        self.owner = owner

    @classmethod
    def from_row(cls, row):
        keys = row.keys()
        owner = None
        if "user_name" in keys:
            owner = {"id": row["user_id"], "name": row["user_name"], "email": row["user_email"]}
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            amount=row["amount"],
            type=row["type"],
            category=row["category"],
            date=row["date"],
            description=row["description"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            owner=owner,
        )

    @property
    def formatted_amount(self):
        return f"{self.amount:.2f}"

    @property
    def formatted_date(self):
        d = date_cls.fromisoformat(self.date)
        return f"{d.strftime('%b')} {d.day}, {d.year}"

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "type": self.type,
            "category": self.category,
            "date": self.date,
            "description": self.description,
            "user": self.owner or {"id": self.user_id},
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "formattedAmount": self.formatted_amount,
            "formattedDate": self.formatted_date,
        }

    def __repr__(self):
        return f"<Expense {self.type} {self.amount}>"

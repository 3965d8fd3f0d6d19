"""
Shopping carts collection schema
"""

from schema.base import (
    CollectionSchema, ListColumn, TextField, SelectField, RelationField,
    MultiRelationField
)
from models.enums import CartStatus
from utils.display import EMPTY, expanded

def _cart_user(record) -> str:
    user = expanded(record, "user")
    if not isinstance(user, dict):
        return record.get("user") or EMPTY
    name = " ".join(p for p in (user.get("fname"), user.get("lname")) if p).strip()
    return name or user.get("email") or record.get("user") or EMPTY

def _cart_tests(record) -> str:
    tests = expanded(record, "test")
    if not isinstance(tests, list) or not tests:
        return EMPTY
    return ", ".join(str(t.get("name") or t.get("id")) for t in tests)

def get_cart_schema() -> CollectionSchema:
    """Get cart collection schema"""
    return CollectionSchema(
        name="cart",
        label="Carts",
        list_columns=[
            ListColumn(key="user", header="User", render=_cart_user),
            ListColumn(key="status", header="Status"),
            ListColumn(key="test", header="Tests in Cart", render=_cart_tests),
            ListColumn(key="last_activity_at", header="Last Activity"),
        ],
        form_fields=[
            RelationField(key="user", label="User", collection="ws_users", display="email"),
            SelectField(key="status", label="Status", options=[s.value for s in CartStatus]),
            MultiRelationField(key="test", label="Tests", collection="test", display="name"),
            TextField(key="last_activity_at", label="Last Activity (text/timestamp)"),
        ],
        search_fields=["status"],
        expand=["user", "test"],
    )

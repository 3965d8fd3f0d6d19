"""
Site users collection schema
"""

from schema.base import CollectionSchema, ListColumn, TextField, TextareaField, CheckboxField
from utils.display import yes_no

def get_users_schema() -> CollectionSchema:
    """Get ws_users collection schema"""
    return CollectionSchema(
        name="ws_users",
        label="Users",
        list_columns=[
            ListColumn(key="email", header="Email"),
            ListColumn(key="fname", header="First"),
            ListColumn(key="lname", header="Last"),
            ListColumn(key="phone", header="Phone"),
            ListColumn(key="isAdmin", header="Admin", render=lambda r: yes_no(r.get("isAdmin"))),
            ListColumn(key="updated", header="Updated"),
        ],
        form_fields=[
            TextField(key="email", label="Email"),
            TextField(key="fname", label="First name"),
            TextField(key="lname", label="Last name"),
            TextField(key="phone", label="Phone"),
            TextareaField(key="address", label="Address"),
            CheckboxField(key="isAdmin", label="Admin"),
            CheckboxField(key="lockedOut", label="Locked Out"),
        ],
        search_fields=["email", "fname", "lname"],
    )

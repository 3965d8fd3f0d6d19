"""
Navigation pages collection schema
"""

from schema.base import (
    CollectionSchema, ListColumn, TextField, NumberField, CheckboxField,
    MultiSelectField, DateTimeField
)
from models.enums import PageRole
from utils.display import EMPTY, yes_no, format_local

def page_route(record) -> str:
    """
    Single route for a navigation entry.

    Both an internal path and an external URL may be stored; the internal
    path wins.
    """
    return record.get("path") or record.get("external_url") or EMPTY

def _roles(record) -> str:
    roles = record.get("roles")
    if isinstance(roles, list) and roles:
        return ", ".join(roles)
    return PageRole.PUBLIC.value

def _window(record) -> str:
    return f"{format_local(record.get('start_at'))} → {format_local(record.get('end_at'))}"

def get_pages_schema() -> CollectionSchema:
    """Get pages collection schema"""
    return CollectionSchema(
        name="pages",
        label="Pages",
        list_columns=[
            ListColumn(key="label", header="Label"),
            ListColumn(key="route", header="Route", render=page_route),
            ListColumn(key="show_in_nav", header="Show in Nav", render=lambda r: yes_no(r.get("show_in_nav"))),
            ListColumn(key="show_in_footer", header="Show in Footer", render=lambda r: yes_no(r.get("show_in_footer"))),
            ListColumn(key="published", header="Published", render=lambda r: yes_no(r.get("published"))),
            ListColumn(key="roles", header="Roles", render=_roles),
            ListColumn(key="order", header="Order"),
            ListColumn(key="window", header="Window", render=_window),
        ],
        form_fields=[
            TextField(key="label", label="Label"),
            TextField(key="path", label="Internal Path (e.g. /tests)"),
            TextField(key="external_url", label="External URL (if not path)"),
            NumberField(key="order", label="Order"),
            MultiSelectField(key="roles", label="Visible To", options=[r.value for r in PageRole]),
            CheckboxField(key="published", label="Published"),
            CheckboxField(key="show_in_nav", label="Show in Nav"),
            CheckboxField(key="show_in_footer", label="Show in Footer"),
            DateTimeField(key="start_at", label="Start At"),
            DateTimeField(key="end_at", label="End At"),
            TextField(key="icon_name", label="Icon Name (optional)"),
            TextField(key="feature_flag", label="Feature Flag (optional)"),
        ],
        sort="order,label",
        search_fields=["label", "path", "external_url"],
    )

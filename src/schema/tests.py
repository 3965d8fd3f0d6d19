"""
Diagnostic tests and test categories collection schemas
"""

from schema.base import (
    CollectionSchema, ListColumn, TextField, TextareaField, NumberField,
    CheckboxField, RelationField, MultiRelationField
)
from utils.display import EMPTY, expanded, format_usd, yes_no

def _category(record) -> str:
    category = expanded(record, "cat_id")
    if isinstance(category, dict) and category.get("name"):
        return str(category["name"])
    return EMPTY

def _included_count(record) -> str:
    if not record.get("top_level_test"):
        return EMPTY
    included = record.get("included_test")
    if not isinstance(included, list):
        included = expanded(record, "included_test")
    return str(len(included)) if isinstance(included, list) else "0"

def get_test_category_schema() -> CollectionSchema:
    """Get test_category collection schema"""
    return CollectionSchema(
        name="test_category",
        label="Test Categories",
        list_columns=[
            ListColumn(key="name", header="Name"),
            ListColumn(key="updated", header="Updated"),
        ],
        form_fields=[TextField(key="name", label="Name")],
        search_fields=["name"],
    )

def get_test_schema() -> CollectionSchema:
    """Get test collection schema"""
    return CollectionSchema(
        name="test",
        label="Tests",
        list_columns=[
            ListColumn(key="show", header="Show", render=lambda r: yes_no(r.get("show"))),
            ListColumn(key="name", header="Name"),
            ListColumn(key="cat_id", header="Category", render=_category),
            ListColumn(key="cost", header="Cost", render=lambda r: format_usd(r.get("cost"))),
            ListColumn(key="available", header="Available", render=lambda r: yes_no(r.get("available"))),
            ListColumn(key="included_test", header="Includes Test", render=_included_count),
        ],
        form_fields=[
            CheckboxField(key="show", label="Show (visible)"),
            TextField(key="name", label="Name"),
            RelationField(key="cat_id", label="Category", collection="test_category", display="name"),
            NumberField(key="cost", label="Cost"),
            TextField(key="measured", label="Measured"),
            TextareaField(key="description", label="Short Description"),
            TextareaField(key="description_long", label="Long Description"),
            TextField(key="who", label="Who"),
            TextField(key="frequency", label="Frequency"),
            CheckboxField(key="available", label="Available"),
            CheckboxField(key="top_level_test", label="Includes Test (Top Level)"),
            MultiRelationField(
                key="included_test",
                label="Included Tests",
                collection="test",
                display="name",
                visible_when="top_level_test",
                exclude_self=True,
            ),
        ],
        search_fields=["name"],
        expand=["cat_id", "included_test"],
    )

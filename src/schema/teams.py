"""
Teams and team members collection schemas
"""

from schema.base import (
    CollectionSchema, ListColumn, TextField, TextareaField, NumberField,
    MultiRelationField, FileField, JsonField
)
from utils.display import expanded

def _member_count(record) -> str:
    members = expanded(record, "members")
    if not isinstance(members, list):
        members = record.get("members")
    return str(len(members)) if isinstance(members, list) else "0"

def get_teams_schema() -> CollectionSchema:
    """Get teams collection schema"""
    return CollectionSchema(
        name="teams",
        label="Teams",
        list_columns=[
            ListColumn(key="title", header="Title"),
            ListColumn(key="order", header="Order"),
            ListColumn(key="members_count", header="Members", render=_member_count),
            ListColumn(key="updated", header="Updated"),
        ],
        form_fields=[
            TextField(key="title", label="Title"),
            NumberField(key="order", label="Order"),
            MultiRelationField(key="members", label="Members", collection="team_members", display="name"),
        ],
        sort="order,title",
        search_fields=["title"],
        expand=["members"],
    )

def get_team_members_schema() -> CollectionSchema:
    """Get team_members collection schema"""
    return CollectionSchema(
        name="team_members",
        label="Team Members",
        list_columns=[
            ListColumn(key="name", header="Name"),
            ListColumn(key="role", header="Role"),
            ListColumn(key="order", header="Order"),
        ],
        form_fields=[
            TextField(key="name", label="Name"),
            TextField(key="role", label="Role"),
            TextareaField(key="bio", label="Bio"),
            FileField(key="image", label="Profile Image"),
            JsonField(key="tags", label="Tags", shape="array", placeholder='["Legal","R&D"]'),
            JsonField(key="socials", label="Socials", shape="object", placeholder='{"linkedin":"...","email":"..."}'),
            NumberField(key="order", label="Order"),
        ],
        sort="order,name",
        search_fields=["name", "role"],
        in_menu=False,
    )

"""
Schema registry for centralized collection lookup
"""

from typing import Dict, List, NamedTuple

from schema.base import CollectionSchema
from schema.pages import get_pages_schema
from schema.users import get_users_schema
from schema.teams import get_teams_schema, get_team_members_schema
from schema.tests import get_test_schema, get_test_category_schema
from schema.carts import get_cart_schema
from schema.testimonials import get_testimonial_schema

MAILING_LIST = "mailing_list"

class UnknownCollectionError(LookupError):
    """Raised when a collection name has no registered schema"""

    def __init__(self, name: str):
        super().__init__(f"Unknown collection: {name}")
        self.name = name

class MenuEntry(NamedTuple):
    key: str
    label: str

def get_all_schemas() -> Dict[str, CollectionSchema]:
    """Get all collection schemas, in menu order"""
    schemas = [
        get_pages_schema(),
        get_users_schema(),
        get_teams_schema(),
        get_team_members_schema(),
        get_test_schema(),
        get_test_category_schema(),
        get_cart_schema(),
        get_testimonial_schema(),
    ]
    return {schema.name: schema for schema in schemas}

def get_schema(name: str) -> CollectionSchema:
    """
    Get the schema for a collection.

    Raises:
        UnknownCollectionError: name is not registered
    """
    schemas = get_all_schemas()
    if name not in schemas:
        raise UnknownCollectionError(name)
    return schemas[name]

def get_available_collections() -> List[str]:
    """Get list of all registered collection names"""
    return list(get_all_schemas().keys())

def get_menu() -> List[MenuEntry]:
    """Side navigation entries: menu collections followed by the mailing list"""
    entries = [
        MenuEntry(schema.name, schema.label)
        for schema in get_all_schemas().values()
        if schema.in_menu
    ]
    entries.append(MenuEntry(MAILING_LIST, "Mailing List"))
    return entries

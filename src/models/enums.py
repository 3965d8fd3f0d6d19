"""
Enum definitions for the Diagnostics Admin Console
"""

from enum import Enum

class FieldKind(str, Enum):
    """Input widget / wire encoding selector for a form field"""
    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    TEXTAREA = "textarea"
    SELECT = "select"
    MULTISELECT = "multiselect"
    RELATION = "relation"
    MULTIRELATION = "multirelation"
    FILE = "file"
    DATETIME = "datetime"
    JSON = "json"

class EditState(str, Enum):
    """
    Lifecycle of a single create-or-edit form.

    - CLOSED: no draft exists
    - OPENING: draft seeded, relation options still loading
    - EDITING: draft held in memory, user may change fields
    - SAVING: submission in flight, save control disabled
    """
    CLOSED = "CLOSED"
    OPENING = "OPENING"
    EDITING = "EDITING"
    SAVING = "SAVING"

class CartStatus(str, Enum):
    OPEN = "open"
    SUBMITTED = "submitted"

class PageRole(str, Enum):
    PUBLIC = "public"
    AUTHED = "authed"
    ADMIN = "admin"

class TimeRange(str, Enum):
    """Mailing list look-back windows"""
    ONE_DAY = "1d"
    ONE_WEEK = "1w"
    ONE_MONTH = "1m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    YEAR_TO_DATE = "ytd"

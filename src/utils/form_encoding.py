"""
Field-kind encoding between form drafts and multipart submissions.

Every field kind has one save rule; the submission always carries the full
field set of the schema (file parts excepted, which are only sent when a new
upload was chosen so the stored file survives an edit).
"""

import json
import logging
import math
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional

from models.form import FormSubmission, UploadedFile
from schema.base import (
    BaseField, CollectionSchema, TextField, TextareaField, SelectField,
    RelationField, NumberField, CheckboxField, MultiSelectField,
    MultiRelationField, FileField, DateTimeField, JsonField
)
from utils.helpers import format_utc_iso, parse_store_timestamp

logger = logging.getLogger(__name__)

Draft = Dict[str, Any]

DATETIME_LOCAL_FORMAT = "%Y-%m-%dT%H:%M"

def to_datetime_local(value: Any, tz: tzinfo) -> str:
    """Stored absolute timestamp -> datetime-local input value in tz"""
    moment = parse_store_timestamp(value)
    if moment is None:
        return ""
    return moment.astimezone(tz).strftime(DATETIME_LOCAL_FORMAT)

def from_datetime_local(value: Any, tz: tzinfo) -> str:
    """datetime-local input value (wall clock in tz) -> absolute UTC timestamp"""
    if not value or not isinstance(value, str):
        return ""
    try:
        wall_clock = datetime.fromisoformat(value.strip())
    except ValueError:
        logger.warning(f"Discarding malformed datetime input '{value}'")
        return ""
    if wall_clock.tzinfo is None:
        wall_clock = wall_clock.replace(tzinfo=tz)
    return format_utc_iso(wall_clock)

def coerce_number(value: Any) -> str:
    """Numeric input -> wire text; empty, NaN and junk all become ''"""
    if value is None or value == "":
        return ""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    text = str(value).strip()
    try:
        # Whole numbers keep every digit
        return str(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return ""
    if math.isnan(number) or math.isinf(number):
        return ""
    if number.is_integer():
        return str(int(number))
    return repr(number)

def parse_number(value: str) -> Any:
    """Wire text -> int/float, '' stays ''"""
    if value == "":
        return ""
    try:
        return int(value)
    except ValueError:
        pass
    number = float(value)
    return int(number) if number.is_integer() else number

def as_list(value: Any) -> List[str]:
    """Normalize a multi-valued draft entry"""
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v) for v in value if v not in (None, "")]
    return [str(value)]

def _text(value: Any) -> str:
    return "" if value is None else str(value)

def json_container(value: Any, shape: str) -> Any:
    """Parsed JSON value -> list (shape 'array') or dict (shape 'object')"""
    if shape == "object":
        return value if isinstance(value, dict) else {}
    if isinstance(value, list):
        return value
    # A lone string becomes a one-item list
    if isinstance(value, str) and value:
        return [value]
    return []

def normalize_json(value: Any, shape: str) -> Any:
    """Stored JSON (text or parsed) -> field container; unparsable text counts as missing"""
    if isinstance(value, str):
        try:
            value = json.loads(value) if value.strip() else None
        except json.JSONDecodeError:
            value = None
    return json_container(value, shape)

def json_text(value: Any) -> str:
    """Draft JSON value -> editor text; an empty container shows as ''"""
    if not value:
        return ""
    return json.dumps(value, indent=2)

def encode_field(field: BaseField, value: Any, submission: FormSubmission, tz: tzinfo) -> None:
    """Append one field's wire entries to the submission"""
    if isinstance(field, (TextField, TextareaField, SelectField, RelationField)):
        submission.append(field.key, _text(value))
    elif isinstance(field, NumberField):
        submission.append(field.key, coerce_number(value))
    elif isinstance(field, CheckboxField):
        submission.append(field.key, "true" if value else "false")
    elif isinstance(field, (MultiSelectField, MultiRelationField)):
        chosen = as_list(value)
        if not chosen:
            submission.append(field.key, "")
        for item in chosen:
            submission.append(field.key, item)
    elif isinstance(field, FileField):
        if isinstance(value, UploadedFile):
            submission.attach(field.key, value)
    elif isinstance(field, DateTimeField):
        submission.append(field.key, from_datetime_local(value, tz))
    elif isinstance(field, JsonField):
        submission.append(field.key, json.dumps(normalize_json(value, field.shape)))
    else:
        raise TypeError(f"Unsupported field kind: {field.kind}")

def encode_draft(schema: CollectionSchema, draft: Draft, tz: tzinfo) -> FormSubmission:
    """Serialize a whole draft per the schema's field kinds"""
    submission = FormSubmission()
    for field in schema.form_fields:
        encode_field(field, draft.get(field.key), submission, tz)
    return submission

def decode_field(field: BaseField, submission: FormSubmission, tz: tzinfo) -> Any:
    """Read one field back out of a submission"""
    values = submission.get_all(field.key)
    first = values[0] if values else ""
    if isinstance(field, (TextField, TextareaField, SelectField, RelationField)):
        return first
    if isinstance(field, NumberField):
        return parse_number(first)
    if isinstance(field, CheckboxField):
        return first == "true"
    if isinstance(field, (MultiSelectField, MultiRelationField)):
        return [v for v in values if v != ""]
    if isinstance(field, FileField):
        return next((upload for name, upload in submission.files if name == field.key), None)
    if isinstance(field, DateTimeField):
        return to_datetime_local(first, tz)
    if isinstance(field, JsonField):
        return normalize_json(first, field.shape)
    raise TypeError(f"Unsupported field kind: {field.kind}")

def decode_submission(schema: CollectionSchema, submission: FormSubmission, tz: tzinfo) -> Draft:
    """Inverse of encode_draft"""
    return {field.key: decode_field(field, submission, tz) for field in schema.form_fields}

def seed_value(field: BaseField, value: Any, tz: tzinfo) -> Any:
    """Stored attribute -> draft value for the field's widget"""
    if isinstance(field, CheckboxField):
        return bool(value)
    if isinstance(field, (MultiSelectField, MultiRelationField)):
        return as_list(value)
    if isinstance(field, DateTimeField):
        return to_datetime_local(value, tz)
    if isinstance(field, FileField):
        # Existing stored filename; replaced only by an UploadedFile
        return value or None
    if isinstance(field, NumberField):
        return "" if value is None else value
    if isinstance(field, JsonField):
        return normalize_json(value, field.shape)
    return _text(value)

def seed_draft(schema: CollectionSchema, record: Optional[Dict[str, Any]], tz: tzinfo) -> Draft:
    """Build a draft from an existing record, or an empty one for a new record"""
    source = record or {}
    return {field.key: seed_value(field, source.get(field.key), tz) for field in schema.form_fields}

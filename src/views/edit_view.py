"""
Create-or-edit form controller for one admin record
"""

import logging
from datetime import tzinfo
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from models.enums import EditState
from models.form import FormSubmission, UploadedFile
from models.record import Record, RelationOption
from schema.base import (
    BaseField, CollectionSchema, FileField, MultiRelationField, MultiSelectField
)
from services.record_gateway import GatewayError, RecordGateway
from utils.form_encoding import Draft, as_list, encode_draft, seed_draft
from views.list_view import invoke

logger = logging.getLogger(__name__)

class PickerOption(NamedTuple):
    id: str
    label: str
    checked: bool
    disabled: bool

class EditView:
    """
    CLOSED -> OPENING -> EDITING -> SAVING -> CLOSED (success) / EDITING (failure)

    Closing discards the draft. A close or re-open while relation options are
    loading makes that load stale.
    """

    def __init__(
        self,
        gateway: RecordGateway,
        schema: CollectionSchema,
        tz: tzinfo,
        alert: Optional[Callable[[str], Any]] = None,
        on_saved: Optional[Callable[[Record], Any]] = None
    ):
        self.gateway = gateway
        self.schema = schema
        self.tz = tz
        self.alert = alert
        self.on_saved = on_saved
        self.state = EditState.CLOSED
        self.record: Optional[Record] = None
        self.draft: Draft = {}
        self.options: Dict[str, List[RelationOption]] = {}
        self.saved: Optional[Record] = None
        self._generation = 0

    @property
    def record_id(self) -> Optional[str]:
        return (self.record or {}).get("id") or None

    @property
    def is_new(self) -> bool:
        return self.record_id is None

    @property
    def title(self) -> str:
        return f"{'Add' if self.is_new else 'Edit'} {self.schema.name}"

    async def open(self, record: Optional[Record] = None) -> None:
        """Seed the draft and load relation options"""
        self._generation += 1
        generation = self._generation
        self.record = record
        self.draft = seed_draft(self.schema, record, self.tz)
        self.options = {}
        self.saved = None
        self.state = EditState.OPENING

        options = await self.gateway.prefetch_relation_options(self.schema)
        if generation != self._generation:
            logger.info(f"Discarding stale {self.schema.name} relation options")
            return
        self.options = options
        self.state = EditState.EDITING

    def close(self) -> None:
        self._generation += 1
        self.state = EditState.CLOSED
        self.record = None
        self.draft = {}
        self.options = {}

    def _field(self, key: str) -> BaseField:
        field = self.schema.get_field(key)
        if field is None:
            raise KeyError(f"{self.schema.name} has no field '{key}'")
        return field

    def _require_editable(self) -> None:
        if self.state not in (EditState.OPENING, EditState.EDITING):
            raise RuntimeError(f"Form is {self.state.value}; field changes are not accepted")

    def set_value(self, key: str, value: Any) -> None:
        self._require_editable()
        self._field(key)
        self.draft[key] = value

    def toggle_value(self, key: str, value: str) -> None:
        """Flip one choice of a multiselect / multirelation field"""
        self._require_editable()
        field = self._field(key)
        if not isinstance(field, (MultiSelectField, MultiRelationField)):
            raise TypeError(f"{key} is not a multi-choice field")
        if self.is_option_disabled(field, value):
            return
        current = as_list(self.draft.get(key))
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        self.draft[key] = current

    def choose_file(self, key: str, upload: Optional[UploadedFile]) -> None:
        self._require_editable()
        if not isinstance(self._field(key), FileField):
            raise TypeError(f"{key} is not a file field")
        self.draft[key] = upload

    def is_visible(self, field: BaseField) -> bool:
        """Gated pickers only show while their controlling checkbox is set"""
        if isinstance(field, MultiRelationField) and field.visible_when:
            return bool(self.draft.get(field.visible_when))
        return True

    def is_option_disabled(self, field: BaseField, option_id: str) -> bool:
        """A record can never be picked as related to itself"""
        return (
            isinstance(field, MultiRelationField)
            and field.exclude_self
            and self.record_id is not None
            and option_id == self.record_id
        )

    def picker_options(self, field: BaseField) -> List[PickerOption]:
        chosen = as_list(self.draft.get(field.key))
        return [
            PickerOption(
                id=option.id,
                label=option.label,
                checked=option.id in chosen,
                disabled=self.is_option_disabled(field, option.id),
            )
            for option in self.options.get(field.key, [])
        ]

    def build_submission(self) -> FormSubmission:
        draft = dict(self.draft)
        for field in self.schema.form_fields:
            if isinstance(field, MultiRelationField) and field.exclude_self and self.record_id:
                draft[field.key] = [v for v in as_list(draft.get(field.key)) if v != self.record_id]
        return encode_draft(self.schema, draft, self.tz)

    async def save(self) -> bool:
        """
        Submit the full draft

        Returns:
            True when the store accepted it (form closed); False when the
            form stays open for correction.
        """
        if self.state != EditState.EDITING:
            logger.warning(f"Ignoring save while form is {self.state.value}")
            return False

        self.state = EditState.SAVING
        submission = self.build_submission()
        try:
            if self.record_id:
                saved = await self.gateway.update_record(self.schema.name, self.record_id, submission)
            else:
                saved = await self.gateway.create_record(self.schema.name, submission)
        except GatewayError as e:
            logger.error(f"Save failed for {self.schema.name}: {e.message}")
            self.state = EditState.EDITING
            await invoke(self.alert, e.message or "Save failed")
            return False

        self.saved = saved
        await invoke(self.on_saved, saved)
        self.close()
        return True

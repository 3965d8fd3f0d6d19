"""
Base schema models for admin collections
"""

from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from models.enums import FieldKind

# Column render rule: record -> display text
RenderRule = Callable[[Dict[str, Any]], str]

class BaseField(BaseModel):
    """Common attributes of every editable field"""
    key: str
    label: str

    model_config = ConfigDict(frozen=True)

class TextField(BaseField):
    kind: Literal[FieldKind.TEXT] = FieldKind.TEXT

class NumberField(BaseField):
    kind: Literal[FieldKind.NUMBER] = FieldKind.NUMBER

class CheckboxField(BaseField):
    kind: Literal[FieldKind.CHECKBOX] = FieldKind.CHECKBOX

class TextareaField(BaseField):
    kind: Literal[FieldKind.TEXTAREA] = FieldKind.TEXTAREA

class SelectField(BaseField):
    kind: Literal[FieldKind.SELECT] = FieldKind.SELECT
    options: List[str]

class MultiSelectField(BaseField):
    kind: Literal[FieldKind.MULTISELECT] = FieldKind.MULTISELECT
    options: List[str]

class RelationField(BaseField):
    """Single id pointing into another collection"""
    kind: Literal[FieldKind.RELATION] = FieldKind.RELATION
    collection: str
    display: str = "id"

class MultiRelationField(BaseField):
    """
    Many ids pointing into another collection.

    visible_when names a checkbox field that must be set for the picker to
    show; exclude_self disables the edited record's own id in the picker.
    """
    kind: Literal[FieldKind.MULTIRELATION] = FieldKind.MULTIRELATION
    collection: str
    display: str = "id"
    visible_when: Optional[str] = None
    exclude_self: bool = False

class FileField(BaseField):
    kind: Literal[FieldKind.FILE] = FieldKind.FILE
    accept: str = "image/*"

class DateTimeField(BaseField):
    kind: Literal[FieldKind.DATETIME] = FieldKind.DATETIME

class JsonField(BaseField):
    """Structured value edited as JSON text; shape is the value's container type"""
    kind: Literal[FieldKind.JSON] = FieldKind.JSON
    shape: Literal["array", "object"] = "array"
    placeholder: str = ""

FormField = Annotated[
    Union[
        TextField,
        NumberField,
        CheckboxField,
        TextareaField,
        SelectField,
        MultiSelectField,
        RelationField,
        MultiRelationField,
        FileField,
        DateTimeField,
        JsonField,
    ],
    Field(discriminator="kind"),
]

RELATION_KINDS = (FieldKind.RELATION, FieldKind.MULTIRELATION)

class ListColumn(BaseModel):
    """Column definition within a collection's list view"""
    key: str
    header: str
    render: Optional[RenderRule] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

class CollectionSchema(BaseModel):
    """Complete render + serialize definition for one collection"""
    name: str
    label: str
    list_columns: List[ListColumn] = Field(default_factory=list)
    form_fields: List[FormField] = Field(default_factory=list)
    sort: str = "-updated"
    search_fields: List[str] = Field(default_factory=list)
    expand: List[str] = Field(default_factory=list)
    in_menu: bool = True

    def get_field(self, key: str) -> Optional[BaseField]:
        """Get field definition by key"""
        return next((f for f in self.form_fields if f.key == key), None)

    def relation_fields(self) -> List[Union[RelationField, MultiRelationField]]:
        """Fields whose options come from another collection"""
        return [f for f in self.form_fields if f.kind in RELATION_KINDS]

    def expand_directive(self) -> str:
        """Comma-joined expansion list for list calls"""
        return ",".join(self.expand)

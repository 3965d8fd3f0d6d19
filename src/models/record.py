"""
Record store Pydantic models
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Records are opaque attribute maps owned by the remote store
Record = Dict[str, Any]

class ListResult(BaseModel):
    """One page of records returned by a list call"""
    items: List[Dict[str, Any]] = Field(default_factory=list)
    page: int = 1
    per_page: int = Field(0, alias="perPage")
    total_items: Optional[int] = Field(None, alias="totalItems")

    model_config = ConfigDict(populate_by_name=True)

class RelationOption(BaseModel):
    """Selectable entry for relation / multirelation widgets"""
    id: str
    label: str

class AdminIdentity(BaseModel):
    """Identity returned by the store's identity lookup"""
    id: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = Field(False, alias="isAdmin")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", "email", mode="before")
    @classmethod
    def coerce_text(cls, v):
        """Stores may send numeric ids; anything else non-textual is dropped"""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("is_admin", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        return v is True or v in (1, "true", "1")

class SiteSettings(BaseModel):
    """Global site switches kept in a single store record"""
    id: Optional[str] = None
    show_footer: bool = True

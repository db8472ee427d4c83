"""
Notes Backend: Note Request/Response Schemas
===============================================

What:  Parsers that turn loosely-typed JSON bodies and query strings into
       strongly-typed objects before they reach the services, plus the
       paginated list response.
How:   Coercion lives in before-validators:
       - booleans: True/False, or "true"/"1"/"yes" and "false"/"0"/"no"
         (trimmed, case-insensitive); anything else is "not specified"
       - tags: a list keeps its non-blank string elements in order; a
         comma-separated string is split and trimmed; anything else is []
       - page/limit: leading integer of the value ("12abc" reads as 12)

Create vs update:
    NoteCreate falls back to defaults for bad optional values (content "",
    pinned/archived False unless given as JSON booleans). NoteUpdate coerces
    flag strings and rejects anything it cannot read, naming the field, since
    a partial update only carries the fields the client meant to change.
"""

import re
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from notes_backend.models import Note
from notes_backend.schemas.common import ApiModel

TRUE_STRINGS = frozenset({"true", "1", "yes"})
FALSE_STRINGS = frozenset({"false", "0", "no"})

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ══════════════════════════════════════════════════════════════════════════
# Coercion helpers
# ══════════════════════════════════════════════════════════════════════════

def parse_bool(value: Any) -> Optional[bool]:
    """Tri-state boolean: True, False, or None for "not specified"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
    return None


def normalize_tags(value: Any) -> List[str]:
    if isinstance(value, list):
        return [tag for tag in value if isinstance(tag, str) and tag.strip()]
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return []


def parse_leading_int(value: Any) -> Optional[int]:
    """Leading integer of a query value, or None if there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════

class NoteCreate(BaseModel):
    """Body of POST /notes. Unknown keys (id, userId, ...) are ignored."""

    title: str = Field(default=None, validate_default=True)
    content: str = ""
    tags: List[str] = Field(default_factory=list)
    pinned: bool = False
    archived: bool = False

    @field_validator("title", mode="before")
    @classmethod
    def require_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError("title_required", "Title is required")
        return v.strip()

    @field_validator("content", mode="before")
    @classmethod
    def content_or_empty(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> List[str]:
        return normalize_tags(v)

    @field_validator("pinned", "archived", mode="before")
    @classmethod
    def flag_or_false(cls, v: Any) -> bool:
        return v if isinstance(v, bool) else False


class NoteUpdate(BaseModel):
    """
    Body of PUT /notes/{id}.

    Only keys present in the body are applied; `changes()` returns them.
    An explicit null counts as present and fails validation.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    pinned: Optional[bool] = None
    archived: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError("invalid_title", "Invalid title")
        return v.strip()

    @field_validator("content", mode="before")
    @classmethod
    def check_content(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise PydanticCustomError("invalid_content", "Invalid content")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> List[str]:
        return normalize_tags(v)

    @field_validator("pinned", "archived", mode="before")
    @classmethod
    def check_flag(cls, v: Any, info: ValidationInfo) -> bool:
        coerced = parse_bool(v)
        if coerced is None:
            raise PydanticCustomError(
                "invalid_flag",
                "Invalid {field} value",
                {"field": info.field_name},
            )
        return coerced

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class NoteQuery(BaseModel):
    """
    Query string of GET /notes. Never fails: bad values fall back to
    "no filter" or the pagination defaults.
    """

    q: Optional[str] = None
    tag: Optional[str] = None
    pinned: Optional[bool] = None
    archived: Optional[bool] = None
    page: int = Field(default=DEFAULT_PAGE, validate_default=True)
    limit: int = Field(default=DEFAULT_PAGE_SIZE, validate_default=True)

    @field_validator("q", mode="before")
    @classmethod
    def search_text(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) and v else None

    @field_validator("tag", mode="before")
    @classmethod
    def trimmed_tag(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip()
        return None

    @field_validator("pinned", "archived", mode="before")
    @classmethod
    def tri_state(cls, v: Any) -> Optional[bool]:
        return parse_bool(v)

    @field_validator("page", mode="before")
    @classmethod
    def floor_page(cls, v: Any) -> int:
        page = parse_leading_int(v)
        return page if page is not None and page >= 1 else DEFAULT_PAGE

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        # 0 and unparsable mean "use the default"; negatives clamp to 1
        limit = parse_leading_int(v) or DEFAULT_PAGE_SIZE
        return max(1, min(MAX_PAGE_SIZE, limit))


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════

class PageMeta(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class NoteListResponse(BaseModel):
    """GET /notes: one page of notes plus pagination metadata."""
    status: Literal["success"] = "success"
    data: List[Note]
    meta: PageMeta


class DeletedNote(BaseModel):
    id: str

"""
Record API Models

The remote record store speaks a generic, table-oriented protocol:
records are flat dicts with a numeric ``Id``, a ``Name`` and custom
columns suffixed with ``_c``. These models describe the requests we send
(fields, filters, ordering, paging) and the envelope we get back.

DESIGN DECISION: Responses never raise for per-record problems.
A create/update/delete call reports success or failure for each input
record individually, so one bad record doesn't sink the whole batch.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# REQUEST MODELS
# =============================================================================

class WhereOperator(str, Enum):
    """Comparison operators supported in where conditions."""
    EQUAL_TO = "EqualTo"
    NOT_EQUAL_TO = "NotEqualTo"
    GREATER_THAN = "GreaterThan"
    GREATER_THAN_OR_EQUAL_TO = "GreaterThanOrEqualTo"
    LESS_THAN = "LessThan"
    LESS_THAN_OR_EQUAL_TO = "LessThanOrEqualTo"
    CONTAINS = "Contains"


class SortType(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class FieldSpec(BaseModel):
    """
    A column to return from a fetch.

    For lookup columns, ``reference_field`` names the column of the
    referenced table used as the lookup's display ``Name``.
    """
    name: str = Field(..., min_length=1)
    reference_field: Optional[str] = None


class WhereCondition(BaseModel):
    """A single filter. All conditions in a fetch are AND-ed."""
    field_name: str = Field(..., min_length=1)
    operator: WhereOperator = WhereOperator.EQUAL_TO
    values: list[Any] = Field(default_factory=list)


class OrderBy(BaseModel):
    field_name: str = Field(..., min_length=1)
    sort_type: SortType = SortType.ASC


class PagingInfo(BaseModel):
    limit: int = Field(default=100, ge=1, le=5000)
    offset: int = Field(default=0, ge=0)


class FetchParams(BaseModel):
    """
    Parameters for fetch_records / get_record_by_id.

    An empty ``fields`` list returns every column of the table.
    ``Id`` and ``Name`` are always returned.
    """
    fields: list[FieldSpec] = Field(default_factory=list)
    where: list[WhereCondition] = Field(default_factory=list)
    order_by: list[OrderBy] = Field(default_factory=list)
    paging: Optional[PagingInfo] = None

    @classmethod
    def of(cls, *field_names: str, **kwargs) -> "FetchParams":
        """Shorthand for a fetch that selects plain columns by name."""
        return cls(fields=[FieldSpec(name=name) for name in field_names], **kwargs)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class FieldError(BaseModel):
    """A validation error the store reported for one column."""
    field_label: str
    message: str


class RecordResult(BaseModel):
    """Outcome of a mutation for a single input record."""
    success: bool
    data: Optional[dict[str, Any]] = None
    message: Optional[str] = None
    errors: list[FieldError] = Field(default_factory=list)


class RecordResponse(BaseModel):
    """
    Envelope returned by every gateway call.

    - fetch_records:     ``data`` is a list of records, ``total`` the
                         match count before paging
    - get_record_by_id:  ``data`` is a single record (or None)
    - mutations:         ``results`` has one entry per input record
    """
    success: bool = True
    message: Optional[str] = None
    data: Any = None
    total: int = Field(default=0, ge=0)
    results: list[RecordResult] = Field(default_factory=list)

    @property
    def successful(self) -> list[RecordResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[RecordResult]:
        return [r for r in self.results if not r.success]

    @classmethod
    def failure(cls, message: str) -> "RecordResponse":
        return cls(success=False, message=message)

"""
Record Query Evaluation

Neither backend can filter server-side (a spreadsheet has no query
language), so filters, ordering and paging are applied in Python over
the table's rows. Rows here are in canonical form (see schema.coerce_value):
lookups are plain integer Ids.
"""

from typing import Any, Callable, Optional

from src.models.records import (
    FetchParams,
    FieldError,
    FieldSpec,
    OrderBy,
    SortType,
    WhereCondition,
    WhereOperator,
)
from src.services.records.schema import (
    ID_COLUMN,
    NAME_COLUMN,
    Column,
    ColumnType,
    TableSchema,
    coerce_value,
)


Row = dict[str, Any]

# (table, record_id, display_column) -> display name of the referenced record
LookupResolver = Callable[[str, int, str], Optional[str]]


class InvalidQueryError(ValueError):
    """A fetch referenced a column the table doesn't have."""
    pass


def _comparable(column: Column, value: Any) -> Any:
    """Coerce a filter value the same way stored values are coerced."""
    try:
        return coerce_value(column, value)
    except (TypeError, ValueError):
        return value


def _matches(row: Row, condition: WhereCondition, column: Column) -> bool:
    stored = row.get(condition.field_name)
    values = [_comparable(column, v) for v in condition.values]
    op = condition.operator

    if op == WhereOperator.EQUAL_TO:
        return stored in values
    if op == WhereOperator.NOT_EQUAL_TO:
        return stored not in values
    if op == WhereOperator.CONTAINS:
        if stored is None:
            return False
        haystack = str(stored).lower()
        return any(str(v).lower() in haystack for v in values if v is not None)

    # Ordered comparisons: a missing value never matches
    if stored is None or not values or values[0] is None:
        return False
    bound = values[0]
    try:
        if op == WhereOperator.GREATER_THAN:
            return stored > bound
        if op == WhereOperator.GREATER_THAN_OR_EQUAL_TO:
            return stored >= bound
        if op == WhereOperator.LESS_THAN:
            return stored < bound
        if op == WhereOperator.LESS_THAN_OR_EQUAL_TO:
            return stored <= bound
    except TypeError:
        return False
    return False


def apply_where(rows: list[Row], where: list[WhereCondition], schema: TableSchema) -> list[Row]:
    """Keep rows matching every condition."""
    resolved = []
    for condition in where:
        column = schema.get_column(condition.field_name)
        if column is None:
            raise InvalidQueryError(
                f"Unknown field '{condition.field_name}' in {schema.name}"
            )
        resolved.append((condition, column))

    return [
        row for row in rows
        if all(_matches(row, condition, column) for condition, column in resolved)
    ]


def apply_order(rows: list[Row], order_by: list[OrderBy], schema: TableSchema) -> list[Row]:
    """
    Sort rows by each OrderBy in turn (first entry is the primary key).
    Missing values always sort last.
    """
    ordered = list(rows)
    for order in reversed(order_by):
        if not schema.has_column(order.field_name):
            raise InvalidQueryError(
                f"Unknown sort field '{order.field_name}' in {schema.name}"
            )
        present = [r for r in ordered if r.get(order.field_name) is not None]
        missing = [r for r in ordered if r.get(order.field_name) is None]
        present.sort(
            key=lambda r: r[order.field_name],
            reverse=order.sort_type == SortType.DESC,
        )
        ordered = present + missing
    return ordered


def present_row(
    row: Row,
    schema: TableSchema,
    fields: list[FieldSpec],
    resolve_lookup: LookupResolver,
) -> Row:
    """
    Shape a stored row for the caller.

    Only the requested fields are returned (all of them when ``fields``
    is empty), plus Id and Name. Lookup columns become
    ``{"Id": ..., "Name": ...}``.
    """
    specs = fields or [FieldSpec(name=c.name) for c in schema.columns]
    result: Row = {
        ID_COLUMN: row.get(ID_COLUMN),
        NAME_COLUMN: row.get(NAME_COLUMN) or "",
    }
    for spec in specs:
        column = schema.get_column(spec.name)
        if column is None:
            raise InvalidQueryError(f"Unknown field '{spec.name}' in {schema.name}")
        value = row.get(spec.name)
        if column.type == ColumnType.LOOKUP and value is not None:
            display = spec.reference_field or "name_c"
            result[spec.name] = {
                ID_COLUMN: value,
                NAME_COLUMN: resolve_lookup(column.lookup_table, value, display),
            }
        else:
            result[spec.name] = value
    return result


def execute_fetch(
    rows: list[Row],
    params: FetchParams,
    schema: TableSchema,
    resolve_lookup: LookupResolver,
) -> tuple[list[Row], int]:
    """
    Run a fetch over a table's rows.

    Returns:
        (presented page of rows, total matches before paging)
    """
    matched = apply_where(rows, params.where, schema)
    ordered = apply_order(matched, params.order_by, schema)
    total = len(ordered)
    if params.paging:
        start = params.paging.offset
        ordered = ordered[start:start + params.paging.limit]
    page = [present_row(r, schema, params.fields, resolve_lookup) for r in ordered]
    return page, total


def clean_record(
    record: dict[str, Any],
    schema: TableSchema,
) -> tuple[Row, list[FieldError]]:
    """
    Validate and coerce a create/update payload against the schema.

    ``Id`` is passed through untouched (callers decide what it means).

    Returns:
        (canonical values, field errors)
    """
    cleaned: Row = {}
    errors: list[FieldError] = []
    for name, value in record.items():
        if name == ID_COLUMN:
            continue
        column = schema.get_column(name)
        if column is None:
            errors.append(FieldError(field_label=name, message="Unknown field"))
            continue
        try:
            cleaned[name] = coerce_value(column, value)
        except (TypeError, ValueError, OverflowError):
            kind = {
                ColumnType.NUMBER: "number",
                ColumnType.DATE: "date",
                ColumnType.LOOKUP: "reference",
            }.get(column.type, "value")
            errors.append(FieldError(
                field_label=column.display_label,
                message=f"Invalid {kind}: {value!r}",
            ))
    return cleaned, errors

"""
Tests for the record store: schema coercion, query evaluation and the
record API as implemented by the in-memory backend.
"""

import asyncio
import sys
import threading

import pytest

from src.models.records import (
    FetchParams,
    FieldSpec,
    OrderBy,
    PagingInfo,
    SortType,
    WhereCondition,
    WhereOperator,
)
from src.services.records import (
    BANK_ACCOUNT_TABLE,
    BUDGET_TABLE,
    CATEGORY_TABLE,
    TRANSACTION_TABLE,
    UnknownTableError,
    get_schema,
)
from src.services.records.query import (
    InvalidQueryError,
    apply_order,
    apply_where,
    clean_record,
)
from src.services.records.schema import Column, ColumnType, coerce_value, serialize_cell


class TestSchema:
    """Tests for table schemas and value coercion."""

    def test_unknown_table(self):
        """Test that an unknown table raises UnknownTableError."""
        with pytest.raises(UnknownTableError):
            get_schema("invoice_c")

    def test_system_columns_first(self):
        """Test Id and Name lead every table's columns."""
        assert get_schema(CATEGORY_TABLE).column_names[:2] == ["Id", "Name"]

    def test_display_column(self):
        """Test tables with name_c display it in lookups."""
        assert get_schema(CATEGORY_TABLE).display_column == "name_c"
        assert get_schema(BUDGET_TABLE).display_column == "Name"

    def test_coerce_number(self):
        """Test number cells become floats and Ids become ints."""
        schema = get_schema(BANK_ACCOUNT_TABLE)
        assert coerce_value(schema.get_column("balance_c"), "1250.5") == 1250.5
        assert coerce_value(schema.get_column("Id"), "7") == 7
        with pytest.raises(ValueError):
            coerce_value(schema.get_column("balance_c"), "lots")

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", "1e400", float("nan"), 10 ** 400])
    def test_coerce_number_rejects_non_finite(self, value):
        """Test NaN, infinity and overflowing numbers are not stored."""
        schema = get_schema(BANK_ACCOUNT_TABLE)
        with pytest.raises((ValueError, OverflowError)):
            coerce_value(schema.get_column("balance_c"), value)

    def test_coerce_empty_is_none(self):
        """Test blank cells become None regardless of type."""
        assert coerce_value(Column(name="x_c", type=ColumnType.NUMBER), "  ") is None

    def test_coerce_date(self):
        """Test dates are normalized to ISO strings."""
        column = get_schema(TRANSACTION_TABLE).get_column("date_c")
        assert coerce_value(column, "2024-03-05T10:00:00") == "2024-03-05"
        with pytest.raises(ValueError):
            coerce_value(column, "05/03/2024")

    def test_coerce_lookup(self):
        """Test lookups accept ints, numeric strings and {'Id': ...} dicts."""
        column = get_schema(TRANSACTION_TABLE).get_column("category_c")
        assert coerce_value(column, "3") == 3
        assert coerce_value(column, {"Id": 4, "Name": "Rent"}) == 4
        with pytest.raises(ValueError):
            coerce_value(column, 2.5)

    def test_serialize_cell(self):
        """Test whole floats are written without a trailing .0."""
        assert serialize_cell(100.0) == "100"
        assert serialize_cell(12.5) == "12.5"
        assert serialize_cell(None) == ""


class TestQuery:
    """Tests for where/order evaluation."""

    @pytest.fixture
    def schema(self):
        return get_schema(BANK_ACCOUNT_TABLE)

    @pytest.fixture
    def rows(self):
        return [
            {"Id": 1, "Name": "A", "name_c": "Main Checking", "balance_c": 100.0, "currency_c": "USD"},
            {"Id": 2, "Name": "B", "name_c": "Savings", "balance_c": 2500.0, "currency_c": "EUR"},
            {"Id": 3, "Name": "C", "name_c": "Travel", "balance_c": None, "currency_c": "USD"},
        ]

    def test_equal_to_matches_any_value(self, rows, schema):
        """Test EqualTo matches any of the given values."""
        where = [WhereCondition(field_name="Id", values=[1, 3])]
        assert [r["Id"] for r in apply_where(rows, where, schema)] == [1, 3]

    def test_contains_is_case_insensitive(self, rows, schema):
        """Test Contains is a case-insensitive substring match."""
        where = [WhereCondition(
            field_name="name_c", operator=WhereOperator.CONTAINS, values=["CHECK"],
        )]
        assert [r["Id"] for r in apply_where(rows, where, schema)] == [1]

    def test_comparison_skips_missing_values(self, rows, schema):
        """Test ordered comparisons never match a missing value."""
        where = [WhereCondition(
            field_name="balance_c", operator=WhereOperator.LESS_THAN, values=["1000"],
        )]
        assert [r["Id"] for r in apply_where(rows, where, schema)] == [1]

    def test_conditions_are_anded(self, rows, schema):
        """Test every condition must match."""
        where = [
            WhereCondition(field_name="currency_c", values=["USD"]),
            WhereCondition(field_name="balance_c", operator=WhereOperator.GREATER_THAN, values=[50]),
        ]
        assert [r["Id"] for r in apply_where(rows, where, schema)] == [1]

    def test_unknown_where_field(self, rows, schema):
        """Test filtering on an unknown field raises InvalidQueryError."""
        with pytest.raises(InvalidQueryError):
            apply_where(rows, [WhereCondition(field_name="nope_c", values=[1])], schema)

    def test_order_puts_missing_last(self, rows, schema):
        """Test None values sort last in both directions."""
        for sort_type in (SortType.ASC, SortType.DESC):
            ordered = apply_order(rows, [OrderBy(field_name="balance_c", sort_type=sort_type)], schema)
            assert ordered[-1]["Id"] == 3

    def test_multi_key_order(self, rows, schema):
        """Test the first OrderBy is the primary key."""
        ordered = apply_order(rows, [
            OrderBy(field_name="currency_c"),
            OrderBy(field_name="Id", sort_type=SortType.DESC),
        ], schema)
        assert [r["Id"] for r in ordered] == [2, 3, 1]

    def test_clean_record_reports_field_errors(self, schema):
        """Test unknown fields and bad values are reported per field."""
        cleaned, errors = clean_record(
            {"Id": 5, "name_c": "Ok", "balance_c": "abc", "colour_c": "red"}, schema,
        )
        assert cleaned == {"name_c": "Ok"}
        messages = {e.field_label: e.message for e in errors}
        assert messages["Balance"] == "Invalid number: 'abc'"
        assert messages["colour_c"] == "Unknown field"


class TestInMemoryGateway:
    """Tests for the record API over the in-memory store."""

    async def test_create_allocates_ids(self, gateway):
        """Test Ids are allocated as max + 1 and Name defaults to name_c."""
        gateway.seed(CATEGORY_TABLE, [{"Id": 10, "name_c": "Old", "type_c": "expense"}])
        response = await gateway.create_record(CATEGORY_TABLE, [
            {"name_c": "Food", "type_c": "expense"},
            {"name_c": "Pay", "type_c": "income"},
        ])
        assert response.success
        assert [r.data["Id"] for r in response.results] == [11, 12]
        assert response.results[0].data["Name"] == "Food"

    def test_concurrent_creates_keep_every_record(self, gateway):
        """Test creates from several session threads never share an Id."""
        def create_accounts(owner):
            async def run():
                for n in range(100):
                    await gateway.create_record(BANK_ACCOUNT_TABLE, [
                        {"name_c": f"Account {owner}-{n}", "balance_c": 1},
                    ])
            asyncio.run(run())

        interval = sys.getswitchinterval()
        sys.setswitchinterval(1e-6)
        try:
            threads = [threading.Thread(target=create_accounts, args=(i,)) for i in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        finally:
            sys.setswitchinterval(interval)

        response = asyncio.run(gateway.fetch_records(BANK_ACCOUNT_TABLE))
        assert response.total == 400
        assert sorted(r["Id"] for r in response.data) == list(range(1, 401))

    async def test_create_reports_failures_per_record(self, gateway):
        """Test one bad record doesn't stop the others."""
        response = await gateway.create_record(CATEGORY_TABLE, [
            {"name_c": "Good"},
            {"name_c": "Bad", "shade_c": "blue"},
        ])
        assert len(response.successful) == 1
        assert response.failed[0].errors[0].message == "Unknown field"

    async def test_create_rejects_non_finite_number(self, gateway):
        """Test a NaN balance is a field error, not a stored record."""
        response = await gateway.create_record(BANK_ACCOUNT_TABLE, [
            {"name_c": "Broken", "balance_c": "nan"},
        ])
        assert response.failed[0].errors[0].message == "Invalid number: 'nan'"
        assert gateway._tables.get(BANK_ACCOUNT_TABLE, {}) == {}

    async def test_create_rejects_missing_reference(self, gateway):
        """Test a lookup to a missing record is a field error."""
        response = await gateway.create_record(BUDGET_TABLE, [
            {"amount_c": 100, "month_c": "2024-04", "category_id_c": 99},
        ])
        failure = response.failed[0]
        assert failure.errors[0].field_label == "Category"
        assert "99" in failure.errors[0].message

    async def test_fetch_resolves_lookups(self, gateway, categories):
        """Test lookups are returned as {'Id', 'Name'} using the referenced name."""
        await gateway.create_record(BUDGET_TABLE, [
            {"amount_c": 300, "month_c": "2024-04", "category_id_c": categories["Groceries"]},
        ])
        response = await gateway.fetch_records(BUDGET_TABLE, FetchParams(fields=[
            FieldSpec(name="amount_c"),
            FieldSpec(name="category_id_c", reference_field="name_c"),
        ]))
        record = response.data[0]
        assert record["category_id_c"] == {"Id": categories["Groceries"], "Name": "Groceries"}
        assert set(record) == {"Id", "Name", "amount_c", "category_id_c"}

    async def test_fetch_paging_and_total(self, gateway, transactions):
        """Test total counts matches before paging."""
        response = await gateway.fetch_records(TRANSACTION_TABLE, FetchParams(
            order_by=[OrderBy(field_name="date_c", sort_type=SortType.DESC)],
            paging=PagingInfo(limit=2, offset=1),
        ))
        assert response.total == 6
        assert [r["date_c"] for r in response.data] == ["2024-04-03", "2024-04-01"]

    async def test_fetch_unknown_table_fails(self, gateway):
        """Test fetching an unknown table returns a failed response."""
        response = await gateway.fetch_records("invoice_c")
        assert response.success is False
        assert "invoice_c" in response.message

    async def test_fetch_unknown_field_fails(self, gateway, categories):
        """Test requesting an unknown field returns a failed response."""
        response = await gateway.fetch_records(CATEGORY_TABLE, FetchParams.of("nope_c"))
        assert response.success is False

    async def test_get_record_by_id(self, gateway, categories):
        """Test get_record_by_id returns one record or a failure."""
        found = await gateway.get_record_by_id(CATEGORY_TABLE, categories["Rent"])
        assert found.data["name_c"] == "Rent"
        missing = await gateway.get_record_by_id(CATEGORY_TABLE, 404)
        assert missing.success is False
        assert missing.data is None

    async def test_update_is_partial(self, gateway, categories):
        """Test update merges the given columns into the stored record."""
        response = await gateway.update_record(CATEGORY_TABLE, [
            {"Id": categories["Rent"], "color_c": "#000000"},
        ])
        assert response.successful[0].data["color_c"] == "#000000"
        assert response.successful[0].data["name_c"] == "Rent"

    async def test_update_missing_and_without_id(self, gateway, categories):
        """Test updates of missing records or without Id fail per record."""
        response = await gateway.update_record(CATEGORY_TABLE, [
            {"Id": 404, "name_c": "Ghost"},
            {"name_c": "No Id"},
        ])
        assert [r.success for r in response.results] == [False, False]
        assert response.results[0].message == "Record with Id 404 not found"
        assert response.results[1].message == "Id is required to update a record"

    async def test_delete(self, gateway, categories):
        """Test delete removes existing records and reports missing ones."""
        response = await gateway.delete_record(CATEGORY_TABLE, [categories["Rent"], 404])
        assert [r.success for r in response.results] == [True, False]
        remaining = await gateway.fetch_records(CATEGORY_TABLE)
        assert categories["Rent"] not in [r["Id"] for r in remaining.data]

    async def test_stored_rows_are_copies(self, gateway, categories):
        """Test mutating a fetched record doesn't change the store."""
        response = await gateway.fetch_records(CATEGORY_TABLE)
        response.data[0]["name_c"] = "Changed"
        again = await gateway.fetch_records(CATEGORY_TABLE)
        assert again.data[0]["name_c"] != "Changed"

    def test_seed_rejects_invalid_records(self, gateway):
        """Test seeding validates values."""
        with pytest.raises(ValueError, match="Invalid seed record"):
            gateway.seed(BANK_ACCOUNT_TABLE, [{"balance_c": "plenty"}])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

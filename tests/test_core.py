"""Tests for core helpers: pagination, parsing and error translation."""

from datetime import datetime, time
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from proman_backend.core.exceptions import (
    DatabaseError,
    NotFoundError,
    ValidationError,
    database_operation,
)
from proman_backend.core.pagination import (
    calculate_offset,
    calculate_total_pages,
    normalize_pagination_params,
)
from proman_backend.core.utils import (
    drop_null_fields,
    format_amount,
    parse_datetime,
    sanitize_string,
)


class TestPagination:
    @pytest.mark.parametrize(
        "page, limit, expected",
        [
            (1, 10, (1, 10)),
            (0, 10, (1, 10)),
            (-3, 0, (1, 1)),
            (2, 500, (2, 100)),
            (None, None, (1, 10)),
        ],
    )
    def test_normalize(self, page, limit, expected):
        assert normalize_pagination_params(page, limit) == expected

    def test_offset_and_total_pages(self):
        assert calculate_offset(3, 20) == 40
        assert calculate_total_pages(0, 10) == 0
        assert calculate_total_pages(21, 10) == 3


class TestParseDatetime:
    def test_date_only(self):
        assert parse_datetime("2024-01-15") == datetime(2024, 1, 15)

    def test_date_only_end_of_day(self):
        parsed = parse_datetime("2024-01-15", end_of_day=True)
        assert parsed == datetime.combine(datetime(2024, 1, 15).date(), time.max)

    def test_datetime_is_kept_for_end_of_day(self):
        parsed = parse_datetime("2024-01-15T08:30:00", end_of_day=True)
        assert parsed == datetime(2024, 1, 15, 8, 30)

    def test_empty_values(self):
        assert parse_datetime(None) is None
        assert parse_datetime("") is None

    def test_invalid_value_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_datetime("2024-13-45", field="dueDate")
        assert exc_info.value.field == "dueDate"
        assert "dueDate" in exc_info.value.message


class TestUtils:
    def test_format_amount(self):
        assert format_amount(None) == "0"
        assert format_amount(Decimal("45.50")) == "45.50"
        assert format_amount(3) == "3"

    def test_sanitize_string(self):
        assert sanitize_string("  abc  ") == "abc"
        assert sanitize_string("abcdef", max_length=3) == "abc"
        assert sanitize_string(None) is None

    def test_drop_null_fields(self):
        values = {"name": None, "code": None, "is_active": False}
        assert drop_null_fields(values, "name", "is_active") == {
            "code": None,
            "is_active": False,
        }


class TestDatabaseOperation:
    @pytest.mark.asyncio
    async def test_sqlalchemy_error_becomes_database_error(self):
        @database_operation("Failed to load thing")
        async def failing():
            raise OperationalError("SELECT 1", {}, Exception("connection lost"))

        with pytest.raises(DatabaseError) as exc_info:
            await failing()

        assert exc_info.value.message == "Failed to load thing"
        assert exc_info.value.status_code == 500
        assert "connection lost" not in exc_info.value.message

    @pytest.mark.asyncio
    async def test_domain_errors_pass_through(self):
        @database_operation("Failed to load thing")
        async def missing():
            raise NotFoundError("Thing with ID 1 not found")

        with pytest.raises(NotFoundError):
            await missing()

    @pytest.mark.asyncio
    async def test_result_is_returned(self):
        @database_operation("Failed")
        async def ok():
            return 42

        assert await ok() == 42

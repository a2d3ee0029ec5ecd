# tests/test_materializer.py
import asyncio
import datetime
import decimal
import uuid

import pytest

from app.core.errors import RowReadError
from app.services.materializer import collect_records, materialize_row, to_json_value


class Rows:
    def __init__(self, rows, fail_at=None, error=None):
        self.rows = rows
        self.fail_at = fail_at
        self.error = error or ValueError("cannot decode")
        self.index = 0
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self.index == self.fail_at:
            raise self.error
        if self.index >= len(self.rows):
            raise StopAsyncIteration
        row = self.rows[self.index]
        self.index += 1
        return row

    async def aclose(self):
        self.closed = True


def test_scalar_conversions():
    ts = datetime.datetime(2024, 5, 1, 12, 30, tzinfo=datetime.timezone.utc)
    assert to_json_value(None) is None
    assert to_json_value(True) is True
    assert to_json_value("text") == "text"
    assert to_json_value(decimal.Decimal("100000.00")) == 100000
    assert to_json_value(decimal.Decimal("12.50")) == 12.5
    assert to_json_value(ts) == "2024-05-01T12:30:00+00:00"
    assert to_json_value(datetime.date(2024, 1, 2)) == "2024-01-02"
    assert to_json_value(b"bytes") == "bytes"
    u = uuid.uuid4()
    assert to_json_value(u) == str(u)


def test_unsupported_value_is_a_row_read_error():
    with pytest.raises(RowReadError):
        to_json_value(object())
    with pytest.raises(RowReadError):
        to_json_value(b"\xff\xfe")


def test_row_keys_keep_column_order():
    row = materialize_row({"price_ugx": decimal.Decimal("1.5"), "name": "Mug", "id": 3})
    assert list(row) == ["price_ugx", "name", "id"]
    assert row == {"price_ugx": 1.5, "name": "Mug", "id": 3}


def test_collect_all_rows_and_close():
    rows = Rows([{"id": 1}, {"id": 2}])
    assert asyncio.run(collect_records(rows)) == [{"id": 1}, {"id": 2}]
    assert rows.closed


def test_decode_failure_aborts_without_partial_results():
    rows = Rows([{"id": 1}, {"id": 2}], fail_at=1)
    with pytest.raises(RowReadError):
        asyncio.run(collect_records(rows))
    assert rows.closed


def test_conversion_failure_aborts_and_closes():
    rows = Rows([{"id": 1}, {"blob": object()}])
    with pytest.raises(RowReadError):
        asyncio.run(collect_records(rows))
    assert rows.closed

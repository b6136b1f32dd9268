"""
Tests unitarios para BatchExtractor (paginación offset/limit).
"""
import pytest

from tablebridge.application.services.batch_extractor import BatchExtractor, ExtractionIncompleteError


def _rows(n):
    return [{"id": i} for i in range(n)]


def test_stops_on_partial_page(source):
    source.tables = {"t": _rows(5)}
    result = BatchExtractor(source, page_size=2).extract("t")

    assert result.complete
    assert [r["id"] for r in result.rows] == [0, 1, 2, 3, 4]
    assert source.page_calls == [("t", 0, 2), ("t", 2, 2), ("t", 4, 2)]


def test_exact_multiple_ends_with_empty_page(source):
    source.tables = {"t": _rows(4)}
    result = BatchExtractor(source, page_size=2).extract("t")

    assert len(result.rows) == 4
    assert result.pages == 3
    assert source.page_calls[-1] == ("t", 4, 2)


def test_empty_table(source):
    source.tables = {"t": []}
    result = BatchExtractor(source, page_size=10).extract("t")
    assert result.complete
    assert result.rows == []


def test_page_error_returns_accumulated_rows_without_retry(source):
    source.tables = {"t": _rows(5)}

    class FlakyAfterFirstPage:
        def __init__(self):
            self.calls = 0

        def fetch_page(self, table, offset, limit, *, order=None):
            self.calls += 1
            if offset > 0:
                raise ConnectionError("reset by peer")
            return source.fetch_page(table, offset, limit)

    client = FlakyAfterFirstPage()
    result = BatchExtractor(client, page_size=2).extract("t")

    assert not result.complete
    assert isinstance(result.error, ExtractionIncompleteError)
    assert result.error.offset == 2
    assert len(result.rows) == 2
    assert client.calls == 2



def test_page_size_must_be_positive(source):
    with pytest.raises(ValueError):
        BatchExtractor(source, page_size=0)

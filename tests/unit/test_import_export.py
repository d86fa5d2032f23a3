"""
Tests for bulk import parsing and export rendering
"""
import json

import pytest

from app.core.exceptions import StoreValidationError
from app.services.import_export import parse_csv, parse_import_body, render_export, to_csv


class TestParseCsv:

    def test_quoted_cells(self):
        text = 'name,description\n"Bed ""Morpheus""","Soft, wide"\n'
        assert parse_csv(text) == [{"name": 'Bed "Morpheus"', "description": "Soft, wide"}]

    def test_json_cells_decoded(self):
        text = 'name,sizes\nBed,"[{""id"": ""double"", ""priceDelta"": 0}]"\n'
        records = parse_csv(text)
        assert records[0]["sizes"] == [{"id": "double", "priceDelta": 0}]

    def test_broken_json_cell_kept_as_text(self):
        records = parse_csv("name,sizes\nBed,[not json\n")
        assert records[0]["sizes"] == "[not json"

    def test_blank_cells_and_rows(self):
        records = parse_csv("name,comment\nIvan,\n,\n")
        assert records == [{"name": "Ivan", "comment": None}]

    def test_empty_text(self):
        assert parse_csv("") == []


class TestParseImportBody:

    def test_json_array(self):
        body = json.dumps([{"username": "ivan"}]).encode()
        assert parse_import_body(body, "application/json") == [{"username": "ivan"}]

    def test_csv_by_content_type(self):
        body = "\ufeffusername,email\nivan,ivan@example.com\n".encode("utf-8")
        assert parse_import_body(body, "text/csv") == [{"username": "ivan", "email": "ivan@example.com"}]

    @pytest.mark.parametrize("body", [
        b"[]",
        b"{}",
        b'{"username": "ivan"}',
        b"[1, 2]",
        b"not json",
        b"\xff\xfe",
    ])
    def test_rejected(self, body):
        with pytest.raises(StoreValidationError):
            parse_import_body(body, "application/json")

    def test_csv_header_only(self):
        with pytest.raises(StoreValidationError):
            parse_import_body(b"username,email\n", "text/csv")


class TestExport:

    def test_csv_encodes_nested_values(self):
        text = to_csv([
            {"id": 1, "inStock": True, "sizes": [{"id": "double"}], "comment": None},
            {"id": 2, "inStock": False, "extra": "x"},
        ])
        lines = text.splitlines()
        assert lines[0] == "id,inStock,sizes,comment,extra"
        assert lines[1] == '1,true,"[{""id"": ""double""}]",,'
        assert lines[2] == "2,false,,,x"

    def test_csv_output_parses_back(self):
        records = [{"name": 'Bed "Morpheus"', "fabrics": [{"id": "beige", "categoryId": "standard"}]}]
        assert parse_csv(to_csv(records)) == records

    def test_json_format(self):
        content, media_type = render_export([{"id": 1, "name": "Кровать"}], "json")
        assert media_type == "application/json"
        assert "Кровать" in content
        assert json.loads(content) == [{"id": 1, "name": "Кровать"}]

    def test_unknown_format(self):
        with pytest.raises(StoreValidationError):
            render_export([], "xml")

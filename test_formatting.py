#!/usr/bin/env python3
"""
Unit tests for asana_cli.formatting
"""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from asana_cli.formatting import (
    format_json,
    format_size,
    format_table,
    or_dash,
    short_date,
    status_string,
    truncate,
)
from asana_cli.models import Attachment, Entity, Task, User


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("Write docs", 50) == "Write docs"

    def test_exact_length_unchanged(self):
        assert truncate("x" * 50, 50) == "x" * 50

    def test_long_text_cut(self):
        result = truncate("x" * 60, 50)
        assert len(result) == 50
        assert result.endswith("...")


class TestFormatSize:
    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024 ** 3, "3.0 GB"),
        ],
    )
    def test_units(self, size, expected):
        assert format_size(size) == expected


class TestSmallFormatters:
    def test_short_date(self):
        assert short_date("2025-01-10T12:34:56.000Z") == "2025-01-10"
        assert short_date("") == "-"

    def test_status_string(self):
        assert status_string(True) == "Completed"
        assert status_string(False) == "Open"

    def test_or_dash(self):
        assert or_dash("") == "-"
        assert or_dash("Alice") == "Alice"


class TestFormatTable:
    def test_aligned_columns(self):
        output = format_table(["GID", "NAME"], [["1", "Write docs"], ["12345", "Ship"]])

        assert output.splitlines() == [
            "GID    NAME",
            "---    ----",
            "1      Write docs",
            "12345  Ship",
        ]

    def test_non_string_cells(self):
        output = format_table(["ASSIGNEE", "TASKS"], [["Alice", 3]])
        assert output.splitlines()[-1] == "Alice     3"

    def test_header_only(self):
        assert format_table(["GID", "NAME"], []) == "GID  NAME\n---  ----"


class TestFormatJson:
    def test_indented_two_spaces(self):
        output = format_json(Entity(gid="1", name="Docs"))
        assert output == '{\n  "gid": "1",\n  "name": "Docs"\n}'

    def test_omits_empty_fields(self):
        task = Task(gid="1", name="Test", assignee=User(gid="u1", name="Alice"))
        data = json.loads(format_json([task]))

        assert data == [
            {"gid": "1", "name": "Test", "completed": False,
             "assignee": {"gid": "u1", "name": "Alice"}}
        ]

    def test_zero_size_attachment_omits_size(self):
        data = json.loads(format_json(Attachment(gid="a1", name="file.txt")))
        assert "size" not in data

    def test_nested_dict_of_records(self):
        data = json.loads(format_json({"task": Task(gid="1"), "attachments": []}))
        assert data == {"task": {"gid": "1", "completed": False}, "attachments": []}

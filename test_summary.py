#!/usr/bin/env python3
"""
Unit tests for asana_cli.summary
"""

import itertools
import sys
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from asana_cli.client import AsanaClient
from asana_cli.models import Task, User
from asana_cli.summary import (
    SUMMARY_LIMIT,
    TaskSummary,
    get_task_summary,
    one_year_before,
    summarize_tasks,
    summary_search_params,
)

TODAY = date(2025, 1, 10)


def make_task(gid, completed=False, due_on="", assignee=None):
    user = User(gid=f"u_{assignee}", name=assignee) if assignee else None
    return Task(gid=gid, completed=completed, due_on=due_on, assignee=user)


class TestSummarizeTasks:
    """Tests for the pure aggregation."""

    def test_empty(self):
        summary = summarize_tasks([], TODAY)
        assert summary == TaskSummary()

    def test_counts(self):
        tasks = [
            make_task("1", completed=False, due_on="2025-01-01", assignee="Alice"),
            make_task("2", completed=False, due_on="2025-01-10", assignee="Alice"),
            make_task("3", completed=True, due_on="2024-12-01", assignee="Bob"),
            make_task("4", completed=False),
        ]

        summary = summarize_tasks(tasks, TODAY)

        assert summary.total == 4
        assert summary.open == 3
        assert summary.completed == 1
        # Due today is not overdue; completed tasks never are
        assert summary.overdue == 1
        assert summary.unassigned == 1
        assert summary.by_assignee == {"Alice": 2, "Bob": 1}

    def test_counts_consistent_over_all_combinations(self):
        due_values = ["", "2025-01-09", "2025-01-10", "2025-01-11"]
        assignees = [None, "Alice", "Bob"]
        tasks = [
            make_task(str(i), completed=completed, due_on=due, assignee=who)
            for i, (completed, due, who) in enumerate(
                itertools.product([True, False], due_values, assignees)
            )
        ]

        summary = summarize_tasks(tasks, TODAY)

        assert summary.total == len(tasks)
        assert summary.open + summary.completed == summary.total
        assert summary.overdue <= summary.open
        assert sum(summary.by_assignee.values()) + summary.unassigned == summary.total
        # Only open tasks due 2025-01-09 are overdue
        assert summary.overdue == len(assignees)

    def test_same_display_name_shares_bucket(self):
        tasks = [
            Task(gid="1", assignee=User(gid="u1", name="Sam")),
            Task(gid="2", assignee=User(gid="u2", name="Sam")),
        ]

        summary = summarize_tasks(tasks, TODAY)

        assert summary.by_assignee == {"Sam": 2}

    def test_assignees_by_count_descending(self):
        summary = TaskSummary(by_assignee={"Alice": 1, "Bob": 5, "Carol": 3})
        assert summary.assignees_by_count() == [("Bob", 5), ("Carol", 3), ("Alice", 1)]

    def test_to_dict(self):
        summary = summarize_tasks([make_task("1", assignee="Alice")], TODAY)
        assert summary.to_dict() == {
            "total": 1,
            "open": 1,
            "completed": 0,
            "overdue": 0,
            "unassigned": 0,
            "by_assignee": {"Alice": 1},
        }


class TestSearchWindow:
    """Tests for the summary search parameters."""

    def test_project_filter(self):
        params = summary_search_params("proj_1", TODAY)

        assert params["projects.any"] == "proj_1"
        assert "modified_on.after" not in params
        assert params["limit"] == "100"

    def test_one_year_window_without_project(self):
        params = summary_search_params(None, TODAY)

        assert params["modified_on.after"] == "2024-01-10"
        assert "projects.any" not in params

    def test_leap_day_rolls_forward(self):
        assert one_year_before(date(2024, 2, 29)) == date(2023, 3, 1)

    def test_regular_day(self):
        assert one_year_before(date(2025, 3, 1)) == date(2024, 3, 1)


class TestGetTaskSummary:
    """Tests for fetch + aggregate."""

    @pytest.fixture
    def client(self):
        client = MagicMock(spec=AsanaClient)
        client.workspace = "ws_1"
        return client

    def test_single_request(self, client):
        client.request_data.return_value = [
            {"gid": "1", "completed": False, "due_on": "2025-01-01",
             "assignee": {"gid": "u1", "name": "Alice"}},
            {"gid": "2", "completed": True, "assignee": None},
        ]

        summary = get_task_summary(client, "proj_1", TODAY)

        client.request_data.assert_called_once()
        assert client.request_data.call_args.args == ("GET", "/workspaces/ws_1/tasks/search")
        assert summary.total == 2
        assert summary.overdue == 1
        assert summary.unassigned == 1

    def test_full_page_logged_at_info(self, client, caplog):
        client.request_data.return_value = [
            {"gid": str(i), "completed": False} for i in range(SUMMARY_LIMIT)
        ]

        with caplog.at_level("INFO", logger="asana_cli.summary"):
            summary = get_task_summary(client, None, TODAY)

        assert summary.total == SUMMARY_LIMIT
        assert "first 100 tasks" in caplog.text
        assert all(record.levelname == "INFO" for record in caplog.records)

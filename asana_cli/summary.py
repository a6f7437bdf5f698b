#!/usr/bin/env python3
"""
Task Summary Aggregation

Counts one page of tasks by completion state, overdue status and assignee.
The aggregation itself is a pure function over already-fetched records;
get_task_summary issues the single search request that feeds it.

Only the first page (up to 100 tasks) is counted, so the numbers are an
approximation for workspaces with more matching tasks than that.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .client import AsanaClient
from .models import Task, decode_records

# Configure logging
logger = logging.getLogger(__name__)

SUMMARY_LIMIT = 100
SUMMARY_FIELDS = "gid,completed,due_on,assignee,assignee.name"


@dataclass
class TaskSummary:
    """
    Task counts for one page of search results.

    Invariants:
        total == open + completed
        overdue <= open
        sum(by_assignee.values()) + unassigned == total
    """

    total: int = 0
    open: int = 0
    completed: int = 0
    overdue: int = 0
    unassigned: int = 0
    by_assignee: Dict[str, int] = field(default_factory=dict)

    def assignees_by_count(self) -> List[Tuple[str, int]]:
        """Assignee buckets, largest first (ties keep first-seen order)."""
        return sorted(self.by_assignee.items(), key=lambda item: item[1], reverse=True)

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "open": self.open,
            "completed": self.completed,
            "overdue": self.overdue,
            "unassigned": self.unassigned,
            "by_assignee": dict(self.by_assignee),
        }


def summarize_tasks(tasks: Iterable[Task], today: Optional[date] = None) -> TaskSummary:
    """
    Aggregate tasks into a TaskSummary in a single pass.

    An open task is overdue when its due_on date string sorts strictly
    before today's YYYY-MM-DD string. Assignees are bucketed by display
    name, so two users sharing a name share a bucket.

    Args:
        tasks: Decoded task records
        today: Reference date (defaults to the current local date)

    Returns:
        TaskSummary
    """
    if today is None:
        today = date.today()
    today_str = today.isoformat()

    summary = TaskSummary()
    for task in tasks:
        summary.total += 1

        if task.completed:
            summary.completed += 1
        else:
            summary.open += 1
            if task.due_on and task.due_on < today_str:
                summary.overdue += 1

        if task.assignee is not None:
            name = task.assignee.name
            summary.by_assignee[name] = summary.by_assignee.get(name, 0) + 1
        else:
            summary.unassigned += 1

    return summary


def one_year_before(today: date) -> date:
    """Same calendar day a year earlier; Feb 29 rolls forward to Mar 1."""
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        return date(today.year - 1, 3, 1)


def summary_search_params(project_gid: Optional[str] = None, today: Optional[date] = None) -> Dict[str, str]:
    """
    Build the search parameters for the summary query.

    The search API needs at least one filter, so without a project the
    query falls back to tasks modified within the last year.
    """
    if today is None:
        today = date.today()

    params: Dict[str, str] = {}
    if project_gid:
        params["projects.any"] = project_gid
    else:
        params["modified_on.after"] = one_year_before(today).isoformat()
    params["limit"] = str(SUMMARY_LIMIT)
    params["opt_fields"] = SUMMARY_FIELDS
    return params


def get_task_summary(
    client: AsanaClient,
    project_gid: Optional[str] = None,
    today: Optional[date] = None,
) -> TaskSummary:
    """
    Fetch one page of tasks and summarize it.

    Args:
        client: Configured AsanaClient
        project_gid: Restrict to one project (optional)
        today: Reference date (defaults to the current local date)

    Returns:
        TaskSummary

    Raises:
        AsanaError: If the request fails or the response cannot be decoded
    """
    if today is None:
        today = date.today()

    params = summary_search_params(project_gid, today)
    data = client.request_data(
        "GET", f"/workspaces/{client.workspace}/tasks/search", params=params
    )
    tasks = decode_records(Task, data)
    summary = summarize_tasks(tasks, today)

    if summary.total >= SUMMARY_LIMIT:
        logger.info(
            f"Summary counted the first {SUMMARY_LIMIT} tasks only; more may match"
        )
    logger.info(
        f"Summarized {summary.total} tasks ({summary.open} open, {summary.overdue} overdue)"
    )
    return summary

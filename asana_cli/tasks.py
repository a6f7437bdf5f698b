#!/usr/bin/env python3
"""
Asana Task Operations

Task listing and search through the workspace search API, single-task CRUD,
and story (comment) operations. Every function issues exactly one request
and only the first page of results is ever returned.
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from .client import AsanaClient
from .models import (
    CreateTaskOptions,
    Story,
    Task,
    TaskListOptions,
    UpdateTaskOptions,
    decode_records,
)

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100

LIST_FIELDS = (
    "gid,name,completed,due_on,assignee,assignee.name,projects,projects.name,"
    "tags,tags.name,permalink_url"
)
SEARCH_FIELDS = (
    "gid,name,completed,due_on,assignee,assignee.name,projects,projects.name,permalink_url"
)
TASK_FIELDS = (
    "gid,name,notes,html_notes,completed,completed_at,due_on,due_at,created_at,"
    "modified_at,assignee,assignee.name,assignee.email,projects,projects.name,"
    "tags,tags.name,permalink_url"
)
STORY_FIELDS = "gid,created_at,created_by,created_by.name,text,html_text,type,resource_subtype"

DUE_FILTERS = ("today", "tomorrow", "week", "overdue")


def _search_endpoint(client: AsanaClient) -> str:
    return f"/workspaces/{client.workspace}/tasks/search"


def due_filter_params(due: str, today: Optional[date] = None) -> Dict[str, str]:
    """
    Translate a due filter into search parameters.

    Args:
        due: today, tomorrow, week, overdue, or a literal YYYY-MM-DD date
        today: Reference date (defaults to the current local date)

    Returns:
        Dict of due_on search parameters

    Example:
        due_filter_params('week', date(2025, 1, 10))
        # {'due_on.before': '2025-01-17', 'due_on.after': '2025-01-10'}
    """
    if today is None:
        today = date.today()

    if due == "today":
        return {"due_on": today.isoformat()}
    if due == "tomorrow":
        return {"due_on": (today + timedelta(days=1)).isoformat()}
    if due == "week":
        return {
            "due_on.before": (today + timedelta(days=7)).isoformat(),
            "due_on.after": today.isoformat(),
        }
    if due == "overdue":
        return {"due_on.before": today.isoformat()}

    # Anything else is forwarded as a date; the API validates it
    return {"due_on": due}


def build_list_params(opts: TaskListOptions, today: Optional[date] = None) -> Dict[str, str]:
    """Build the search parameters for list_tasks."""
    params: Dict[str, str] = {}

    if opts.project:
        params["projects.any"] = opts.project
    if opts.assignee:
        params["assignee.any"] = opts.assignee
    if opts.tag:
        params["tags.any"] = opts.tag
    if opts.due:
        params.update(due_filter_params(opts.due, today))

    if not opts.include_completed:
        params["completed"] = "false"

    params["limit"] = str(opts.limit if opts.limit > 0 else DEFAULT_LIMIT)

    if opts.sort_by:
        params["sort_by"] = opts.sort_by
        params["sort_ascending"] = "true"

    # Subtasks are never listed
    params["is_subtask"] = "false"
    params["opt_fields"] = LIST_FIELDS
    return params


def list_tasks(
    client: AsanaClient, opts: TaskListOptions, today: Optional[date] = None
) -> List[Task]:
    """
    List tasks matching the given filters.

    Args:
        client: Configured AsanaClient
        opts: Filters for the search
        today: Reference date for due filters (defaults to the current date)

    Returns:
        First page of matching tasks

    Raises:
        AsanaError: If the request fails or the response cannot be decoded
    """
    params = build_list_params(opts, today)
    data = client.request_data("GET", _search_endpoint(client), params=params)
    tasks = decode_records(Task, data)
    logger.info(f"Found {len(tasks)} tasks matching filters")
    return tasks


def search_tasks(client: AsanaClient, query: str, limit: int = DEFAULT_LIMIT) -> List[Task]:
    """Full-text search over incomplete tasks."""
    params: Dict[str, str] = {}
    if query:
        params["text"] = query
    params["completed"] = "false"
    params["limit"] = str(limit if limit > 0 else DEFAULT_LIMIT)
    params["opt_fields"] = SEARCH_FIELDS

    data = client.request_data("GET", _search_endpoint(client), params=params)
    tasks = decode_records(Task, data)
    logger.info(f"Found {len(tasks)} tasks matching '{query}'")
    return tasks


def get_task(client: AsanaClient, task_gid: str) -> Task:
    """Fetch a single task with its full field projection."""
    if not task_gid:
        raise ValueError("task_gid is required")

    data = client.request_data("GET", f"/tasks/{task_gid}", params={"opt_fields": TASK_FIELDS})
    return Task.from_dict(data)


def create_task(client: AsanaClient, opts: CreateTaskOptions) -> Task:
    """
    Create a new task.

    Tasks without projects or a parent are created in the client's workspace.

    Returns:
        The created task as echoed by the API

    Raises:
        ValueError: If no name is given
        AsanaError: If the request fails
    """
    body = opts.to_payload(client.workspace)
    data = client.request_data("POST", "/tasks", body=body)
    task = Task.from_dict(data)
    logger.info(f"Created task '{task.name}' with gid {task.gid}")
    return task


def update_task(client: AsanaClient, task_gid: str, opts: UpdateTaskOptions) -> Task:
    """
    Update the fields of a task that were explicitly set.

    Raises:
        ValueError: If nothing was set
        AsanaError: If the request fails
    """
    if not task_gid:
        raise ValueError("task_gid is required")

    body = opts.to_payload()
    data = client.request_data("PUT", f"/tasks/{task_gid}", body=body)
    task = Task.from_dict(data)
    logger.info(f"Updated task {task_gid}: {', '.join(sorted(body['data']))}")
    return task


def complete_task(client: AsanaClient, task_gid: str) -> Task:
    return update_task(client, task_gid, UpdateTaskOptions(completed=True))


def reopen_task(client: AsanaClient, task_gid: str) -> Task:
    return update_task(client, task_gid, UpdateTaskOptions(completed=False))


def delete_task(client: AsanaClient, task_gid: str) -> None:
    if not task_gid:
        raise ValueError("task_gid is required")

    client.request("DELETE", f"/tasks/{task_gid}")
    logger.info(f"Deleted task {task_gid}")


# ============================================================================
# Stories
# ============================================================================

def add_comment(client: AsanaClient, task_gid: str, text: str, html: bool = False) -> Story:
    """
    Add a comment to a task.

    Args:
        client: Configured AsanaClient
        task_gid: Task to comment on
        text: Comment body; Asana rich text wrapped in <body> when html is set
        html: Send the text as html_text instead of plain text

    Returns:
        The created story
    """
    if not task_gid:
        raise ValueError("task_gid is required")
    if not text:
        raise ValueError("Comment text is required")

    key = "html_text" if html else "text"
    data = client.request_data(
        "POST", f"/tasks/{task_gid}/stories", body={"data": {key: text}}
    )
    story = Story.from_dict(data)
    logger.info(f"Added comment {story.gid} to task {task_gid}")
    return story


def get_task_stories(client: AsanaClient, task_gid: str) -> List[Story]:
    """Get comments and activity for a task."""
    data = client.request_data(
        "GET", f"/tasks/{task_gid}/stories", params={"opt_fields": STORY_FIELDS}
    )
    stories = decode_records(Story, data)
    logger.info(f"Found {len(stories)} stories for task {task_gid}")
    return stories


def delete_story(client: AsanaClient, story_gid: str) -> None:
    if not story_gid:
        raise ValueError("story_gid is required")

    client.request("DELETE", f"/stories/{story_gid}")
    logger.info(f"Deleted story {story_gid}")

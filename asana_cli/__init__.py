#!/usr/bin/env python3
"""
Asana CLI - command-line client and library for the Asana REST API

Usage:
    from asana_cli import (
        # Configuration
        load_config,

        # Transport
        AsanaClient,

        # Task operations
        list_tasks,
        search_tasks,
        get_task,
        create_task,
        update_task,

        # Summary
        get_task_summary,
    )

    client = AsanaClient(load_config())
    tasks = list_tasks(client, TaskListOptions(assignee="me", due="today"))
"""

__version__ = "1.0.0"

# Error classes
from .errors import (
    AsanaError,
    AsanaConfigError,
    AsanaTransportError,
    AsanaDecodeError,
    AsanaFileError,
    AsanaAPIError,
    AsanaValidationError,
    AsanaAuthError,
    AsanaNotFoundError,
    AsanaRateLimitError,
    AsanaServerError,
)

# Configuration
from .config import Config, load_config

# Transport
from .client import AsanaClient

# Records and options
from .models import (
    UNSET,
    Attachment,
    CreateTaskOptions,
    Entity,
    Project,
    Story,
    Task,
    TaskListOptions,
    UpdateTaskOptions,
    User,
    Workspace,
)

# Task operations
from .tasks import (
    add_comment,
    complete_task,
    create_task,
    delete_story,
    delete_task,
    get_task,
    get_task_stories,
    list_tasks,
    reopen_task,
    search_tasks,
    update_task,
)

# Projects, users and workspaces
from .projects import list_projects
from .users import get_me, list_users, list_workspaces

# Attachments
from .attachments import (
    delete_attachment,
    download_attachment,
    get_attachment,
    list_attachments,
    upload_attachment,
)

# Summary
from .summary import TaskSummary, get_task_summary, summarize_tasks

__all__ = [
    "__version__",
    # Errors
    "AsanaError",
    "AsanaConfigError",
    "AsanaTransportError",
    "AsanaDecodeError",
    "AsanaFileError",
    "AsanaAPIError",
    "AsanaValidationError",
    "AsanaAuthError",
    "AsanaNotFoundError",
    "AsanaRateLimitError",
    "AsanaServerError",
    # Configuration
    "Config",
    "load_config",
    # Transport
    "AsanaClient",
    # Records and options
    "UNSET",
    "Attachment",
    "CreateTaskOptions",
    "Entity",
    "Project",
    "Story",
    "Task",
    "TaskListOptions",
    "UpdateTaskOptions",
    "User",
    "Workspace",
    # Tasks
    "add_comment",
    "complete_task",
    "create_task",
    "delete_story",
    "delete_task",
    "get_task",
    "get_task_stories",
    "list_tasks",
    "reopen_task",
    "search_tasks",
    "update_task",
    # Projects, users and workspaces
    "list_projects",
    "get_me",
    "list_users",
    "list_workspaces",
    # Attachments
    "delete_attachment",
    "download_attachment",
    "get_attachment",
    "list_attachments",
    "upload_attachment",
    # Summary
    "TaskSummary",
    "get_task_summary",
    "summarize_tasks",
]

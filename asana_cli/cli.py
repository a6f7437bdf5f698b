#!/usr/bin/env python3
"""
Asana command-line interface.

Environment Variables:
    ASANA_TOKEN: Personal Access Token (required)
    ASANA_WORKSPACE: Workspace GID (required by most commands)
    ASANA_TIMEOUT: Request timeout in seconds (optional)
    ASANA_DEBUG: Enable debug logging when set to 1/true/yes (optional)

Usage:
    asana tasks list -m -d today
    asana tasks get <gid> --comments
    asana tasks create "Task name" -p <project_gid>
    asana tasks update <gid> --clear-due
    asana tasks comment <gid> "Looks good"
    asana projects list
    asana summary -p <project_gid>
    asana attachments upload <task_gid> ./report.pdf
    asana attachments download <attachment_gid> -o /tmp/report.pdf
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from . import __version__
from .attachments import (
    delete_attachment,
    download_attachment,
    get_attachment,
    list_attachments,
    upload_attachment,
)
from .client import AsanaClient
from .config import config_help, load_config
from .errors import AsanaError
from .formatting import (
    format_size,
    format_table,
    or_dash,
    print_json,
    short_date,
    status_string,
    truncate,
)
from .models import CreateTaskOptions, Task, TaskListOptions, UpdateTaskOptions
from .projects import list_projects
from .summary import SUMMARY_LIMIT, get_task_summary
from .tasks import (
    DEFAULT_LIMIT,
    DUE_FILTERS,
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
from .users import get_me, list_users, list_workspaces

# Configure logging
logger = logging.getLogger(__name__)

SORT_FIELDS = ["due_date", "created_at", "completed_at", "modified_at", "likes"]
GLOBAL_FLAGS = {"--json", "-j", "--debug"}
GLOBAL_VALUE_FLAGS = {"-c", "--config"}


# ========== Helpers ==========

def setup_logging(debug: bool = False) -> None:
    """Configure root logging on stderr; DEBUG with --debug or ASANA_DEBUG."""
    env_debug = os.environ.get("ASANA_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}
    level = logging.DEBUG if debug or env_debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def hoist_global_flags(raw_args: Sequence[str]) -> List[str]:
    """
    Move global flags in front of the subcommand so they work in any position.

    "asana tasks list --json -c prod.env" parses like
    "asana --json -c prod.env tasks list".
    """
    hoisted: List[str] = []
    rest: List[str] = []
    i = 0
    while i < len(raw_args):
        arg = raw_args[i]
        if arg == "--":
            rest.extend(raw_args[i:])
            break
        if arg in GLOBAL_FLAGS:
            hoisted.append(arg)
        elif arg in GLOBAL_VALUE_FLAGS and i + 1 < len(raw_args):
            hoisted.extend(raw_args[i:i + 2])
            i += 1
        elif arg.startswith("--config="):
            hoisted.append(arg)
        else:
            rest.append(arg)
        i += 1
    return hoisted + rest


def confirm(prompt: str) -> bool:
    """Ask a yes/no question; only 'y' or 'Y' counts as yes."""
    try:
        response = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return response.strip() in ("y", "Y")


def format_task_table(tasks: List[Task]) -> str:
    rows = []
    for task in tasks:
        assignee = task.assignee.name if task.assignee else "-"
        project = task.projects[0].name if task.projects else "-"
        rows.append([task.gid, truncate(task.name, 50), or_dash(task.due_on), or_dash(assignee), or_dash(project)])
    return format_table(["GID", "NAME", "DUE", "ASSIGNEE", "PROJECT"], rows)


def print_limit_hint(count: int, limit: int) -> None:
    if count >= limit:
        print(f"\n(Showing {limit} tasks, use -l to increase limit)")


# ========== Task commands ==========

def cmd_tasks_list(client: AsanaClient, args):
    """List tasks."""
    assignee = "me" if args.mine else args.assignee
    limit = args.limit if args.limit > 0 else DEFAULT_LIMIT
    opts = TaskListOptions(
        project=args.project or "",
        assignee=assignee or "",
        tag=args.tag or "",
        due=args.due or "",
        include_completed=args.all,
        limit=limit,
        sort_by=args.sort or "",
    )

    tasks = list_tasks(client, opts)
    if args.json:
        print_json(tasks)
        return

    if not tasks:
        print("No tasks found.")
        return

    print(format_task_table(tasks))
    print_limit_hint(len(tasks), limit)


def cmd_tasks_get(client: AsanaClient, args):
    """Get task details, attachments, and optionally comments."""
    task = get_task(client, args.task_gid)
    stories = get_task_stories(client, args.task_gid) if args.comments else []
    attachments = list_attachments(client, args.task_gid)

    if args.json:
        output = {"task": task, "attachments": attachments}
        if args.comments:
            output["comments"] = stories
        print_json(output)
        return

    print(f"Task: {task.name}")
    print(f"GID: {task.gid}")
    print(f"Status: {status_string(task.completed)}")

    if task.assignee:
        line = f"Assignee: {task.assignee.name}"
        if task.assignee.email:
            line += f" <{task.assignee.email}>"
        print(line)
    if task.due_on:
        print(f"Due: {task.due_on}")
    if task.projects:
        print(f"Projects: {', '.join(p.name for p in task.projects)}")
    if task.tags:
        print(f"Tags: {', '.join(t.name for t in task.tags)}")

    print(f"Created: {task.created_at}")
    print(f"Modified: {task.modified_at}")

    if task.permalink_url:
        print(f"URL: {task.permalink_url}")
    if task.notes:
        print(f"\nDescription:\n{task.notes}")

    if attachments:
        print(f"\nAttachments ({len(attachments)}):")
        for a in attachments:
            size = f" ({format_size(a.size)})" if a.size > 0 else ""
            print(f"  - {a.name}{size} [{a.gid}]")

    if args.comments and stories:
        print(f"\nComments & Activity ({len(stories)}):")
        print("-" * 40)
        for story in stories:
            author = story.created_by.name if story.created_by else "Unknown"
            print(f"[{short_date(story.created_at)}] {author}")
            if story.text:
                print(f"  {story.text}")
            print()


def cmd_tasks_create(client: AsanaClient, args):
    """Create task."""
    opts = CreateTaskOptions(
        name=args.name,
        notes=args.notes or "",
        assignee=args.assignee or "",
        due_on=args.due or "",
        projects=[args.project] if args.project else [],
        tags=args.tag or [],
        parent=args.parent or "",
    )
    task = create_task(client, opts)
    if args.json:
        print_json(task)
        return

    print("Task created successfully!")
    print(f"GID: {task.gid}")
    print(f"Name: {task.name}")
    if task.permalink_url:
        print(f"URL: {task.permalink_url}")


def cmd_tasks_update(client: AsanaClient, args):
    """Update task."""
    opts = UpdateTaskOptions()
    if args.name:
        opts.name = args.name
    if args.notes is not None:
        opts.notes = args.notes
    if args.unassign:
        opts.assignee = None
    elif args.assignee:
        opts.assignee = args.assignee
    if args.clear_due:
        opts.due_on = None
    elif args.due:
        opts.due_on = args.due

    task = update_task(client, args.task_gid, opts)
    if args.json:
        print_json(task)
        return

    print(f"Task updated: {task.name}")


def cmd_tasks_complete(client: AsanaClient, args):
    task = complete_task(client, args.task_gid)
    print(f"Task completed: {task.name}")


def cmd_tasks_reopen(client: AsanaClient, args):
    task = reopen_task(client, args.task_gid)
    print(f"Task reopened: {task.name}")


def cmd_tasks_delete(client: AsanaClient, args):
    """Delete task after confirmation."""
    if not args.force and not confirm(f"Are you sure you want to delete task {args.task_gid}?"):
        print("Cancelled.")
        return

    delete_task(client, args.task_gid)
    print(f"Task {args.task_gid} deleted.")


def cmd_tasks_comment(client: AsanaClient, args):
    """Add comment."""
    message = args.message
    # Rich text must be wrapped in <body>
    if args.html and "<body>" not in message:
        message = f"<body>{message}</body>"

    story = add_comment(client, args.task_gid, message, html=args.html)
    if args.json:
        print_json(story)
        return

    print(f"Comment added successfully (ID: {story.gid})")
    print(f"Created at: {story.created_at}")


def cmd_tasks_delete_comment(client: AsanaClient, args):
    if not args.force and not confirm(f"Are you sure you want to delete comment {args.story_gid}?"):
        print("Cancelled.")
        return

    delete_story(client, args.story_gid)
    print(f"Comment {args.story_gid} deleted.")


def cmd_tasks_search(client: AsanaClient, args):
    """Search tasks."""
    limit = args.limit if args.limit > 0 else DEFAULT_LIMIT
    tasks = search_tasks(client, args.query, limit)
    if args.json:
        print_json(tasks)
        return

    if not tasks:
        print("No tasks found.")
        return

    print(format_task_table(tasks))
    print_limit_hint(len(tasks), limit)


# ========== Project, user and workspace commands ==========

def cmd_projects_list(client: AsanaClient, args):
    """List projects."""
    projects = list_projects(client, archived=args.archived, limit=args.limit)
    if args.json:
        print_json(projects)
        return

    if not projects:
        print("No projects found.")
        return

    rows = [
        [p.gid, truncate(p.name, 40), "Yes" if p.archived else "No", short_date(p.created_at)]
        for p in projects
    ]
    print(format_table(["GID", "NAME", "ARCHIVED", "CREATED"], rows))


def cmd_users_list(client: AsanaClient, args):
    users = list_users(client)
    if args.json:
        print_json(users)
        return

    if not users:
        print("No users found.")
        return

    rows = [[u.gid, u.name, or_dash(u.email)] for u in users]
    print(format_table(["GID", "NAME", "EMAIL"], rows))


def cmd_users_me(client: AsanaClient, args):
    user = get_me(client)
    if args.json:
        print_json(user)
        return

    print(f"Name: {user.name}")
    print(f"GID: {user.gid}")
    if user.email:
        print(f"Email: {user.email}")


def cmd_workspaces(client: AsanaClient, args):
    """List workspaces."""
    workspaces = list_workspaces(client)
    if args.json:
        print_json(workspaces)
        return

    if not workspaces:
        print("No workspaces found.")
        return

    rows = [[ws.gid, ws.name, "Yes" if ws.is_organization else "No"] for ws in workspaces]
    print(format_table(["GID", "NAME", "ORGANIZATION"], rows))


# ========== Summary ==========

def cmd_summary(client: AsanaClient, args):
    """Show task counts by status and assignee."""
    summary = get_task_summary(client, args.project)
    if args.json:
        print_json(summary)
        return

    print("Task Summary")
    print("============")
    print(f"Total Tasks:     {summary.total}")
    print(f"Open Tasks:      {summary.open}")
    print(f"Completed Tasks: {summary.completed}")
    print(f"Overdue Tasks:   {summary.overdue}")
    print(f"Unassigned:      {summary.unassigned}")

    if summary.by_assignee:
        print("\nTasks by Assignee")
        print("-----------------")
        rows = [[or_dash(name), count] for name, count in summary.assignees_by_count()]
        print(format_table(["ASSIGNEE", "TASKS"], rows))

    if summary.total >= SUMMARY_LIMIT:
        print(f"\n(Counted the first {SUMMARY_LIMIT} tasks only, more may match)")


# ========== Attachment commands ==========

def cmd_attachments_list(client: AsanaClient, args):
    attachments = list_attachments(client, args.task_gid)
    if args.json:
        print_json(attachments)
        return

    if not attachments:
        print("No attachments found.")
        return

    rows = [
        [
            a.gid,
            truncate(a.name, 50),
            format_size(a.size) if a.size > 0 else "-",
            short_date(a.created_at),
            or_dash(a.host),
        ]
        for a in attachments
    ]
    print(format_table(["GID", "NAME", "SIZE", "CREATED", "HOST"], rows))


def cmd_attachments_get(client: AsanaClient, args):
    attachment = get_attachment(client, args.attachment_gid)
    if args.json:
        print_json(attachment)
        return

    print(f"Name: {attachment.name}")
    print(f"GID: {attachment.gid}")
    if attachment.resource_subtype:
        print(f"Type: {attachment.resource_subtype}")
    if attachment.host:
        print(f"Host: {attachment.host}")
    if attachment.size > 0:
        print(f"Size: {format_size(attachment.size)}")
    if attachment.created_at:
        print(f"Created: {attachment.created_at}")
    if attachment.parent:
        print(f"Parent: {attachment.parent.name} ({attachment.parent.gid})")
    if attachment.download_url:
        print(f"Download URL: {attachment.download_url}")
    if attachment.permanent_url:
        print(f"Permanent URL: {attachment.permanent_url}")
    if attachment.view_url:
        print(f"View URL: {attachment.view_url}")


def cmd_attachments_upload(client: AsanaClient, args):
    attachment = upload_attachment(client, args.task_gid, args.file_path)
    if args.json:
        print_json(attachment)
        return

    print("File uploaded successfully!")
    print(f"GID: {attachment.gid}")
    print(f"Name: {attachment.name}")


def cmd_attachments_download(client: AsanaClient, args):
    # Download URLs expire quickly, so always fetch a fresh one
    attachment = get_attachment(client, args.attachment_gid)
    dest_path = download_attachment(client, attachment, args.output)
    print(f"Downloaded: {dest_path}")


def cmd_attachments_delete(client: AsanaClient, args):
    if not args.force and not confirm(
        f"Are you sure you want to delete attachment {args.attachment_gid}?"
    ):
        print("Cancelled.")
        return

    delete_attachment(client, args.attachment_gid)
    print(f"Attachment {args.attachment_gid} deleted.")


# ========== Local commands ==========

def cmd_version(client, args):
    print(f"asana-cli v{__version__}")


def cmd_configure(client, args):
    print("Asana CLI Configuration")
    print("=======================")
    print()
    print(config_help())
    print()
    print("Finding your Workspace GID:")
    print("  Run 'asana workspaces' after setting ASANA_TOKEN to list your workspaces,")
    print("  or find it in your Asana URL: https://app.asana.com/0/<workspace_gid>/...")


# ========== Parser ==========

def build_parser() -> argparse.ArgumentParser:
    epilog = """\
Examples:
  asana tasks list -m -d today     My tasks due today
  asana tasks list -p <gid> --all  All tasks in a project
  asana tasks get <gid> --comments Task details with comments
  asana tasks create "Name" -p <gid>
  asana tasks update <gid> -d 2025-03-01
  asana tasks complete <gid>
  asana tasks search "query"
  asana summary -p <gid>           Task counts for a project
  asana attachments upload <task> <file>

Environment:
  ASANA_TOKEN       Required. Personal access token.
  ASANA_WORKSPACE   Required by most commands. Workspace GID.
"""

    parser = argparse.ArgumentParser(
        prog="asana",
        description="A command-line interface for Asana",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", help="Path to config file (.env format)")
    parser.add_argument("-j", "--json", action="store_true", help="Output as JSON")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.set_defaults(help_parser=parser)

    subparsers = parser.add_subparsers(dest="command", metavar="command")

    # tasks
    tasks = subparsers.add_parser("tasks", help="Manage tasks")
    tasks.set_defaults(help_parser=tasks)
    tasks_sub = tasks.add_subparsers(dest="subcommand", metavar="subcommand")

    t_list = tasks_sub.add_parser("list", help="List tasks")
    t_list.add_argument("-m", "--mine", action="store_true",
                        help="Show only tasks assigned to me (shortcut for -a me)")
    t_list.add_argument("-p", "--project", help="Filter by project GID")
    t_list.add_argument("-a", "--assignee", help="Filter by assignee GID (use 'me' for yourself)")
    t_list.add_argument("-t", "--tag", help="Filter by tag GID")
    t_list.add_argument("-d", "--due",
                        help=f"Filter by due date: {', '.join(DUE_FILTERS)}, or YYYY-MM-DD")
    t_list.add_argument("--all", action="store_true", help="Include completed tasks")
    t_list.add_argument("-l", "--limit", type=int, default=DEFAULT_LIMIT,
                        help="Maximum number of tasks to return")
    t_list.add_argument("-s", "--sort", choices=SORT_FIELDS,
                        help="Sort field (ascending); unsorted when omitted, earlier releases sorted by due_date")
    t_list.set_defaults(func=cmd_tasks_list)

    t_get = tasks_sub.add_parser("get", help="Get a task by ID")
    t_get.add_argument("task_gid", help="Task GID to retrieve")
    t_get.add_argument("--comments", action="store_true", help="Include comments and activity")
    t_get.set_defaults(func=cmd_tasks_get)

    t_create = tasks_sub.add_parser("create", help="Create a new task")
    t_create.add_argument("name", help="Task name")
    t_create.add_argument("-n", "--notes", help="Task description")
    t_create.add_argument("-a", "--assignee", help="Assignee GID or 'me'")
    t_create.add_argument("-d", "--due", help="Due date (YYYY-MM-DD)")
    t_create.add_argument("-p", "--project", help="Project GID to add task to")
    t_create.add_argument("--tag", action="append", help="Tag GID (repeatable)")
    t_create.add_argument("--parent", help="Parent task GID (creates a subtask)")
    t_create.set_defaults(func=cmd_tasks_create)

    t_complete = tasks_sub.add_parser("complete", help="Mark a task as complete")
    t_complete.add_argument("task_gid", help="Task GID to complete")
    t_complete.set_defaults(func=cmd_tasks_complete)

    t_reopen = tasks_sub.add_parser("reopen", help="Reopen a completed task")
    t_reopen.add_argument("task_gid", help="Task GID to reopen")
    t_reopen.set_defaults(func=cmd_tasks_reopen)

    t_update = tasks_sub.add_parser("update", help="Update a task")
    t_update.add_argument("task_gid", help="Task GID to update")
    t_update.add_argument("-n", "--name", help="New task name")
    t_update.add_argument("--notes", help="New task description (empty string clears it)")
    assignee_group = t_update.add_mutually_exclusive_group()
    assignee_group.add_argument("-a", "--assignee", help="New assignee GID or 'me'")
    assignee_group.add_argument("--unassign", action="store_true", help="Remove the assignee")
    due_group = t_update.add_mutually_exclusive_group()
    due_group.add_argument("-d", "--due", help="New due date (YYYY-MM-DD)")
    due_group.add_argument("--clear-due", action="store_true", help="Remove the due date")
    t_update.set_defaults(func=cmd_tasks_update)

    t_delete = tasks_sub.add_parser("delete", help="Delete a task")
    t_delete.add_argument("task_gid", help="Task GID to delete")
    t_delete.add_argument("-f", "--force", action="store_true", help="Skip confirmation")
    t_delete.set_defaults(func=cmd_tasks_delete)

    t_comment = tasks_sub.add_parser("comment", help="Add a comment to a task")
    t_comment.add_argument("task_gid", help="Task GID to comment on")
    t_comment.add_argument("message", help="Comment message (use --html for rich text)")
    t_comment.add_argument("--html", action="store_true", help="Treat message as HTML rich text")
    t_comment.set_defaults(func=cmd_tasks_comment)

    t_uncomment = tasks_sub.add_parser("delete-comment", help="Delete a comment")
    t_uncomment.add_argument("story_gid", help="Comment (story) GID to delete")
    t_uncomment.add_argument("-f", "--force", action="store_true", help="Skip confirmation")
    t_uncomment.set_defaults(func=cmd_tasks_delete_comment)

    t_search = tasks_sub.add_parser("search", help="Search for tasks")
    t_search.add_argument("query", help="Search query")
    t_search.add_argument("-l", "--limit", type=int, default=DEFAULT_LIMIT,
                          help="Maximum number of tasks to return")
    t_search.set_defaults(func=cmd_tasks_search)

    # projects
    projects = subparsers.add_parser("projects", help="Manage projects")
    projects.set_defaults(help_parser=projects)
    projects_sub = projects.add_subparsers(dest="subcommand", metavar="subcommand")

    p_list = projects_sub.add_parser("list", help="List projects in the workspace")
    p_list.add_argument("-a", "--archived", action="store_true", help="List archived projects")
    p_list.add_argument("-l", "--limit", type=int, default=50,
                        help="Maximum number of projects to return")
    p_list.set_defaults(func=cmd_projects_list)

    # users
    users = subparsers.add_parser("users", help="List users")
    users.set_defaults(help_parser=users)
    users_sub = users.add_subparsers(dest="subcommand", metavar="subcommand")

    u_list = users_sub.add_parser("list", help="List users in the workspace")
    u_list.set_defaults(func=cmd_users_list)

    u_me = users_sub.add_parser("me", help="Show current user")
    u_me.set_defaults(func=cmd_users_me)

    # workspaces
    ws = subparsers.add_parser("workspaces", help="List workspaces (needs only ASANA_TOKEN)")
    ws.set_defaults(func=cmd_workspaces, token_only=True)

    # summary
    summary = subparsers.add_parser("summary", help="Show task counts by status and assignee")
    summary.add_argument("-p", "--project", help="Filter by project GID")
    summary.set_defaults(func=cmd_summary)

    # attachments
    attachments = subparsers.add_parser("attachments", help="Manage attachments")
    attachments.set_defaults(help_parser=attachments)
    att_sub = attachments.add_subparsers(dest="subcommand", metavar="subcommand")

    a_list = att_sub.add_parser("list", help="List attachments on a task")
    a_list.add_argument("task_gid", help="Task GID to list attachments for")
    a_list.set_defaults(func=cmd_attachments_list)

    a_get = att_sub.add_parser("get", help="Get attachment details")
    a_get.add_argument("attachment_gid", help="Attachment GID to retrieve")
    a_get.set_defaults(func=cmd_attachments_get)

    a_upload = att_sub.add_parser("upload", help="Upload a file to a task")
    a_upload.add_argument("task_gid", help="Task GID to attach file to")
    a_upload.add_argument("file_path", help="Path to file to upload")
    a_upload.set_defaults(func=cmd_attachments_upload)

    a_download = att_sub.add_parser("download", help="Download an attachment")
    a_download.add_argument("attachment_gid", help="Attachment GID to download")
    a_download.add_argument("-o", "--output",
                            help="Output file path (defaults to current directory with attachment name)")
    a_download.set_defaults(func=cmd_attachments_download)

    a_delete = att_sub.add_parser("delete", help="Delete an attachment")
    a_delete.add_argument("attachment_gid", help="Attachment GID to delete")
    a_delete.add_argument("-f", "--force", action="store_true", help="Skip confirmation")
    a_delete.set_defaults(func=cmd_attachments_delete)

    # local commands
    version = subparsers.add_parser("version", help="Show version information")
    version.set_defaults(func=cmd_version, no_client=True)

    configure = subparsers.add_parser("configure", help="Show configuration help")
    configure.set_defaults(func=cmd_configure, no_client=True)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    raw_args = sys.argv[1:] if argv is None else list(argv)
    args = parser.parse_args(hoist_global_flags(raw_args))

    setup_logging(args.debug)

    func = getattr(args, "func", None)
    if func is None:
        # Bare "asana" or a command group without a subcommand
        args.help_parser.print_help()
        return 0

    try:
        if getattr(args, "no_client", False):
            func(None, args)
        else:
            config = load_config(
                args.config,
                require_workspace=not getattr(args, "token_only", False),
            )
            func(AsanaClient(config), args)
    except (AsanaError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())

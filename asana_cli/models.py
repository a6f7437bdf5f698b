#!/usr/bin/env python3
"""
Asana Records and Request Options

Decoded records are immutable snapshots of what the API returned for the
fields that were requested; anything not requested is left empty. Options
classes describe one request and are built once per command.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional, Type, TypeVar

from .errors import AsanaDecodeError

T = TypeVar("T")


# ============================================================================
# Decoding helpers
# ============================================================================

def _expect_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise AsanaDecodeError(
            f"parsing response: expected {what} object, got {type(data).__name__}"
        )
    return data


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _compact(value: Any) -> Any:
    """Drop empty optional values, like the API omits unrequested fields."""
    if isinstance(value, dict):
        return {
            k: _compact(v)
            for k, v in value.items()
            if v is not None and v != "" and v != []
        }
    if isinstance(value, list):
        return [_compact(v) for v in value]
    return value


def decode_records(cls: Type[T], data: Any) -> List[T]:
    """Decode a list payload into records of the given class."""
    if not isinstance(data, list):
        raise AsanaDecodeError(
            f"parsing response: expected list of {cls.__name__} records, got {type(data).__name__}"
        )
    return [cls.from_dict(item) for item in data]  # type: ignore[attr-defined]


class Record:
    """Mixin for JSON output of decoded records."""

    def to_dict(self) -> Dict[str, Any]:
        return _compact(asdict(self))


# ============================================================================
# Records
# ============================================================================

@dataclass(frozen=True)
class Entity(Record):
    """Compact reference to another record (project, tag, parent)."""

    gid: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Entity":
        data = _expect_dict(data, "entity")
        return cls(gid=_text(data, "gid"), name=_text(data, "name"))


@dataclass(frozen=True)
class User(Record):
    gid: str
    name: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "User":
        data = _expect_dict(data, "user")
        return cls(
            gid=_text(data, "gid"),
            name=_text(data, "name"),
            email=_text(data, "email"),
        )


@dataclass(frozen=True)
class Workspace(Record):
    gid: str
    name: str = ""
    is_organization: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "Workspace":
        data = _expect_dict(data, "workspace")
        return cls(
            gid=_text(data, "gid"),
            name=_text(data, "name"),
            is_organization=bool(data.get("is_organization")),
        )


@dataclass(frozen=True)
class Task(Record):
    gid: str
    name: str = ""
    notes: str = ""
    html_notes: str = ""
    completed: bool = False
    completed_at: str = ""
    due_on: str = ""
    due_at: str = ""
    created_at: str = ""
    modified_at: str = ""
    assignee: Optional[User] = None
    projects: List[Entity] = field(default_factory=list)
    tags: List[Entity] = field(default_factory=list)
    permalink_url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Task":
        data = _expect_dict(data, "task")
        assignee = data.get("assignee")
        return cls(
            gid=_text(data, "gid"),
            name=_text(data, "name"),
            notes=_text(data, "notes"),
            html_notes=_text(data, "html_notes"),
            completed=bool(data.get("completed")),
            completed_at=_text(data, "completed_at"),
            due_on=_text(data, "due_on"),
            due_at=_text(data, "due_at"),
            created_at=_text(data, "created_at"),
            modified_at=_text(data, "modified_at"),
            assignee=User.from_dict(assignee) if assignee else None,
            projects=decode_records(Entity, data.get("projects") or []),
            tags=decode_records(Entity, data.get("tags") or []),
            permalink_url=_text(data, "permalink_url"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        # Completion state is meaningful even when false
        result["completed"] = self.completed
        return result


@dataclass(frozen=True)
class Project(Record):
    gid: str
    name: str = ""
    archived: bool = False
    color: str = ""
    created_at: str = ""
    permalink_url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Project":
        data = _expect_dict(data, "project")
        return cls(
            gid=_text(data, "gid"),
            name=_text(data, "name"),
            archived=bool(data.get("archived")),
            color=_text(data, "color"),
            created_at=_text(data, "created_at"),
            permalink_url=_text(data, "permalink_url"),
        )


@dataclass(frozen=True)
class Story(Record):
    """A comment or activity entry on a task."""

    gid: str
    created_at: str = ""
    created_by: Optional[User] = None
    text: str = ""
    html_text: str = ""
    type: str = ""
    resource_subtype: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Story":
        data = _expect_dict(data, "story")
        created_by = data.get("created_by")
        return cls(
            gid=_text(data, "gid"),
            created_at=_text(data, "created_at"),
            created_by=User.from_dict(created_by) if created_by else None,
            text=_text(data, "text"),
            html_text=_text(data, "html_text"),
            type=_text(data, "type"),
            resource_subtype=_text(data, "resource_subtype"),
        )


@dataclass(frozen=True)
class Attachment(Record):
    """
    A file attached to a task.

    Note: download_url is only valid for a few minutes after retrieval.
    Fetch the attachment again right before downloading rather than storing it.
    """

    gid: str
    name: str = ""
    resource_subtype: str = ""
    created_at: str = ""
    download_url: str = ""
    permanent_url: str = ""
    view_url: str = ""
    host: str = ""
    size: int = 0
    parent: Optional[Entity] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Attachment":
        data = _expect_dict(data, "attachment")
        parent = data.get("parent")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            raise AsanaDecodeError(f"parsing response: invalid attachment size {data.get('size')!r}")
        return cls(
            gid=_text(data, "gid"),
            name=_text(data, "name"),
            resource_subtype=_text(data, "resource_subtype"),
            created_at=_text(data, "created_at"),
            download_url=_text(data, "download_url"),
            permanent_url=_text(data, "permanent_url"),
            view_url=_text(data, "view_url"),
            host=_text(data, "host"),
            size=size,
            parent=Entity.from_dict(parent) if parent else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if not self.size:
            result.pop("size", None)
        return result


# ============================================================================
# Request options
# ============================================================================

class _Unset:
    """Marker for an update field the caller did not touch."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class TaskListOptions:
    """Filters for one task search. Empty strings mean "no filter"."""

    project: str = ""
    assignee: str = ""
    tag: str = ""
    due: str = ""
    include_completed: bool = False
    limit: int = 0
    sort_by: str = ""


@dataclass
class CreateTaskOptions:
    name: str
    notes: str = ""
    assignee: str = ""
    due_on: str = ""
    projects: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    parent: str = ""

    def to_payload(self, workspace: str) -> Dict[str, Any]:
        """
        Build the request body for POST /tasks.

        A task must live somewhere: without projects or a parent task it is
        created directly in the workspace.
        """
        if not self.name:
            raise ValueError("Task name is required")

        data: Dict[str, Any] = {"name": self.name}
        if self.notes:
            data["notes"] = self.notes
        if self.assignee:
            data["assignee"] = self.assignee
        if self.due_on:
            data["due_on"] = self.due_on
        if self.projects:
            data["projects"] = list(self.projects)
        if self.tags:
            data["tags"] = list(self.tags)
        if self.parent:
            data["parent"] = self.parent
        if not self.projects and not self.parent:
            data["workspace"] = workspace
        return {"data": data}


@dataclass
class UpdateTaskOptions:
    """
    Changes for PUT /tasks/{gid}.

    Each field is UNSET (leave alone), None (clear on the server) or a value.
    """

    name: Any = UNSET
    notes: Any = UNSET
    assignee: Any = UNSET
    due_on: Any = UNSET
    completed: Any = UNSET

    def changed_fields(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def to_payload(self) -> Dict[str, Any]:
        data = self.changed_fields()
        if not data:
            raise ValueError("No updates provided")
        if data.get("name", "") is None:
            raise ValueError("Task name cannot be cleared")
        return {"data": data}

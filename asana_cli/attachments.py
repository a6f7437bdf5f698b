#!/usr/bin/env python3
"""
Asana Attachment Operations

Functions for managing file attachments on Asana tasks.
Supports upload, download, list, get, and delete operations.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .client import AsanaClient, decode_data
from .models import Attachment, decode_records

# Configure logging
logger = logging.getLogger(__name__)

LIST_FIELDS = "gid,name,resource_subtype,created_at,host,size"
ATTACHMENT_FIELDS = (
    "gid,name,resource_subtype,created_at,download_url,permanent_url,view_url,"
    "host,size,parent,parent.name"
)


def list_attachments(client: AsanaClient, task_gid: str) -> List[Attachment]:
    """
    Get all attachments for an Asana task.

    Download URLs are not requested here; use get_attachment for a fresh one.
    """
    if not task_gid:
        raise ValueError("task_gid is required")

    data = client.request_data(
        "GET", f"/tasks/{task_gid}/attachments", params={"opt_fields": LIST_FIELDS}
    )
    attachments = decode_records(Attachment, data)
    logger.info(f"Found {len(attachments)} attachments for task {task_gid}")
    return attachments


def get_attachment(client: AsanaClient, attachment_gid: str) -> Attachment:
    """
    Get details about a specific attachment.

    Note: download_url is only valid for ~2 minutes after retrieval.
    Refresh on demand rather than storing.

    Args:
        client: Configured AsanaClient
        attachment_gid: Asana attachment GID

    Returns:
        Attachment record including download_url

    Raises:
        AsanaError: If the operation fails
        ValueError: If inputs are invalid
    """
    if not attachment_gid:
        raise ValueError("attachment_gid is required")

    data = client.request_data(
        "GET", f"/attachments/{attachment_gid}", params={"opt_fields": ATTACHMENT_FIELDS}
    )
    attachment = Attachment.from_dict(data)
    logger.info(f"Retrieved attachment '{attachment.name}'")
    return attachment


def upload_attachment(client: AsanaClient, task_gid: str, file_path: str) -> Attachment:
    """
    Upload a local file as an attachment on a task.

    The attachment is named after the file's base name.

    Raises:
        AsanaFileError: If the file cannot be read
        AsanaError: If the upload fails
        ValueError: If inputs are invalid
    """
    if not task_gid:
        raise ValueError("task_gid is required")

    logger.info(f"Uploading '{file_path}' to task {task_gid}")
    raw = client.upload(f"/tasks/{task_gid}/attachments", file_path)
    attachment = Attachment.from_dict(decode_data(raw))
    logger.info(f"Uploaded attachment '{attachment.name}' with gid {attachment.gid}")
    return attachment


def download_attachment(
    client: AsanaClient, attachment: Attachment, dest_path: Optional[str] = None
) -> str:
    """
    Download an attachment's content to disk.

    Args:
        client: Configured AsanaClient
        attachment: Attachment fetched with get_attachment (needs download_url)
        dest_path: Output path (defaults to the attachment name in the current directory)

    Returns:
        The path written to
    """
    if not dest_path:
        dest_path = str(Path(".") / Path(attachment.name).name)

    client.download(attachment.download_url, dest_path)
    logger.info(f"Saved attachment {attachment.gid} to {dest_path}")
    return dest_path


def delete_attachment(client: AsanaClient, attachment_gid: str) -> None:
    if not attachment_gid:
        raise ValueError("attachment_gid is required")

    client.request("DELETE", f"/attachments/{attachment_gid}")
    logger.info(f"Deleted attachment {attachment_gid}")

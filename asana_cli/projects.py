#!/usr/bin/env python3
"""
Asana Project Operations

Functions for listing projects in the configured workspace.
"""

import logging
from typing import List

from .client import AsanaClient
from .models import Project, decode_records

# Configure logging
logger = logging.getLogger(__name__)

PROJECT_FIELDS = "gid,name,archived,color,created_at,permalink_url"


def list_projects(client: AsanaClient, archived: bool = False, limit: int = 100) -> List[Project]:
    """
    List projects in the workspace.

    Args:
        client: Configured AsanaClient
        archived: List archived projects instead of active ones
        limit: Maximum number of projects to return (default: 100)

    Returns:
        List of Project records

    Example:
        projects = list_projects(client, limit=20)
        for project in projects:
            print(f"{project.name}: {project.gid}")
    """
    params = {
        "archived": str(archived).lower(),
        "limit": str(limit if limit > 0 else 100),
        "opt_fields": PROJECT_FIELDS,
    }
    data = client.request_data("GET", f"/workspaces/{client.workspace}/projects", params=params)
    projects = decode_records(Project, data)
    logger.info(f"Retrieved {len(projects)} projects")
    return projects

#!/usr/bin/env python3
"""
Asana User and Workspace Operations

Functions for looking up users and workspaces.
"""

import logging
from typing import List

from .client import AsanaClient
from .models import User, Workspace, decode_records

# Configure logging
logger = logging.getLogger(__name__)

USER_FIELDS = "gid,name,email"


def list_users(client: AsanaClient) -> List[User]:
    """List users in the workspace."""
    data = client.request_data(
        "GET", f"/workspaces/{client.workspace}/users", params={"opt_fields": USER_FIELDS}
    )
    users = decode_records(User, data)
    logger.info(f"Retrieved {len(users)} users")
    return users


def get_me(client: AsanaClient) -> User:
    """Get the user the token belongs to."""
    data = client.request_data("GET", "/users/me", params={"opt_fields": USER_FIELDS})
    return User.from_dict(data)


def list_workspaces(client: AsanaClient) -> List[Workspace]:
    """
    Get all workspaces accessible by the authenticated user.

    Only needs a token, so it can be used to find the GID to put in
    ASANA_WORKSPACE.
    """
    data = client.request_data(
        "GET", "/workspaces", params={"opt_fields": "gid,name,is_organization"}
    )
    workspaces = decode_records(Workspace, data)
    logger.info(f"Retrieved {len(workspaces)} workspaces")
    return workspaces

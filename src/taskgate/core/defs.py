"""
Core definitions for the Taskgate system.

These define the closed set of backend calls, their kind, and the
declarative shapes used by the registry (parameter specs and routes).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .validators import Validator


class CallType(str, enum.Enum):
    """Kind of backend call."""
    QUERY = "func"  # set-returning function, paginated
    MUTATION = "proc"  # procedure, no rows


class CallName(str, enum.Enum):
    """
    Closed set of backend operations exposed through the gateway.

    The value is the stored function/procedure name. It is the only part of
    a statement interpolated into SQL text, so it must never be built from
    request input.
    """

    # Users
    CREATE_USER = "create_user"
    GET_ALL_USERS = "get_all_users"
    GET_USER_BY_ID = "get_user_by_id"
    GET_USER_BY_EMAIL = "get_user_by_email"
    GET_USER_TEAMS = "get_user_teams"
    GET_USER_SECRETS = "get_user_secrets"
    GET_USER_SECRETS_BY_EMAIL = "get_user_secrets_by_email"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"

    # Teams
    CREATE_TEAM = "create_team"
    GET_ALL_TEAMS = "get_all_teams"
    GET_TEAM_BY_ID = "get_team_by_id"
    UPDATE_TEAM = "update_team"
    DELETE_TEAM = "delete_team"

    # Membership
    ADD_TEAM_MEMBER = "add_team_member"
    ADD_USER_TO_TEAM = "add_user_to_team"
    GET_TEAM_MEMBERS = "get_team_members"
    GET_TEAM_MEMBERSHIP = "get_team_membership"
    REMOVE_TEAM_MEMBER = "remove_team_member"
    REMOVE_USER_FROM_TEAM = "remove_user_from_team"

    # Statuses
    CREATE_STATUS = "create_status"
    GET_ALL_STATUSES = "get_all_statuses"
    GET_STATUS_BY_ID = "get_status_by_id"
    GET_STATUS_BY_NAME = "get_status_by_name"
    UPDATE_STATUS = "update_status"
    DELETE_STATUS = "delete_status"

    # Todos
    CREATE_TODO = "create_todo"
    GET_TODO_BY_ID = "get_todo_by_id"
    GET_USER_TODOS = "get_user_todos"
    GET_MEMBER_TODOS = "get_member_todos"
    GET_TEAM_TODOS = "get_team_todos"
    UPDATE_TODO = "update_todo"
    DELETE_TODO = "delete_todo"

    # Global roles
    CREATE_GLOBAL_ROLE = "create_global_role"
    GET_ALL_GLOBAL_ROLES = "get_all_global_roles"
    GET_GLOBAL_ROLE_BY_ID = "get_global_role_by_id"
    GET_GLOBAL_ROLE_BY_NAME = "get_global_role_by_name"
    UPDATE_GLOBAL_ROLE = "update_global_role"
    DELETE_GLOBAL_ROLE = "delete_global_role"
    ASSIGN_GLOBAL_ROLE = "assign_global_role"
    GET_USER_GLOBAL_ROLES = "get_user_global_roles"
    REVOKE_GLOBAL_ROLE = "revoke_global_role"

    # Local (per-team) roles
    CREATE_LOCAL_ROLE = "create_local_role"
    GET_ALL_LOCAL_ROLES = "get_all_local_roles"
    GET_LOCAL_ROLE_BY_ID = "get_local_role_by_id"
    GET_LOCAL_ROLE_BY_NAME = "get_local_role_by_name"
    UPDATE_LOCAL_ROLE = "update_local_role"
    DELETE_LOCAL_ROLE = "delete_local_role"
    ASSIGN_LOCAL_ROLE = "assign_local_role"
    GET_MEMBER_LOCAL_ROLES = "get_member_local_roles"
    REVOKE_LOCAL_ROLE = "revoke_local_role"


ParamSpec = tuple[tuple[str, Optional[Validator]], ...]
"""Ordered (name, validator) pairs; order is the stored call's argument order."""

ParamCoercion = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class RouteDef:
    """Definition of an HTTP route bound to a backend call."""
    method: str  # GET, POST, PUT, DELETE
    path: str  # FastAPI template, e.g. "/user/{user_id}"
    call_type: CallType
    call_name: CallName
    coerce: Optional[ParamCoercion] = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str]:
        return self.method.upper(), self.path

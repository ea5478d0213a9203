"""
Route table - HTTP method and path bound to a backend call.

Path parameters arrive as strings; routes whose calls expect numeric ids
carry a coercion that converts them before they are merged with the body.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from .defs import CallName, CallType, ParamCoercion, RouteDef


def params_to_int(names: Optional[Sequence[str]] = None) -> ParamCoercion:
    """
    Build a coercion converting path parameters to integers.

    Args:
        names: Parameters to convert (default: all of them)

    Values that do not parse are left untouched so the call's validator
    reports them as invalid.
    """
    def coerce(params: dict[str, Any]) -> dict[str, Any]:
        result = dict(params)
        for key in (names if names is not None else list(params)):
            if key not in result:
                continue
            try:
                result[key] = int(result[key])
            except (TypeError, ValueError):
                pass
        return result

    return coerce


Q = CallType.QUERY
M = CallType.MUTATION
to_int = params_to_int()

ROUTES: tuple[RouteDef, ...] = (
    # ----- Users -----
    RouteDef("POST", "/user/create", Q, CallName.CREATE_USER),
    RouteDef("GET", "/user/all", Q, CallName.GET_ALL_USERS, to_int),
    RouteDef("GET", "/user/email/{email}", Q, CallName.GET_USER_BY_EMAIL),
    RouteDef("GET", "/user/{user_id}/teams", Q, CallName.GET_USER_TEAMS, to_int),
    RouteDef("GET", "/user/{user_id}/todos", Q, CallName.GET_USER_TODOS, to_int),
    RouteDef("GET", "/user/{user_id}/global-roles", Q, CallName.GET_USER_GLOBAL_ROLES, to_int),
    RouteDef("GET", "/user/{user_id}", Q, CallName.GET_USER_BY_ID, to_int),
    RouteDef("PUT", "/user/{user_id}", M, CallName.UPDATE_USER, to_int),
    RouteDef("DELETE", "/user/{user_id}", M, CallName.DELETE_USER, to_int),

    # ----- Teams -----
    RouteDef("POST", "/team/create", Q, CallName.CREATE_TEAM),
    RouteDef("GET", "/team/all", Q, CallName.GET_ALL_TEAMS),
    RouteDef("GET", "/team/{team_id}/members", Q, CallName.GET_TEAM_MEMBERS, to_int),
    RouteDef("GET", "/team/{team_id}/todos", Q, CallName.GET_TEAM_TODOS, to_int),
    RouteDef("GET", "/team/{team_id}/user/{user_id}/todos", Q, CallName.GET_MEMBER_TODOS, to_int),
    RouteDef("GET", "/team/{team_id}", Q, CallName.GET_TEAM_BY_ID, to_int),
    RouteDef("PUT", "/team/{team_id}", M, CallName.UPDATE_TEAM, to_int),
    RouteDef("DELETE", "/team/{team_id}", M, CallName.DELETE_TEAM, to_int),

    # ----- Membership -----
    RouteDef("POST", "/team-membership/add", Q, CallName.ADD_USER_TO_TEAM, to_int),
    RouteDef(
        "GET", "/team-membership/user/{user_id}/team/{team_id}",
        Q, CallName.GET_TEAM_MEMBERSHIP, to_int,
    ),
    RouteDef("DELETE", "/team-membership/{member_id}", M, CallName.REMOVE_USER_FROM_TEAM, to_int),

    # ----- Statuses -----
    RouteDef("POST", "/status/create", M, CallName.CREATE_STATUS),
    RouteDef("GET", "/status/all", Q, CallName.GET_ALL_STATUSES),
    RouteDef("GET", "/status/name/{name}", Q, CallName.GET_STATUS_BY_NAME),
    RouteDef("GET", "/status/{status_id}", Q, CallName.GET_STATUS_BY_ID, to_int),
    RouteDef("PUT", "/status/{status_id}", M, CallName.UPDATE_STATUS, to_int),
    RouteDef("DELETE", "/status/{status_id}", M, CallName.DELETE_STATUS, to_int),

    # ----- Todos -----
    RouteDef("POST", "/todo/create", M, CallName.CREATE_TODO),
    RouteDef("GET", "/todo/{todo_id}", Q, CallName.GET_TODO_BY_ID, to_int),
    RouteDef("PUT", "/todo/{todo_id}", M, CallName.UPDATE_TODO, to_int),
    RouteDef("DELETE", "/todo/{todo_id}", M, CallName.DELETE_TODO, to_int),

    # ----- Global roles -----
    RouteDef("POST", "/global-role/create", M, CallName.CREATE_GLOBAL_ROLE),
    RouteDef("GET", "/global-role/all", Q, CallName.GET_ALL_GLOBAL_ROLES),
    RouteDef("GET", "/global-role/name/{name}", Q, CallName.GET_GLOBAL_ROLE_BY_NAME),
    RouteDef("GET", "/global-role/{role_id}", Q, CallName.GET_GLOBAL_ROLE_BY_ID, to_int),
    RouteDef("PUT", "/global-role/{role_id}", M, CallName.UPDATE_GLOBAL_ROLE, to_int),
    RouteDef("DELETE", "/global-role/{role_id}", M, CallName.DELETE_GLOBAL_ROLE, to_int),
    RouteDef(
        "POST", "/user/{user_id}/global-role/{role_id}/assign",
        M, CallName.ASSIGN_GLOBAL_ROLE, to_int,
    ),
    RouteDef(
        "DELETE", "/user/{user_id}/global-role/{role_id}/revoke",
        M, CallName.REVOKE_GLOBAL_ROLE, to_int,
    ),

    # ----- Local roles -----
    RouteDef("POST", "/local-role/create", M, CallName.CREATE_LOCAL_ROLE),
    RouteDef("GET", "/local-role/all", Q, CallName.GET_ALL_LOCAL_ROLES),
    RouteDef("GET", "/local-role/name/{name}", Q, CallName.GET_LOCAL_ROLE_BY_NAME),
    RouteDef("GET", "/local-role/{role_id}", Q, CallName.GET_LOCAL_ROLE_BY_ID, to_int),
    RouteDef("PUT", "/local-role/{role_id}", M, CallName.UPDATE_LOCAL_ROLE, to_int),
    RouteDef("DELETE", "/local-role/{role_id}", M, CallName.DELETE_LOCAL_ROLE, to_int),
    RouteDef(
        "POST", "/team-membership/{member_id}/local-role/{role_id}/assign",
        M, CallName.ASSIGN_LOCAL_ROLE, to_int,
    ),
    RouteDef(
        "GET", "/team-membership/{member_id}/local-roles",
        Q, CallName.GET_MEMBER_LOCAL_ROLES, to_int,
    ),
    RouteDef(
        "DELETE", "/team-membership/{member_id}/local-role/{role_id}/revoke",
        M, CallName.REVOKE_LOCAL_ROLE, to_int,
    ),
)

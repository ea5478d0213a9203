"""
Call catalogue - parameter specs for every backend call.

Parameter order is the stored function/procedure's declared argument order.
"""

from __future__ import annotations

from .defs import CallName, ParamSpec
from .validators import (
    BOOL_OPT,
    DATE_OPT,
    EMAIL,
    EMAIL_OPT,
    ID,
    ID_OPT,
    STR,
    STR_NONEMPTY,
    STR_NONEMPTY_OPT,
    STR_OPT,
    TIMESTAMP_OPT,
)


CALL_SPECS: dict[CallName, ParamSpec] = {
    # ----- Users -----
    CallName.CREATE_USER: (
        ("name", STR_NONEMPTY),
        ("email", EMAIL),
        ("password_hash", STR),
        ("two_fa_secret", STR_OPT),
        ("two_fa_saved", BOOL_OPT),
    ),
    CallName.GET_ALL_USERS: (),
    CallName.GET_USER_BY_ID: (("user_id", ID),),
    CallName.GET_USER_BY_EMAIL: (("email", EMAIL),),
    CallName.GET_USER_TEAMS: (("user_id", ID),),
    CallName.GET_USER_SECRETS: (("user_id", ID),),
    CallName.GET_USER_SECRETS_BY_EMAIL: (("email", EMAIL),),
    CallName.UPDATE_USER: (
        ("user_id", ID),
        ("name", STR_NONEMPTY_OPT),
        ("email", EMAIL_OPT),
        ("password_hash", STR_OPT),
        ("two_fa_secret", STR_OPT),
        ("two_fa_saved", BOOL_OPT),
    ),
    CallName.DELETE_USER: (("user_id", ID),),

    # ----- Teams -----
    CallName.CREATE_TEAM: (("name", STR_NONEMPTY), ("description", STR)),
    CallName.GET_ALL_TEAMS: (),
    CallName.GET_TEAM_BY_ID: (("team_id", ID),),
    CallName.UPDATE_TEAM: (
        ("team_id", ID),
        ("name", STR_NONEMPTY_OPT),
        ("description", STR_OPT),
    ),
    CallName.DELETE_TEAM: (("team_id", ID),),

    # ----- Membership -----
    CallName.ADD_TEAM_MEMBER: (("user_id", ID), ("team_id", ID)),
    CallName.ADD_USER_TO_TEAM: (("user_id", ID), ("team_id", ID)),
    CallName.GET_TEAM_MEMBERS: (("team_id", ID),),
    CallName.GET_TEAM_MEMBERSHIP: (("user_id", ID), ("team_id", ID)),
    CallName.REMOVE_TEAM_MEMBER: (("user_id", ID), ("team_id", ID)),
    CallName.REMOVE_USER_FROM_TEAM: (("member_id", ID),),

    # ----- Statuses -----
    CallName.CREATE_STATUS: (("name", STR_NONEMPTY),),
    CallName.GET_ALL_STATUSES: (),
    CallName.GET_STATUS_BY_ID: (("status_id", ID),),
    CallName.GET_STATUS_BY_NAME: (("name", STR),),
    CallName.UPDATE_STATUS: (("status_id", ID), ("name", STR_NONEMPTY)),
    CallName.DELETE_STATUS: (("status_id", ID),),

    # ----- Todos -----
    CallName.CREATE_TODO: (
        ("created_by", ID),
        ("team_id", ID),
        ("title", STR_NONEMPTY),
        ("description", STR),
        ("status", ID),
        ("assigned_to", ID_OPT),
        ("due_date", DATE_OPT),
    ),
    CallName.GET_TODO_BY_ID: (("todo_id", ID),),
    CallName.GET_USER_TODOS: (("user_id", ID),),
    CallName.GET_MEMBER_TODOS: (("team_id", ID), ("user_id", ID)),
    CallName.GET_TEAM_TODOS: (("team_id", ID),),
    CallName.UPDATE_TODO: (
        ("todo_id", ID),
        ("assigned_to", ID_OPT),
        ("title", STR_NONEMPTY_OPT),
        ("description", STR_OPT),
        ("status", ID_OPT),
        ("due_date", DATE_OPT),
        ("completed_at", TIMESTAMP_OPT),
    ),
    CallName.DELETE_TODO: (("todo_id", ID),),

    # ----- Global roles -----
    CallName.CREATE_GLOBAL_ROLE: (("name", STR_NONEMPTY),),
    CallName.GET_ALL_GLOBAL_ROLES: (),
    CallName.GET_GLOBAL_ROLE_BY_ID: (("role_id", ID),),
    CallName.GET_GLOBAL_ROLE_BY_NAME: (("name", STR),),
    CallName.UPDATE_GLOBAL_ROLE: (("role_id", ID), ("name", STR_NONEMPTY)),
    CallName.DELETE_GLOBAL_ROLE: (("role_id", ID),),
    CallName.ASSIGN_GLOBAL_ROLE: (("user_id", ID), ("role_id", ID)),
    CallName.GET_USER_GLOBAL_ROLES: (("user_id", ID),),
    CallName.REVOKE_GLOBAL_ROLE: (("user_id", ID), ("role_id", ID)),

    # ----- Local roles -----
    CallName.CREATE_LOCAL_ROLE: (("name", STR_NONEMPTY),),
    CallName.GET_ALL_LOCAL_ROLES: (),
    CallName.GET_LOCAL_ROLE_BY_ID: (("role_id", ID),),
    CallName.GET_LOCAL_ROLE_BY_NAME: (("name", STR),),
    CallName.UPDATE_LOCAL_ROLE: (("role_id", ID), ("name", STR_NONEMPTY)),
    CallName.DELETE_LOCAL_ROLE: (("role_id", ID),),
    CallName.ASSIGN_LOCAL_ROLE: (("member_id", ID), ("role_id", ID)),
    CallName.GET_MEMBER_LOCAL_ROLES: (("member_id", ID),),
    CallName.REVOKE_LOCAL_ROLE: (("member_id", ID), ("role_id", ID)),
}

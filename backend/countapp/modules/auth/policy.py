"""
Access policy
=============

Every protected operation is listed once in ``REQUIRED_ROLES`` with the set of
roles allowed to perform it. An empty set means any authenticated identity.
Roles are not ranked: ``super`` does not implicitly satisfy a ``master`` check,
both are enumerated wherever elevated access is required.
"""

import enum
from typing import Dict, FrozenSet

from countapp.core.exceptions import AuthorizationError
from countapp.models.user import Role
from countapp.schemas.auth import IdentityClaim


class Operation(str, enum.Enum):
    TEMPLATE_CREATE = "template:create"
    TEMPLATE_LIST = "template:list"
    TEMPLATE_UPDATE = "template:update"
    TEMPLATE_DELETE = "template:delete"

    INSTANCE_START = "instance:start"
    INSTANCE_RESUME = "instance:resume"
    INSTANCE_COMPLETE = "instance:complete"
    INSTANCE_DISCARD = "instance:discard"

    RESULT_QUERY_RANGE = "result:query-range"
    RESULT_QUERY_ALL = "result:query-all"
    RESULT_DELETE = "result:delete"

    PRESET_CREATE = "preset:create"
    PRESET_LIST = "preset:list"
    PRESET_UPDATE = "preset:update"
    PRESET_DELETE = "preset:delete"

    USER_LIST = "user:list"
    USER_CREATE = "user:create"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"


ANY_AUTHENTICATED: FrozenSet[Role] = frozenset()
MANAGERS: FrozenSet[Role] = frozenset({Role.MASTER, Role.SUPER})


REQUIRED_ROLES: Dict[Operation, FrozenSet[Role]] = {
    Operation.TEMPLATE_CREATE: MANAGERS,
    Operation.TEMPLATE_LIST: ANY_AUTHENTICATED,
    Operation.TEMPLATE_UPDATE: MANAGERS,
    Operation.TEMPLATE_DELETE: MANAGERS,

    Operation.INSTANCE_START: ANY_AUTHENTICATED,
    Operation.INSTANCE_RESUME: ANY_AUTHENTICATED,
    Operation.INSTANCE_COMPLETE: ANY_AUTHENTICATED,
    Operation.INSTANCE_DISCARD: ANY_AUTHENTICATED,

    Operation.RESULT_QUERY_RANGE: MANAGERS,
    Operation.RESULT_QUERY_ALL: MANAGERS,
    Operation.RESULT_DELETE: MANAGERS,

    Operation.PRESET_CREATE: MANAGERS,
    Operation.PRESET_LIST: MANAGERS,
    Operation.PRESET_UPDATE: MANAGERS,
    Operation.PRESET_DELETE: MANAGERS,

    Operation.USER_LIST: MANAGERS,
    Operation.USER_CREATE: MANAGERS,
    Operation.USER_UPDATE: MANAGERS,
    Operation.USER_DELETE: MANAGERS,
}


def authorize(identity: IdentityClaim, operation: Operation) -> None:
    """
    Allow ``identity`` to perform ``operation`` or raise AuthorizationError.

    A pure set-membership check against ``identity.role``.
    """
    required = REQUIRED_ROLES[operation]
    if required and identity.role not in required:
        raise AuthorizationError()

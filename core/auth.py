"""
Authorization predicates for mutating commands.

Deciding who may create trees, link chains or rotate parameters belongs to
the governance layer outside the pool core. The core only asks a predicate:

    authorize(action) -> bool

where ``action`` is one of the ``Action`` values. Every mutating command
takes the predicate as a keyword-only ``authorize`` argument and calls
``require`` before touching state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable

from core.schemas.errors import UnauthorizedException

if TYPE_CHECKING:
    from core.params.store import ParameterStore

logger = logging.getLogger(__name__)


class Action(str, Enum):
    CREATE_TREE = "create_tree"
    ADD_EDGE = "add_edge"
    UPDATE_EDGE = "update_edge"
    CREATE_POOL = "create_pool"
    SET_HASH_PARAMETERS = "set_hash_parameters"
    SET_VERIFYING_MATERIAL = "set_verifying_material"
    SET_MAINTAINER = "set_maintainer"
    SET_AMOUNT_LIMITS = "set_amount_limits"


Authorizer = Callable[[Action], bool]


def allow_all(action: Action) -> bool:
    return True


def deny_all(action: Action) -> bool:
    return False


def allow_actions(actions: Iterable[Action]) -> Authorizer:
    """Predicate granting exactly the listed actions."""
    granted = frozenset(actions)

    def _authorize(action: Action) -> bool:
        return action in granted

    return _authorize


def maintainer_only(store: ParameterStore, caller: bytes) -> Authorizer:
    """
    Predicate granting every action to the store's current maintainer.

    The maintainer is read when the predicate is evaluated, so a predicate
    built before ``set_maintainer`` stops working for the old maintainer.
    """

    def _authorize(action: Action) -> bool:
        return store.maintainer is not None and caller == store.maintainer

    return _authorize


def require(authorize: Authorizer, action: Action) -> None:
    """
    Raise UnauthorizedException unless ``authorize(action)`` is true.
    """
    if not authorize(action):
        logger.warning(f"Rejected unauthorized {action.value}")
        raise UnauthorizedException(action.value)


__all__ = [
    "Action",
    "Authorizer",
    "allow_all",
    "deny_all",
    "allow_actions",
    "maintainer_only",
    "require",
]

"""
A4E Resource Handle Registry

Single source of truth for the foundational resources every other unit
consumes: the VPC, the storage bucket, the GraphQL API, the Cognito user pool
and the execution roles of the application functions. A handle is published
once, by the Ready unit that owns it, and is read-only afterwards.
"""

import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

from aws_cdk import Stack

from .errors import HandleConflictError, HandleNotReadyError
from .units import UnitState

import config
sys.path.append(config.BASE_DIR + '/utils')
import utils

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceHandle:
    name: str
    kind: str
    construct: Any
    owner: str
    region: Optional[str] = None
    account: Optional[str] = None
    logical_id: Optional[str] = None

    @classmethod
    def of(cls, name, construct, owner, kind=None):
        region = account = None
        stack = _owning_stack(construct)
        if stack is not None:
            region, account = stack.region, stack.account
        node = getattr(construct, 'node', None)
        return cls(
            name=name,
            kind=kind or type(construct).__name__,
            construct=construct,
            owner=owner,
            region=region,
            account=account,
            logical_id=node.id if node is not None else None,
        )


def _owning_stack(construct):
    if getattr(construct, 'node', None) is None:
        return None
    return Stack.of(construct)


class ResourceRegistry:

    def __init__(self):
        self._handles: Dict[str, ResourceHandle] = {}

    def publish(self, name, construct, owner, kind=None):
        if owner.state is not UnitState.READY:
            raise HandleNotReadyError(
                f"unit '{owner.name}' is {owner.state.value}; handles are published from Ready units only"
            )
        if name in self._handles:
            existing = self._handles[name]
            raise HandleConflictError(f"handle '{name}' was already published by unit '{existing.owner}'")

        handle = ResourceHandle.of(name, construct, owner.name, kind)
        self._handles[name] = handle
        logger.info(f"published handle {name} ({handle.kind}) from {owner.name}")
        return handle

    def handle(self, name) -> ResourceHandle:
        try:
            return self._handles[name]
        except KeyError:
            raise HandleNotReadyError(f"handle '{name}' has not been published yet") from None

    def get(self, name):
        return self.handle(name).construct

    def __contains__(self, name):
        return name in self._handles

    @property
    def network(self):
        return self.get(config.HANDLE_NETWORK)

    @property
    def storage_bucket(self):
        return self.get(config.HANDLE_STORAGE_BUCKET)

    @property
    def data_api(self):
        return self.get(config.HANDLE_DATA_API)

    @property
    def user_directory(self):
        return self.get(config.HANDLE_USER_DIRECTORY)

    def function_role(self, function_name):
        return self.get(utils.functionRoleHandle(function_name))

    def function(self, function_name):
        return self.get(utils.functionHandle(function_name))

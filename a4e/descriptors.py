"""
A4E Agent Descriptors

What an agent builder hands back: the agent id and its stable alias id, plus
a kind-specific extension. The composition engine only reads the common fields;
extensions are forwarded to whoever needs them (the configurator reads the
production extension).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class AgentKind(Enum):
    MAINTENANCE = 'maintenance'
    REGULATORY = 'regulatory'
    PETROPHYSICS = 'petrophysics'
    PRODUCTION = 'production'


@dataclass(frozen=True)
class MaintenanceExtension:
    default_database_name: str


@dataclass(frozen=True)
class RegulatoryExtension:
    metric: Any


@dataclass(frozen=True)
class ProductionExtension:
    default_database_name: str
    database: Any
    athena_workgroup: Any


AgentExtension = Union[MaintenanceExtension, RegulatoryExtension, ProductionExtension]

_EXTENSION_TYPES = {
    AgentKind.MAINTENANCE: MaintenanceExtension,
    AgentKind.REGULATORY: RegulatoryExtension,
    AgentKind.PETROPHYSICS: None,
    AgentKind.PRODUCTION: ProductionExtension,
}


@dataclass(frozen=True)
class AgentDescriptor:
    kind: AgentKind
    agent_id: str
    agent_alias_id: str
    extension: Optional[AgentExtension] = None

    def __post_init__(self):
        if not self.agent_id or not self.agent_alias_id:
            raise ValueError(f"{self.kind.value} descriptor needs both agent_id and agent_alias_id")
        expected = _EXTENSION_TYPES[self.kind]
        if expected is None and self.extension is not None:
            raise ValueError(f"{self.kind.value} agents carry no extension")
        if expected is not None and not isinstance(self.extension, expected):
            raise ValueError(f"{self.kind.value} agents carry a {expected.__name__}")

    @property
    def output_prefix(self):
        return self.kind.value

    def outputs(self):
        return {
            f"{self.output_prefix}AgentId": self.agent_id,
            f"{self.output_prefix}AgentAliasId": self.agent_alias_id,
        }

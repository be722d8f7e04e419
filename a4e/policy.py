"""
A4E Policy Synthesizer

Builds least-privilege IAM statements and attaches them to a principal (an
execution role, or the service role behind an AppSync data source).

Rules enforced on every grant:
- actions and resource patterns must both be non-empty
- a grant is attached once per (principal, resource set, action set)
- a broad pattern (bare "*" resource, a whole resource type such as
  foundation-model/*, or a wildcard region) needs a documented reason; it is
  only used where the upstream service has no narrower resource to address
- a principal restricted to a responsibility ceiling never receives actions
  outside it
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

import aws_cdk.aws_iam as iam

from .errors import InvalidGrantError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyGrant:
    principal_key: str
    resources: FrozenSet[str]
    actions: FrozenSet[str]
    statement: Any = field(compare=False, hash=False, repr=False)
    wildcard_reason: Optional[str] = field(default=None, compare=False)


def is_broad_pattern(pattern):
    """True when a pattern matches every resource of its service, type or region.

    arn:partition:service:region:account:resource
    - the pattern "*", or a bare "*" resource part
    - a "type/*" resource part with nothing narrower, e.g. foundation-model/*
    - a wildcard in the region, e.g. us-* or *
    S3 resource parts are bucket/key, so bucket/* stays scoped to one bucket.
    """
    if pattern == '*':
        return True
    parts = pattern.split(':', 5)
    if len(parts) != 6:
        return False
    service, region, resource = parts[2], parts[3], parts[5]
    if resource == '*' or '*' in region:
        return True
    if service == 's3':
        return False
    segments = resource.split('/')
    return len(segments) == 2 and segments[1] == '*'


def principal_key(principal):
    node = getattr(principal, 'node', None)
    if node is not None:
        return node.path
    return f"{type(principal).__name__}@{id(principal)}"


def _resolve_principal(principal):
    # accept IGrantable (functions, data sources) as well as IPrincipal
    return getattr(principal, 'grant_principal', None) or principal


class PolicySynthesizer:

    def __init__(self):
        self._grants: Dict[Tuple[str, FrozenSet[str], FrozenSet[str]], PolicyGrant] = {}
        self._ceilings: Dict[str, FrozenSet[str]] = {}

    def restrict(self, principal, actions):
        """Declare the only actions a principal may ever be granted."""
        principal = _resolve_principal(principal)
        ceiling = frozenset(actions or [])
        if not ceiling:
            raise InvalidGrantError("a responsibility ceiling needs at least one action")

        key = principal_key(principal)
        for grant in self.grants_for(principal):
            extra = grant.actions - ceiling
            if extra:
                raise InvalidGrantError(
                    f"{key} already holds {sorted(extra)}, outside the ceiling {sorted(ceiling)}"
                )
        self._ceilings[key] = ceiling

    def grant(self, principal, resources, actions, wildcard_reason=None):
        resources = list(resources or [])
        actions = list(actions or [])
        if not actions:
            raise InvalidGrantError("a grant needs at least one action")
        if not resources:
            raise InvalidGrantError("a grant needs at least one resource pattern")

        principal = _resolve_principal(principal)
        key = principal_key(principal)

        broad = [pattern for pattern in resources if is_broad_pattern(pattern)]
        if broad and not wildcard_reason:
            raise InvalidGrantError(f"{key}: {broad} match every resource; pass wildcard_reason to allow it")

        ceiling = self._ceilings.get(key)
        if ceiling is not None:
            extra = set(actions) - ceiling
            if extra:
                raise InvalidGrantError(f"{key} may not be granted {sorted(extra)}")

        grant_key = (key, frozenset(resources), frozenset(actions))
        existing = self._grants.get(grant_key)
        if existing is not None:
            return existing

        statement = iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=actions,
            resources=resources,
        )
        principal.add_to_principal_policy(statement)

        grant = PolicyGrant(
            principal_key=key,
            resources=grant_key[1],
            actions=grant_key[2],
            statement=statement,
            wildcard_reason=wildcard_reason,
        )
        self._grants[grant_key] = grant
        if wildcard_reason:
            logger.info(f"wildcard grant to {key}: {wildcard_reason}")
        return grant

    def grants_for(self, principal):
        key = principal_key(_resolve_principal(principal))
        return [grant for grant in self._grants.values() if grant.principal_key == key]

    def statements_for(self, principal):
        return [grant.statement for grant in self.grants_for(principal)]

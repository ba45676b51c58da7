"""Routing engine — decides which outputs receive a changed object.

Every output rule is evaluated independently against the event's object
key.  The result maps destination provider names to destination paths; when
several matching rules name the same provider, the rule declared last wins.
"""

from __future__ import annotations

from collections.abc import Iterable

from multiout.models.config import OutputRule
from multiout.models.events import Event
from multiout.models.routing import RoutingDecision


def rule_matches(rule: OutputRule, object_key: str) -> bool:
    """Return whether *object_key* passes the rule's prefix and suffix filters."""
    if rule.prefix and not any(object_key.startswith(p) for p in rule.prefix):
        return False
    if rule.suffix and not any(object_key.endswith(s) for s in rule.suffix):
        return False
    return True


def compute_destinations(
    event: Event, rules: Iterable[OutputRule]
) -> RoutingDecision:
    """Compute the destination mapping for *event*.

    An empty mapping means nothing matched; that is not an error.
    """
    destinations: RoutingDecision = {}
    for rule in rules:
        if rule_matches(rule, event.object_key):
            destinations[rule.storage_name] = rule.path
    return destinations

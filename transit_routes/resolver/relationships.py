#!/usr/bin/env python3
"""
Relationship Resolver

Builds the bidirectional propagation graph from declared route intents.

Implements:
- Return paths for every dynamic and default relationship
- Inspection fan-out (the inspector learns both endpoints)
- De-duplication
- Inspection precedence
- Self-reference removal
- Default route suppression by inspected dynamic routes
"""

import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..diagnostic_logger import DiagnosticLogger
from ..errors import (
    AmbiguousInspectionError,
    InspectorNotCapableError,
    UnsupportedInspectionError,
)
from ..models import Entity, EntitySet, EntityStyle, Relationship, StaticRoute

logger = logging.getLogger(__name__)


class RelationshipResolver:
    """
    Resolves the propagation graph of an EntitySet in place.

    Non-inspect: Source <-> Propagation <-> Dest.
    Inspect:     Source <-> Inspect <-> Dest, with the inspector propagating
                 to both ends.
    """

    def __init__(self, entities: EntitySet, diagnostics: Optional[DiagnosticLogger] = None):
        self.entities = entities
        self.diagnostics = diagnostics or DiagnosticLogger()

    def configure_relationships(self):
        """Pass 1 (dynamic routes), Pass 2 (default routes), then normalize."""
        self._run_pass("dynamic", lambda entity: entity.propagations)
        self._run_pass(
            "default",
            lambda entity: [entity.default_route] if entity.default_route else [],
        )
        self.normalize()

    def _run_pass(self, name: str, relationships_of: Callable[[Entity], List[Relationship]]):
        # Reads come from the lists as they were at pass start, writes land in
        # `pending` and are swapped in once every entity has been visited.
        pending: Dict[str, List[Relationship]] = {
            entity.name: list(entity.propagations) for entity in self.entities
        }
        mirrored = 0
        for entity in self.entities:
            for relationship in list(relationships_of(entity)):
                self.mirror(entity, relationship, pending)
                mirrored += 1

        for entity in self.entities:
            entity.propagations = pending[entity.name]
        logger.debug(f"{name} pass mirrored {mirrored} relationships")

    def mirror(
        self,
        entity: Entity,
        relationship: Relationship,
        pending: Dict[str, List[Relationship]],
    ):
        """Give `relationship`'s target (and inspector) a path back to `entity`."""
        target = self.entities.get(relationship.target, referenced_by=entity.name)
        pending[target.name].append(Relationship(entity.name, relationship.inspector))

        if relationship.inspector:
            inspector = self.resolve_inspector(entity, relationship)
            pending[inspector.name].append(Relationship(entity.name))
            pending[inspector.name].append(Relationship(target.name))
            # Keep the inspector edges symmetric as well
            pending[entity.name].append(Relationship(inspector.name))
            pending[target.name].append(Relationship(inspector.name))

    def resolve_inspector(self, entity: Entity, relationship: Relationship) -> Entity:
        """Look up and vet the inspector named by `relationship`."""
        inspector = self.entities.get(relationship.inspector, referenced_by=entity.name)
        if inspector.style == EntityStyle.VPN:
            raise UnsupportedInspectionError(
                f"{entity.name} routes to {relationship.target} via {inspector.name}: "
                "inspection by VPN is not supported",
                entity=entity.name,
                target=relationship.target,
                inspector=inspector.name,
            )
        if not inspector.inspects:
            raise InspectorNotCapableError(entity.name, relationship.target, inspector.name)
        return inspector

    def normalize(self, resolve_defaults: bool = True):
        """
        De-duplicate and resolve precedence for every entity.

        Safe to run any number of times; runs again after every stage that
        injects edges. Once default routes have been emitted they are final,
        so later runs pass `resolve_defaults=False`.
        """
        for entity in self.entities:
            entity.propagations = self._dedupe_relationships(entity.propagations)
            entity.blackhole_cidrs = list(OrderedDict.fromkeys(entity.blackhole_cidrs))
            entity.static_routes = self._resolve_static_routes(entity)
            entity.propagations = self._remove_routes_self(entity)
            entity.propagations = self._prefer_inspected(entity)
            if resolve_defaults:
                self._resolve_default_route(entity)

    def _dedupe_relationships(self, relationships: List[Relationship]) -> List[Relationship]:
        unique: Dict[tuple, Relationship] = OrderedDict()
        for relationship in relationships:
            unique.setdefault(relationship.key, relationship)
        return list(unique.values())

    def _remove_routes_self(self, entity: Entity) -> List[Relationship]:
        kept = []
        for relationship in entity.propagations:
            if relationship.target == entity.name:
                self.diagnostics.log_event(
                    "self_reference_removed",
                    {"entity": entity.name, "inspector": relationship.inspector},
                )
                continue
            kept.append(relationship)
        return kept

    def _prefer_inspected(self, entity: Entity) -> List[Relationship]:
        """Where one target is reached both inspected and not, keep the inspected entry."""
        inspectors: Dict[str, set] = OrderedDict()
        for relationship in entity.propagations:
            if relationship.inspector:
                inspectors.setdefault(relationship.target, set()).add(relationship.inspector)

        for target, names in inspectors.items():
            if len(names) > 1:
                raise AmbiguousInspectionError(entity.name, target, names)

        kept = []
        for relationship in entity.propagations:
            if relationship.inspector or relationship.target not in inspectors:
                kept.append(relationship)
            else:
                self.diagnostics.log_event(
                    "uninspected_propagation_dropped",
                    {"entity": entity.name, "target": relationship.target},
                )
        return kept

    def _resolve_static_routes(self, entity: Entity) -> List[StaticRoute]:
        routes: Dict[tuple, List[StaticRoute]] = OrderedDict()
        for static_route in OrderedDict.fromkeys(entity.static_routes):
            if static_route.target == entity.name:
                self.diagnostics.log_event(
                    "self_static_route_removed",
                    {"entity": entity.name, "cidr": static_route.cidr},
                )
                continue
            routes.setdefault((static_route.cidr, static_route.target), []).append(static_route)

        kept = []
        for (cidr, target), candidates in routes.items():
            inspectors = {r.inspector for r in candidates if r.inspector}
            if len(inspectors) > 1:
                raise AmbiguousInspectionError(entity.name, target, inspectors)
            if inspectors:
                kept.extend(r for r in candidates if r.inspector)
            else:
                kept.extend(candidates)
        return kept

    def _resolve_default_route(self, entity: Entity):
        default_route = entity.default_route
        if default_route is None:
            return

        if default_route.target == entity.name:
            self.diagnostics.log_event("self_default_route_removed", {"entity": entity.name})
            entity.default_route = None
            return

        # An inspected dynamic route to the same target wins over the catch-all
        inspectors = {
            r.inspector
            for r in entity.propagations
            if r.target == default_route.target and r.inspector
        }
        if not inspectors:
            return
        if default_route.inspector and default_route.inspector not in inspectors:
            raise AmbiguousInspectionError(
                entity.name, default_route.target, inspectors | {default_route.inspector}
            )
        self.diagnostics.log_event(
            "default_route_suppressed",
            {
                "entity": entity.name,
                "target": default_route.target,
                "inspector": sorted(inspectors)[0],
            },
        )
        entity.default_route = None

#!/usr/bin/env python3
"""
Hub Route Planner

Walks the resolved entity set and emits the hub-level routing actions.

Phase A handles static, default and blackhole routes. Inspected static and
default routes inject propagations into the target and inspector, so the
resolver normalizes again before Phase B turns the surviving propagations
into associations (uninspected) or inspection routes (inspected).

Non-inspect: Forward: Source -> Dest CIDR -> Dest.
             Return:  Dest -> Propagation -> Source
Inspect:     Forward: Source -> Dest CIDR -> Inspect.  Inspect -> Propagation -> Dest.
             Return:  Dest -> Source CIDR -> Inspect.  Inspect -> Propagation -> Source.
"""

import logging
from typing import List, Union

from ..errors import UnsupportedInspectionError
from ..models import DEFAULT_ROUTE_CIDR, Entity, EntitySet, Relationship
from ..resolver.relationships import RelationshipResolver
from .actions import HubAssociation, HubRoute, HubRouteStyle, route_id

logger = logging.getLogger(__name__)

HubAction = Union[HubRoute, HubAssociation]


class HubRoutePlanner:
    def __init__(self, entities: EntitySet, resolver: RelationshipResolver):
        self.entities = entities
        self.resolver = resolver

    def plan(self) -> List[HubAction]:
        """Phase A, re-normalize, Phase B."""
        actions = self.plan_static_and_default()
        # Default routes are already emitted, only absorb the injected edges
        self.resolver.normalize(resolve_defaults=False)
        actions.extend(self.plan_propagations())
        return actions

    def plan_static_and_default(self) -> List[HubRoute]:
        actions: List[HubRoute] = []
        for entity in self.entities:
            for static_route in entity.static_routes:
                actions.append(
                    self._static_or_default_route(
                        entity,
                        static_route.relationship,
                        static_route.cidr,
                        HubRouteStyle.STATIC,
                    )
                )
            if entity.default_route:
                actions.append(
                    self._static_or_default_route(
                        entity,
                        entity.default_route,
                        DEFAULT_ROUTE_CIDR,
                        HubRouteStyle.DEFAULT,
                    )
                )
            for cidr in entity.blackhole_cidrs:
                # No attachment on a blackhole, so nothing else can change
                actions.append(
                    HubRoute(
                        action_id=route_id("BlackHole", f"{entity.name}-{cidr}"),
                        entity=entity.name,
                        route_table=entity.route_table,
                        destination_cidr=cidr,
                        style=HubRouteStyle.BLACKHOLE,
                    )
                )
        logger.debug(f"Phase A emitted {len(actions)} static, default and blackhole routes")
        return actions

    def _static_or_default_route(
        self,
        entity: Entity,
        relationship: Relationship,
        cidr: str,
        style: HubRouteStyle,
    ) -> HubRoute:
        target = self.entities.get(relationship.target, referenced_by=entity.name)
        attachment = target.attachment

        if relationship.inspector:
            # Our route points at the inspector, not the actual destination
            inspector = self.resolver.resolve_inspector(entity, relationship)
            attachment = inspector.attachment
            # Inspect -> Propagation -> Dest
            inspector.add_propagation(target.name)
            # Dest -> Source CIDR -> Inspect, realized as an inspection route in Phase B
            target.add_propagation(entity.name, inspector.name)
            # Inspect -> Propagation -> Source
            inspector.add_propagation(entity.name)
        else:
            # Dest -> Propagation -> Source
            target.add_propagation(entity.name)

        if style == HubRouteStyle.DEFAULT:
            # A route table holds a single default route
            action_id = route_id("DefaultRoute", entity.route_table)
        else:
            action_id = route_id("StaticRoute", f"{entity.name}-{cidr}-{target.name}")

        return HubRoute(
            action_id=action_id,
            entity=entity.name,
            route_table=entity.route_table,
            destination_cidr=cidr,
            style=style,
            attachment=attachment,
            target=target.name,
        )

    def plan_propagations(self) -> List[HubAction]:
        actions: List[HubAction] = []
        for entity in self.entities:
            for relationship in entity.propagations:
                target = self.entities.get(relationship.target, referenced_by=entity.name)
                if relationship.inspector:
                    actions.append(self._inspection_route(entity, target, relationship))
                else:
                    actions.append(
                        HubAssociation(
                            action_id=f"Propagation-{entity.name}-to-{target.name}",
                            entity=entity.name,
                            route_table=entity.route_table,
                            target=target.name,
                            attachment=target.attachment,
                        )
                    )
        return actions

    def _inspection_route(
        self, entity: Entity, target: Entity, relationship: Relationship
    ) -> HubRoute:
        inspector = self.resolver.resolve_inspector(entity, relationship)
        # The destination CIDR must be known, which only holds for VPCs
        if not target.is_vpc or not target.cidr:
            raise UnsupportedInspectionError(
                f"{entity.name} routes to {target.name} via {inspector.name}: inspection "
                f"is not available for {target.style.value} destined traffic",
                entity=entity.name,
                target=target.name,
                inspector=inspector.name,
            )
        return HubRoute(
            action_id=f"InspectionRoute-{entity.name}-to-{target.name}",
            entity=entity.name,
            route_table=entity.route_table,
            destination_cidr=target.cidr,
            style=HubRouteStyle.INSPECTION,
            attachment=inspector.attachment,
            target=target.name,
        )

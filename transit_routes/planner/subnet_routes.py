#!/usr/bin/env python3
"""
Subnet Route Planner

Decides which local subnet route tables point at the hub, per entity style:

- natEgress: public subnets route each peer CIDR back to the hub. The default
  route to the NAT/internet gateway stays untouched.
- serviceEndpoint, dnsResolver: private subnets default to the hub.
- firewall: inspection subnets (not the hub-facing ones) default to the hub.
- workloadIsolated: every subnet defaults to the hub.
- workloadPublic: public subnets route specific CIDRs to the hub so the
  internet gateway default survives; private subnets default to the hub.
- vpn, directConnectGateway, tgwPeer: no subnets, nothing to do.
"""

import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional

from ..diagnostic_logger import DiagnosticLogger
from ..models import (
    DEFAULT_ROUTE_CIDR,
    Entity,
    EntitySet,
    EntityStyle,
    Relationship,
    Subnet,
    SubnetRole,
)
from .actions import SubnetRoute, route_id

logger = logging.getLogger(__name__)

PRIVATE_ROLES = (SubnetRole.PRIVATE, SubnetRole.PRIVATE_ISOLATED)


class SubnetRoutePlanner:
    def __init__(self, entities: EntitySet, diagnostics: Optional[DiagnosticLogger] = None):
        self.entities = entities
        self.diagnostics = diagnostics or DiagnosticLogger()
        self.policies: Dict[EntityStyle, Callable[[Entity], List[SubnetRoute]]] = {
            EntityStyle.NAT_EGRESS: self.nat_egress_routes,
            EntityStyle.SERVICE_ENDPOINT: self.endpoint_routes,
            EntityStyle.DNS_RESOLVER: self.endpoint_routes,
            EntityStyle.FIREWALL: self.firewall_routes,
            EntityStyle.WORKLOAD_ISOLATED: self.workload_isolated_routes,
            EntityStyle.WORKLOAD_PUBLIC: self.workload_public_routes,
            EntityStyle.VPN: self.no_routes,
            EntityStyle.DIRECT_CONNECT_GATEWAY: self.no_routes,
            EntityStyle.TGW_PEER: self.no_routes,
        }

    def plan(self) -> List[SubnetRoute]:
        # Two subnets sharing a route table resolve to the same action id
        actions: Dict[str, SubnetRoute] = OrderedDict()
        for entity in self.entities:
            for action in self.policies[entity.style](entity):
                actions.setdefault(action.action_id, action)
        logger.debug(f"Planned {len(actions)} subnet routes")
        return list(actions.values())

    def no_routes(self, entity: Entity) -> List[SubnetRoute]:
        return []

    def nat_egress_routes(self, entity: Entity) -> List[SubnetRoute]:
        routes = []
        for subnet in self._subnets(entity, SubnetRole.PUBLIC):
            routes.extend(self.routes_between_attachments(entity, subnet))
        return routes

    def endpoint_routes(self, entity: Entity) -> List[SubnetRoute]:
        return [
            self.default_to_hub(entity, subnet)
            for subnet in self._subnets(entity, *PRIVATE_ROLES)
        ]

    def firewall_routes(self, entity: Entity) -> List[SubnetRoute]:
        return [
            self.default_to_hub(entity, subnet)
            for subnet in self._subnets(entity, SubnetRole.INSPECTION)
        ]

    def workload_isolated_routes(self, entity: Entity) -> List[SubnetRoute]:
        subnets = [s for s in self._subnets(entity) if s.role != SubnetRole.TRANSIT]
        return [self.default_to_hub(entity, subnet) for subnet in subnets]

    def workload_public_routes(self, entity: Entity) -> List[SubnetRoute]:
        routes = []
        for subnet in self._subnets(entity, SubnetRole.PUBLIC):
            routes.extend(self.routes_between_attachments(entity, subnet))
            routes.extend(self.routes_to_static(entity, subnet))
        for subnet in self._subnets(entity, *PRIVATE_ROLES):
            routes.append(self.default_to_hub(entity, subnet))
        return routes

    def default_to_hub(self, entity: Entity, subnet: Subnet) -> SubnetRoute:
        # One default entry per route table
        return self._subnet_route(
            route_id("ToHubDefault", subnet.route_table),
            entity,
            subnet,
            DEFAULT_ROUTE_CIDR,
        )

    def routes_to_static(self, entity: Entity, subnet: Subnet) -> List[SubnetRoute]:
        return [
            self._subnet_route(
                route_id("ToHubCidr", f"{entity.name}{subnet.route_table}{static_route.cidr}"),
                entity,
                subnet,
                static_route.cidr,
            )
            for static_route in entity.static_routes
        ]

    def routes_between_attachments(self, entity: Entity, subnet: Subnet) -> List[SubnetRoute]:
        routes = []
        for relationship in entity.propagations:
            if self._covered_by_default(entity.default_route, relationship):
                self.diagnostics.log_event(
                    "subnet_route_covered_by_default",
                    {"entity": entity.name, "subnet": subnet.name, "target": relationship.target},
                )
                continue
            target = self.entities.get(relationship.target, referenced_by=entity.name)
            # Only VPCs have an address block we can route to
            if not target.cidr:
                continue
            routes.append(
                self._subnet_route(
                    route_id("ToHubCidr", f"{entity.name}{subnet.route_table}{target.cidr}"),
                    entity,
                    subnet,
                    target.cidr,
                )
            )
        return routes

    def _covered_by_default(
        self, default_route: Optional[Relationship], relationship: Relationship
    ) -> bool:
        if default_route is None:
            return False
        if default_route.target == relationship.target:
            return True
        return default_route.inspector is not None and default_route.inspector == relationship.target

    def _subnets(self, entity: Entity, *roles: SubnetRole) -> List[Subnet]:
        subnets = entity.subnets_by_role(*roles) if roles else list(entity.subnets)
        return list(OrderedDict.fromkeys(subnets))

    def _subnet_route(
        self, action_id: str, entity: Entity, subnet: Subnet, destination_cidr: str
    ) -> SubnetRoute:
        return SubnetRoute(
            action_id=action_id,
            entity=entity.name,
            subnet=subnet.name,
            availability_zone=subnet.availability_zone,
            route_table=subnet.route_table,
            destination_cidr=destination_cidr,
            hub=self.entities.hub,
        )

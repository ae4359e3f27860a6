# File: transit_routes/topology.py
"""
Topology documents.

Maps an already validated topology document onto an EntitySet. The document
carries the handles the provisioning layer created, plus the route intents
in the same shape as the network configuration:

    hub: tgw-0a1b2c
    entities:
      workload-a:
        style: workloadIsolated
        cidr: 10.1.0.0/16
        attachment: tgw-attach-a
        routeTable: tgw-rtb-a
        subnets:
          - name: app
            role: private
            cidr: 10.1.0.0/24
            routeTable: rtb-a1
            availabilityZone: us-east-1a
    routes:
      dynamicRoutes:   [{vpcName: workload-a, routesTo: workload-b, inspectedBy: fw}]
      defaultRoutes:   [{vpcName: workload-a, routesTo: egress}]
      staticRoutes:    [{vpcName: workload-a, staticCidr: 10.9.0.0/16, routesTo: vpn-1}]
      blackholeRoutes: [{vpcName: workload-a, blackholeCidrs: [10.66.0.0/16]}]
"""

from typing import Any, Dict

import yaml

from .errors import InvalidEntityError
from .models import (
    Entity,
    EntitySet,
    EntityStyle,
    Relationship,
    StaticRoute,
    Subnet,
    SubnetRole,
)


def _required(stanza: Dict[str, Any], key: str, where: str) -> Any:
    value = stanza.get(key)
    if value is None or value == "":
        raise InvalidEntityError(f"{where} is missing '{key}'", entity=where)
    return value


def _enum(enum_type, value: str, where: str):
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidEntityError(
            f"{where} has unknown {enum_type.__name__} '{value}' (expected one of {allowed})",
            entity=where,
        ) from None


def _subnet(stanza: Dict[str, Any], entity_name: str) -> Subnet:
    where = f"{entity_name} subnet {stanza.get('name', '?')}"
    return Subnet(
        name=_required(stanza, "name", where),
        role=_enum(SubnetRole, _required(stanza, "role", where), where),
        cidr=_required(stanza, "cidr", where),
        route_table=_required(stanza, "routeTable", where),
        availability_zone=stanza.get("availabilityZone", ""),
    )


def _entity(name: str, stanza: Dict[str, Any]) -> Entity:
    style = _enum(EntityStyle, _required(stanza, "style", name), name)
    inspects = stanza.get("inspects")
    if inspects is None:
        inspects = style == EntityStyle.FIREWALL
    return Entity(
        name=name,
        style=style,
        attachment=_required(stanza, "attachment", name),
        route_table=_required(stanza, "routeTable", name),
        cidr=stanza.get("cidr"),
        inspects=inspects,
        subnets=[_subnet(subnet, name) for subnet in stanza.get("subnets") or []],
    )


def _routing_pair(entity_set: EntitySet, route: Dict[str, Any], where: str):
    source = entity_set.get(_required(route, "vpcName", where))
    target = _required(route, "routesTo", where)
    entity_set.get(target, referenced_by=source.name)
    inspector = route.get("inspectedBy")
    if inspector:
        entity_set.get(inspector, referenced_by=source.name)
    return source, target, inspector


def load_topology(document: Dict[str, Any]) -> EntitySet:
    """Build a fresh EntitySet from a topology document."""
    if not isinstance(document, dict):
        raise InvalidEntityError("Topology document must be a mapping")

    entity_set = EntitySet(hub=_required(document, "hub", "topology"))
    for name, stanza in (document.get("entities") or {}).items():
        entity_set.add(_entity(name, stanza or {}))

    routes = document.get("routes") or {}
    for route in routes.get("dynamicRoutes") or []:
        source, target, inspector = _routing_pair(entity_set, route, "dynamicRoutes entry")
        source.add_propagation(target, inspector)

    for route in routes.get("defaultRoutes") or []:
        source, target, inspector = _routing_pair(entity_set, route, "defaultRoutes entry")
        source.default_route = Relationship(target, inspector)

    for route in routes.get("staticRoutes") or []:
        source, target, inspector = _routing_pair(entity_set, route, "staticRoutes entry")
        source.static_routes.append(
            StaticRoute(_required(route, "staticCidr", "staticRoutes entry"), target, inspector)
        )

    for route in routes.get("blackholeRoutes") or []:
        source = entity_set.get(_required(route, "vpcName", "blackholeRoutes entry"))
        source.blackhole_cidrs.extend(route.get("blackholeCidrs") or [])

    return entity_set


def load_topology_file(path: str) -> EntitySet:
    with open(path) as f:
        return load_topology(yaml.safe_load(f))


def _relationship_stanza(relationship: Relationship) -> Dict[str, Any]:
    stanza = {"routesTo": relationship.target}
    if relationship.inspector:
        stanza["inspectedBy"] = relationship.inspector
    return stanza


def dump_topology(entity_set: EntitySet) -> str:
    """YAML export of the resolved routing state, for diagnostics."""
    resolved = {"hub": entity_set.hub, "entities": {}}
    for entity in entity_set:
        resolved["entities"][entity.name] = {
            "style": entity.style.value,
            "propagations": [_relationship_stanza(r) for r in entity.propagations],
            "defaultRoute": (
                _relationship_stanza(entity.default_route) if entity.default_route else None
            ),
        }
    return yaml.safe_dump(resolved, sort_keys=False)

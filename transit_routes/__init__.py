"""Route resolution and propagation planning for transit gateway hubs."""

from .engine import RoutePlanningEngine, RoutingPlan, plan_routes
from .errors import (
    AmbiguousInspectionError,
    InspectorNotCapableError,
    InvalidEntityError,
    RoutePlanningError,
    UnknownEntityError,
    UnsupportedInspectionError,
)
from .models import Entity, EntitySet, EntityStyle, Relationship, StaticRoute, Subnet, SubnetRole
from .topology import load_topology, load_topology_file

__all__ = [
    "AmbiguousInspectionError",
    "Entity",
    "EntitySet",
    "EntityStyle",
    "InspectorNotCapableError",
    "InvalidEntityError",
    "Relationship",
    "RoutePlanningEngine",
    "RoutePlanningError",
    "RoutingPlan",
    "StaticRoute",
    "Subnet",
    "SubnetRole",
    "UnknownEntityError",
    "UnsupportedInspectionError",
    "load_topology",
    "load_topology_file",
    "plan_routes",
]

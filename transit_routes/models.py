# File: transit_routes/models.py
"""
Entity model for hub routing.

Every attachable network, tunnel, circuit or peer is an Entity. Entities live
in an EntitySet arena and refer to each other by name only, so the
propagation graph never holds object cycles.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import InvalidEntityError, UnknownEntityError

DEFAULT_ROUTE_CIDR = "0.0.0.0/0"


class EntityStyle(Enum):
    WORKLOAD_ISOLATED = "workloadIsolated"
    WORKLOAD_PUBLIC = "workloadPublic"
    NAT_EGRESS = "natEgress"
    SERVICE_ENDPOINT = "serviceEndpoint"
    DNS_RESOLVER = "dnsResolver"
    FIREWALL = "firewall"
    VPN = "vpn"
    DIRECT_CONNECT_GATEWAY = "directConnectGateway"
    TGW_PEER = "tgwPeer"


# Attachments with no VPC behind them: no subnets, no known address block
NON_VPC_STYLES = (
    EntityStyle.VPN,
    EntityStyle.DIRECT_CONNECT_GATEWAY,
    EntityStyle.TGW_PEER,
)


class SubnetRole(Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PRIVATE_ISOLATED = "privateIsolated"
    TRANSIT = "transit"
    INSPECTION = "inspection"


@dataclass(frozen=True)
class Subnet:
    """One subnet of a named subnet group, with its local route table."""

    name: str
    role: SubnetRole
    cidr: str
    route_table: str
    availability_zone: str = ""


@dataclass(frozen=True)
class Relationship:
    """A propagation or default route toward `target`, optionally via `inspector`."""

    target: str
    inspector: Optional[str] = None

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        return (self.target, self.inspector)


@dataclass(frozen=True)
class StaticRoute:
    cidr: str
    target: str
    inspector: Optional[str] = None

    @property
    def relationship(self) -> Relationship:
        return Relationship(self.target, self.inspector)


@dataclass
class Entity:
    """
    Routing-relevant state of one hub attachment.

    `attachment` and `route_table` are opaque handles created by the
    provisioning layer (real identifiers or imported ones).
    """

    name: str
    style: EntityStyle
    attachment: str
    route_table: str
    cidr: Optional[str] = None
    inspects: bool = False
    subnets: List[Subnet] = field(default_factory=list)
    blackhole_cidrs: List[str] = field(default_factory=list)
    static_routes: List[StaticRoute] = field(default_factory=list)
    default_route: Optional[Relationship] = None
    propagations: List[Relationship] = field(default_factory=list)

    def __post_init__(self):
        if self.inspects and self.style != EntityStyle.FIREWALL:
            raise InvalidEntityError(
                f"{self.name} is {self.style.value} style and cannot inspect traffic",
                entity=self.name,
            )
        if self.style in NON_VPC_STYLES and self.subnets:
            raise InvalidEntityError(
                f"{self.name} is {self.style.value} style and cannot own subnets",
                entity=self.name,
            )

    @property
    def is_vpc(self) -> bool:
        return self.style not in NON_VPC_STYLES

    def subnets_by_role(self, *roles: SubnetRole) -> List[Subnet]:
        return [subnet for subnet in self.subnets if subnet.role in roles]

    def add_propagation(self, target: str, inspector: Optional[str] = None):
        self.propagations.append(Relationship(target, inspector))


class EntitySet:
    """Name-indexed arena of entities attached to one hub."""

    def __init__(self, hub: str, entities: Optional[List[Entity]] = None):
        self.hub = hub
        self._entities: Dict[str, Entity] = OrderedDict()
        for entity in entities or []:
            self.add(entity)

    def add(self, entity: Entity) -> Entity:
        if entity.name in self._entities:
            raise InvalidEntityError(
                f"Entity name '{entity.name}' is already in use", entity=entity.name
            )
        self._entities[entity.name] = entity
        return entity

    def get(self, name: str, referenced_by: Optional[str] = None) -> Entity:
        try:
            return self._entities[name]
        except KeyError:
            raise UnknownEntityError(name, referenced_by) from None

    def names(self) -> List[str]:
        return list(self._entities.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)

    def snapshot(self) -> Dict[str, Dict]:
        """Routing state per entity, for diagnostics and idempotence checks."""
        return {
            entity.name: {
                "propagations": [r.key for r in entity.propagations],
                "default_route": entity.default_route.key if entity.default_route else None,
                "static_routes": [(s.cidr, s.target, s.inspector) for s in entity.static_routes],
                "blackhole_cidrs": list(entity.blackhole_cidrs),
            }
            for entity in self._entities.values()
        }

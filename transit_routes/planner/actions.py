# File: transit_routes/planner/actions.py

import hashlib
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class HubRouteStyle(Enum):
    STATIC = "static"
    DEFAULT = "default"
    BLACKHOLE = "blackhole"
    INSPECTION = "inspection"


def route_id(prefix: str, seed: str) -> str:
    """Stable identifier so an unchanged configuration re-plans to the same ids."""
    return prefix + hashlib.md5(seed.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class HubRoute:
    """A route in an entity's hub route table. Blackholes carry no attachment."""

    action_id: str
    entity: str
    route_table: str
    destination_cidr: str
    style: HubRouteStyle
    attachment: Optional[str] = None
    target: Optional[str] = None

    @property
    def blackhole(self) -> bool:
        return self.style == HubRouteStyle.BLACKHOLE

    @property
    def action_type(self) -> str:
        return f"hub_route_{self.style.value}"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["style"] = self.style.value
        data["blackhole"] = self.blackhole
        data["type"] = "route"
        return data


@dataclass(frozen=True)
class HubAssociation:
    """Standing propagation of `attachment` into an entity's hub route table."""

    action_id: str
    entity: str
    route_table: str
    target: str
    attachment: str

    action_type = "hub_association"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = "association"
        return data


@dataclass(frozen=True)
class SubnetRoute:
    """A local subnet route table entry pointing at the hub."""

    action_id: str
    entity: str
    subnet: str
    availability_zone: str
    route_table: str
    destination_cidr: str
    hub: str

    action_type = "subnet_route"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = "subnet_route"
        return data

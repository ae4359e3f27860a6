import pytest

from transit_routes.models import Entity, EntitySet, EntityStyle, Subnet, SubnetRole

HUB = "tgw-0a1b2c3d"


def build_entity(name, style=EntityStyle.WORKLOAD_ISOLATED, **kwargs):
    kwargs.setdefault("attachment", f"tgw-attach-{name}")
    kwargs.setdefault("route_table", f"tgw-rtb-{name}")
    if style == EntityStyle.FIREWALL:
        kwargs.setdefault("inspects", True)
    return Entity(name=name, style=style, **kwargs)


@pytest.fixture
def entity():
    """Factory for entities with predictable attachment and route table handles."""
    return build_entity


@pytest.fixture
def subnet():
    def build(name, role, cidr, route_table=None, availability_zone="us-east-1a"):
        return Subnet(
            name=name,
            role=role,
            cidr=cidr,
            route_table=route_table or f"rtb-{name}",
            availability_zone=availability_zone,
        )

    return build


@pytest.fixture
def entity_set():
    def build(*entities):
        return EntitySet(HUB, list(entities))

    return build


@pytest.fixture
def topology_document():
    """Egress, inspection, two workloads and an on-premises VPN."""
    return {
        "hub": HUB,
        "entities": {
            "egress": {
                "style": "natEgress",
                "cidr": "10.0.0.0/16",
                "attachment": "tgw-attach-egress",
                "routeTable": "tgw-rtb-egress",
                "subnets": [
                    {
                        "name": "public",
                        "role": "public",
                        "cidr": "10.0.0.0/24",
                        "routeTable": "rtb-egress-public",
                        "availabilityZone": "us-east-1a",
                    },
                    {
                        "name": "transit",
                        "role": "transit",
                        "cidr": "10.0.1.0/28",
                        "routeTable": "rtb-egress-transit",
                        "availabilityZone": "us-east-1a",
                    },
                ],
            },
            "inspection": {
                "style": "firewall",
                "cidr": "10.100.0.0/16",
                "attachment": "tgw-attach-inspection",
                "routeTable": "tgw-rtb-inspection",
                "subnets": [
                    {
                        "name": "firewall",
                        "role": "inspection",
                        "cidr": "10.100.0.0/24",
                        "routeTable": "rtb-inspection-firewall",
                    },
                    {
                        "name": "transit",
                        "role": "transit",
                        "cidr": "10.100.1.0/28",
                        "routeTable": "rtb-inspection-transit",
                    },
                ],
            },
            "workload-a": {
                "style": "workloadIsolated",
                "cidr": "10.1.0.0/16",
                "attachment": "tgw-attach-a",
                "routeTable": "tgw-rtb-a",
                "subnets": [
                    {
                        "name": "app",
                        "role": "private",
                        "cidr": "10.1.0.0/24",
                        "routeTable": "rtb-a-app",
                    },
                ],
            },
            "workload-b": {
                "style": "workloadIsolated",
                "cidr": "10.2.0.0/16",
                "attachment": "tgw-attach-b",
                "routeTable": "tgw-rtb-b",
                "subnets": [
                    {
                        "name": "app",
                        "role": "private",
                        "cidr": "10.2.0.0/24",
                        "routeTable": "rtb-b-app",
                    },
                ],
            },
            "on-prem": {
                "style": "vpn",
                "attachment": "tgw-attach-vpn",
                "routeTable": "tgw-rtb-vpn",
            },
        },
        "routes": {
            "dynamicRoutes": [
                {"vpcName": "workload-a", "routesTo": "workload-b", "inspectedBy": "inspection"},
            ],
            "defaultRoutes": [
                {"vpcName": "workload-a", "routesTo": "egress"},
                {"vpcName": "workload-b", "routesTo": "egress"},
            ],
            "staticRoutes": [
                {"vpcName": "workload-b", "staticCidr": "192.168.0.0/16", "routesTo": "on-prem"},
            ],
            "blackholeRoutes": [
                {"vpcName": "workload-a", "blackholeCidrs": ["10.66.0.0/16"]},
            ],
        },
    }

import hashlib

from transit_routes.diagnostic_logger import DiagnosticLogger
from transit_routes.models import EntityStyle, Relationship, StaticRoute, SubnetRole
from transit_routes.planner import HubRoutePlanner, SubnetRoutePlanner
from transit_routes.resolver import RelationshipResolver

HUB = "tgw-0a1b2c3d"


def plan_subnets(entities, diagnostics=None):
    resolver = RelationshipResolver(entities, diagnostics)
    resolver.configure_relationships()
    HubRoutePlanner(entities, resolver).plan()
    return SubnetRoutePlanner(entities, diagnostics).plan()


def table_routes(actions):
    return sorted((a.route_table, a.destination_cidr) for a in actions)


def test_workload_isolated_defaults_every_subnet_but_transit(entity, entity_set, subnet):
    a = entity(
        "a",
        cidr="10.1.0.0/16",
        subnets=[
            subnet("a-public", SubnetRole.PUBLIC, "10.1.0.0/24"),
            subnet("a-private", SubnetRole.PRIVATE, "10.1.1.0/24"),
            subnet("a-transit", SubnetRole.TRANSIT, "10.1.2.0/28"),
        ],
    )
    actions = plan_subnets(entity_set(a))

    assert table_routes(actions) == [
        ("rtb-a-private", "0.0.0.0/0"),
        ("rtb-a-public", "0.0.0.0/0"),
    ]
    assert all(action.hub == HUB for action in actions)
    assert actions[0].action_id == "ToHubDefault" + hashlib.md5(b"rtb-a-public").hexdigest()


def test_subnets_sharing_a_route_table_get_one_route(entity, entity_set, subnet):
    a = entity(
        "a",
        cidr="10.1.0.0/16",
        subnets=[
            subnet("app-1a", SubnetRole.PRIVATE, "10.1.0.0/24", "rtb-a-app", "us-east-1a"),
            subnet("app-1b", SubnetRole.PRIVATE, "10.1.1.0/24", "rtb-a-app", "us-east-1b"),
        ],
    )
    actions = plan_subnets(entity_set(a))

    assert len(actions) == 1
    assert actions[0].subnet == "app-1a"
    assert actions[0].availability_zone == "us-east-1a"


def test_nat_egress_routes_peer_cidrs_from_public_subnets(entity, entity_set, subnet):
    egress = entity(
        "egress",
        EntityStyle.NAT_EGRESS,
        cidr="10.0.0.0/16",
        subnets=[
            subnet("egress-public", SubnetRole.PUBLIC, "10.0.0.0/24"),
            subnet("egress-transit", SubnetRole.TRANSIT, "10.0.1.0/28"),
        ],
    )
    a = entity("a", cidr="10.1.0.0/16", default_route=Relationship("egress"))
    b = entity("b", cidr="10.2.0.0/16", default_route=Relationship("egress"))
    vpn = entity("vpn", EntityStyle.VPN, propagations=[Relationship("egress")])
    actions = plan_subnets(entity_set(egress, a, b, vpn))

    # No default route change, and the VPN has no address block to route to
    assert table_routes(actions) == [
        ("rtb-egress-public", "10.1.0.0/16"),
        ("rtb-egress-public", "10.2.0.0/16"),
    ]


def test_endpoints_default_private_subnets(entity, entity_set, subnet):
    for style in (EntityStyle.SERVICE_ENDPOINT, EntityStyle.DNS_RESOLVER):
        endpoints = entity(
            "endpoints",
            style,
            cidr="10.20.0.0/16",
            subnets=[
                subnet("ep-public", SubnetRole.PUBLIC, "10.20.0.0/24"),
                subnet("ep-private", SubnetRole.PRIVATE, "10.20.1.0/24"),
                subnet("ep-isolated", SubnetRole.PRIVATE_ISOLATED, "10.20.2.0/24"),
            ],
        )
        actions = plan_subnets(entity_set(endpoints))

        assert table_routes(actions) == [
            ("rtb-ep-isolated", "0.0.0.0/0"),
            ("rtb-ep-private", "0.0.0.0/0"),
        ]


def test_firewall_defaults_inspection_subnets_only(entity, entity_set, subnet):
    fw = entity(
        "fw",
        EntityStyle.FIREWALL,
        cidr="10.100.0.0/16",
        subnets=[
            subnet("fw-inspection", SubnetRole.INSPECTION, "10.100.0.0/24"),
            subnet("fw-transit", SubnetRole.TRANSIT, "10.100.1.0/28"),
        ],
    )
    actions = plan_subnets(entity_set(fw))

    assert table_routes(actions) == [("rtb-fw-inspection", "0.0.0.0/0")]


def test_workload_public_keeps_internet_default(entity, entity_set, subnet):
    a = entity(
        "a",
        EntityStyle.WORKLOAD_PUBLIC,
        cidr="10.1.0.0/16",
        propagations=[Relationship("b")],
        static_routes=[StaticRoute("192.168.0.0/16", "vpn")],
        subnets=[
            subnet("a-public", SubnetRole.PUBLIC, "10.1.0.0/24"),
            subnet("a-private", SubnetRole.PRIVATE, "10.1.1.0/24"),
        ],
    )
    b = entity("b", cidr="10.2.0.0/16")
    vpn = entity("vpn", EntityStyle.VPN)
    actions = plan_subnets(entity_set(a, b, vpn))

    public = [x for x in actions if x.route_table == "rtb-a-public"]
    assert sorted(x.destination_cidr for x in public) == ["10.2.0.0/16", "192.168.0.0/16"]
    assert "0.0.0.0/0" not in [x.destination_cidr for x in public]
    assert table_routes(x for x in actions if x.route_table == "rtb-a-private") == [
        ("rtb-a-private", "0.0.0.0/0")
    ]


def test_cidr_route_defers_to_default_toward_same_target(entity, entity_set, subnet):
    diagnostics = DiagnosticLogger()
    a = entity(
        "a",
        EntityStyle.WORKLOAD_PUBLIC,
        cidr="10.1.0.0/16",
        default_route=Relationship("egress"),
        propagations=[Relationship("egress"), Relationship("b")],
        subnets=[subnet("a-public", SubnetRole.PUBLIC, "10.1.0.0/24")],
    )
    egress = entity("egress", EntityStyle.NAT_EGRESS, cidr="10.0.0.0/16")
    b = entity("b", cidr="10.2.0.0/16")
    actions = plan_subnets(entity_set(a, egress, b), diagnostics)

    assert table_routes(actions) == [("rtb-a-public", "10.2.0.0/16")]
    skipped = [e for e in diagnostics.events if e["event"] == "subnet_route_covered_by_default"]
    assert [e["context"]["target"] for e in skipped] == ["egress"]


def test_cidr_route_defers_to_default_via_inspector(entity, entity_set, subnet):
    a = entity(
        "a",
        EntityStyle.WORKLOAD_PUBLIC,
        cidr="10.1.0.0/16",
        default_route=Relationship("egress", "fw"),
        propagations=[Relationship("b")],
        subnets=[subnet("a-public", SubnetRole.PUBLIC, "10.1.0.0/24")],
    )
    egress = entity("egress", EntityStyle.NAT_EGRESS, cidr="10.0.0.0/16")
    fw = entity("fw", EntityStyle.FIREWALL, cidr="10.100.0.0/16")
    b = entity("b", cidr="10.2.0.0/16")
    actions = plan_subnets(entity_set(a, egress, fw, b))

    assert ("fw", None) in [r.key for r in a.propagations]
    assert table_routes(actions) == [("rtb-a-public", "10.2.0.0/16")]


def test_entities_without_subnets_are_skipped(entity, entity_set):
    a = entity("a", cidr="10.1.0.0/16", propagations=[Relationship("vpn"), Relationship("dx")])
    vpn = entity("vpn", EntityStyle.VPN)
    dx = entity("dx", EntityStyle.DIRECT_CONNECT_GATEWAY)
    peer = entity("peer", EntityStyle.TGW_PEER, propagations=[Relationship("a")])

    assert plan_subnets(entity_set(a, vpn, dx, peer)) == []

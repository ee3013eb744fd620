from __future__ import annotations

import ipaddress

import pytest

from topology_nexthop.config import NextHopSettings
from topology_nexthop.exceptions import MetadataError
from topology_nexthop.interfaces.metadata import (
    ABSENT,
    MALFORMED,
    PRESENT,
    NodeMetadataAccessor,
    decode_neighbors,
    decode_routing_tables,
)
from topology_nexthop.interfaces.topology import (
    IPV4_DEFAULT_ROUTE,
    IPV6_DEFAULT_ROUTE,
    NextHopCandidate,
    Prefix,
    ResolvedNextHop,
    Route,
    RoutingTable,
)


def ip(value: str):
    return ipaddress.ip_address(value)


def test_prefix_contains_addresses_inside_network():
    prefix = Prefix.parse("192.168.0.0/24")

    assert prefix.contains(ip("192.168.0.5"))
    assert prefix.contains(ip("192.168.0.255"))
    assert not prefix.contains(ip("192.168.1.1"))
    assert prefix.specificity() == 24
    assert str(prefix) == "192.168.0.0/24"


def test_prefix_parse_masks_host_bits():
    prefix = Prefix.parse("10.16.0.7/24")

    assert prefix.address == ip("10.16.0.0")
    assert prefix.mask_length == 24


def test_default_route_contains_everything_in_its_family():
    assert IPV4_DEFAULT_ROUTE.is_default_route()
    assert IPV4_DEFAULT_ROUTE.specificity() == 0
    assert IPV4_DEFAULT_ROUTE.contains(ip("8.8.8.8"))
    assert IPV4_DEFAULT_ROUTE.contains(ip("255.255.255.255"))
    assert not IPV4_DEFAULT_ROUTE.contains(ip("2001:db8::1"))
    assert IPV6_DEFAULT_ROUTE.contains(ip("2001:db8::1"))


def test_prefix_from_parts_rejects_out_of_range_mask():
    assert Prefix.from_parts("10.0.0.0", 8) == Prefix.parse("10.0.0.0/8")
    assert Prefix.from_parts("2001:db8::", 128).mask_length == 128

    with pytest.raises(ValueError):
        Prefix.from_parts("10.0.0.0", 33)
    with pytest.raises(ValueError):
        Prefix.from_parts("10.0.0.0", -1)


def test_route_requires_candidates():
    with pytest.raises(ValueError):
        Route(prefix=Prefix.parse("10.0.0.0/8"), candidates=())


def test_resolved_next_hop_as_dict():
    hop = ResolvedNextHop(address=ip("10.16.0.2"), interface_index=2)

    assert hop.as_dict() == {"address": "10.16.0.2", "interface_index": 2}


def test_decode_routing_tables_from_snapshot_payload():
    tables = decode_routing_tables(
        [
            {
                "ID": 255,
                "Src": "10.16.0.5",
                "Type": "local",
                "Routes": [
                    {
                        "Protocol": 2,
                        "Prefix": "192.168.0.0/24",
                        "NextHops": [{"IP": "10.16.0.2", "IfIndex": 2, "Priority": 100}],
                    },
                    {"Prefix": "10.60.0.0/24", "NextHops": [{"IfIndex": 5}]},
                ],
            }
        ]
    )

    assert len(tables) == 1
    table = tables[0]
    assert table.id == 255
    assert table.source == ip("10.16.0.5")
    assert table.type == "local"
    first, second = table.routes
    assert first.prefix == Prefix.parse("192.168.0.0/24")
    assert first.protocol == 2
    assert first.candidates == (NextHopCandidate(address=ip("10.16.0.2"), interface_index=2, priority=100),)
    assert second.candidates[0].address is None
    assert second.candidates[0].is_connected
    assert second.protocol is None


def test_route_without_prefix_is_default_route_of_gateway_family():
    tables = decode_routing_tables(
        [
            {
                "ID": 254,
                "Routes": [
                    {"NextHops": [{"IP": "10.16.0.12", "IfIndex": 2}]},
                    {"NextHops": [{"IP": "fe80::1", "IfIndex": 3}]},
                    {"NextHops": [{"IfIndex": 4}]},
                ],
            }
        ]
    )

    prefixes = [route.prefix for route in tables[0].routes]
    assert prefixes == [IPV4_DEFAULT_ROUTE, IPV6_DEFAULT_ROUTE, IPV4_DEFAULT_ROUTE]


def test_decode_routing_tables_accepts_typed_objects():
    table = RoutingTable(
        id=255,
        routes=(Route(prefix=Prefix.parse("10.0.0.0/8"), candidates=(NextHopCandidate(None, 1),)),),
    )

    assert decode_routing_tables([table]) == (table,)


def test_decode_routing_tables_decodes_raw_entries_inside_typed_tables():
    table = RoutingTable(
        id=255,
        routes=({"Prefix": "10.0.0.0/8", "NextHops": [{"IP": "192.0.2.1", "IfIndex": 1}]},),
    )

    decoded = decode_routing_tables([table])

    assert decoded[0].id == 255
    assert decoded[0].routes == (
        Route(prefix=Prefix.parse("10.0.0.0/8"), candidates=(NextHopCandidate(ip("192.0.2.1"), 1),)),
    )


def test_integral_float_indexes_are_accepted():
    tables = decode_routing_tables(
        [{"ID": 255.0, "Routes": [{"Prefix": "10.0.0.0/8", "NextHops": [{"IfIndex": 2.0}]}]}]
    )

    assert tables[0].id == 255
    assert tables[0].routes[0].candidates[0].interface_index == 2


def test_accessor_reports_typed_table_with_bad_route_as_malformed():
    accessor = NodeMetadataAccessor()

    lookup = accessor.routing_tables({"RoutingTables": [RoutingTable(id=255, routes=("garbage",))]})

    assert lookup.status == MALFORMED


@pytest.mark.parametrize(
    "value",
    [
        "not-a-list",
        {"ID": 255},
        [42],
        [{"ID": 255, "Routes": [{"Prefix": "10.0.0.0/8", "NextHops": []}]}],
        [{"ID": 255, "Routes": [{"Prefix": "10.0.0.0/99", "NextHops": [{"IfIndex": 1}]}]}],
        [{"ID": 255, "Routes": [{"Prefix": "10.0.0.0/8", "NextHops": [{"IP": "nope", "IfIndex": 1}]}]}],
        [{"ID": "main", "Routes": []}],
        [{"ID": 2.9, "Routes": []}],
        [{"ID": 255, "Routes": [{"Prefix": "10.0.0.0/8", "NextHops": [{"IfIndex": 2.5}]}]}],
        [RoutingTable(id=255, routes=(42,))],
        [RoutingTable(id=255, routes=({"Prefix": "bogus", "NextHops": [{"IfIndex": 1}]},))],
    ],
)
def test_decode_routing_tables_rejects_malformed_values(value):
    with pytest.raises(MetadataError):
        decode_routing_tables(value)


def test_decode_neighbors():
    neighbors = decode_neighbors(
        [{"IP": "10.16.0.2", "IfIndex": 2, "MAC": "fa:16:3e:c1:e8:d1", "State": ["NUD_REACHABLE"]}]
    )

    assert neighbors[0].address == ip("10.16.0.2")
    assert neighbors[0].interface_index == 2
    assert neighbors[0].link_address == "fa:16:3e:c1:e8:d1"
    assert neighbors[0].state == ("NUD_REACHABLE",)
    assert neighbors[0].vlan is None

    with pytest.raises(MetadataError):
        decode_neighbors([{"IfIndex": 2, "MAC": "fa:16:3e:c1:e8:d1"}])


def test_accessor_distinguishes_absent_and_malformed():
    accessor = NodeMetadataAccessor()

    assert accessor.routing_tables({}).status == ABSENT
    assert accessor.routing_tables(None).status == ABSENT
    assert accessor.routing_tables({"RoutingTables": None}).status == ABSENT

    malformed = accessor.routing_tables({"RoutingTables": "garbage"})
    assert malformed.status == MALFORMED
    assert "RoutingTables" in malformed.error
    assert malformed.value is None

    present = accessor.routing_tables({"RoutingTables": []})
    assert present.status == PRESENT
    assert present.present
    assert present.value == ()


def test_accessor_honours_configured_keys():
    accessor = NodeMetadataAccessor(NextHopSettings(routing_tables_key="Routing", neighbors_key="ARP"))
    metadata = {
        "Routing": [{"ID": 1, "Routes": []}],
        "ARP": [{"IP": "10.0.0.1", "IfIndex": 1, "MAC": "aa:bb:cc:dd:ee:ff"}],
        "RoutingTables": "ignored",
    }

    assert accessor.routing_tables(metadata).value[0].id == 1
    assert accessor.neighbors(metadata).value[0].link_address == "aa:bb:cc:dd:ee:ff"

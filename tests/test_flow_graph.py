"""Tests for outflow and inflow graph construction."""

import pytest

from flow_graph import DEFAULT_HUB, build_inflow_graph, build_outflow_graph
from models import ChainFlowRow, FlowEdge


@pytest.fixture
def flows():
    return [ChainFlowRow("Ethereum", 5, 1000.0), ChainFlowRow("Solana", 2, 500.0)]


def test_outflow_graph(flows):
    graph = build_outflow_graph(flows)

    assert graph.nodes == ("Algorand", "Ethereum", "Solana")
    assert graph.edges == (FlowEdge(0, 1, 1000.0), FlowEdge(0, 2, 500.0))
    assert graph.hub == DEFAULT_HUB


def test_inflow_graph(flows):
    graph = build_inflow_graph(flows)

    assert graph.nodes == ("Ethereum", "Solana", "Algorand")
    assert graph.edges == (FlowEdge(0, 2, 1000.0), FlowEdge(1, 2, 500.0))
    assert graph.hub_index == 2
    assert graph.hub == "Algorand"


@pytest.mark.parametrize("builder", [build_outflow_graph, build_inflow_graph])
def test_empty_input_gives_hub_only_graph(builder):
    graph = builder([], hub="Algorand")
    assert graph.nodes == ("Algorand",)
    assert graph.edges == ()
    assert graph.total_value == 0
    assert graph.shares() == []


def test_duplicate_chains_are_not_merged():
    rows = [ChainFlowRow("Solana", 1, 10.0), ChainFlowRow("Solana", 1, 30.0)]
    graph = build_outflow_graph(rows, hub="Hub")
    assert graph.nodes == ("Hub", "Solana", "Solana")
    assert [e.target for e in graph.edges] == [1, 2]


def test_every_edge_touches_the_hub_once(flows):
    for graph in (build_outflow_graph(flows), build_inflow_graph(flows)):
        assert len(graph.edges) == len(flows)
        for edge in graph.edges:
            assert (edge.source == graph.hub_index) != (edge.target == graph.hub_index)


def test_shares_and_serialization(flows):
    graph = build_inflow_graph(flows, hub="Algorand")

    assert graph.total_value == 1500.0
    assert graph.shares() == pytest.approx([66.6667, 33.3333], abs=1e-3)

    data = graph.to_dict()
    assert data["nodes"] == ["Ethereum", "Solana", "Algorand"]
    assert data["hub"] == "Algorand"
    assert data["links"] == {"source": [0, 1], "target": [2, 2], "value": [1000.0, 500.0]}
    assert data["total_value"] == 1500.0

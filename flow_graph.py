"""
Build Sankey-style flow graphs between the hub network and counterparty chains.

Outflow graphs put the hub first and fan out to each chain; inflow graphs
list the chains first and converge on the hub as the last node. Nodes and
edges keep input order and duplicate chain names are not merged.
"""

from models import ChainFlowRow, FlowEdge, FlowGraph

DEFAULT_HUB = "Algorand"


def build_outflow_graph(rows: list[ChainFlowRow], hub: str = DEFAULT_HUB) -> FlowGraph:
    """Value leaving the hub: edges 0 -> i+1."""
    nodes = [hub] + [r.chain_name for r in rows]
    edges = [FlowEdge(source=0, target=i + 1, value=r.value) for i, r in enumerate(rows)]
    return FlowGraph(nodes=tuple(nodes), edges=tuple(edges), hub_index=0)


def build_inflow_graph(rows: list[ChainFlowRow], hub: str = DEFAULT_HUB) -> FlowGraph:
    """Value entering the hub: edges i -> len(rows)."""
    hub_index = len(rows)
    nodes = [r.chain_name for r in rows] + [hub]
    edges = [FlowEdge(source=i, target=hub_index, value=r.value) for i, r in enumerate(rows)]
    return FlowGraph(nodes=tuple(nodes), edges=tuple(edges), hub_index=hub_index)

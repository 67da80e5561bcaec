"""
Row records and view models for the Allbridge dashboard.

Rows are produced by csv_decoder, view models by metrics and flow_graph.
All of them are immutable once built.
"""

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class TimeSeriesRow:
    """One calendar month of bridge activity."""

    period: str
    transactions: int = 0
    active_users: int = 0
    source_volume: float = 0.0
    destination_volume: float = 0.0
    total_volume: float = 0.0
    transactions_to_date: int = 0
    users_to_date: int = 0
    volume_to_date: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ChainFlowRow:
    """Aggregate flow between the hub network and one counterparty chain."""

    chain_name: str
    transfer_count: int = 0
    value: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class InsufficientData:
    """Returned instead of metrics when there is nothing to compare yet."""

    reason: str = "at least two periods are required"


@dataclass(frozen=True)
class DerivedMetrics:
    current_transactions: int
    current_users: int
    current_volume: float
    transactions_delta: float
    users_delta: float
    volume_delta: float
    history: tuple[TimeSeriesRow, ...] = ()

    @property
    def current_period(self) -> str:
        return self.history[-1].period if self.history else ""

    def to_dict(self, include_history: bool = True) -> dict:
        result = {
            "period": self.current_period,
            "current_transactions": self.current_transactions,
            "current_users": self.current_users,
            "current_volume": self.current_volume,
            "transactions_delta": self.transactions_delta,
            "users_delta": self.users_delta,
            "volume_delta": self.volume_delta,
        }
        if include_history:
            result["history"] = [row.to_dict() for row in self.history]
        return result


@dataclass(frozen=True)
class ChartPoint:
    """One bar of the monthly charts."""

    label: str
    period: str
    transactions: int
    users: int
    volume: float
    source_volume: float
    destination_volume: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FlowEdge:
    source: int
    target: int
    value: float


@dataclass(frozen=True)
class FlowGraph:
    """Directed bipartite graph between the hub and its counterparties.

    Node indices are plain list positions; they are only meaningful within
    one graph instance.
    """

    nodes: tuple[str, ...] = ()
    edges: tuple[FlowEdge, ...] = ()
    hub_index: int = 0

    @property
    def hub(self) -> str:
        return self.nodes[self.hub_index]

    @property
    def total_value(self) -> float:
        return sum(e.value for e in self.edges)

    def shares(self) -> list[float]:
        """Percentage share of each edge in the total flow, in edge order."""
        total = self.total_value
        if total <= 0:
            return [0.0 for _ in self.edges]
        return [e.value / total * 100 for e in self.edges]

    def to_dict(self) -> dict:
        return {
            "nodes": list(self.nodes),
            "hub": self.hub,
            "links": {
                "source": [e.source for e in self.edges],
                "target": [e.target for e in self.edges],
                "value": [e.value for e in self.edges],
            },
            "shares": self.shares(),
            "total_value": self.total_value,
        }


@dataclass
class SourceTexts:
    """Raw CSV text of the three dashboard sources from one load."""

    time_series: str
    outflow: str
    inflow: str
    origins: dict = field(default_factory=dict)

"""
Build the Allbridge dashboard dataset from the warehouse CSV exports.

Loads the monthly time series and the outflow/inflow tables, derives the
month-over-month KPIs, the chart window and both flow graphs, and writes the
combined payload as JSON for the presentation layer.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from config import Settings, load_settings
from csv_decoder import decode_chain_flows, decode_time_series
from fetch_sources import SourceLoadError, load_sources
from flow_graph import DEFAULT_HUB, build_inflow_graph, build_outflow_graph
from metrics import DEFAULT_CHART_WINDOW, chart_window, derive_metrics, volume_totals
from models import ChainFlowRow, InsufficientData, TimeSeriesRow

logger = logging.getLogger(__name__)


def build_dashboard_data(
    time_series: list[TimeSeriesRow],
    outflows: list[ChainFlowRow],
    inflows: list[ChainFlowRow],
    hub: str = DEFAULT_HUB,
    window: int = DEFAULT_CHART_WINDOW,
) -> dict:
    """Build the full dashboard dataset."""
    metrics = derive_metrics(time_series)

    if isinstance(metrics, InsufficientData):
        status = "insufficient_data"
        metrics_data = None
        history = []
        points = []
        message = metrics.reason
    else:
        status = "ok"
        metrics_data = metrics.to_dict(include_history=False)
        history = [row.to_dict() for row in metrics.history]
        points = chart_window(metrics.history, window)
        message = ""

    # An empty flow table means "no data yet" rather than a hub-only graph
    outflow = build_outflow_graph(outflows, hub).to_dict() if outflows else None
    inflow = build_inflow_graph(inflows, hub).to_dict() if inflows else None

    return {
        "status": status,
        "message": message,
        "hub": hub,
        "metrics": metrics_data,
        "history": history,
        "chart": {
            "points": [p.to_dict() for p in points],
            "volume_totals": volume_totals(points),
        },
        "outflow": outflow,
        "inflow": inflow,
        "generated_at": datetime.now(timezone.utc).isoformat(),
    }


def load_dashboard(settings: Settings) -> dict:
    """Fetch all sources, decode them and build the dataset.

    Raises SourceLoadError if any source cannot be fetched.
    """
    texts = load_sources(settings)
    time_series = decode_time_series(texts.time_series)
    outflows = decode_chain_flows(texts.outflow)
    inflows = decode_chain_flows(texts.inflow)

    logger.info(
        f"Decoded {len(time_series)} periods, {len(outflows)} outflow chains, "
        f"{len(inflows)} inflow chains"
    )
    return build_dashboard_data(
        time_series, outflows, inflows,
        hub=settings.hub_name,
        window=settings.chart_window,
    )


def main():
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    settings = load_settings()

    logger.info("Loading data sources...")
    try:
        data = load_dashboard(settings)
    except SourceLoadError as exc:
        logger.error(f"{exc} Please run the export job first.")
        sys.exit(1)

    output_dir = os.path.dirname(settings.output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    with open(settings.output_path, "w") as f:
        json.dump(data, f, indent=2)

    metrics = data["metrics"]
    if metrics:
        logger.info(f"--- {metrics['period']} (month to date) ---")
        logger.info(f"Transactions: {metrics['current_transactions']:,} ({metrics['transactions_delta']:+.2f}%)")
        logger.info(f"Users: {metrics['current_users']:,} ({metrics['users_delta']:+.2f}%)")
        logger.info(f"Volume: ${metrics['current_volume']:,.0f} ({metrics['volume_delta']:+.2f}%)")
    else:
        logger.warning(f"No metrics yet: {data['message']}")

    logger.info(f"Dashboard data written to {settings.output_path}")


if __name__ == "__main__":
    main()

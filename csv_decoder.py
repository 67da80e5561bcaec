"""
Decode the warehouse CSV exports into typed rows.

The exporter writes plain comma-separated text with a header line and never
quotes or escapes commas inside values, so lines are split on "," directly.
Columns are positional; the header is skipped without being checked.

Malformed cells never abort a decode: numeric cells that do not parse become
0 and text cells lose their quote characters.
"""

import logging
import math

from models import ChainFlowRow, TimeSeriesRow

logger = logging.getLogger(__name__)

TIME_SERIES_COLUMNS = [
    "date",
    "monthly_transactions",
    "monthly_active_users",
    "monthly_src_usdc",
    "monthly_dst_usdc",
    "monthly_usdc",
    "transactions_mtd",
    "active_users_mtd",
    "volume_mtd",
]

CHAIN_FLOW_COLUMNS = ["chain", "transfer_count", "value_usd"]


def parse_number(raw: str | None) -> float:
    """Coerce a numeric cell, returning 0 for anything that is not a finite number."""
    if raw is None:
        return 0.0
    text = raw.strip()
    if not text or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def parse_count(raw: str | None) -> int:
    return int(parse_number(raw))


def strip_quotes(raw: str | None) -> str:
    if raw is None:
        return ""
    return raw.replace('"', "").strip()


def _data_lines(text: str) -> list[str]:
    lines = (text or "").strip().split("\n")
    # Header line is dropped unconditionally
    return [line for line in lines[1:] if line.strip()]


def _split(lines: list[str], expected: int, layout: str) -> list[list[str]]:
    rows = [line.split(",") for line in lines]
    mismatched = sum(1 for cells in rows if len(cells) != expected)
    if mismatched:
        logger.warning(
            "%s: %d of %d lines do not have %d columns, decoding positionally anyway",
            layout, mismatched, len(rows), expected,
        )
    return rows


def _cell(cells: list[str], index: int) -> str | None:
    return cells[index] if index < len(cells) else None


def decode_time_series(text: str) -> list[TimeSeriesRow]:
    """Decode the monthly time-series export, preserving input order."""
    cells_list = _split(_data_lines(text), len(TIME_SERIES_COLUMNS), "time series")
    return [
        TimeSeriesRow(
            period=strip_quotes(_cell(v, 0)),
            transactions=parse_count(_cell(v, 1)),
            active_users=parse_count(_cell(v, 2)),
            source_volume=parse_number(_cell(v, 3)),
            destination_volume=parse_number(_cell(v, 4)),
            total_volume=parse_number(_cell(v, 5)),
            transactions_to_date=parse_count(_cell(v, 6)),
            users_to_date=parse_count(_cell(v, 7)),
            volume_to_date=parse_number(_cell(v, 8)),
        )
        for v in cells_list
    ]


def decode_chain_flows(text: str) -> list[ChainFlowRow]:
    """Decode an outflow or inflow table.

    Rows without a chain name or with a non-positive value are dropped.
    """
    result = []
    skipped = 0
    for v in _split(_data_lines(text), len(CHAIN_FLOW_COLUMNS), "chain flows"):
        row = ChainFlowRow(
            chain_name=strip_quotes(_cell(v, 0)),
            transfer_count=parse_count(_cell(v, 1)),
            value=parse_number(_cell(v, 2)),
        )
        if not row.chain_name or row.value <= 0:
            skipped += 1
            continue
        result.append(row)
    if skipped:
        logger.debug("Dropped %d chain flow rows with no name or no value", skipped)
    return result


def _format_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)


def encode_time_series(rows: list[TimeSeriesRow]) -> str:
    """Write rows in the exporter's time-series layout, header included."""
    lines = [",".join(TIME_SERIES_COLUMNS)]
    for r in rows:
        lines.append(",".join([
            r.period,
            _format_number(r.transactions),
            _format_number(r.active_users),
            _format_number(r.source_volume),
            _format_number(r.destination_volume),
            _format_number(r.total_volume),
            _format_number(r.transactions_to_date),
            _format_number(r.users_to_date),
            _format_number(r.volume_to_date),
        ]))
    return "\n".join(lines) + "\n"


def encode_chain_flows(rows: list[ChainFlowRow]) -> str:
    lines = [",".join(CHAIN_FLOW_COLUMNS)]
    for r in rows:
        lines.append(f"{r.chain_name},{_format_number(r.transfer_count)},{_format_number(r.value)}")
    return "\n".join(lines) + "\n"

"""Tests for building and writing the dashboard dataset."""

import json

import pytest

import generate_report
from config import Settings
from fetch_sources import SourceLoadError
from generate_report import build_dashboard_data, load_dashboard
from models import ChainFlowRow, TimeSeriesRow

SERIES_CSV = (
    "date,monthly_transactions,monthly_active_users,monthly_src_usdc,monthly_dst_usdc,"
    "monthly_usdc,transactions_mtd,active_users_mtd,volume_mtd\n"
    '"2024-07",120,55,700,400,1100,120,55,1100\n'
    '"2024-06",100,50,600,400,1000,100,50,1000\n'
)
OUTFLOW_CSV = 'chain,transfer_count,value_usd\n"Ethereum",5,1000\n"Solana",2,500\n"Tron",1,0\n'
INFLOW_CSV = 'chain,transfer_count,value_usd\n"Ethereum",4,800\n'


@pytest.fixture
def settings(tmp_path):
    files = {"series.csv": SERIES_CSV, "out.csv": OUTFLOW_CSV, "in.csv": INFLOW_CSV}
    for name, text in files.items():
        (tmp_path / name).write_text(text)
    return Settings(
        time_series_source=str(tmp_path / "series.csv"),
        outflow_source=str(tmp_path / "out.csv"),
        inflow_source=str(tmp_path / "in.csv"),
        hub_name="Algorand",
        chart_window=12,
        output_path=str(tmp_path / "out" / "dashboard.json"),
    )


def test_load_dashboard_end_to_end(settings):
    data = load_dashboard(settings)

    assert data["status"] == "ok"
    metrics = data["metrics"]
    assert metrics["period"] == "2024-07"
    assert metrics["current_transactions"] == 120
    assert metrics["transactions_delta"] == pytest.approx(20.0)
    assert metrics["users_delta"] == pytest.approx(10.0)
    assert metrics["volume_delta"] == pytest.approx(10.0)

    assert [p["period"] for p in data["chart"]["points"]] == ["2024-06", "2024-07"]
    assert data["chart"]["volume_totals"]["total"] == 2100.0

    assert data["outflow"]["nodes"] == ["Algorand", "Ethereum", "Solana"]
    assert data["inflow"]["nodes"] == ["Ethereum", "Algorand"]
    assert data["inflow"]["links"] == {"source": [0], "target": [1], "value": [800.0]}

    # Payload must be JSON serializable
    json.dumps(data)


def test_insufficient_time_series_and_empty_flows():
    data = build_dashboard_data([TimeSeriesRow("2024-07")], [], [ChainFlowRow("Base", 1, 5.0)])

    assert data["status"] == "insufficient_data"
    assert data["metrics"] is None
    assert data["message"]
    assert data["chart"]["points"] == []
    assert data["outflow"] is None
    assert data["inflow"]["nodes"] == ["Base", "Algorand"]


def test_chart_window_setting_is_respected():
    rows = [TimeSeriesRow(f"2024-{m:02d}", transactions_to_date=m) for m in range(1, 7)]
    data = build_dashboard_data(rows, [], [], hub="Hub", window=3)
    assert [p["period"] for p in data["chart"]["points"]] == ["2024-04", "2024-05", "2024-06"]
    assert data["hub"] == "Hub"


def test_main_writes_json(settings, monkeypatch):
    monkeypatch.setattr(generate_report, "load_settings", lambda: settings)

    generate_report.main()

    with open(settings.output_path) as f:
        data = json.load(f)
    assert data["metrics"]["current_volume"] == 1100.0


def test_main_exits_when_sources_fail(settings, monkeypatch):
    def failing_load(_settings):
        raise SourceLoadError("Failed to load data.")

    monkeypatch.setattr(generate_report, "load_settings", lambda: settings)
    monkeypatch.setattr(generate_report, "load_dashboard", failing_load)

    with pytest.raises(SystemExit) as excinfo:
        generate_report.main()
    assert excinfo.value.code == 1

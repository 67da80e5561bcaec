"""
Settings for the dashboard pipeline.

Defaults are overridden by dashboard_config.json (if present) and then by
environment variables. A .env file next to this module is loaded first.

Environment variables:
    ALLBRIDGE_TIMESERIES_SOURCE   Path or URL of the monthly time series CSV
    ALLBRIDGE_OUTFLOW_SOURCE      Path or URL of the outflow-by-chain CSV
    ALLBRIDGE_INFLOW_SOURCE       Path or URL of the inflow-by-chain CSV
    HUB_NAME                      Name of the hub network (default: Algorand)
    CHART_WINDOW                  Number of trailing months charted (default: 12)
    REQUEST_TIMEOUT               Seconds per HTTP fetch (default: 30)
    DASHBOARD_OUTPUT              Where generate_report.py writes its JSON
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SCRIPT_DIR = Path(__file__).resolve().parent
DATA_DIR = SCRIPT_DIR / "data"
CONFIG_FILE = SCRIPT_DIR / "dashboard_config.json"

DEFAULTS = {
    "time_series_source": str(DATA_DIR / "allbridge.csv"),
    "outflow_source": str(DATA_DIR / "allbridge_outflow.csv"),
    "inflow_source": str(DATA_DIR / "allbridge_inflow.csv"),
    "hub_name": "Algorand",
    "chart_window": 12,
    "request_timeout": 30,
    "output_path": str(DATA_DIR / "dashboard.json"),
}

ENV_VARS = {
    "time_series_source": "ALLBRIDGE_TIMESERIES_SOURCE",
    "outflow_source": "ALLBRIDGE_OUTFLOW_SOURCE",
    "inflow_source": "ALLBRIDGE_INFLOW_SOURCE",
    "hub_name": "HUB_NAME",
    "chart_window": "CHART_WINDOW",
    "request_timeout": "REQUEST_TIMEOUT",
    "output_path": "DASHBOARD_OUTPUT",
}

INT_SETTINGS = ("chart_window", "request_timeout")


@dataclass(frozen=True)
class Settings:
    time_series_source: str = DEFAULTS["time_series_source"]
    outflow_source: str = DEFAULTS["outflow_source"]
    inflow_source: str = DEFAULTS["inflow_source"]
    hub_name: str = DEFAULTS["hub_name"]
    chart_window: int = DEFAULTS["chart_window"]
    request_timeout: int = DEFAULTS["request_timeout"]
    output_path: str = DEFAULTS["output_path"]


def _as_int(key, raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s: %r, using default %s", key, raw, DEFAULTS[key])
        return DEFAULTS[key]


def load_settings(config_file=CONFIG_FILE, environ=None) -> Settings:
    """Resolve settings from defaults, the JSON config file and the environment."""
    if environ is None:
        load_dotenv(SCRIPT_DIR / ".env")
        environ = os.environ

    values = dict(DEFAULTS)

    config_file = Path(config_file) if config_file else None
    if config_file and config_file.exists():
        try:
            with open(config_file) as f:
                cfg = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Failed to parse %s, using defaults: %s", config_file, exc)
            cfg = {}
        if not isinstance(cfg, dict):
            logger.warning("%s must contain a JSON object, using defaults", config_file)
            cfg = {}
        for key in DEFAULTS:
            if key not in cfg:
                continue
            if key not in INT_SETTINGS and not isinstance(cfg[key], str):
                logger.warning("Ignoring non-string %s in %s: %r", key, config_file, cfg[key])
                continue
            values[key] = cfg[key]
        if cfg:
            logger.info("Loaded config from %s", config_file)

    for key, var in ENV_VARS.items():
        raw = environ.get(var, "").strip()
        if raw:
            values[key] = raw

    for key in INT_SETTINGS:
        values[key] = _as_int(key, values[key])

    return Settings(**values)

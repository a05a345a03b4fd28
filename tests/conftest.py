"""Shared fixtures for the QuoteGraph tests."""

import os

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from quoteRecords import DataRecord

REPO_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")


def make_series(closes, start="2017-01-02"):
    """Build a series of close-only records on consecutive days."""
    dates = pd.date_range(start, periods=len(closes), freq="D")
    return tuple(
        DataRecord(timestamp=ts, open=None, high=None, low=None, close=float(c))
        for ts, c in zip(dates, closes)
    )


def make_ohlc_series(rows, start="2017-01-02"):
    """Build a series from (open, high, low, close) tuples."""
    dates = pd.date_range(start, periods=len(rows), freq="D")
    return tuple(
        DataRecord(timestamp=ts, open=o, high=h, low=l, close=c, volume=1000.0)
        for ts, (o, h, l, c) in zip(dates, rows)
    )


def quote_lines(count, start="2017-01-02", price=100.0):
    """CSV lines in the data file format, one per business day."""
    lines = []
    for i, ts in enumerate(pd.bdate_range(start, periods=count)):
        close = price + i
        lines.append(f"{ts:%Y-%m-%d},{close - 0.5:.2f},{close + 1:.2f},{close - 1:.2f},{close:.2f},{1000 + i}")
    return lines


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding a valid 'vw' file."""
    (tmp_path / "vw.csv").write_text(
        "Date,Open,High,Low,Close,Volume\n" + "\n".join(quote_lines(30)) + "\n"
    )
    return tmp_path

"""Tests for DataRecord, series helpers and frame normalization."""

import numpy as np
import pandas as pd
import pytest

import globalsQg
import quoteRecords
from conftest import make_series


class TestNormalizeFrame:
    def test_capitalizes_columns_and_sorts(self):
        raw = pd.DataFrame(
            {
                "date": ["2017-01-03", "2017-01-02"],
                "open": [2.0, 1.0],
                "high": [2.5, 1.5],
                "low": [1.5, 0.5],
                "close": [2.2, 1.2],
                "volume": [20, 10],
            }
        )
        df = quoteRecords.normalizeFrame(raw)
        assert list(df.columns) == quoteRecords.QUOTE_COLUMNS
        assert isinstance(df.index, pd.DatetimeIndex)
        assert df.index.is_monotonic_increasing
        assert df["Close"].tolist() == [1.2, 2.2]

    def test_duplicate_timestamps_keep_last(self):
        raw = pd.DataFrame(
            {"Date": ["2017-01-02", "2017-01-02", "2017-01-03"], "Close": [1.0, 5.0, 2.0]}
        )
        df = quoteRecords.normalizeFrame(raw)
        assert len(df) == 2
        assert df["Close"].iloc[0] == 5.0

    def test_drops_rows_without_close_or_date(self):
        raw = pd.DataFrame(
            {"Date": ["2017-01-02", "not a date", "2017-01-04"], "Close": [1.0, 2.0, None]}
        )
        df = quoteRecords.normalizeFrame(raw)
        assert df["Close"].tolist() == [1.0]

    def test_timezone_is_removed(self):
        index = pd.date_range("2017-01-02", periods=3, freq="D", tz="Europe/Berlin")
        raw = pd.DataFrame({"Close": [1.0, 2.0, 3.0]}, index=index)
        df = quoteRecords.normalizeFrame(raw)
        assert df.index.tz is None

    def test_missing_ohlc_columns_become_empty(self):
        raw = pd.DataFrame({"Date": ["2017-01-02"], "Close": [1.0]})
        df = quoteRecords.normalizeFrame(raw)
        assert df["Open"].isna().all()
        assert df["Volume"].isna().all()


class TestSeriesConversion:
    def test_to_series_keeps_optional_fields_as_none(self):
        raw = pd.DataFrame({"Date": ["2017-01-02", "2017-01-03"], "Close": [1.0, 2.0]})
        series = quoteRecords.toSeries(quoteRecords.normalizeFrame(raw))
        assert len(series) == 2
        assert series[0].open is None
        assert series[0].volume is None
        assert not series[0].hasOhlc()
        assert series[1].close == 2.0

    def test_records_are_immutable(self):
        record = make_series([1.0])[0]
        with pytest.raises(AttributeError):
            record.close = 3.0

    def test_to_data_frame_matches_series(self):
        series = make_series([3.0, 4.0, 5.0])
        df = quoteRecords.toDataFrame(series)
        assert df["Close"].tolist() == [3.0, 4.0, 5.0]
        assert df["Open"].isna().all()
        assert quoteRecords.toSeries(df) == series

    def test_closes_is_float_array(self):
        values = quoteRecords.closes(make_series([1, 2, 3]))
        assert values.dtype == np.float64
        assert values.tolist() == [1.0, 2.0, 3.0]


class TestValidateSeries:
    def test_empty_series_fails(self):
        with pytest.raises(globalsQg.EmptySeries):
            quoteRecords.validateSeries((), "vw")

    def test_out_of_order_series_fails(self):
        series = make_series([1.0, 2.0])
        with pytest.raises(ValueError):
            quoteRecords.validateSeries((series[1], series[0]), "vw")

    def test_valid_series_is_returned(self):
        series = make_series([1.0, 2.0])
        assert quoteRecords.validateSeries(series) is series

    def test_describe_series(self):
        text = quoteRecords.describeSeries(make_series([1.0, 2.0]), "vw")
        assert text == "vw: 2 quotes from 2017-01-02 to 2017-01-03"

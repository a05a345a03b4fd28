import numpy as np
import pandas as pd
from typing import NamedTuple, Optional, Tuple

import globalsQg
#---------------------------------------------------------------------------------------------------------------------------------
PRICE_COLUMNS = ['Open', 'High', 'Low', 'Close']
QUOTE_COLUMNS = PRICE_COLUMNS + ['Volume']
#---------------------------------------------------------------------------------------------------------------------------------
class DataRecord(NamedTuple):
  timestamp: pd.Timestamp
  open: Optional[float]
  high: Optional[float]
  low: Optional[float]
  close: float
  volume: Optional[float] = None
  #-------------------------------------------------------------------------------------------------------------------------------
  def hasOhlc(self) -> bool:
    return self.open is not None and self.high is not None and self.low is not None
#---------------------------------------------------------------------------------------------------------------------------------
Series = Tuple[DataRecord, ...]
#---------------------------------------------------------------------------------------------------------------------------------
def optionalFloat(value) -> Optional[float]:
  if value is None or pd.isna(value):
    return None
  return float(value)
#---------------------------------------------------------------------------------------------------------------------------------
def normalizeFrame(df: pd.DataFrame) -> pd.DataFrame:
  """Bring a raw quote frame into the shape every loader returns.

  Columns are capitalized (Open, High, Low, Close, Volume), missing ones are added empty,
  the index becomes a timezone free DatetimeIndex, rows without a timestamp or a close
  are dropped, duplicated timestamps keep the last row and the result is sorted ascending.
  """
  df = df.copy()
  df.rename(columns={col: col.capitalize() for col in df.columns if isinstance(col, str) and col.lower() in ['date', 'open', 'high', 'low', 'close', 'volume']}, inplace=True)
  if 'Date' in df.columns:
    df = df.set_index('Date')
  for col in QUOTE_COLUMNS:
    if col not in df.columns:
      df[col] = np.nan
    df[col] = pd.to_numeric(df[col], errors='coerce')
  df = df[QUOTE_COLUMNS]
  if not isinstance(df.index, pd.DatetimeIndex):
    df.index = pd.to_datetime(df.index, errors='coerce')
  if df.index.tz is not None:
    df.index = df.index.tz_convert(None)
  df = df[df.index.notna()]
  df = df.dropna(subset=['Close'])
  df = df[~df.index.duplicated(keep='last')]
  df.index.name = 'Date'
  return df.sort_index()
#---------------------------------------------------------------------------------------------------------------------------------
def toSeries(df: pd.DataFrame) -> Series:
  return tuple(
    DataRecord(
      timestamp=pd.Timestamp(ts),
      open=optionalFloat(row.Open),
      high=optionalFloat(row.High),
      low=optionalFloat(row.Low),
      close=float(row.Close),
      volume=optionalFloat(row.Volume),
    )
    for ts, row in zip(df.index, df.itertuples(index=False))
  )
#---------------------------------------------------------------------------------------------------------------------------------
def toDataFrame(series: Series) -> pd.DataFrame:
  df = pd.DataFrame(
    [[r.open, r.high, r.low, r.close, r.volume] for r in series],
    columns=QUOTE_COLUMNS,
    index=pd.DatetimeIndex([r.timestamp for r in series], name='Date'),
    dtype=float,
  )
  return df
#---------------------------------------------------------------------------------------------------------------------------------
def closes(series: Series) -> np.ndarray:
  return np.array([r.close for r in series], dtype=float)
#---------------------------------------------------------------------------------------------------------------------------------
def validateSeries(series: Series, source: str = "") -> Series:
  if not series:
    raise globalsQg.EmptySeries(f"Source '{source}' contains no valid quotes.", source)
  for prev, cur in zip(series, series[1:]):
    if not prev.timestamp < cur.timestamp:
      raise ValueError(f"Series for {source} is not strictly increasing at {cur.timestamp}.")
  return series
#---------------------------------------------------------------------------------------------------------------------------------
def dateRange(series: Series) -> Tuple[pd.Timestamp, pd.Timestamp]:
  return series[0].timestamp, series[-1].timestamp
#---------------------------------------------------------------------------------------------------------------------------------
def describeSeries(series: Series, source: str) -> str:
  if not series:
    return f"{source}: no data"
  first, last = dateRange(series)
  return f"{source}: {len(series)} quotes from {first.date()} to {last.date()}"

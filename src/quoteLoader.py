import os
import math
import glob
from contextlib import closing
from typing import Callable, Iterable, List, Optional, Tuple

import pandas as pd
import psycopg2

import globalsQg
import quoteConfig
import quoteRecords
from quoteRecords import Series
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class DataLoader:
  """Turns a source name into a Series. Subclasses provide fetchFrame, listSources and describe."""
  def __init__(self, defaultSource: str):
    self.defaultSource = defaultSource
    self.failed = False
    self.lastError: Optional[globalsQg.QuoteGraphError] = None
  #-------------------------------------------------------------------------------------------------------------------------------
  def hasFailed(self) -> bool:
    return self.failed
  #-------------------------------------------------------------------------------------------------------------------------------
  def markFailed(self, error: globalsQg.QuoteGraphError):
    self.failed = True
    self.lastError = error
    print(f"{self.describe()} failed: {error}")
  #-------------------------------------------------------------------------------------------------------------------------------
  def fetchFrame(self, sourceName: str) -> pd.DataFrame:
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def listSources(self) -> List[str]:
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def describe(self) -> str:
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def load(self, sourceName: str) -> Series:
    try:
      df = self.fetchFrame(sourceName)
    except (globalsQg.ConnectionFailure, globalsQg.FileNotFound) as e:
      self.markFailed(e)
      raise
    series = quoteRecords.validateSeries(quoteRecords.toSeries(quoteRecords.normalizeFrame(df)), sourceName)
    self.failed = False
    self.lastError = None
    return series
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class SqlLoader(DataLoader):
  QUERY = "SELECT date, open, high, low, close, volume FROM quotes WHERE source = %s ORDER BY date"
  SOURCES_QUERY = "SELECT DISTINCT source FROM quotes ORDER BY source"
  #-------------------------------------------------------------------------------------------------------------------------------
  def __init__(self, config: quoteConfig.DbConfig, connect: Callable = psycopg2.connect):
    super().__init__(config.defaultSource)
    self.config = config
    self.connect = connect
    self.reachable = False
    try:
      with closing(self.openConnection()):
        self.reachable = True
      print(f"Connected to {self.describe()}")
    except globalsQg.ConnectionFailure as e:
      self.markFailed(e)
      return
    try:
      self.load(config.defaultSource)
    except globalsQg.ConnectionFailure:
      pass    # already marked by load
    except globalsQg.QuoteGraphError as e:
      self.markFailed(e)
  #-------------------------------------------------------------------------------------------------------------------------------
  def describe(self) -> str:
    return f"PostgreSQL {self.config.database} on {self.config.host}:{self.config.port}"
  #-------------------------------------------------------------------------------------------------------------------------------
  def openConnection(self):
    try:
      return self.connect(**self.config.connectParameters())
    except (psycopg2.Error, OSError) as e:
      raise globalsQg.ConnectionFailure(f"Could not connect to {self.describe()}: {str(e).strip()}") from e
  #-------------------------------------------------------------------------------------------------------------------------------
  def fetchRows(self, query: str, params: Tuple = ()) -> List[tuple]:
    if not self.reachable:
      raise globalsQg.ConnectionFailure(f"{self.describe()} is not reachable.")
    with closing(self.openConnection()) as conn:
      try:
        with closing(conn.cursor()) as cursor:
          cursor.execute(query, params)
          return cursor.fetchall()
      except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
        raise globalsQg.ConnectionFailure(f"Lost connection to {self.describe()}: {str(e).strip()}") from e
      except psycopg2.Error as e:
        raise globalsQg.QuoteGraphError(f"Query failed on {self.describe()}: {str(e).strip()}") from e
  #-------------------------------------------------------------------------------------------------------------------------------
  def fetchFrame(self, sourceName: str) -> pd.DataFrame:
    rows = self.fetchRows(SqlLoader.QUERY, (sourceName,))
    if not rows:
      raise globalsQg.SourceNotFound(f"Source '{sourceName}' not found in {self.describe()}.", sourceName)
    print(f"Loaded {len(rows)} rows for {sourceName} from {self.describe()}")
    return pd.DataFrame(rows, columns=['Date'] + quoteRecords.QUOTE_COLUMNS)
  #-------------------------------------------------------------------------------------------------------------------------------
  def listSources(self) -> List[str]:
    return [row[0] for row in self.fetchRows(SqlLoader.SOURCES_QUERY)]
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class FileLoader(DataLoader):
  """Reads quotes from '<dataDir>/<source>.csv'.

  One quote per line: Date,Open,High,Low,Close,Volume with ISO dates (2017-01-13).
  A header line and blank lines are ignored, the volume may be left empty.
  Malformed lines are skipped and reported, they only fail the load when nothing valid is left.
  """
  def __init__(self, defaultSource: str, dataDir: str = quoteConfig.DATA_DIR):
    super().__init__(defaultSource)
    self.dataDir = dataDir
    self.skippedLines: List[globalsQg.ParseFailure] = []
    try:
      self.load(defaultSource)
    except globalsQg.SourceNotFound as e:
      self.markFailed(globalsQg.FileNotFound(str(e), defaultSource))
    except globalsQg.FileNotFound:
      pass    # already marked by load
    except globalsQg.EmptySeries as e:
      self.markFailed(e)
  #-------------------------------------------------------------------------------------------------------------------------------
  def describe(self) -> str:
    return f"Files in {os.path.abspath(self.dataDir)}"
  #-------------------------------------------------------------------------------------------------------------------------------
  def constructFilePath(self, sourceName: str) -> str:
    return os.path.join(self.dataDir, f"{sourceName}{quoteConfig.FILE_SUFFIX}")
  #-------------------------------------------------------------------------------------------------------------------------------
  def fetchFrame(self, sourceName: str) -> pd.DataFrame:
    path = self.constructFilePath(sourceName)
    try:
      with open(path, 'r', encoding='utf-8', errors='replace') as f:
        rows, self.skippedLines = parseQuoteLines(f, sourceName)
    except FileNotFoundError as e:
      raise globalsQg.SourceNotFound(f"Source '{sourceName}' not found: {path} does not exist.", sourceName) from e
    except OSError as e:
      raise globalsQg.FileNotFound(f"Could not read {path}: {e}", sourceName) from e
    if self.skippedLines:
      print(f"Warning: skipped {len(self.skippedLines)} malformed line(s) in {path}, first: {self.skippedLines[0]}")
    return pd.DataFrame(rows, columns=['Date'] + quoteRecords.QUOTE_COLUMNS)
  #-------------------------------------------------------------------------------------------------------------------------------
  def listSources(self) -> List[str]:
    pattern = os.path.join(self.dataDir, f"*{quoteConfig.FILE_SUFFIX}")
    return sorted(os.path.splitext(os.path.basename(p))[0] for p in glob.glob(pattern))
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
def parseQuoteLine(line: str, lineNumber: int, source: str) -> list:
  fields = [f.strip() for f in line.split(',')]
  if len(fields) not in (5, 6):
    raise globalsQg.ParseFailure(f"line {lineNumber}: expected 5 or 6 fields, got {len(fields)}", source, lineNumber)
  try:
    date = pd.to_datetime(fields[0], format='%Y-%m-%d')
    prices = [float(v) for v in fields[1:5]]
    volume = float(fields[5]) if len(fields) == 6 and fields[5] else None
  except ValueError as e:
    raise globalsQg.ParseFailure(f"line {lineNumber}: {e}", source, lineNumber) from e
  if pd.isna(date) or not all(math.isfinite(p) for p in prices):
    raise globalsQg.ParseFailure(f"line {lineNumber}: missing date or price", source, lineNumber)
  return [date] + prices + [volume]
#---------------------------------------------------------------------------------------------------------------------------------
def parseQuoteLines(lines: Iterable[str], source: str) -> Tuple[List[list], List[globalsQg.ParseFailure]]:
  rows, skipped = [], []
  headerAllowed = True
  for lineNumber, line in enumerate(lines, start=1):
    if not line.strip():
      continue
    if headerAllowed and line.split(',')[0].strip().lower() == 'date':
      headerAllowed = False
      continue
    headerAllowed = False
    try:
      rows.append(parseQuoteLine(line, lineNumber, source))
    except globalsQg.ParseFailure as e:
      skipped.append(e)
  return rows, skipped
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
def defaultLoaderFactories(config: quoteConfig.DbConfig, dataDir: str = quoteConfig.DATA_DIR) -> List[Callable[[], DataLoader]]:
  return [
    lambda: SqlLoader(config),
    lambda: FileLoader(config.defaultSource, dataDir),
  ]
#---------------------------------------------------------------------------------------------------------------------------------
def getLoader(factories: Iterable[Callable[[], DataLoader]]) -> Optional[DataLoader]:
  """Returns the first loader that could establish its backend, None if every backend failed."""
  for factory in factories:
    try:
      loader = factory()
    except Exception as e:
      print(f"Could not create data loader: {e}")
      continue
    if not loader.hasFailed():
      print(f"### Using {loader.describe()} as data source ###")
      return loader
    print("Trying next data source as fallback.")
  print("No data could be loaded at the moment. Please try again later.")
  return None

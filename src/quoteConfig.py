import os
from typing import NamedTuple, Tuple
#---------------------------------------------------------------------------------------------------------------------------------
# Hardcoded development configuration. Every value can be overridden by an environment variable.
#---------------------------------------------------------------------------------------------------------------------------------
DB_HOST       = os.environ.get('QUOTEGRAPH_DB_HOST', 'localhost')
DB_USER       = os.environ.get('QUOTEGRAPH_DB_USER', 'postgres')
DB_PASSWORD   = os.environ.get('QUOTEGRAPH_DB_PASSWORD', 'dp')
DB_NAME       = os.environ.get('QUOTEGRAPH_DB_NAME', 'boersendaten')
DB_PORT       = int(os.environ.get('QUOTEGRAPH_DB_PORT', '5432'))
DB_TIMEOUT    = int(os.environ.get('QUOTEGRAPH_DB_TIMEOUT', '3'))     # seconds
DATA_DIR      = os.environ.get('QUOTEGRAPH_DATA_DIR', 'data')
FILE_SUFFIX   = '.csv'
DEFAULT_SOURCE = os.environ.get('QUOTEGRAPH_SOURCE', 'vw')
GRAPH_TYPE    = os.environ.get('QUOTEGRAPH_GRAPH', 'line')
CHART_STYLE   = os.environ.get('QUOTEGRAPH_STYLE', 'yahoo')
SOURCES: Tuple[str, ...] = ('vw', 'blackrock', 'goldman', 'cac40')
CHART_WIDTH   = 900
CHART_HEIGHT  = 500
#---------------------------------------------------------------------------------------------------------------------------------
class DbConfig(NamedTuple):
  host: str
  user: str
  password: str
  database: str
  port: int
  defaultSource: str
  #-------------------------------------------------------------------------------------------------------------------------------
  @staticmethod
  def fromEnvironment() -> 'DbConfig':
    return DbConfig(DB_HOST, DB_USER, DB_PASSWORD, DB_NAME, DB_PORT, DEFAULT_SOURCE)
  #-------------------------------------------------------------------------------------------------------------------------------
  def connectParameters(self) -> dict:
    """Keyword arguments for psycopg2.connect."""
    return {
      'host': self.host,
      'user': self.user,
      'password': self.password,
      'dbname': self.database,
      'port': self.port,
      'connect_timeout': DB_TIMEOUT,
    }
  #-------------------------------------------------------------------------------------------------------------------------------
  def __repr__(self) -> str:
    return f"DbConfig({self.user}@{self.host}:{self.port}/{self.database}, source={self.defaultSource})"

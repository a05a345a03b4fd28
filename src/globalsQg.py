#---------------------------------------------------------------------------------------------------------------------------------
# Error taxonomy shared by the loader, renderer and ui modules.
#---------------------------------------------------------------------------------------------------------------------------------
class QuoteGraphError(Exception):
  """Base for every data error that must end up in front of the user instead of crashing the app."""
  def __init__(self, message: str, source: str = ""):
    super().__init__(message)
    self.source = source
#---------------------------------------------------------------------------------------------------------------------------------
class ConnectionFailure(QuoteGraphError):
  """The database could not be reached. Recovered by falling back to files."""
#---------------------------------------------------------------------------------------------------------------------------------
class FileNotFound(QuoteGraphError):
  """A data file could not be opened. Fatal for the FileLoader."""
#---------------------------------------------------------------------------------------------------------------------------------
class ParseFailure(QuoteGraphError):
  """A single line of a data file could not be parsed."""
  def __init__(self, message: str, source: str = "", lineNumber: int = 0):
    super().__init__(message, source)
    self.lineNumber = lineNumber
#---------------------------------------------------------------------------------------------------------------------------------
class EmptySeries(QuoteGraphError):
  """A source was found but did not yield a single valid record."""
#---------------------------------------------------------------------------------------------------------------------------------
class SourceNotFound(QuoteGraphError):
  """The requested source does not exist in the active backend."""

import traceback
from typing import List, Optional, Sequence

import globalsQg
import graphRenderer
import quoteRecords
from graphRenderer import DrawCommand, GraphRenderer, Viewport
from quoteLoader import DataLoader
from quoteRecords import Series
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class PresentationShell:
  """What the controller needs from the window. QuoteGraphApp implements it with tkinter."""
  def setGraph(self, commands: List[DrawCommand], title: str):
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def setSourceOptions(self, names: Sequence[str]):
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def showError(self, message: str):
    raise NotImplementedError
  #-------------------------------------------------------------------------------------------------------------------------------
  def setStatus(self, text: str):
    raise NotImplementedError
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class AppState:
  def __init__(self, loader: DataLoader, renderer: GraphRenderer, viewport: Viewport):
    self.loader = loader
    self.renderer = renderer
    self.viewport = viewport
    self.series: Optional[Series] = None
    self.sourceName: Optional[str] = None
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class SelectionController:
  def __init__(self, state: AppState, shell: PresentationShell):
    self.state = state
    self.shell = shell
  #-------------------------------------------------------------------------------------------------------------------------------
  def start(self, sources: Sequence[str]) -> bool:
    self.shell.setSourceOptions(list(sources))
    return self.onSourceSelected(self.state.loader.defaultSource)
  #-------------------------------------------------------------------------------------------------------------------------------
  def onSourceSelected(self, sourceName: str) -> bool:
    """Load and draw a source. On failure the error goes to the shell and the current graph stays."""
    try:
      series = self.state.loader.load(sourceName)
      commands = self.state.renderer.render(series, self.state.viewport)
    except globalsQg.QuoteGraphError as e:
      print(f"Could not display {sourceName}: {e}")
      self.shell.showError(str(e))
      return False
    self.state.series = series
    self.state.sourceName = sourceName
    self.shell.setGraph(commands, self.title())
    self.shell.setStatus(f"{quoteRecords.describeSeries(series, sourceName)} ({self.state.loader.describe()})")
    return True
  #-------------------------------------------------------------------------------------------------------------------------------
  def onGraphTypeSelected(self, graphType: str) -> bool:
    try:
      self.state.renderer = graphRenderer.getRenderer(graphType)
    except ValueError as e:
      self.shell.showError(str(e))
      return False
    return self.redraw()
  #-------------------------------------------------------------------------------------------------------------------------------
  def onResize(self, width: float, height: float) -> bool:
    try:
      self.state.viewport = Viewport.create(width, height)
    except ValueError:
      return False    # window not mapped yet
    return self.redraw()
  #-------------------------------------------------------------------------------------------------------------------------------
  def redraw(self) -> bool:
    if not self.state.series:
      return False
    try:
      commands = self.state.renderer.render(self.state.series, self.state.viewport)
    except globalsQg.QuoteGraphError as e:
      self.shell.showError(str(e))
      return False
    self.shell.setGraph(commands, self.title())
    return True
  #-------------------------------------------------------------------------------------------------------------------------------
  def title(self) -> str:
    return f"{self.state.sourceName} - {self.state.renderer.name} graph"
#---------------------------------------------------------------------------------------------------------------------------------
def reportCallbackError(shell: PresentationShell, error: Exception):
  """Keeps an unexpected error in a Tk callback from taking the window down."""
  print(f"Unexpected error: {error}")
  traceback.print_exc()
  shell.setStatus(f"Error: {error}")

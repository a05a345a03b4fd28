import tkinter as tk
from tkinter import ttk, messagebox
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
import matplotlib.pyplot as plt
from typing import List, Optional, Sequence

import globalsQg
import quoteConfig
import quoteLoader
import graphRenderer
import chartDisplay
from graphRenderer import DrawCommand, Viewport
from selectionControl import AppState, PresentationShell, SelectionController, reportCallbackError
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class QuoteGraphApp(PresentationShell):
  #-------------------------------------------------------------------------------------------------------------------------------
  def __init__(self, root: tk.Tk, state: AppState, sources: Sequence[str]):
    self.root = root
    self.root.title("Quote Graph")
    self.root.minsize(640, 400)
    self.state = state
    self.chartUtils = chartDisplay.ChartingUtils(quoteConfig.CHART_STYLE)
    self.controller = SelectionController(state, self)
    self.sourceVar = tk.StringVar(value=state.loader.defaultSource)
    self.graphTypeVar = tk.StringVar(value=state.renderer.name)
    self.styleVar = tk.StringVar(value=quoteConfig.CHART_STYLE)
    self.fig: Optional[plt.Figure] = None
    self.canvas: Optional[FigureCanvasTkAgg] = None
    self.lastCommands: List[DrawCommand] = []
    self.lastTitle = ''
    self.resizeJob: Optional[str] = None
    self.setupUserInterface()
    self.controller.start(sources)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setupSelectionBar(self):
    bar = ttk.Frame(self.root, padding=(5, 5, 5, 0))
    bar.pack(side=tk.TOP, fill=tk.X)
    ttk.Label(bar, text="Source:").pack(side=tk.LEFT, padx=(0, 2))
    self.sourceBox = ttk.Combobox(bar, textvariable=self.sourceVar, state='readonly', width=14)
    self.sourceBox.pack(side=tk.LEFT, padx=(0, 10))
    self.sourceBox.bind("<<ComboboxSelected>>", self.handleSourceSelect)
    ttk.Label(bar, text="Graph:").pack(side=tk.LEFT, padx=(0, 2))
    graphBox = ttk.Combobox(bar, textvariable=self.graphTypeVar, values=list(graphRenderer.RENDERERS), state='readonly', width=12)
    graphBox.pack(side=tk.LEFT, padx=(0, 10))
    graphBox.bind("<<ComboboxSelected>>", self.handleGraphTypeSelect)
    ttk.Label(bar, text="Style:").pack(side=tk.LEFT, padx=(0, 2))
    styleBox = ttk.Combobox(bar, textvariable=self.styleVar, values=chartDisplay.availableStyles(), state='readonly', width=14)
    styleBox.pack(side=tk.LEFT)
    styleBox.bind("<<ComboboxSelected>>", self.handleStyleSelect)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setupChartArea(self):
    self.chartFrame = ttk.LabelFrame(self.root, text="Chart", padding=(1, 2, 2, 1),
                                     width=int(self.state.viewport.width), height=int(self.state.viewport.height))
    self.chartFrame.pack(expand=True, fill=tk.BOTH, padx=5, pady=5)
    self.chartFrame.pack_propagate(False)
    self.chartFrame.bind("<Configure>", self.handleResize)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setupStatusBar(self):
    self.statusBar = ttk.Label(self.root, text="Ready", relief=tk.SUNKEN, anchor=tk.W)
    self.statusBar.pack(side=tk.BOTTOM, fill=tk.X)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setupUserInterface(self):
    ttk.Style(self.root).theme_use('clam')
    self.setupSelectionBar()
    self.setupStatusBar()
    self.setupChartArea()
  #-------------------------------------------------------------------------------------------------------------------------------
  # PresentationShell
  #-------------------------------------------------------------------------------------------------------------------------------
  def setGraph(self, commands: List[DrawCommand], title: str):
    self.lastCommands, self.lastTitle = commands, title
    self.displayFigure(self.chartUtils.createGraphFigure(commands, self.state.viewport, title))
  #-------------------------------------------------------------------------------------------------------------------------------
  def setSourceOptions(self, names: Sequence[str]):
    self.sourceBox.config(values=list(names))
  #-------------------------------------------------------------------------------------------------------------------------------
  def showError(self, message: str):
    self.statusBar.config(text=f"Error: {message}")
    messagebox.showerror("Error", message, parent=self.root)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setStatus(self, text: str):
    self.statusBar.config(text=text)
  #-------------------------------------------------------------------------------------------------------------------------------
  def displayFigure(self, fig: plt.Figure):
    if self.canvas:
      self.canvas.get_tk_widget().destroy()
    if self.fig:
      plt.close(self.fig)
    self.fig = fig
    self.canvas = FigureCanvasTkAgg(fig, master=self.chartFrame)
    self.canvas.get_tk_widget().pack(side=tk.TOP, fill=tk.BOTH, expand=True)
    self.canvas.draw()
  #-------------------------------------------------------------------------------------------------------------------------------
  # event handlers
  #-------------------------------------------------------------------------------------------------------------------------------
  def handleSourceSelect(self, event=None):
    sourceName = self.sourceVar.get()
    self.root.config(cursor="watch")
    self.statusBar.config(text=f"Loading {sourceName}...")
    self.root.update_idletasks()
    try:
      if not self.controller.onSourceSelected(sourceName) and self.state.sourceName:
        self.sourceVar.set(self.state.sourceName)    # dropdown follows the graph that is still shown
    except Exception as e:
      reportCallbackError(self, e)
    finally:
      self.root.config(cursor="")
  #-------------------------------------------------------------------------------------------------------------------------------
  def handleGraphTypeSelect(self, event=None):
    try:
      if not self.controller.onGraphTypeSelected(self.graphTypeVar.get()):
        self.graphTypeVar.set(self.state.renderer.name)
    except Exception as e:
      reportCallbackError(self, e)
  #-------------------------------------------------------------------------------------------------------------------------------
  def handleStyleSelect(self, event=None):
    try:
      self.chartUtils.setStyle(self.styleVar.get())
      if self.lastCommands:
        self.setGraph(self.lastCommands, self.lastTitle)
    except Exception as e:
      reportCallbackError(self, e)
  #-------------------------------------------------------------------------------------------------------------------------------
  def handleResize(self, event):
    if self.resizeJob:
      self.root.after_cancel(self.resizeJob)
    self.resizeJob = self.root.after(150, self.applyResize, event.width - 4, event.height - 20)
  #-------------------------------------------------------------------------------------------------------------------------------
  def applyResize(self, width: int, height: int):
    self.resizeJob = None
    if (width, height) == (int(self.state.viewport.width), int(self.state.viewport.height)):
      return
    try:
      self.controller.onResize(width, height)
    except Exception as e:
      reportCallbackError(self, e)
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
def collectSources(loader: quoteLoader.DataLoader) -> List[str]:
  """The configured sources first, then whatever else the backend offers."""
  sources = list(quoteConfig.SOURCES)
  try:
    sources += [s for s in loader.listSources() if s not in sources]
  except globalsQg.QuoteGraphError as e:
    print(f"Could not list sources of {loader.describe()}: {e}")
  return sources
#---------------------------------------------------------------------------------------------------------------------------------
def dataErrorDialog(root: tk.Tk):
  root.withdraw()
  messagebox.showerror("Error", "Failed To Load any Data..", parent=root)
  root.destroy()
#---------------------------------------------------------------------------------------------------------------------------------
def createRenderer(graphType: str) -> graphRenderer.GraphRenderer:
  try:
    return graphRenderer.getRenderer(graphType)
  except ValueError as e:
    print(f"{e} Using line graph.")
    return graphRenderer.LineGraph()
#---------------------------------------------------------------------------------------------------------------------------------
def main():
  config = quoteConfig.DbConfig.fromEnvironment()
  print(f"Starting Quote Graph with {config}")
  loader = quoteLoader.getLoader(quoteLoader.defaultLoaderFactories(config, quoteConfig.DATA_DIR))
  root = tk.Tk()
  if loader is None:
    dataErrorDialog(root)
    return
  state = AppState(loader, createRenderer(quoteConfig.GRAPH_TYPE), Viewport.create(quoteConfig.CHART_WIDTH, quoteConfig.CHART_HEIGHT))
  QuoteGraphApp(root, state, collectSources(loader))
  root.mainloop()
#---------------------------------------------------------------------------------------------------------------------------------
if __name__ == "__main__":
  main()

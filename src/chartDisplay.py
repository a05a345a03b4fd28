import mplfinance as mpf
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.patches import Rectangle
from typing import Any, Dict, List

from graphRenderer import Candle, DrawCommand, Label, Line, Point, Rect, Viewport, commandsOfType
#---------------------------------------------------------------------------------------------------------------------------------
DPI = 100
MARKER_LIMIT = 60    # above this many points the line alone is drawn
ANCHORS = {
  'nw': ('left', 'top'),
  'sw': ('left', 'bottom'),
  'w' : ('left', 'center'),
}
#---------------------------------------------------------------------------------------------------------------------------------
def pickColor(value: Any, key: str) -> str:
  return value.get(key) if isinstance(value, dict) else value
#---------------------------------------------------------------------------------------------------------------------------------
def chartColors(styleName: str) -> Dict[str, str]:
  """Colors for the graph, taken from an mplfinance style so the look can be switched by name."""
  style = mpf.make_mpf_style(base_mpf_style=styleName)
  marketColors = style['marketcolors']
  mavColors = style.get('mavcolors') or ['#1f77b4']
  return {
    'face'  : style.get('facecolor') or 'white',
    'up'    : pickColor(marketColors['candle'], 'up'),
    'down'  : pickColor(marketColors['candle'], 'down'),
    'wick'  : pickColor(marketColors.get('wick', 'black'), 'up'),
    'column': pickColor(marketColors.get('volume', '#1f77b4'), 'up'),
    'line'  : mavColors[0],
    'text'  : 'dimgray',
  }
#---------------------------------------------------------------------------------------------------------------------------------
def availableStyles() -> List[str]:
  return list(mpf.available_styles())
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class ChartingUtils:
  def __init__(self, styleName: str = 'yahoo'):
    self.setStyle(styleName)
  #-------------------------------------------------------------------------------------------------------------------------------
  def setStyle(self, styleName: str):
    self.styleName = styleName
    self.colors = chartColors(styleName)
  #-------------------------------------------------------------------------------------------------------------------------------
  def createErrorFigure(self, message: str) -> plt.Figure:
    fig, ax = plt.subplots(figsize=(10, 6))
    ax.text(0.5, 0.5, message, ha='center', va='center', fontsize=10, wrap=True)
    ax.set_axis_off()
    return fig
  #-------------------------------------------------------------------------------------------------------------------------------
  def createGraphFigure(self, commands: List[DrawCommand], viewport: Viewport, title: str = '') -> plt.Figure:
    fig = plt.figure(figsize=(viewport.width / DPI, viewport.height / DPI), dpi=DPI, facecolor=self.colors['face'])
    ax = fig.add_axes([0, 0, 1, 1])
    ax.set_facecolor(self.colors['face'])
    ax.set_xlim(0, viewport.width)
    ax.set_ylim(viewport.height, 0)    # pixel rows grow downward
    ax.set_axis_off()
    self.drawLines(ax, commandsOfType(commands, Line))
    self.drawPoints(ax, commandsOfType(commands, Point))
    self.drawRects(ax, commandsOfType(commands, Rect))
    self.drawCandles(ax, commandsOfType(commands, Candle))
    self.drawLabels(ax, commandsOfType(commands, Label))
    if title:
      fig.text(0.5, 0.99, title, ha='center', va='top', fontsize=10, color=self.colors['text'])
    return fig
  #-------------------------------------------------------------------------------------------------------------------------------
  def drawLines(self, ax: plt.Axes, lines: List[Line]):
    if lines:
      ax.add_collection(LineCollection([[(l.x1, l.y1), (l.x2, l.y2)] for l in lines], colors=self.colors['line'], linewidths=1.2))
  #-------------------------------------------------------------------------------------------------------------------------------
  def drawPoints(self, ax: plt.Axes, points: List[Point]):
    if points and len(points) <= MARKER_LIMIT:
      ax.scatter([p.x for p in points], [p.y for p in points], s=12, color=self.colors['line'], zorder=3)
  #-------------------------------------------------------------------------------------------------------------------------------
  def drawRects(self, ax: plt.Axes, rects: List[Rect]):
    if rects:
      patches = [Rectangle((r.x, r.y), r.width, r.height) for r in rects]
      ax.add_collection(PatchCollection(patches, facecolor=self.colors['column'], edgecolor='none'))
  #-------------------------------------------------------------------------------------------------------------------------------
  def drawCandles(self, ax: plt.Axes, candles: List[Candle]):
    if not candles:
      return
    ax.add_collection(LineCollection([[(c.x, c.high), (c.x, c.low)] for c in candles], colors=self.colors['wick'], linewidths=0.7))
    bodies = [Rectangle((c.x - c.width / 2, c.bodyTop), c.width, max(c.bodyBottom - c.bodyTop, 1.0)) for c in candles]
    colors = [self.colors['up'] if c.rising else self.colors['down'] for c in candles]
    ax.add_collection(PatchCollection(bodies, facecolor=colors, edgecolor=colors, zorder=2))
  #-------------------------------------------------------------------------------------------------------------------------------
  def drawLabels(self, ax: plt.Axes, labels: List[Label]):
    for label in labels:
      ha, va = ANCHORS.get(label.anchor, ('left', 'center'))
      ax.text(label.x + 4, label.y, label.text, ha=ha, va=va, fontsize=8, color=self.colors['text'])

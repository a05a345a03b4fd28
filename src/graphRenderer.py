import numpy as np
from typing import Dict, List, NamedTuple, Sequence, Tuple, Type, Union

import globalsQg
import quoteRecords
from quoteRecords import Series
#---------------------------------------------------------------------------------------------------------------------------------
EPSILON = 1e-6
#---------------------------------------------------------------------------------------------------------------------------------
class Viewport(NamedTuple):
  width: float
  height: float
  #-------------------------------------------------------------------------------------------------------------------------------
  @staticmethod
  def create(width: float, height: float) -> 'Viewport':
    if width <= 0 or height <= 0:
      raise ValueError(f"Viewport needs a positive size, got {width}x{height}.")
    return Viewport(float(width), float(height))
#---------------------------------------------------------------------------------------------------------------------------------
# Draw primitives, all in pixel coordinates with the origin in the top left corner.
#---------------------------------------------------------------------------------------------------------------------------------
class Point(NamedTuple):
  x: float
  y: float
#---------------------------------------------------------------------------------------------------------------------------------
class Line(NamedTuple):
  x1: float
  y1: float
  x2: float
  y2: float
#---------------------------------------------------------------------------------------------------------------------------------
class Rect(NamedTuple):
  x: float
  y: float
  width: float
  height: float
#---------------------------------------------------------------------------------------------------------------------------------
class Candle(NamedTuple):
  x: float
  bodyTop: float
  bodyBottom: float
  high: float
  low: float
  width: float
  rising: bool
#---------------------------------------------------------------------------------------------------------------------------------
class Label(NamedTuple):
  x: float
  y: float
  text: str
  anchor: str = 'w'
#---------------------------------------------------------------------------------------------------------------------------------
DrawCommand = Union[Point, Line, Rect, Candle, Label]
#---------------------------------------------------------------------------------------------------------------------------------
def computeBounds(values: Sequence[float]) -> Tuple[float, float]:
  values = np.asarray(values, dtype=float)
  minValue, maxValue = float(values.min()), float(values.max())
  if minValue == maxValue:
    minValue, maxValue = minValue - EPSILON, maxValue + EPSILON
  if minValue == maxValue:
    minValue, maxValue = float(np.nextafter(minValue, -np.inf)), float(np.nextafter(maxValue, np.inf))
  return minValue, maxValue
#---------------------------------------------------------------------------------------------------------------------------------
class Scale:
  """Maps values to pixel rows for one render call."""
  def __init__(self, minValue: float, maxValue: float, height: float):
    self.minValue = minValue
    self.maxValue = maxValue
    self.height = height
  #-------------------------------------------------------------------------------------------------------------------------------
  def toY(self, values) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    span = self.maxValue - self.minValue
    if np.isfinite(span):
      ratio = (values - self.minValue) / span
    else:    # span of two huge finite values overflowed, compare halves instead
      ratio = (values / 2 - self.minValue / 2) / (self.maxValue / 2 - self.minValue / 2)
    y = self.height - ratio * self.height
    return np.clip(y, 0.0, self.height)
#---------------------------------------------------------------------------------------------------------------------------------
def commandsOfType(commands: List[DrawCommand], kind: type) -> List[DrawCommand]:
  return [c for c in commands if isinstance(c, kind)]
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class GraphRenderer:
  name = ''
  #-------------------------------------------------------------------------------------------------------------------------------
  def render(self, series: Series, viewport: Viewport) -> List[DrawCommand]:
    if not series:
      raise globalsQg.EmptySeries("Nothing to draw, the series is empty.")
    return self.draw(series, viewport)
  #-------------------------------------------------------------------------------------------------------------------------------
  def draw(self, series: Series, viewport: Viewport) -> List[DrawCommand]:
    raise NotImplementedError
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class LineGraph(GraphRenderer):
  name = 'line'
  #-------------------------------------------------------------------------------------------------------------------------------
  def xPositions(self, count: int, width: float) -> np.ndarray:
    if count == 1:
      return np.array([width / 2])
    return np.arange(count) * (width / (count - 1))
  #-------------------------------------------------------------------------------------------------------------------------------
  def draw(self, series: Series, viewport: Viewport) -> List[DrawCommand]:
    values = quoteRecords.closes(series)
    minValue, maxValue = computeBounds(values)
    xs = np.clip(self.xPositions(len(values), viewport.width), 0.0, viewport.width)
    ys = Scale(minValue, maxValue, viewport.height).toY(values)
    commands: List[DrawCommand] = [Point(float(x), float(y)) for x, y in zip(xs, ys)]
    commands += [Line(float(xs[i]), float(ys[i]), float(xs[i + 1]), float(ys[i + 1])) for i in range(len(xs) - 1)]
    commands.append(Label(0.0, 0.0, f"{values.max():.2f}", 'nw'))
    commands.append(Label(0.0, viewport.height, f"{values.min():.2f}", 'sw'))
    return commands
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class ColumnGraph(GraphRenderer):
  name = 'column'
  fill = 0.8
  #-------------------------------------------------------------------------------------------------------------------------------
  def draw(self, series: Series, viewport: Viewport) -> List[DrawCommand]:
    values = quoteRecords.closes(series)
    minValue, maxValue = computeBounds(np.append(values, min(0.0, values.min())))
    ys = Scale(minValue, maxValue, viewport.height).toY(values)
    baseline = float(Scale(minValue, maxValue, viewport.height).toY([max(minValue, 0.0)])[0])
    slot = viewport.width / len(values)
    barWidth = slot * ColumnGraph.fill
    commands: List[DrawCommand] = []
    for i, y in enumerate(ys):
      top, bottom = min(float(y), baseline), max(float(y), baseline)
      commands.append(Rect(i * slot + (slot - barWidth) / 2, top, barWidth, bottom - top))
    commands.append(Label(0.0, 0.0, f"{maxValue:.2f}", 'nw'))
    return commands
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
class CandlestickGraph(GraphRenderer):
  name = 'candlestick'
  bodyFill = 0.6
  #-------------------------------------------------------------------------------------------------------------------------------
  def draw(self, series: Series, viewport: Viewport) -> List[DrawCommand]:
    ohlc = np.array([[r.open if r.open is not None else r.close,
                      r.high if r.high is not None else r.close,
                      r.low if r.low is not None else r.close,
                      r.close] for r in series], dtype=float)
    ohlc[:, 1] = ohlc.max(axis=1)   # high must cover open/close
    ohlc[:, 2] = ohlc[:, [0, 2, 3]].min(axis=1)
    minValue, maxValue = computeBounds(ohlc[:, 1:3].ravel())
    scale = Scale(minValue, maxValue, viewport.height)
    yOpen, yHigh, yLow, yClose = (scale.toY(ohlc[:, i]) for i in range(4))
    slot = viewport.width / len(series)
    commands: List[DrawCommand] = []
    for i in range(len(series)):
      commands.append(Candle(
        x=(i + 0.5) * slot,
        bodyTop=float(min(yOpen[i], yClose[i])),
        bodyBottom=float(max(yOpen[i], yClose[i])),
        high=float(yHigh[i]),
        low=float(yLow[i]),
        width=slot * CandlestickGraph.bodyFill,
        rising=bool(ohlc[i, 3] >= ohlc[i, 0]),
      ))
    commands.append(Label(0.0, 0.0, f"{ohlc[:, 1].max():.2f}", 'nw'))
    commands.append(Label(0.0, viewport.height, f"{ohlc[:, 2].min():.2f}", 'sw'))
    return commands
#---------------------------------------------------------------------------------------------------------------------------------
#---------------------------------------------------------------------------------------------------------------------------------
RENDERERS: Dict[str, Type[GraphRenderer]] = {
  LineGraph.name: LineGraph,
  ColumnGraph.name: ColumnGraph,
  CandlestickGraph.name: CandlestickGraph,
}
#---------------------------------------------------------------------------------------------------------------------------------
def getRenderer(name: str) -> GraphRenderer:
  if name not in RENDERERS:
    raise ValueError(f"Unknown graph type '{name}', choose one of {', '.join(RENDERERS)}.")
  return RENDERERS[name]()

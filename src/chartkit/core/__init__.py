"""Toolkit-agnostic chart core: geometry, scene primitives, repaint policy.

The Qt pieces (``qt_render`` and ``widget``) are not imported
here so painters can be exercised without PyQt6 loaded.
"""

from .geometry import Padding, Point, Rect
from .repaint import PaintState, should_repaint
from .scene import Scene, TextStyle
from .tooltip import TooltipStyle

__all__ = ["Padding", "Point", "Rect", "PaintState", "should_repaint", "Scene", "TextStyle", "TooltipStyle"]

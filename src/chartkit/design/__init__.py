"""Design primitives shared by all chart families (colors, gradients, motion)."""

from .colors import Color, parse_color
from .gradients import GradientStop, LinearGradient, vertical_gradient
from .easing import Curve, get_curve

__all__ = [
    "Color",
    "parse_color",
    "GradientStop",
    "LinearGradient",
    "vertical_gradient",
    "Curve",
    "get_curve",
]

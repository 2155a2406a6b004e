"""Hollow semicircle meter."""

from .models import MeterReading, SemicircleStyle, parse_semicircle_json

__all__ = ["MeterReading", "SemicircleStyle", "parse_semicircle_json"]

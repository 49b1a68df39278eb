"""Metric parsing and colour mapping utilities."""

from euro_metrics.normalizers.color_normalizer import colorize, hsl_to_rgb
from euro_metrics.normalizers.metric_normalizer import parse_year_value, range_converter

__all__ = ["colorize", "hsl_to_rgb", "parse_year_value", "range_converter"]

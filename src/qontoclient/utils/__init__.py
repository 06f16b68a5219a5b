"""Utility functions for qontoclient."""

from qontoclient.utils.date_parser import parse_datetime

__all__ = ["parse_datetime"]

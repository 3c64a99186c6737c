"""Enum definitions for readings."""

from enum import Enum


class MeasureType(str, Enum):
    """Kind of meter a reading was taken from."""

    WATER = "WATER"
    GAS = "GAS"

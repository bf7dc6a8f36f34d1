"""Value objects and helpers for monetary amounts."""

from .money import ZERO, parse_decimal, round_half_up

__all__ = ["ZERO", "parse_decimal", "round_half_up"]

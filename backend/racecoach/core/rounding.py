import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going towards +infinity."""
    return math.floor(value + 0.5)


def round_to(value: float, digits: int) -> float:
    factor = 10**digits
    return round_half_up(value * factor) / factor


def clamp(value, lower, upper):
    return max(lower, min(upper, value))

# openprobe/core/enums.py
from __future__ import annotations

from enum import Enum, IntEnum


class ContactShape(str, Enum):
    """Outline of a single contact; serialized as its lowercase name."""

    CIRCLE = "circle"
    RECT = "rect"
    SQUARE = "square"

    @classmethod
    def parse(cls, value: "ContactShape | str") -> "ContactShape":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown contact shape {value!r}; expected one of {[s.value for s in cls]}."
        )


class ProbeNdim(IntEnum):
    """Plotting dimensionality of a probe."""

    TWO = 2
    THREE = 3

    @classmethod
    def parse(cls, value: "ProbeNdim | int | str") -> "ProbeNdim":
        # Files in the wild carry either 2 or "2".
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid ndim {value!r}; expected 2 or 3.")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid ndim {value!r}; expected 2 or 3.") from None


class ProbeSiUnits(str, Enum):
    """Real-world length unit for positions and shape parameters."""

    MM = "mm"
    UM = "um"

    @classmethod
    def parse(cls, value: "ProbeSiUnits | str") -> "ProbeSiUnits":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown SI unit {value!r}; expected one of {[u.value for u in cls]}."
        )

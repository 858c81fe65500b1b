# openprobe/core/metadata.py
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .exceptions import InvalidProbe


@dataclass(frozen=True, slots=True)
class ProbeAnnotations:
    """
    Free-form descriptive metadata of a probe.

    - name: model name, e.g. "ASSY-77-H2"
    - manufacturer: e.g. "cambridgeneurotech"
    """
    name: str = ""
    manufacturer: str = ""

    def __post_init__(self) -> None:
        if self.name is None:
            object.__setattr__(self, "name", "")
        if self.manufacturer is None:
            object.__setattr__(self, "manufacturer", "")
        if not isinstance(self.name, str):
            raise InvalidProbe("ProbeAnnotations.name must be a string.")
        if not isinstance(self.manufacturer, str):
            raise InvalidProbe("ProbeAnnotations.manufacturer must be a string.")


@dataclass(frozen=True, slots=True)
class ContactAnnotations:
    """
    One free-form annotation per contact, parallel to the probe's contact arrays.
    Entries may be empty strings.
    """
    annotations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.annotations is None:
            object.__setattr__(self, "annotations", ())
            return
        if isinstance(self.annotations, str) or not isinstance(self.annotations, Iterable):
            raise InvalidProbe("ContactAnnotations.annotations must be a sequence of strings.")
        values = tuple(self.annotations)
        for v in values:
            if not isinstance(v, str):
                raise InvalidProbe("ContactAnnotations entries must be strings.")
        object.__setattr__(self, "annotations", values)

    def __len__(self) -> int:
        return len(self.annotations)

    def __iter__(self) -> Iterator[str]:
        return iter(self.annotations)

    def __getitem__(self, index: int) -> str:
        return self.annotations[index]


def _optional_size(name: str, value: float | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidProbe(f"ContactShapeParam.{name} must be a number.")
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidProbe(f"ContactShapeParam.{name} must be a number, got {value!r}.") from None
    if not math.isfinite(v):
        raise InvalidProbe(f"ContactShapeParam.{name} must be finite, got {v}.")
    return v


SHAPE_PARAM_KEYS = ("radius", "width", "height")


@dataclass(frozen=True, slots=True)
class ContactShapeParam:
    """
    Geometry of a single contact.

    Which members are meaningful depends on the paired ContactShape
    (circle -> radius, square -> width, rect -> width + height). The pairing
    and the sign of the values are not enforced here.

    `explicit` names members that were given as null on the wire; to_dict()
    writes them back as None so a document keeps its shape.
    """
    radius: float | None = None
    width: float | None = None
    height: float | None = None
    explicit: frozenset[str] = field(default=frozenset(), compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", _optional_size("radius", self.radius))
        object.__setattr__(self, "width", _optional_size("width", self.width))
        object.__setattr__(self, "height", _optional_size("height", self.height))
        explicit = frozenset(self.explicit)
        unknown = explicit.difference(SHAPE_PARAM_KEYS)
        if unknown:
            raise InvalidProbe(f"ContactShapeParam.explicit has unknown members {sorted(unknown)}.")
        object.__setattr__(self, "explicit", explicit)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactShapeParam":
        """Build from a wire object, remembering which members were written as null."""
        return cls(
            radius=data.get("radius"),
            width=data.get("width"),
            height=data.get("height"),
            explicit=frozenset(k for k in SHAPE_PARAM_KEYS if k in data),
        )

    def to_dict(self) -> dict[str, float | None]:
        """Set members plus explicitly null ones, keyed as on the wire."""
        out: dict[str, float | None] = {}
        for key in SHAPE_PARAM_KEYS:
            value = getattr(self, key)
            if value is not None or key in self.explicit:
                out[key] = value
        return out

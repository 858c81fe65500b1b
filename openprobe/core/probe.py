# openprobe/core/probe.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import numpy as np

from .contact import Contact
from .enums import ContactShape, ProbeNdim, ProbeSiUnits
from .exceptions import ContactIndexOutOfRange, InvalidProbe
from .metadata import ContactAnnotations, ContactShapeParam, ProbeAnnotations


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


def _coords(name: str, value: Any, tail: tuple[int, ...]) -> np.ndarray:
    """Copy `value` into a float array of shape (k, *tail)."""
    try:
        arr = np.array(value, dtype=float)
    except (TypeError, ValueError) as e:
        raise InvalidProbe(f"Probe.{name} must be numeric: {e}") from e
    if arr.size == 0:
        arr = arr.reshape((0, *tail))
    if arr.ndim != 1 + len(tail) or arr.shape[1:] != tail:
        expected = ", ".join(["n", *map(str, tail)])
        raise InvalidProbe(f"Probe.{name} must have shape ({expected}), got {arr.shape}")
    if not np.isfinite(arr).all():
        raise InvalidProbe(f"Probe.{name} contains non-finite values (NaN/Inf).")
    return _readonly(arr)


def _channel_indices(value: Any) -> np.ndarray:
    arr = np.array(value)
    if arr.size == 0:
        return _readonly(np.zeros(0, dtype=np.int64))
    if arr.ndim != 1:
        raise InvalidProbe(f"Probe.device_channel_indices must be 1D, got shape {arr.shape}")
    if arr.dtype == bool or not np.issubdtype(arr.dtype, np.number):
        raise InvalidProbe("Probe.device_channel_indices must contain integers.")
    if np.issubdtype(arr.dtype, np.floating):
        if not np.isfinite(arr).all() or np.any(arr != np.round(arr)):
            raise InvalidProbe("Probe.device_channel_indices must contain integers.")
    return _readonly(arr.astype(np.int64))


def _labels(name: str, value: Iterable[Any]) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidProbe(f"Probe.{name} must be a sequence of strings.")
    out: list[str] = []
    for v in value:
        if isinstance(v, str):
            out.append(v)
        elif isinstance(v, (int, np.integer)) and not isinstance(v, bool):
            out.append(str(int(v)))
        else:
            raise InvalidProbe(f"Probe.{name} entries must be strings, got {v!r}.")
    return tuple(out)


def _shape_param(value: ContactShapeParam | Mapping[str, Any]) -> ContactShapeParam:
    if isinstance(value, ContactShapeParam):
        return value
    if isinstance(value, Mapping):
        return ContactShapeParam.from_dict(value)
    raise InvalidProbe(f"Contact shape parameters must be a mapping, got {value!r}.")


@dataclass(frozen=True, slots=True, eq=False)
class Probe:
    """
    One physical probe, possibly spanning several shanks.

    Contacts are stored as parallel per-contact arrays, as on the wire:
    entry i of every per-contact field describes contact i.

    Required: contact_positions, contact_shapes, contact_shape_params.
    Optional fields left as None are filled in when the probe is validated
    as part of a ProbeGroup. Lengths are only cross-checked there.
    """
    contact_positions: np.ndarray = field(repr=False)
    contact_shapes: tuple[ContactShape, ...] = field(repr=False)
    contact_shape_params: tuple[ContactShapeParam, ...] = field(repr=False)
    ndim: ProbeNdim = ProbeNdim.TWO
    si_units: ProbeSiUnits = ProbeSiUnits.UM
    annotations: ProbeAnnotations = field(default_factory=ProbeAnnotations)
    contact_plane_axes: np.ndarray | None = field(default=None, repr=False)
    contact_annotations: ContactAnnotations | None = field(default=None, repr=False)
    probe_planar_contour: np.ndarray | None = field(default=None, repr=False)
    device_channel_indices: np.ndarray | None = field(default=None, repr=False)
    contact_ids: tuple[str, ...] | None = field(default=None, repr=False)
    shank_ids: tuple[str, ...] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        try:
            ndim = ProbeNdim.parse(self.ndim)
            si_units = ProbeSiUnits.parse(self.si_units)
        except ValueError as e:
            raise InvalidProbe(str(e)) from e
        object.__setattr__(self, "ndim", ndim)
        object.__setattr__(self, "si_units", si_units)

        if self.annotations is None:
            object.__setattr__(self, "annotations", ProbeAnnotations())
        elif not isinstance(self.annotations, ProbeAnnotations):
            raise InvalidProbe("Probe.annotations must be a ProbeAnnotations instance.")

        if self.contact_positions is None:
            raise InvalidProbe("Probe.contact_positions is required.")
        if self.contact_shapes is None:
            raise InvalidProbe("Probe.contact_shapes is required.")
        if self.contact_shape_params is None:
            raise InvalidProbe("Probe.contact_shape_params is required.")

        object.__setattr__(
            self, "contact_positions", _coords("contact_positions", self.contact_positions, (int(ndim),))
        )
        try:
            shapes = tuple(ContactShape.parse(s) for s in self.contact_shapes)
        except (TypeError, ValueError) as e:
            raise InvalidProbe(f"Probe.contact_shapes: {e}") from e
        object.__setattr__(self, "contact_shapes", shapes)
        object.__setattr__(
            self, "contact_shape_params", tuple(_shape_param(p) for p in self.contact_shape_params)
        )

        if self.contact_plane_axes is not None:
            object.__setattr__(
                self,
                "contact_plane_axes",
                _coords("contact_plane_axes", self.contact_plane_axes, (2, int(ndim))),
            )
        if self.probe_planar_contour is not None:
            object.__setattr__(
                self,
                "probe_planar_contour",
                _coords("probe_planar_contour", self.probe_planar_contour, (int(ndim),)),
            )
        if self.contact_annotations is not None and not isinstance(
            self.contact_annotations, ContactAnnotations
        ):
            object.__setattr__(self, "contact_annotations", ContactAnnotations(self.contact_annotations))
        if self.device_channel_indices is not None:
            object.__setattr__(
                self, "device_channel_indices", _channel_indices(self.device_channel_indices)
            )
        if self.contact_ids is not None:
            object.__setattr__(self, "contact_ids", _labels("contact_ids", self.contact_ids))
        if self.shank_ids is not None:
            object.__setattr__(self, "shank_ids", _labels("shank_ids", self.shank_ids))

    @property
    def number_of_contacts(self) -> int:
        return int(self.contact_positions.shape[0])

    @property
    def shank_names(self) -> list[str]:
        """Distinct shank ids in order of first appearance."""
        if self.shank_ids is None:
            return []
        return list(dict.fromkeys(self.shank_ids))

    def get_contact(self, index: int) -> Contact:
        """
        Build the Contact at `index` from the parallel arrays.

        Raises ContactIndexOutOfRange if index is outside [0, number_of_contacts)
        or if a per-contact field is missing or too short (validate first).
        """
        n = self.number_of_contacts
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise ContactIndexOutOfRange(f"Contact index must be an integer, got {index!r}.")
        index = int(index)
        if not 0 <= index < n:
            raise ContactIndexOutOfRange(f"Contact index {index} out of range for {n} contacts.")

        for name in ("contact_shapes", "contact_shape_params", "device_channel_indices", "contact_ids", "shank_ids"):
            values = getattr(self, name)
            if values is None or len(values) <= index:
                raise ContactIndexOutOfRange(
                    f"Probe.{name} has no entry for contact {index}; validate the probe first."
                )

        x, y = self.contact_positions[index, :2]
        return Contact(
            pos_x=float(x),
            pos_y=float(y),
            shape=self.contact_shapes[index],
            shape_params=self.contact_shape_params[index],
            device_id=int(self.device_channel_indices[index]),
            contact_id=self.contact_ids[index],
            shank_id=self.shank_ids[index],
            index=index,
        )

    def get_contacts(self) -> list[Contact]:
        return [self.get_contact(i) for i in range(self.number_of_contacts)]

    def replace(self, **changes: Any) -> "Probe":
        """Return a new Probe with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    # ---- factory helpers ----
    @staticmethod
    def default_contact_shapes(n: int, shape: ContactShape | str) -> tuple[ContactShape, ...]:
        return (ContactShape.parse(shape),) * n

    @staticmethod
    def default_contact_plane_axes(n: int, ndim: ProbeNdim | int = ProbeNdim.TWO) -> np.ndarray:
        """n copies of the identity axis pair ((1, 0), (0, 1))."""
        eye = np.eye(2, int(ndim))
        return np.tile(eye, (n, 1, 1))

    @staticmethod
    def default_circle_params(n: int, radius: float) -> tuple[ContactShapeParam, ...]:
        return (ContactShapeParam(radius=radius),) * n

    @staticmethod
    def default_square_params(n: int, width: float) -> tuple[ContactShapeParam, ...]:
        return (ContactShapeParam(width=width),) * n

    @staticmethod
    def default_rect_params(n: int, width: float, height: float) -> tuple[ContactShapeParam, ...]:
        return (ContactShapeParam(width=width, height=height),) * n

    @staticmethod
    def default_device_channel_indices(n: int, offset: int = 0) -> np.ndarray:
        return np.arange(offset, offset + n, dtype=np.int64)

    @staticmethod
    def default_contact_ids(n: int) -> tuple[str, ...]:
        return tuple(str(i) for i in range(n))

    @staticmethod
    def default_shank_ids(n: int) -> tuple[str, ...]:
        return ("",) * n

# openprobe/core/probe_group.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, Sequence

import numpy as np

from ..config.models import ValidationSettings
from .contact import Contact
from .exceptions import (
    ArgumentLengthMismatch,
    DuplicateChannel,
    InvalidProbeGroup,
    ProbeIndexOutOfRange,
)
from .probe import Probe
from .validation import duplicate_device_channels, validate_probes


@dataclass(frozen=True, slots=True, eq=False)
class ProbeGroup:
    """
    ProbeGroup = probeinterface document: format metadata + the probes it describes.

    Design goals:
    - validated on construction: a ProbeGroup only exists in its valid,
      fully-defaulted form (contact ids, shank ids, plane axes and device
      channel indices are always set)
    - the caller's Probe objects are never modified; defaults are filled
      into new Probe objects owned by the group
    - immutable: with_device_channel_indices returns a new ProbeGroup

    Subclasses pin the accepted `specification` through SPECIFICATION.
    """
    SPECIFICATION: ClassVar[str | None] = None

    specification: str
    version: str
    probes: tuple[Probe, ...] = field(repr=False)
    settings: ValidationSettings = field(
        default_factory=ValidationSettings, repr=False, kw_only=True
    )

    def __post_init__(self) -> None:
        if self.settings is None:
            object.__setattr__(self, "settings", ValidationSettings())
        elif not isinstance(self.settings, ValidationSettings):
            raise InvalidProbeGroup("ProbeGroup.settings must be a ValidationSettings instance.")

        validated = validate_probes(
            self.specification,
            self.version,
            self.probes,
            self.settings,
            expected_specification=type(self).SPECIFICATION,
        )
        object.__setattr__(self, "probes", validated)

    @classmethod
    def from_group(cls, other: "ProbeGroup") -> "ProbeGroup":
        """Build a new group from a snapshot of `other`, re-running validation."""
        if not isinstance(other, ProbeGroup):
            raise InvalidProbeGroup("from_group() expects a ProbeGroup instance.")
        return cls(other.specification, other.version, other.probes, settings=other.settings)

    def copy(self) -> "ProbeGroup":
        return type(self).from_group(self)

    def validate(self) -> None:
        """Re-run the validation pipeline on the stored probes; a no-op for a valid group."""
        validate_probes(
            self.specification,
            self.version,
            self.probes,
            self.settings,
            expected_specification=type(self).SPECIFICATION,
        )

    # ---- sequence-like API over probes ----
    def __len__(self) -> int:
        return len(self.probes)

    def __iter__(self) -> Iterator[Probe]:
        return iter(self.probes)

    def __getitem__(self, index: int) -> Probe:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise ProbeIndexOutOfRange(f"Probe index must be an integer, got {index!r}.")
        if not 0 <= index < len(self.probes):
            raise ProbeIndexOutOfRange(
                f"Probe index {index} out of range for {len(self.probes)} probes."
            )
        return self.probes[index]

    # ---- aggregated views ----
    @property
    def number_of_contacts(self) -> int:
        return sum(p.number_of_contacts for p in self.probes)

    def get_contact_ids(self) -> list[str]:
        """All contact ids, probe by probe."""
        return [cid for p in self.probes for cid in p.contact_ids]

    def get_device_channel_indices(self) -> np.ndarray:
        """All device channel indices, probe by probe."""
        return np.concatenate([p.device_channel_indices for p in self.probes])

    def get_contacts(self) -> list[Contact]:
        return [c for p in self.probes for c in p.get_contacts()]

    # ---- transformations ----
    def with_device_channel_indices(
        self, probe_index: int, device_channel_indices: Sequence[int] | np.ndarray
    ) -> "ProbeGroup":
        """
        Return a new ProbeGroup where probe `probe_index` uses `device_channel_indices`.

        The new array must have one entry per contact of that probe, and the
        group must stay unique (ignoring -1) once it is in place. Both are
        checked before anything is built, so on failure nothing changes.
        """
        current = self[probe_index]
        candidate = current.replace(device_channel_indices=device_channel_indices)

        expected = len(current.device_channel_indices)
        actual = len(candidate.device_channel_indices)
        if actual != expected:
            raise ArgumentLengthMismatch(
                f"Incoming device channel indices have {actual} contacts, "
                f"but the existing probe {probe_index} has {expected} contacts."
            )

        probes = list(self.probes)
        probes[probe_index] = candidate
        duplicates = duplicate_device_channels(probes)
        if duplicates:
            raise DuplicateChannel(
                f"Device channel indices are not valid ({duplicates} repeated). "
                "Ensure that all values are either -1 or are unique."
            )

        return type(self)(self.specification, self.version, probes, settings=self.settings)

    # probeinterface name for the same operation; the result must be kept,
    # the receiving group is left as it was
    update_device_channel_indices = with_device_channel_indices


class ProbeInterfaceGroup(ProbeGroup):
    """ProbeGroup for documents written against the probeinterface specification."""

    __slots__ = ()

    SPECIFICATION = "probeinterface"

# openprobe/core/contact.py
from __future__ import annotations

from dataclasses import dataclass

from .enums import ContactShape
from .metadata import ContactShapeParam


@dataclass(frozen=True, slots=True)
class Contact:
    """Read-only view of one contact, assembled from a Probe's parallel arrays."""

    pos_x: float
    pos_y: float
    shape: ContactShape
    shape_params: ContactShapeParam
    device_id: int
    contact_id: str
    shank_id: str
    index: int

    @property
    def position(self) -> tuple[float, float]:
        return self.pos_x, self.pos_y

    @property
    def is_connected(self) -> bool:
        # -1 marks a contact that is not recorded
        return self.device_id != -1

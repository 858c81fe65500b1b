# openprobe/core/__init__.py
"""
Core domain objects for openprobe.

This module defines the probeinterface data model and its validator:
- Probe: one physical probe, contacts stored as parallel arrays
- Contact: read-only view of a single contact
- ProbeGroup: validated collection of probes (one probeinterface document)
- validation: the pure, step-by-step normalization pipeline behind ProbeGroup

The core layer is independent from the wire format.
"""

from .enums import ContactShape, ProbeNdim, ProbeSiUnits
from .metadata import ContactAnnotations, ContactShapeParam, ProbeAnnotations
from .contact import Contact
from .probe import Probe
from .probe_group import ProbeGroup, ProbeInterfaceGroup
from .exceptions import (
    ProbeInterfaceError,
    InvalidProbe,
    InvalidProbeGroup,
    MissingField,
    LengthMismatch,
    ContactIdParseError,
    DuplicateChannel,
    ArgumentLengthMismatch,
    ProbeFormatError,
    ContactIndexOutOfRange,
    ProbeIndexOutOfRange,
)


__all__ = [
    # enums
    "ContactShape",
    "ProbeNdim",
    "ProbeSiUnits",

    # metadata
    "ContactAnnotations",
    "ContactShapeParam",
    "ProbeAnnotations",

    # domain objects
    "Contact",
    "Probe",
    "ProbeGroup",
    "ProbeInterfaceGroup",

    # exceptions
    "ProbeInterfaceError",
    "InvalidProbe",
    "InvalidProbeGroup",
    "MissingField",
    "LengthMismatch",
    "ContactIdParseError",
    "DuplicateChannel",
    "ArgumentLengthMismatch",
    "ProbeFormatError",
    "ContactIndexOutOfRange",
    "ProbeIndexOutOfRange",
]

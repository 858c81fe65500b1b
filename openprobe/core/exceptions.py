# openprobe/core/exceptions.py
from __future__ import annotations


class ProbeInterfaceError(Exception):
    """Base error for all openprobe exceptions."""


# ---- Validation / construction errors ----
class InvalidProbe(ProbeInterfaceError, ValueError):
    """Raised when a Probe (or one of its value objects) is constructed with invalid inputs."""


class InvalidProbeGroup(ProbeInterfaceError, ValueError):
    """Raised when a ProbeGroup fails validation."""


class MissingField(InvalidProbeGroup):
    """Raised when specification, version or probes are missing or empty."""


class LengthMismatch(InvalidProbeGroup):
    """Raised when a per-contact field of a probe disagrees with its contact count."""

    def __init__(self, probe_index: int, field: str, expected: int, actual: int) -> None:
        self.probe_index = probe_index
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Probe {probe_index}: '{field}' has {actual} entries, "
            f"expected {expected} (one per contact)."
        )


class ContactIdParseError(InvalidProbeGroup):
    """Raised when a contact id that must be numeric cannot be parsed as an integer."""


class DuplicateChannel(InvalidProbeGroup):
    """Raised when device channel indices (ignoring -1) are not unique across all probes."""


# ---- Argument errors ----
class ArgumentLengthMismatch(ProbeInterfaceError, ValueError):
    """Raised when a replacement array does not match the length it replaces."""


class ProbeFormatError(ProbeInterfaceError, ValueError):
    """Raised when a wire document is not shaped like a probeinterface document."""


# ---- Lookup errors (also behave like IndexError for sequence-like APIs) ----
class ContactIndexOutOfRange(ProbeInterfaceError, IndexError):
    """Raised when a requested contact index is not present on a probe."""


class ProbeIndexOutOfRange(ProbeInterfaceError, IndexError):
    """Raised when a requested probe index is not present in a group."""

# openprobe/core/validation.py
"""
Validation and normalization pipeline for probe groups.

Every step is a pure function: it takes a tuple of probes and returns a tuple
of probes (new Probe objects where defaults were filled in, the same objects
otherwise). Nothing here mutates its input, so a failing step leaves the
caller's probes exactly as they were.

Step order matters:
    check_presence
    validate_variable_length
    set_default_contact_ids_if_missing
    force_contact_ids_to_zero_indexed
    set_empty_shank_ids_if_missing
    set_default_plane_axes_if_missing
    set_default_device_channel_indices_if_missing
    validate_device_channel_indices
"""
from __future__ import annotations

import re
from typing import Iterable, Sequence

import numpy as np

from .._logging import logger
from ..config.models import ValidationSettings
from .exceptions import (
    ContactIdParseError,
    DuplicateChannel,
    InvalidProbeGroup,
    LengthMismatch,
    MissingField,
)
from .probe import Probe

_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def _parse_int(value: str) -> int | None:
    if not _INT_RE.match(value):
        return None
    return int(value)


def check_presence(
    specification: str | None,
    version: str | None,
    probes: Iterable[Probe] | None,
    *,
    expected_specification: str | None = None,
    strict: bool = True,
) -> tuple[Probe, ...]:
    if not isinstance(specification, str) or not specification:
        raise MissingField("Specification string must be defined.")
    if not isinstance(version, str) or not version:
        raise MissingField("Version string must be defined.")
    if probes is None:
        raise MissingField("No probes are listed; probes must be given at construction.")
    if isinstance(probes, Probe):
        raise InvalidProbeGroup("ProbeGroup.probes must be a sequence of Probe instances.")

    probes = tuple(probes)
    if not probes:
        raise MissingField("No probes are listed; probes must be given at construction.")
    for i, p in enumerate(probes):
        if not isinstance(p, Probe):
            raise InvalidProbeGroup(f"ProbeGroup.probes[{i}] must be a Probe instance.")

    if expected_specification is not None and specification != expected_specification:
        if strict:
            raise InvalidProbeGroup(
                f"Specification must be '{expected_specification}', got '{specification}'."
            )
        logger.warning(
            f"Specification '{specification}' does not match '{expected_specification}'; continuing."
        )
    return probes


def validate_variable_length(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    """Every per-contact field that is present must have one entry per contact."""
    for i, p in enumerate(probes):
        n = p.number_of_contacts
        fields = {
            "contact_shapes": p.contact_shapes,
            "contact_shape_params": p.contact_shape_params,
            "contact_plane_axes": p.contact_plane_axes,
            "contact_ids": p.contact_ids,
            "shank_ids": p.shank_ids,
            "device_channel_indices": p.device_channel_indices,
            "contact_annotations": p.contact_annotations,
        }
        for name, values in fields.items():
            if values is not None and len(values) != n:
                raise LengthMismatch(i, name, n, len(values))
    return tuple(probes)


def set_default_contact_ids_if_missing(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    out = []
    for i, p in enumerate(probes):
        if p.contact_ids is None:
            logger.debug(f"Probe {i}: no contact ids, using 0..{p.number_of_contacts - 1}")
            p = p.replace(contact_ids=Probe.default_contact_ids(p.number_of_contacts))
        out.append(p)
    return tuple(out)


def force_contact_ids_to_zero_indexed(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    """
    Renumber 1-based contact ids to 0-based.

    All ids of the group must be integers. The renumbering applies only when,
    over the whole group, the ids are exactly a permutation of 1..N where N
    is the total number of contacts. The condition is global: probes that
    were numbered independently can trigger (or miss) it by coincidence.
    """
    numeric: list[list[int]] = []
    for i, p in enumerate(probes):
        ids = []
        for cid in p.contact_ids or ():
            value = _parse_int(cid)
            if value is None:
                raise ContactIdParseError(f"Probe {i}: contact id '{cid}' is not an integer.")
            ids.append(value)
        numeric.append(ids)

    flat = [v for ids in numeric for v in ids]
    if not flat:
        return tuple(probes)

    total = sum(p.number_of_contacts for p in probes)
    if min(flat) != 1 or max(flat) != total or len(set(flat)) != len(flat):
        return tuple(probes)

    logger.info(f"Contact ids are numbered 1..{total}; renumbering to 0..{total - 1}")
    return tuple(
        p.replace(contact_ids=tuple(str(v - 1) for v in ids))
        for p, ids in zip(probes, numeric)
    )


def set_empty_shank_ids_if_missing(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    out = []
    for i, p in enumerate(probes):
        if p.shank_ids is None:
            logger.debug(f"Probe {i}: no shank ids, using empty labels")
            p = p.replace(shank_ids=Probe.default_shank_ids(p.number_of_contacts))
        out.append(p)
    return tuple(out)


def set_default_plane_axes_if_missing(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    out = []
    for i, p in enumerate(probes):
        if p.contact_plane_axes is None:
            logger.debug(f"Probe {i}: no contact plane axes, using identity axes")
            p = p.replace(
                contact_plane_axes=Probe.default_contact_plane_axes(p.number_of_contacts, p.ndim)
            )
        out.append(p)
    return tuple(out)


def set_default_device_channel_indices_if_missing(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    """Missing indices are taken from the numeric contact ids; non-numeric ids give 0."""
    out = []
    for i, p in enumerate(probes):
        if p.device_channel_indices is None:
            logger.debug(f"Probe {i}: no device channel indices, deriving them from contact ids")
            indices = np.zeros(p.number_of_contacts, dtype=np.int64)
            for j, cid in enumerate(p.contact_ids or ()):
                value = _parse_int(cid)
                if value is not None:
                    indices[j] = value
            p = p.replace(device_channel_indices=indices)
        out.append(p)
    return tuple(out)


def duplicate_device_channels(probes: Sequence[Probe]) -> list[int]:
    """Connected channel indices (not -1) used by more than one contact of the group."""
    arrays = [p.device_channel_indices for p in probes if p.device_channel_indices is not None]
    if not arrays:
        return []
    all_indices = np.concatenate(arrays)
    active = all_indices[all_indices != -1]
    values, counts = np.unique(active, return_counts=True)
    return [int(v) for v in values[counts > 1]]


def device_channel_indices_are_unique(probes: Sequence[Probe]) -> bool:
    return not duplicate_device_channels(probes)


def validate_device_channel_indices(probes: Sequence[Probe]) -> tuple[Probe, ...]:
    duplicates = duplicate_device_channels(probes)
    if duplicates:
        raise DuplicateChannel(
            f"Device channel indices are not unique across all probes: {duplicates} used more than once."
        )
    return tuple(probes)


def validate_probes(
    specification: str | None,
    version: str | None,
    probes: Iterable[Probe] | None,
    settings: ValidationSettings | None = None,
    *,
    expected_specification: str | None = None,
) -> tuple[Probe, ...]:
    """Run the full pipeline and return the validated, fully-defaulted probes."""
    settings = settings or ValidationSettings()

    validated = check_presence(
        specification,
        version,
        probes,
        expected_specification=expected_specification,
        strict=settings.strict_specification,
    )
    validated = validate_variable_length(validated)
    validated = set_default_contact_ids_if_missing(validated)
    if settings.normalize_one_based_contact_ids:
        validated = force_contact_ids_to_zero_indexed(validated)
    validated = set_empty_shank_ids_if_missing(validated)
    validated = set_default_plane_axes_if_missing(validated)
    validated = set_default_device_channel_indices_if_missing(validated)
    validated = validate_device_channel_indices(validated)
    return validated

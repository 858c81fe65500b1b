# openprobe/io/probeinterface_json.py
"""
probeinterface JSON codec.

Maps parsed probeinterface documents (plain dicts, as returned by json.loads)
onto the core model and back. No file access happens here: callers read and
write the text themselves and use loads()/dumps(), or work on dicts with
probe_group_from_dict()/probe_group_to_dict().
"""
from __future__ import annotations

import json
from typing import Any, Mapping

from openprobe._logging import logger
from openprobe.config.models import SerializationSettings, Settings, ValidationSettings
from openprobe.core import (
    ContactAnnotations,
    MissingField,
    Probe,
    ProbeAnnotations,
    ProbeFormatError,
    ProbeGroup,
    ProbeInterfaceGroup,
)

GROUP_KEYS = ("specification", "version", "probes")

PROBE_REQUIRED_KEYS = (
    "ndim",
    "si_units",
    "annotations",
    "contact_positions",
    "contact_shapes",
    "contact_shape_params",
)
PROBE_OPTIONAL_KEYS = (
    "contact_annotations",
    "contact_plane_axes",
    "probe_planar_contour",
    "device_channel_indices",
    "contact_ids",
    "shank_ids",
)


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ProbeFormatError(f"{where} must be a JSON object, got {type(value).__name__}.")
    return value


def _log_unknown_keys(data: Mapping[str, Any], known: tuple[str, ...], where: str) -> None:
    unknown = [k for k in data if k not in known]
    if unknown:
        logger.debug(f"Ignoring unknown keys in {where}: {unknown}")


def _annotations_from_dict(value: Any, where: str) -> ProbeAnnotations:
    value = _require_mapping(value, f"{where}.annotations")
    _log_unknown_keys(value, ("name", "manufacturer"), f"{where}.annotations")
    return ProbeAnnotations(
        name=value.get("name", ""),
        manufacturer=value.get("manufacturer", ""),
    )


def _contact_annotations_from_wire(value: Any, where: str) -> ContactAnnotations | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        # probeinterface writers emit {} when there are no per-contact annotations
        if value:
            logger.debug(f"Ignoring keyed contact_annotations in {where}: {list(value)}")
        return None
    return ContactAnnotations(value)


def probe_from_dict(data: Mapping[str, Any], *, where: str = "probe") -> Probe:
    """Build an (unvalidated) Probe from its wire representation.

    Parameters
    ----------
    data:
        One element of the document's "probes" array.
    where:
        Location used in error messages, e.g. "probes[1]".
    """
    data = _require_mapping(data, where)
    for key in PROBE_REQUIRED_KEYS:
        if key not in data:
            raise MissingField(f"{where}: required key '{key}' is missing.")
    _log_unknown_keys(data, PROBE_REQUIRED_KEYS + PROBE_OPTIONAL_KEYS, where)

    shape_params = data["contact_shape_params"]
    if not isinstance(shape_params, list):
        raise ProbeFormatError(f"{where}.contact_shape_params must be a JSON array.")

    return Probe(
        ndim=data["ndim"],
        si_units=data["si_units"],
        annotations=_annotations_from_dict(data["annotations"], where),
        contact_positions=data["contact_positions"],
        contact_shapes=data["contact_shapes"],
        contact_shape_params=shape_params,
        contact_plane_axes=data.get("contact_plane_axes"),
        contact_annotations=_contact_annotations_from_wire(data.get("contact_annotations"), where),
        probe_planar_contour=data.get("probe_planar_contour"),
        device_channel_indices=data.get("device_channel_indices"),
        contact_ids=data.get("contact_ids"),
        shank_ids=data.get("shank_ids"),
    )


def probe_to_dict(probe: Probe) -> dict[str, Any]:
    """Wire representation of a Probe; fields that are None are left out."""
    out: dict[str, Any] = {
        "ndim": str(int(probe.ndim)),
        "si_units": probe.si_units.value,
        "annotations": {
            "name": probe.annotations.name,
            "manufacturer": probe.annotations.manufacturer,
        },
    }
    if probe.contact_annotations is not None:
        out["contact_annotations"] = list(probe.contact_annotations)
    out["contact_positions"] = probe.contact_positions.tolist()
    if probe.contact_plane_axes is not None:
        out["contact_plane_axes"] = probe.contact_plane_axes.tolist()
    out["contact_shapes"] = [s.value for s in probe.contact_shapes]
    out["contact_shape_params"] = [p.to_dict() for p in probe.contact_shape_params]
    if probe.probe_planar_contour is not None:
        out["probe_planar_contour"] = probe.probe_planar_contour.tolist()
    if probe.device_channel_indices is not None:
        out["device_channel_indices"] = probe.device_channel_indices.tolist()
    if probe.contact_ids is not None:
        out["contact_ids"] = list(probe.contact_ids)
    if probe.shank_ids is not None:
        out["shank_ids"] = list(probe.shank_ids)
    return out


def _validation_settings(settings: ValidationSettings | Settings | None) -> ValidationSettings:
    if settings is None:
        return ValidationSettings()
    if isinstance(settings, Settings):
        return settings.validation
    return settings


def _serialization_settings(settings: SerializationSettings | Settings | None) -> SerializationSettings:
    if settings is None:
        return SerializationSettings()
    if isinstance(settings, Settings):
        return settings.serialization
    return settings


def probe_group_from_dict(
    data: Mapping[str, Any],
    *,
    group_cls: type[ProbeGroup] = ProbeInterfaceGroup,
    settings: ValidationSettings | Settings | None = None,
) -> ProbeGroup:
    """Build and validate a ProbeGroup from a parsed probeinterface document.

    Unknown keys are ignored. Missing required keys raise MissingField; any
    validation failure of the group propagates unchanged. `settings` may be a
    full Settings object (e.g. from ConfigLoader); its validation part is used.
    """
    data = _require_mapping(data, "document")
    for key in GROUP_KEYS:
        if key not in data:
            raise MissingField(f"document: required key '{key}' is missing.")
    _log_unknown_keys(data, GROUP_KEYS, "document")

    raw_probes = data["probes"]
    if raw_probes is None:
        raise MissingField("document: 'probes' is null.")
    if not isinstance(raw_probes, list):
        raise ProbeFormatError("document.probes must be a JSON array.")

    probes = [probe_from_dict(p, where=f"probes[{i}]") for i, p in enumerate(raw_probes)]
    return group_cls(
        data["specification"],
        data["version"],
        probes,
        settings=_validation_settings(settings),
    )


def probe_group_to_dict(group: ProbeGroup) -> dict[str, Any]:
    return {
        "specification": group.specification,
        "version": group.version,
        "probes": [probe_to_dict(p) for p in group.probes],
    }


def loads(
    text: str | bytes,
    *,
    group_cls: type[ProbeGroup] = ProbeInterfaceGroup,
    settings: ValidationSettings | Settings | None = None,
) -> ProbeGroup:
    """Parse a probeinterface JSON document into a validated ProbeGroup."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProbeFormatError(f"Document is not valid JSON: {e}") from e
    return probe_group_from_dict(data, group_cls=group_cls, settings=settings)


def dumps(group: ProbeGroup, settings: SerializationSettings | Settings | None = None) -> str:
    """Serialize a ProbeGroup to probeinterface JSON text."""
    settings = _serialization_settings(settings)
    return json.dumps(
        probe_group_to_dict(group),
        indent=settings.indent,
        sort_keys=settings.sort_keys,
    )

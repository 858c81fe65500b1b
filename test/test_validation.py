# test/test_validation.py
import numpy as np
import pytest

from openprobe.config import ValidationSettings
from openprobe.core import (
    ContactIdParseError,
    ContactShape,
    DuplicateChannel,
    InvalidProbeGroup,
    LengthMismatch,
    MissingField,
    Probe,
)
from openprobe.core.validation import (
    check_presence,
    device_channel_indices_are_unique,
    force_contact_ids_to_zero_indexed,
    set_default_contact_ids_if_missing,
    set_default_device_channel_indices_if_missing,
    set_default_plane_axes_if_missing,
    set_empty_shank_ids_if_missing,
    validate_device_channel_indices,
    validate_probes,
    validate_variable_length,
)


def _probe(n: int, **kwargs) -> Probe:
    return Probe(
        contact_positions=[[0.0, 20.0 * i] for i in range(n)],
        contact_shapes=Probe.default_contact_shapes(n, ContactShape.SQUARE),
        contact_shape_params=Probe.default_square_params(n, 12.0),
        **kwargs,
    )


def test_check_presence():
    probes = [_probe(1)]
    assert check_presence("probeinterface", "0.2.21", probes) == tuple(probes)

    with pytest.raises(MissingField):
        check_presence("", "0.2.21", probes)
    with pytest.raises(MissingField):
        check_presence("probeinterface", None, probes)
    with pytest.raises(MissingField):
        check_presence("probeinterface", "0.2.21", [])
    with pytest.raises(MissingField):
        check_presence("probeinterface", "0.2.21", None)
    with pytest.raises(InvalidProbeGroup):
        check_presence("probeinterface", "0.2.21", [{"contact_positions": []}])


def test_check_presence_expected_specification():
    probes = [_probe(1)]
    with pytest.raises(InvalidProbeGroup):
        check_presence("other", "1", probes, expected_specification="probeinterface")

    out = check_presence("other", "1", probes, expected_specification="probeinterface", strict=False)
    assert len(out) == 1


@pytest.mark.parametrize(
    "field, value",
    [
        ("contact_ids", ["0", "1"]),
        ("shank_ids", [""]),
        ("device_channel_indices", [0, 1, 2, 3]),
        ("contact_plane_axes", [[[1.0, 0.0], [0.0, 1.0]]]),
        ("contact_annotations", ["a", "b"]),
        ("contact_shape_params", [{"width": 12.0}]),
        ("contact_shapes", ["square", "square"]),
    ],
)
def test_validate_variable_length_reports_field(field, value):
    probes = [_probe(2), _probe(3).replace(**{field: value})]
    with pytest.raises(LengthMismatch) as excinfo:
        validate_variable_length(probes)
    assert excinfo.value.probe_index == 1
    assert excinfo.value.field == field
    assert excinfo.value.expected == 3


def test_validate_variable_length_accepts_missing_optional_fields():
    probes = (_probe(2), _probe(3, shank_ids=["a", "a", "b"]))
    assert validate_variable_length(probes) == probes


def test_default_contact_ids_only_where_missing():
    given = _probe(2, contact_ids=["7", "8"])
    missing = _probe(3)
    out = set_default_contact_ids_if_missing([given, missing])

    assert out[0] is given
    assert out[1].contact_ids == ("0", "1", "2")
    assert missing.contact_ids is None


def test_zero_index_normalization_whole_group():
    probes = [_probe(2, contact_ids=["1", "2"]), _probe(2, contact_ids=["3", "4"])]
    out = force_contact_ids_to_zero_indexed(probes)
    assert out[0].contact_ids == ("0", "1")
    assert out[1].contact_ids == ("2", "3")


def test_zero_index_normalization_is_not_applied_when_zero_based():
    probes = [_probe(2, contact_ids=["0", "1"]), _probe(2, contact_ids=["2", "3"])]
    out = force_contact_ids_to_zero_indexed(probes)
    assert out[0].contact_ids == ("0", "1")
    assert out[1].contact_ids == ("2", "3")


@pytest.mark.parametrize(
    "ids_a, ids_b",
    [
        (["1", "2"], ["2", "4"]),  # duplicate
        (["1", "2"], ["3", "5"]),  # max != N
        (["2", "3"], ["4", "5"]),  # min != 1
    ],
)
def test_zero_index_normalization_requires_permutation(ids_a, ids_b):
    probes = [_probe(2, contact_ids=ids_a), _probe(2, contact_ids=ids_b)]
    out = force_contact_ids_to_zero_indexed(probes)
    assert list(out[0].contact_ids) == ids_a
    assert list(out[1].contact_ids) == ids_b


def test_zero_index_normalization_rewrites_permutation_in_place_order():
    probes = [_probe(3, contact_ids=["3", "1", "2"])]
    out = force_contact_ids_to_zero_indexed(probes)
    assert out[0].contact_ids == ("2", "0", "1")


def test_zero_index_normalization_requires_numeric_ids():
    with pytest.raises(ContactIdParseError):
        force_contact_ids_to_zero_indexed([_probe(2, contact_ids=["e1", "e2"])])
    with pytest.raises(ContactIdParseError):
        force_contact_ids_to_zero_indexed([_probe(1, contact_ids=["1_0"])])


def test_empty_shank_ids_and_plane_axes_defaults():
    out = set_empty_shank_ids_if_missing([_probe(2), _probe(1, shank_ids=["s0"])])
    assert out[0].shank_ids == ("", "")
    assert out[1].shank_ids == ("s0",)

    axes = set_default_plane_axes_if_missing([_probe(2)])[0].contact_plane_axes
    assert axes.shape == (2, 2, 2)
    assert np.allclose(axes[0], np.eye(2))


def test_default_device_channel_indices_follow_contact_ids():
    probes = [_probe(3, contact_ids=["4", "x", "6"]), _probe(1, contact_ids=["9"], device_channel_indices=[1])]
    out = set_default_device_channel_indices_if_missing(probes)
    assert out[0].device_channel_indices.tolist() == [4, 0, 6]
    assert out[1].device_channel_indices.tolist() == [1]


def test_device_channel_uniqueness_is_global_and_ignores_disabled():
    ok = [_probe(3, device_channel_indices=[-1, 0, -1]), _probe(2, device_channel_indices=[-1, 1])]
    assert device_channel_indices_are_unique(ok)
    assert validate_device_channel_indices(ok) == tuple(ok)

    clash = [_probe(2, device_channel_indices=[5, 6]), _probe(2, device_channel_indices=[7, 5])]
    assert not device_channel_indices_are_unique(clash)
    with pytest.raises(DuplicateChannel, match=r"\[5\]"):
        validate_device_channel_indices(clash)


def test_several_disabled_channels_in_two_probes_are_valid():
    probes = [
        _probe(4, device_channel_indices=[-1, -1, 0, -1]),
        _probe(3, device_channel_indices=[-1, 1, -1]),
    ]
    out = validate_probes("probeinterface", "0.2.21", probes)
    assert np.concatenate([p.device_channel_indices for p in out]).tolist() == [-1, -1, 0, -1, -1, 1, -1]

    probes[1] = probes[1].replace(device_channel_indices=[-1, 0, -1])
    with pytest.raises(DuplicateChannel, match=r"\[0\]"):
        validate_probes("probeinterface", "0.2.21", probes)


def test_validate_probes_full_pipeline_defaults():
    out = validate_probes("probeinterface", "0.2.21", [_probe(3)])
    p = out[0]
    assert p.contact_ids == ("0", "1", "2")
    assert p.shank_ids == ("", "", "")
    assert p.device_channel_indices.tolist() == [0, 1, 2]
    assert p.contact_plane_axes.shape == (3, 2, 2)


def test_validate_probes_respects_normalization_setting():
    probes = [_probe(2, contact_ids=["1", "2"])]

    out = validate_probes("probeinterface", "1", probes)
    assert out[0].contact_ids == ("0", "1")

    settings = ValidationSettings(normalize_one_based_contact_ids=False)
    out = validate_probes("probeinterface", "1", probes, settings)
    assert out[0].contact_ids == ("1", "2")
    assert out[0].device_channel_indices.tolist() == [1, 2]

    named = [_probe(2, contact_ids=["e1", "e2"], device_channel_indices=[0, 1])]
    out = validate_probes("probeinterface", "1", named, settings)
    assert out[0].contact_ids == ("e1", "e2")


def test_validate_probes_does_not_mutate_inputs():
    raw = _probe(2, contact_ids=["1", "2"])
    validate_probes("probeinterface", "1", [raw])
    assert raw.contact_ids == ("1", "2")
    assert raw.shank_ids is None
    assert raw.device_channel_indices is None

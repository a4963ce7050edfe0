"""
Tests for structural inference over REST JSON payloads.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from engine.frames import FieldKind, FrameType
from engine.normalize.rest import JsonShape, RestNormalizer, classify

START = datetime(2024, 1, 1, tzinfo=timezone.utc)
NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _normalizer(step: timedelta = timedelta(minutes=1)) -> RestNormalizer:
    return RestNormalizer(start=START, step=step, now=NOW)


@pytest.mark.parametrize(
    "payload,shape",
    [
        ([{"a": 1}], JsonShape.array_of_objects),
        ([1, 2], JsonShape.array_of_scalars),
        ([], JsonShape.empty_array),
        ({"data": [{"a": 1}]}, JsonShape.object_with_data_array),
        ({"data": {"a": 1}}, JsonShape.object),
        ({"cpu": 1}, JsonShape.object),
        (42, JsonShape.scalar),
        ("ok", JsonShape.scalar),
        (True, JsonShape.scalar),
        (None, JsonShape.scalar),
    ],
)
def test_classify(payload, shape):
    assert classify(payload) is shape


def test_data_envelope_with_timestamps_is_time_series():
    payload = {
        "data": [
            {"time": "2024-01-01T00:00:00Z", "value": 5},
            {"time": "2024-01-01T00:01:00Z", "value": 7},
        ]
    }
    frames = _normalizer().to_frames(payload)

    assert len(frames) == 1
    frame = frames[0]
    assert frame.type == FrameType.timeseries
    assert [f.name for f in frame.fields] == ["time", "value"]
    assert frame.fields[0].values == [START, START + timedelta(minutes=1)]
    assert frame.get_field("value").values == [5.0, 7.0]
    assert frame.row_count == 2


def test_timestamp_key_priority_per_row():
    frame = _normalizer().to_frame([{"date": "2024-01-01T00:00:00Z", "time": 1704067260, "v": 1}])
    assert frame.fields[0].values == [START + timedelta(minutes=1)]
    assert [f.name for f in frame.fields] == ["time", "v"]


def test_rows_without_timestamp_are_synthesized_from_range_start():
    payload = [
        {"value": 1},
        {"ts": 1704070800000, "value": 2},
        {"value": 3},
    ]
    frame = _normalizer(step=timedelta(seconds=30)).to_frame(payload)
    assert frame.type == FrameType.timeseries
    assert frame.fields[0].values == [
        START,
        START + timedelta(hours=1),
        START + timedelta(seconds=60),
    ]
    assert frame.get_field("value").values == [1.0, 2.0, 3.0]


def test_numeric_fields_come_from_first_row_and_include_numeric_strings():
    payload = [
        {"time": 1704067200, "cpu": "0.5", "host": "a", "mem": 10, "up": True},
        {"time": 1704067260, "cpu": "0.7", "host": "b", "mem": 12, "extra": 1},
    ]
    frame = _normalizer().to_frame(payload)
    assert [f.name for f in frame.fields] == ["time", "cpu", "mem"]
    assert all(f.kind == FieldKind.number for f in frame.fields[1:])
    assert frame.get_field("cpu").values == [0.5, 0.7]


def test_missing_keys_stay_aligned_by_name():
    payload = [
        {"time": 1704067200, "a": 1, "b": 2},
        {"time": 1704067260, "b": 4},
        {"time": 1704067320, "a": "n/a", "b": 6},
    ]
    frame = _normalizer().to_frame(payload)
    assert frame.get_field("a").values == [1.0, None, None]
    assert frame.get_field("b").values == [2.0, 4.0, 6.0]
    assert frame.is_aligned
    assert len(frame.time_field) == len(frame.get_field("a"))


def test_array_without_timestamps_is_table():
    frame = _normalizer().to_frame([{"cpu": 1, "name": "x"}, {"cpu": 2, "name": "y"}])
    assert frame.type == FrameType.table
    assert frame.time_field is None
    assert [f.name for f in frame.fields] == ["cpu"]
    assert frame.fields[0].values == [1.0, 2.0]


def test_array_of_scalars_is_single_untyped_field():
    frame = _normalizer().to_frame([1, "two", None])
    assert len(frame.fields) == 1
    assert frame.fields[0].name == "value"
    assert frame.fields[0].kind == FieldKind.other
    assert frame.fields[0].values == [1, "two", None]


def test_empty_array_is_single_empty_field():
    frames = _normalizer().to_frames([])
    assert len(frames) == 1
    assert len(frames[0].fields) == 1
    assert frames[0].fields[0].name == "value"
    assert frames[0].fields[0].values == []


def test_single_object_is_one_row_table_with_verbatim_values():
    frame = _normalizer().to_frame({"cpu": 42, "status": "ok", "tags": ["a"]})
    assert frame.type == FrameType.table
    assert [f.name for f in frame.fields] == ["cpu", "status", "tags"]
    assert frame.get_field("cpu").values == [42]
    assert frame.get_field("cpu").kind == FieldKind.number
    assert frame.get_field("status").values == ["ok"]
    assert frame.get_field("status").kind == FieldKind.string
    assert frame.get_field("tags").values == [["a"]]
    assert frame.row_count == 1


@pytest.mark.parametrize("value", [42, "ok", False])
def test_scalar_is_stamped_with_now(value):
    frame = _normalizer().to_frame(value)
    assert [f.name for f in frame.fields] == ["time", "value"]
    assert frame.fields[0].values == [NOW]
    assert frame.fields[1].values == [value]


def test_unparseable_row_timestamp_falls_back_to_now():
    frame = _normalizer().to_frame([{"time": "soon", "v": 1}])
    assert frame.fields[0].values == [NOW]


def test_normalization_is_structurally_idempotent():
    payload = [{"time": 1704067200, "a": 1, "b": "2"}, {"time": 1704067260, "a": 3, "b": "4"}]
    first = _normalizer().to_frame(payload)
    second = _normalizer().to_frame(payload)
    assert [(f.name, f.kind) for f in first.fields] == [(f.name, f.kind) for f in second.fields]
    assert first.to_dict() == second.to_dict()

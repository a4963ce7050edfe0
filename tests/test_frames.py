from datetime import datetime, timezone

from engine.frames import Field, FieldKind, Frame, FrameType, epoch_millis


def test_epoch_millis_treats_naive_as_utc():
    assert epoch_millis(datetime(2024, 1, 1, tzinfo=timezone.utc)) == 1704067200000
    assert epoch_millis(datetime(2024, 1, 1)) == 1704067200000


def test_field_serialization():
    f = Field(
        "value",
        FieldKind.number,
        [1.0, float("nan"), float("inf"), None],
        labels={"job": "api"},
        display_name="api",
    )
    assert f.to_dict() == {
        "name": "value",
        "type": "number",
        "values": [1.0, None, None, None],
        "labels": {"job": "api"},
        "config": {"displayNameFromDS": "api"},
    }


def test_time_field_serializes_to_epoch_millis():
    f = Field("time", FieldKind.time, [datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)])
    assert f.to_dict() == {"name": "time", "type": "time", "values": [1704067201000]}


def test_frame_serialization_and_lookups():
    frame = Frame(
        fields=[
            Field("time", FieldKind.time, [datetime(2024, 1, 1, tzinfo=timezone.utc)]),
            Field("line", FieldKind.string, ["hello"]),
        ],
        type=FrameType.log_lines,
        custom={"labels": {"job": "api"}},
    )
    assert frame.row_count == 1
    assert frame.is_aligned
    assert frame.time_field.name == "time"
    assert frame.get_field("line").values == ["hello"]
    assert frame.get_field("missing") is None
    assert frame.to_dict() == {
        "name": "",
        "meta": {"type": "log-lines", "custom": {"labels": {"job": "api"}}},
        "fields": [
            {"name": "time", "type": "time", "values": [1704067200000]},
            {"name": "line", "type": "string", "values": ["hello"]},
        ],
    }


def test_untyped_frame_has_empty_meta():
    frame = Frame(fields=[Field("value", FieldKind.other, [])])
    assert frame.row_count == 0
    assert frame.time_field is None
    assert frame.to_dict()["meta"] == {}


def test_misaligned_frame_is_detected():
    frame = Frame(fields=[Field("a", FieldKind.number, [1]), Field("b", FieldKind.number, [])])
    assert not frame.is_aligned

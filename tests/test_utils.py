import json
from dataclasses import dataclass
from datetime import timedelta

from bson import ObjectId

from itemshop.utils import convert_string_time_to_time, convert_to_object, debug, local_time


def test_debug_prints_tab_indented_json(capsys):
    debug({"app": "item", "status": "OK"})
    out = capsys.readouterr().out
    assert json.loads(out) == {"app": "item", "status": "OK"}
    assert "\t" in out


def test_debug_handles_dataclass(capsys):
    @dataclass
    class Sample:
        title: str
        damage: int

    debug(Sample("Iron Sword", 50))
    assert json.loads(capsys.readouterr().out) == {"title": "Iron Sword", "damage": 50}


def test_local_time_is_bangkok():
    assert local_time().utcoffset() == timedelta(hours=7)


def test_convert_string_time_to_time():
    result = convert_string_time_to_time("2024-01-02T03:04:05.123 +0000 UTC")
    assert result.utcoffset() == timedelta(hours=7)
    assert result.hour == 10
    assert result.microsecond == 123000


def test_convert_string_time_invalid_gives_zero_time():
    result = convert_string_time_to_time("not a time")
    assert result.year == 1
    assert result.utcoffset() == timedelta(hours=7)


def test_convert_to_object_round_trip():
    oid = ObjectId()
    assert convert_to_object(str(oid)) == oid


def test_convert_to_object_invalid():
    assert convert_to_object("xyz") == ObjectId("0" * 24)
import datetime
import enum

import pytest


class Colour(enum.Enum):
    RED = "red"
    BLUE = "blue"


@pytest.fixture
def target():
    from ..converters import DefaultBasicTypeConverterImpl

    return DefaultBasicTypeConverterImpl()


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (Colour.RED, "red"),
        (datetime.date(2022, 3, 4), "2022-03-04"),
        (datetime.datetime(2022, 3, 4, 5, 6, 7), "2022-03-04T05:06:07"),
        (3, 3),
        ("x", "x"),
    ],
)
def test_to_wire(target, value, expected):
    assert target.convert_to_wire_value(None, value) == expected


@pytest.mark.parametrize(
    "typ, value, expected",
    [
        (None, {"a": 1}, {"a": 1}),
        (str, None, None),
        (Colour, "blue", Colour.BLUE),
        (bool, "TRUE", True),
        (bool, "0", False),
        (bool, 1, True),
        (int, "12", 12),
        (float, "1.5", 1.5),
        (str, 12, "12"),
        (datetime.date, "2022-03-04", datetime.date(2022, 3, 4)),
        (datetime.date, "2022-03-04T10:00:00Z", datetime.date(2022, 3, 4)),
        (
            datetime.datetime,
            "2022-03-04T10:00:00Z",
            datetime.datetime(2022, 3, 4, 10, tzinfo=datetime.timezone.utc),
        ),
    ],
)
def test_from_wire(target, typ, value, expected):
    assert target.convert_from_wire_value(typ, value) == expected


@pytest.mark.parametrize(
    "typ, value",
    [(Colour, "green"), (bool, "maybe"), (int, "twelve")],
)
def test_from_wire_failure(target, typ, value):
    with pytest.raises((TypeError, ValueError)):
        target.convert_from_wire_value(typ, value)


@pytest.mark.parametrize(
    "typ, value, expected",
    [
        (None, object(), True),
        (str, None, True),
        (float, 1, True),
        (float, True, False),
        (int, False, False),
        (datetime.date, datetime.date(2022, 1, 1), True),
        (datetime.date, datetime.datetime(2022, 1, 1), False),
        (str, b"x", False),
    ],
)
def test_accepts(target, typ, value, expected):
    assert target.accepts(typ, value) is expected

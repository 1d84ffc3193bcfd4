import logging

import numpy as np
import pytest

from partkit import (
    FloatCurve,
    get_bool,
    get_bools,
    get_curve,
    get_double,
    get_float,
    get_floats,
    get_int,
    get_string,
    get_strings,
    get_vector3,
    parse_config,
)

LOGGER = "partkit.config_values"


def _module(text: str):
    return parse_config(text)


def test_strings():
    node = _module("name = wheel\ntag = a\ntag = b")

    assert get_string(node, "name") == "wheel"
    assert get_string(node, "missing") == ""
    assert get_string(node, "missing", "fallback") == "fallback"
    assert get_strings(node, "tag") == ["a", "b"]
    assert get_strings(node, "missing") == []


@pytest.mark.parametrize("text, expected", [("True", True), ("false", False), (" TRUE ", True)])
def test_bool_values(text, expected):
    node = _module(f"enabled = {text}")

    assert get_bool(node, "enabled") is expected


def test_malformed_bool_logs_and_returns_default(caplog):
    node = _module("enabled = yes")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        assert get_bool(node, "enabled", True) is True

    assert "not recognized as a valid Boolean" in caplog.text


def test_missing_values_use_defaults_silently(caplog):
    node = _module("")

    with caplog.at_level(logging.DEBUG, logger=LOGGER):
        assert get_bool(node, "enabled") is False
        assert get_int(node, "count") == 0
        assert get_int(node, "count", 4) == 4
        assert get_float(node, "ratio", 1.5) == 1.5
        assert get_double(node, "ratio") == 0.0
        assert get_floats(node, "list") == []

    assert caplog.records == []


def test_get_bools_skips_malformed_entries(caplog):
    node = _module("flag = true\nflag = nope\nflag = False")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        assert get_bools(node, "flag") == [True, False]

    assert "nope" in caplog.text


def test_numeric_values():
    node = _module("count = 12\nratio = 0.1\nbad = 1.2.3")

    assert get_int(node, "count") == 12
    assert get_float(node, "ratio") == float(np.float32(0.1))
    assert get_double(node, "ratio") == 0.1
    assert get_int(node, "ratio", 7) == 7
    assert get_double(node, "bad", 2.0) == 2.0


def test_malformed_number_is_logged(caplog):
    node = _module("count = many")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        assert get_int(node, "count", 3) == 3

    assert "count" in caplog.text


def test_float_lists():
    node = _module("sizes = 1, 2.5,3\nbroken = 1,x\nempty =")

    assert get_floats(node, "sizes") == [1.0, 2.5, 3.0]
    assert get_floats(node, "broken", [9.0]) == [9.0]
    assert get_floats(node, "empty", [4.0]) == [4.0]


def test_vector3_parses_three_components():
    node = _module("offset = 0.5, -1, 2")

    np.testing.assert_array_equal(get_vector3(node, "offset"), [0.5, -1.0, 2.0])


def test_vector3_missing_without_default_logs(caplog):
    node = _module("")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        vec = get_vector3(node, "offset")

    np.testing.assert_array_equal(vec, np.zeros(3))
    assert "No value for name: offset" in caplog.text


def test_vector3_missing_with_default_is_silent(caplog):
    node = _module("")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        vec = get_vector3(node, "offset", (1, 2, 3))

    np.testing.assert_array_equal(vec, [1.0, 2.0, 3.0])
    assert caplog.records == []


@pytest.mark.parametrize("text", ["1, 2", "a, b, c"])
def test_vector3_malformed_logs_and_falls_back(text, caplog):
    node = _module(f"offset = {text}")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        vec = get_vector3(node, "offset", (0, 0, 1))

    np.testing.assert_array_equal(vec, [0.0, 0.0, 1.0])
    assert "ERROR parsing values for Vector3" in caplog.text


def test_curve_reads_two_and_four_token_keys():
    node = _module(
        """
torqueCurve
{
    key = 0 0
    key = 1	10 0 0
}
"""
    )

    curve = get_curve(node, "torqueCurve")

    assert [(k.time, k.value) for k in curve.keys] == [(0.0, 0.0), (1.0, 10.0)]
    assert curve.keys[1].in_tangent == 0.0
    assert curve.evaluate(1.0) == pytest.approx(10.0)


def test_curve_skips_malformed_keys(caplog):
    node = _module("torqueCurve\n{\n key = 0 0\n key = x 1\n key = 1 2 3\n key = 2 4\n}")

    with caplog.at_level(logging.WARNING, logger=LOGGER):
        curve = get_curve(node, "torqueCurve")

    assert [k.time for k in curve.keys] == [0.0, 2.0]
    assert caplog.text.count("skipping malformed curve key") == 2


def test_missing_curve_copies_default():
    default = FloatCurve()
    default.add(0.0, 1.0, 0.0, 0.0)
    default.add(5.0, 2.0, 0.0, 0.0)

    curve = get_curve(_module(""), "torqueCurve", default)

    assert curve is not default
    assert [(k.time, k.value) for k in curve.keys] == [(0.0, 1.0), (5.0, 2.0)]
    curve.add(9.0, 9.0)
    assert len(default) == 2


def test_missing_curve_without_default_is_linear():
    curve = get_curve(_module(""), "torqueCurve")

    assert curve.evaluate(0.25) == pytest.approx(0.25)
    assert curve.evaluate(1.0) == pytest.approx(1.0)

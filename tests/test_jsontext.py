"""Tests for the stack-based JSON text codec."""

import json
import math

import pytest

from cherries._jsontext import dumps, loads

SAMPLE = {
    "label": "ünïcode \"quoted\"",
    "value": [1, 2.5, None, True, {"nested": []}, {}],
    "unit": "meter",
}


class TestDumps:
    def test_compact_has_no_spaces(self) -> None:
        assert dumps({"a": [1, 2], "b": {}}) == '{"a":[1,2],"b":{}}'

    @pytest.mark.parametrize("indent", [0, 2, 4])
    def test_indented_matches_json_module(self, indent: int) -> None:
        assert dumps(SAMPLE, indent=indent) == json.dumps(SAMPLE, indent=indent)

    def test_non_finite_floats(self) -> None:
        assert dumps([math.inf, -math.inf]) == "[Infinity,-Infinity]"

    def test_rejects_unknown_types(self) -> None:
        with pytest.raises(TypeError):
            dumps({"value": object()})

    def test_rejects_non_string_keys(self) -> None:
        with pytest.raises(TypeError, match="keys must be strings"):
            dumps({1: "one"})

    def test_deep_nesting(self) -> None:
        data: list = []
        for _ in range(5000):
            data = [data]

        assert dumps(data) == "[" * 5000 + "[]" + "]" * 5000


class TestLoads:
    def test_reads_json_module_output(self) -> None:
        assert loads(json.dumps(SAMPLE, indent=2)) == SAMPLE
        assert loads(json.dumps(SAMPLE)) == SAMPLE

    def test_bytes(self) -> None:
        assert loads(json.dumps(SAMPLE).encode("utf-8")) == SAMPLE

    def test_top_level_scalar(self) -> None:
        assert loads(" 42 ") == 42

    def test_non_finite_constants(self) -> None:
        values = loads("[Infinity, -Infinity, NaN]")

        assert values[:2] == [math.inf, -math.inf]
        assert math.isnan(values[2])

    def test_deep_nesting(self) -> None:
        data = loads("[" * 5000 + "]" * 5000)

        depth = 0
        while data:
            depth += 1
            data = data[0]
        assert depth == 4999

    @pytest.mark.parametrize(
        "text",
        ["", "[1,]", '{"a" 1}', "{1: 2}", "[1 2]", '{"a": 1', "[1] 2"],
    )
    def test_malformed(self, text: str) -> None:
        with pytest.raises(json.JSONDecodeError):
            loads(text)

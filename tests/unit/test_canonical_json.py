"""
Canonical JSON Unit Tests
Tests for core/schemas/canonical.py

Tests:
1. Deterministic ordering - dict keys sorted regardless of insertion order
2. Bytes rendered as 0x-prefixed lowercase hex
3. None excluded from dicts and models
4. Floats have no canonical form
5. Pydantic models serialize through their JSON mode
"""
from enum import Enum
from typing import Optional

import pytest
from pydantic import BaseModel

from core.schemas.canonical import (
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    loads_canonical,
)
from core.schemas.element import ElementField
from core.schemas.errors import CanonicalizationException


class SampleEnum(str, Enum):
    MIXER = "mixer"


class SampleModel(BaseModel):
    tree_id: int
    root: ElementField
    kind: SampleEnum = SampleEnum.MIXER
    max_edges: Optional[int] = None


class TestDeterministicOrdering:
    def test_dict_keys_sorted(self):
        assert dumps_canonical({"b": 1, "a": 2}) == '{"a":2,"b":1}'

    def test_nested_dict_keys_sorted(self):
        result = dumps_canonical({"z": {"y": 1, "x": 2}, "a": 0})
        assert result == '{"a":0,"z":{"x":2,"y":1}}'

    def test_repeated_serialization_identical(self):
        obj = {"roots": [b"\x01", b"\x02"], "depth": 3}
        assert dumps_canonical(obj) == dumps_canonical(obj)

    def test_canonical_equals_ignores_insertion_order(self):
        assert canonical_equals({"a": 1, "b": 2}, {"b": 2, "a": 1})
        assert not canonical_equals({"a": 1}, {"a": 2})


class TestBytes:
    def test_bytes_as_hex(self):
        assert dumps_canonical({"leaf": b"\xab\x01"}) == '{"leaf":"0xab01"}'

    def test_bytearray_as_hex(self):
        assert canonicalize_value(bytearray(b"\x00\xff")) == "0x00ff"

    def test_tuple_as_list(self):
        assert canonicalize_value((1, 2)) == [1, 2]


class TestExcludeNone:
    def test_none_excluded_from_dict(self):
        assert dumps_canonical({"a": 1, "b": None}) == '{"a":1}'

    def test_none_excluded_from_model(self):
        model = SampleModel(tree_id=0, root=b"\x00" * 32)
        assert "max_edges" not in loads_canonical(dumps_canonical(model))

    def test_zero_and_false_kept(self):
        assert dumps_canonical({"a": 0, "b": False}) == '{"a":0,"b":false}'


class TestModels:
    def test_model_fields_rendered_json_mode(self):
        model = SampleModel(tree_id=7, root=b"\x11" * 32, max_edges=2)
        data = loads_canonical(dumps_canonical(model))

        assert data == {
            "tree_id": 7,
            "root": "0x" + "11" * 32,
            "kind": "mixer",
            "max_edges": 2,
        }

    def test_enum_serializes_to_value(self):
        assert canonicalize_value(SampleEnum.MIXER) == "mixer"


class TestFloatSafety:
    def test_float_rejected(self):
        with pytest.raises(CanonicalizationException):
            dumps_canonical({"amount": 1.5})

    def test_float_in_list_rejected(self):
        with pytest.raises(CanonicalizationException) as exc_info:
            dumps_canonical({"items": [1, 2.0]})
        assert exc_info.value.details["path"] == "items[1]"

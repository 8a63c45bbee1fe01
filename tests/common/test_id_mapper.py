"""
Tests for the IDMapper class.

Covers:
- Building mappings from ordered name lists
- Lookups in both directions, single and batch
- Error conditions for duplicates, unknown names and bad indices
"""

import numpy as np
import pytest

from ripM.common.id_mapper import IDMapper


class TestIDMapperBasic:
    """Test basic IDMapper functionality."""

    def test_empty_mapper(self):
        mapper = IDMapper()

        assert mapper.size() == 0
        assert len(mapper) == 0
        assert mapper.is_empty()
        assert str(mapper) == "IDMapper(empty)"
        assert repr(mapper) == "IDMapper(size=0)"

    def test_add_node_assigns_sequential_indices(self):
        mapper = IDMapper()

        assert mapper.add_node("TP53") == 0
        assert mapper.add_node("BRCA1") == 1
        assert mapper.add_node(12345) == 2

        assert mapper.get_index("BRCA1") == 1
        assert mapper.get_name(2) == 12345
        assert "TP53" in mapper
        assert "MYC" not in mapper

    def test_from_names_preserves_order(self):
        names = ["TP53", "BRCA1", "EGFR", "MYC"]
        mapper = IDMapper.from_names(names)

        assert mapper.names == names
        assert mapper.get_indices(["EGFR", "TP53"]) == [2, 0]
        assert mapper.get_names([3, 1]) == ["MYC", "BRCA1"]

    def test_get_names_accepts_numpy_integers(self):
        mapper = IDMapper.from_names(["a", "b", "c"])

        assert mapper.get_names(np.array([2, 0])) == ["c", "a"]

    def test_names_returns_copy(self):
        mapper = IDMapper.from_names(["a", "b"])
        names = mapper.names
        names.append("c")

        assert mapper.size() == 2

    def test_str_previews_first_names(self):
        mapper = IDMapper.from_names(["a", "b", "c", "d"])

        assert str(mapper) == "IDMapper(4 nodes: a, b, c, ...)"


class TestIDMapperErrors:
    """Test error conditions."""

    def test_duplicate_name(self):
        mapper = IDMapper.from_names(["a"])

        with pytest.raises(ValueError, match="already mapped"):
            mapper.add_node("a")

    def test_duplicate_in_from_names(self):
        with pytest.raises(ValueError, match="already mapped"):
            IDMapper.from_names(["a", "b", "a"])

    def test_unhashable_name(self):
        mapper = IDMapper()

        with pytest.raises(TypeError, match="hashable"):
            mapper.add_node(["not", "hashable"])

    def test_unknown_name(self):
        mapper = IDMapper.from_names(["a"])

        with pytest.raises(KeyError, match="not found"):
            mapper.get_index("z")

    def test_index_out_of_range(self):
        mapper = IDMapper.from_names(["a"])

        with pytest.raises(KeyError, match="not found"):
            mapper.get_name(1)
        with pytest.raises(KeyError, match="not found"):
            mapper.get_name(-1)

    def test_non_integer_index(self):
        mapper = IDMapper.from_names(["a"])

        with pytest.raises(TypeError, match="integer"):
            mapper.get_name("0")
        with pytest.raises(TypeError, match="integer"):
            mapper.get_name(True)

    def test_has_name_with_unhashable(self):
        mapper = IDMapper.from_names(["a"])

        assert not mapper.has_name({"a": 1})


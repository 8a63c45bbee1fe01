"""
Tests for input validation utilities.
"""

import numpy as np
import pytest

from ripM.common.exceptions import ValidationError, ComputationError
from ripM.common.validators import (
    validate_square_matrix,
    check_finite,
    validate_symmetric,
    validate_node_names,
    validate_partition,
    validate_module_indices,
)


class TestValidateSquareMatrix:

    def test_converts_to_float(self):
        result = validate_square_matrix([[0, 1], [1, 0]])

        assert result.dtype == np.float64
        assert result.shape == (2, 2)

    def test_non_square(self):
        with pytest.raises(ValidationError, match="must be square"):
            validate_square_matrix(np.zeros((2, 3)))

    def test_wrong_dimensions(self):
        with pytest.raises(ValidationError, match="two-dimensional"):
            validate_square_matrix(np.zeros(4))

    def test_empty(self):
        with pytest.raises(ValidationError, match="empty"):
            validate_square_matrix(np.zeros((0, 0)))

        assert validate_square_matrix(np.zeros((0, 0)), allow_empty=True).size == 0

    def test_non_numeric(self):
        with pytest.raises(ValidationError, match="numeric"):
            validate_square_matrix([["a", "b"], ["c", "d"]])

    def test_field_name_in_message(self):
        with pytest.raises(ValidationError, match="field 'adjacency'"):
            validate_square_matrix(np.zeros((1, 2)), field="adjacency")


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.eye(3), "test")

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite_raises(self, bad):
        matrix = np.eye(3)
        matrix[1, 2] = bad

        with pytest.raises(ComputationError, match="Non-finite values produced by rescale") as info:
            check_finite(matrix, "rescale")
        assert info.value.details["non_finite_count"] == 1


class TestValidateSymmetric:

    def test_symmetric_passes(self):
        validate_symmetric(np.array([[0.0, 2.0], [2.0, 0.0]]))

    def test_asymmetric_raises(self):
        with pytest.raises(ValidationError, match="symmetric") as info:
            validate_symmetric(np.array([[0.0, 2.0], [1.5, 0.0]]))
        assert info.value.details["max_asymmetry"] == pytest.approx(0.5)


class TestValidateNodeNames:

    def test_count_mismatch(self):
        with pytest.raises(ValidationError, match="does not match"):
            validate_node_names(["a", "b"], 3)

    def test_duplicates(self):
        with pytest.raises(ValidationError, match="unique"):
            validate_node_names(["a", "b", "a"], 3)


class TestValidatePartition:

    def test_valid_partition_normalized(self):
        modules = [np.array([2, 0]), [1, 3]]

        result = validate_partition(modules, 4)

        assert result == [[2, 0], [1, 3]]
        assert all(type(i) is int for module in result for i in module)

    def test_no_modules(self):
        with pytest.raises(ValidationError, match="no modules"):
            validate_partition([], 3)

    def test_empty_module(self):
        with pytest.raises(ValidationError, match="Module 1 is empty"):
            validate_partition([[0, 1], []], 2)

    def test_out_of_range(self):
        with pytest.raises(ValidationError, match="out of range"):
            validate_partition([[0, 1], [5]], 3)

    def test_overlap(self):
        with pytest.raises(ValidationError, match="more than one module"):
            validate_partition([[0, 1], [1, 2]], 3)

    def test_missing_node(self):
        with pytest.raises(ValidationError, match="does not cover") as info:
            validate_partition([[0], [2]], 4)
        assert info.value.details["first_missing"] == [1, 3]


class TestValidateModuleIndices:

    def test_returns_int_array(self):
        result = validate_module_indices([3, 1], 4)

        assert result.dtype == np.int64
        assert result.tolist() == [3, 1]

    def test_out_of_range(self):
        with pytest.raises(ValidationError, match="out of range"):
            validate_module_indices([0, 4], 4)

    def test_duplicates(self):
        with pytest.raises(ValidationError, match="duplicate"):
            validate_module_indices([1, 1], 4)

"""
Tests for network deconvolution.
"""

import numpy as np
import pytest

from conftest import perfect_matching, random_symmetric
from ripM.common.exceptions import ComputationError, ConfigurationError, ValidationError
from ripM.network.deconvolution import deconvolve


class TestDeconvolve:

    def setup_method(self):
        self.matching = perfect_matching(3)
        self.edges = self.matching > 0

    @pytest.mark.parametrize("beta", [0.5, 0.9, 0.99])
    def test_direct_only_network_is_recovered(self, beta):
        result = deconvolve(self.matching, alpha=1.0, beta=beta, control=0)

        np.testing.assert_allclose(result, self.matching, atol=1e-8)

    def test_partial_alpha_keeps_strong_edges(self):
        result = deconvolve(self.matching, alpha=0.5, beta=0.5, control=0)

        np.testing.assert_allclose(result, self.matching, atol=1e-8)

    def test_control_one_shifts_whole_reconstruction(self):
        result = deconvolve(self.matching, alpha=1.0, beta=0.5, control=1)

        off_diagonal = ~np.eye(6, dtype=bool)
        np.testing.assert_allclose(result[self.edges], 1.0, atol=1e-8)
        np.testing.assert_allclose(np.diag(result), 0.0, atol=1e-8)
        np.testing.assert_allclose(result[off_diagonal & ~self.edges], 0.25, atol=1e-8)

    @pytest.mark.parametrize("control", [0, 1])
    def test_output_range_and_symmetry(self, control):
        matrix = random_symmetric(15, seed=3, density=0.6)

        result = deconvolve(matrix, alpha=0.8, beta=0.9, control=control)

        assert result.shape == matrix.shape
        assert result.min() == pytest.approx(0.0)
        assert result.max() == pytest.approx(1.0)
        np.testing.assert_allclose(result, result.T, atol=1e-10)

    def test_input_is_not_modified(self):
        original = self.matching.copy()

        deconvolve(self.matching)

        np.testing.assert_array_equal(self.matching, original)

    def test_constant_matrix(self):
        with pytest.raises(ComputationError, match="constant"):
            deconvolve(np.ones((4, 4)))

    def test_non_square(self):
        with pytest.raises(ValidationError, match="square"):
            deconvolve(np.zeros((2, 3)))


class TestDeconvolveParameters:

    @pytest.mark.parametrize("alpha", [0.0, -0.5, 1.5])
    def test_alpha_out_of_range(self, alpha):
        with pytest.raises(ConfigurationError, match="alpha"):
            deconvolve(perfect_matching(), alpha=alpha)

    @pytest.mark.parametrize("beta", [0.0, 1.0, 2.0])
    def test_beta_out_of_range(self, beta):
        with pytest.raises(ConfigurationError, match="beta"):
            deconvolve(perfect_matching(), beta=beta)

    def test_invalid_control(self):
        with pytest.raises(ConfigurationError, match="control"):
            deconvolve(perfect_matching(), control=2)

    @pytest.mark.parametrize("control", [True, False, 1.0])
    def test_non_integer_control(self, control):
        with pytest.raises(ConfigurationError, match="must be an integer"):
            deconvolve(perfect_matching(), control=control)

    def test_numpy_integer_control(self):
        result = deconvolve(perfect_matching(), beta=0.5, control=np.int64(0))

        np.testing.assert_allclose(result, perfect_matching(), atol=1e-8)

    def test_parameters_checked_before_matrix(self):
        with pytest.raises(ConfigurationError):
            deconvolve(np.zeros((2, 3)), alpha=0.0)

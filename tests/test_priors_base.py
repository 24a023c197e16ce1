"""
Tests for the priors.base module.
"""

import pytest
import numpy as np
from kidiq.priors.base import (
    ModelPriors,
    PriorSpec,
    cauchy,
    default_priors,
    exponential,
    flat,
    normal,
    prior_table,
    student_t,
)


class TestPriorSpec:
    """Test PriorSpec validation and helpers."""

    def test_defaults(self):
        """Test the default PriorSpec values."""
        spec = PriorSpec()
        assert spec.family == "normal"
        assert spec.location == 0.0
        assert spec.scale == 2.5
        assert spec.autoscale is True

    def test_negative_scale_rejected(self):
        """Test that a negative scale raises an error."""
        with pytest.raises(ValueError, match="scale must be >= 0"):
            normal(0.0, -1.0)

    def test_negative_scale_in_sequence_rejected(self):
        """Test that any negative scale in a sequence raises an error."""
        with pytest.raises(ValueError):
            normal(0.0, [1.0, -0.5])

    def test_zero_scale_allowed(self):
        """Test that a zero scale is accepted."""
        spec = normal(0.0, 0.0)
        assert spec.scale == 0.0

    def test_unknown_family_rejected(self):
        """Test that an unknown family raises an error."""
        with pytest.raises(ValueError, match="Unknown prior family"):
            PriorSpec("gamma")

    def test_student_t_needs_df(self):
        """Test that student_t without df raises an error."""
        with pytest.raises(ValueError, match="df"):
            PriorSpec("student_t", df=None)

    def test_scale_array_broadcasts_scalar(self):
        """Test that scalar scale and location broadcast to the coefficients."""
        spec = normal(1.0, 2.0)
        np.testing.assert_array_equal(spec.scale_array(3), [2.0, 2.0, 2.0])
        np.testing.assert_array_equal(spec.location_array(3), [1.0, 1.0, 1.0])

    def test_scale_array_wrong_length(self):
        """Test that a scale sequence of the wrong length raises an error."""
        spec = normal(0.0, [1.0, 2.0])
        with pytest.raises(ValueError, match="2 values"):
            spec.scale_array(3)

    def test_exponential_stores_mean_as_scale(self):
        """Test that exponential stores 1 / rate as its scale."""
        spec = exponential(rate=0.5)
        assert spec.family == "exponential"
        assert spec.scale == pytest.approx(2.0)

    def test_exponential_rejects_nonpositive_rate(self):
        """Test that a zero rate raises an error."""
        with pytest.raises(ValueError, match="rate"):
            exponential(rate=0.0)

    def test_describe(self):
        """Test the short description of each family."""
        assert normal(0, 2.5).describe() == "normal(0, 2.5)"
        assert student_t(3, 0, 1).describe() == "student_t(3, 0, 1)"
        assert exponential(0.1).describe() == "exponential(rate = 0.1)"
        assert flat().describe() == "flat"
        assert normal(None, 2.5).describe() == "normal(mean(y), 2.5)"

    def test_frozen(self):
        """Test that a PriorSpec cannot be modified."""
        spec = cauchy()
        with pytest.raises(AttributeError):
            spec.scale = 1.0


class TestModelPriors:
    """Test the ModelPriors container."""

    def test_default_priors(self):
        """Test the families of the default priors."""
        priors = default_priors()
        assert priors.intercept.location is None
        assert priors.coefficients.family == "normal"
        assert priors.aux.family == "exponential"
        assert not priors.has_flat

    def test_exponential_not_allowed_for_coefficients(self):
        """Test that an exponential coefficient prior raises an error."""
        with pytest.raises(ValueError, match="coefficients"):
            ModelPriors(coefficients=exponential())

    def test_laplace_not_allowed_for_sigma(self):
        """Test that a laplace prior on sigma raises an error."""
        with pytest.raises(ValueError, match="sigma"):
            ModelPriors(aux=PriorSpec("laplace"))

    def test_zero_sigma_scale_rejected(self):
        """Test that sigma cannot have a zero prior scale."""
        with pytest.raises(ValueError, match="positive scale"):
            ModelPriors(aux=PriorSpec("normal", scale=0.0))

    def test_has_flat(self):
        """Test that a flat block is detected."""
        priors = ModelPriors(coefficients=flat())
        assert priors.has_flat

    def test_with_coefficient_scale(self):
        """Test that only the coefficient scale changes in the copy."""
        priors = default_priors()
        tighter = priors.with_coefficient_scale(0.1)
        assert tighter.coefficients.scale == 0.1
        assert priors.coefficients.scale == 2.5
        assert tighter.intercept == priors.intercept

    def test_prior_table(self):
        """Test that prior_table shows mean(y) for a data-centred intercept."""
        table = prior_table(default_priors())
        assert list(table.index) == ["intercept", "coefficients", "aux"]
        assert table.loc["coefficients", "prior"] == "normal(0, 2.5)"
        assert table.loc["intercept", "location"] == "mean(y)"
        assert table.loc["coefficients", "location"] == 0.0

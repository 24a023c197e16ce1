"""
Tests for the data module.
"""

import pytest
import numpy as np
import pandas as pd
from kidiq.data import (
    REQUIRED_COLUMNS,
    load_kidiq,
    prediction_grid,
    simulate_kidiq,
)


class TestLoadKidiq:
    """Test the load_kidiq function."""

    def test_load_csv(self, tmp_path):
        """Test that the function correctly loads a comma-separated file."""
        df = pd.DataFrame(
            {
                "mom_iq": [121.1, 89.4, 115.4],
                "kid_score": [65, 98, 85],
                "mom_hs": [1, 1, 1],
                "mom_work": [4, 4, 4],
                "mom_age": [27, 25, 27],
            }
        )
        file_path = tmp_path / "kidiq.csv"
        df.to_csv(file_path, index=False)

        result = load_kidiq(file_path)

        assert list(result.columns[:4]) == REQUIRED_COLUMNS
        assert "mom_age" in result.columns
        assert result["kid_score"].tolist() == [65, 98, 85]

    def test_load_tsv(self, tmp_path):
        """Test that a tab-separated file is detected and loaded."""
        df = simulate_kidiq(5, random_seed=0)
        file_path = tmp_path / "kidiq.tsv"
        df.to_csv(file_path, sep="\t", index=False)

        result = load_kidiq(file_path)

        pd.testing.assert_frame_equal(result, df)

    def test_drops_row_name_column(self, tmp_path):
        """R exports write row names as an unnamed first column."""
        df = simulate_kidiq(4, random_seed=0)
        file_path = tmp_path / "kidiq.csv"
        df.to_csv(file_path, index=True)

        result = load_kidiq(file_path)

        assert not any(c.startswith("Unnamed") for c in result.columns)
        assert len(result) == 4

    def test_missing_columns(self, tmp_path):
        """Test that a file without the required columns raises an error."""
        file_path = tmp_path / "bad.csv"
        pd.DataFrame({"kid_score": [1, 2], "mom_iq": [100, 110]}).to_csv(
            file_path, index=False
        )

        with pytest.raises(ValueError, match="missing columns"):
            load_kidiq(file_path)

    def test_custom_required_columns(self, tmp_path):
        """Test that the required columns can be overridden."""
        file_path = tmp_path / "small.csv"
        pd.DataFrame({"kid_score": [1, 2], "mom_iq": [100, 110]}).to_csv(
            file_path, index=False
        )

        result = load_kidiq(file_path, columns=["kid_score", "mom_iq"])

        assert list(result.columns) == ["kid_score", "mom_iq"]

    def test_file_not_found(self):
        """Test that the function raises an error if the file is not found."""
        with pytest.raises(FileNotFoundError):
            load_kidiq("non_existent_file.csv")


class TestSimulateKidiq:
    """Test the simulate_kidiq function."""

    def test_shape_and_columns(self):
        """Test that simulated data has the expected size and value ranges."""
        df = simulate_kidiq(50, random_seed=3)
        assert len(df) == 50
        assert set(REQUIRED_COLUMNS) <= set(df.columns)
        assert set(df["mom_hs"].unique()) <= {0, 1}
        assert set(df["mom_work"].unique()) <= {1, 2, 3, 4}

    def test_reproducible(self):
        """Test that the same seed gives the same dataset."""
        pd.testing.assert_frame_equal(
            simulate_kidiq(30, random_seed=7), simulate_kidiq(30, random_seed=7)
        )

    def test_scores_increase_with_iq(self):
        """Test that simulated scores rise with the mother's IQ."""
        df = simulate_kidiq(2000, random_seed=11)
        slope = np.polyfit(df["mom_iq"], df["kid_score"], 1)[0]
        assert 0.3 < slope < 0.8


class TestPredictionGrid:
    """Test the prediction_grid function."""

    def test_default_grid(self):
        """Test that the default grid crosses three IQs with both hs values."""
        grid = prediction_grid()
        assert list(grid.columns) == ["mom_hs", "mom_iq", "mom_work"]
        assert len(grid) == 6

    def test_custom_values(self):
        """Test that given values are crossed into the grid."""
        grid = prediction_grid(mom_iq=[100.0], mom_hs=[0, 1], mom_work=[1, 2, 3])
        assert len(grid) == 6
        assert grid["mom_iq"].unique().tolist() == [100.0]

"""
Loading and simulating the children's test score dataset.

The dataset has one row per child with the child's test score and maternal
predictors: high-school completion, IQ, work status and (optionally) age.
"""

import sys
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

RESPONSE_COLUMN = "kid_score"
REQUIRED_COLUMNS = ["kid_score", "mom_hs", "mom_iq", "mom_work"]
OPTIONAL_COLUMNS = ["mom_age"]
WORK_LEVELS = [1, 2, 3, 4]


def load_kidiq(
    file_path: Union[str, Path],
    sep: Optional[str] = None,
    columns: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """
    Load the dataset from a delimited file.

    Args:
        file_path: Path to the data file.
        sep: Field delimiter. Inferred from the extension when omitted
             (tab for .tsv/.txt, comma otherwise).
        columns: Columns that must be present. Defaults to REQUIRED_COLUMNS.

    Returns:
        A DataFrame with the required columns first.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a required column is missing.
    """
    file_path = Path(file_path)
    if sep is None:
        sep = "\t" if file_path.suffix.lower() in (".tsv", ".txt") else ","

    try:
        df = pd.read_csv(file_path, sep=sep)
    except FileNotFoundError:
        print(f"Error: The file was not found at {file_path}", file=sys.stderr)
        raise

    # Tolerate R-style exports with a leading row-name column
    df = df.drop(columns=[c for c in df.columns if str(c).startswith("Unnamed")])

    required = list(columns) if columns is not None else REQUIRED_COLUMNS
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(
            f"Dataset at {file_path} is missing columns {missing}. "
            f"Found: {list(df.columns)}"
        )

    ordered = required + [c for c in df.columns if c not in required]
    return df[ordered].copy()


def simulate_kidiq(n: int = 434, random_seed: Optional[int] = None) -> pd.DataFrame:
    """
    Simulate a dataset with the same columns and rough structure as the
    original survey: scores depend on maternal high-school completion and IQ,
    work status has a small effect.

    Args:
        n: Number of children.
        random_seed: Seed for numpy's random generator.

    Returns:
        DataFrame with kid_score, mom_hs, mom_iq, mom_work and mom_age.
    """
    rng = np.random.default_rng(random_seed)

    mom_hs = rng.binomial(1, 0.79, size=n)
    mom_iq = rng.normal(100.0, 15.0, size=n)
    mom_work = rng.choice(WORK_LEVELS, size=n, p=[0.22, 0.22, 0.09, 0.47])
    mom_age = rng.integers(17, 30, size=n)

    work_effect = np.array([0.0, 2.0, 5.0, 1.0])[mom_work - 1]
    kid_score = (
        26.0 + 6.0 * mom_hs + 0.56 * mom_iq + work_effect + rng.normal(0, 18.0, size=n)
    )
    kid_score = np.clip(np.round(kid_score), 20, 144)

    return pd.DataFrame(
        {
            "kid_score": kid_score.astype(int),
            "mom_hs": mom_hs,
            "mom_iq": mom_iq,
            "mom_work": mom_work,
            "mom_age": mom_age,
        }
    )


def prediction_grid(
    mom_iq: Sequence[float] = (80.0, 100.0, 120.0),
    mom_hs: Sequence[int] = (0, 1),
    mom_work: Optional[Sequence[int]] = None,
) -> pd.DataFrame:
    """
    New-data table crossing the given predictor values.

    Returns:
        DataFrame with one row per combination, ready for predictions.
    """
    work = list(mom_work) if mom_work is not None else [WORK_LEVELS[-1]]
    index = pd.MultiIndex.from_product(
        [list(mom_hs), list(mom_iq), work], names=["mom_hs", "mom_iq", "mom_work"]
    )
    return index.to_frame(index=False)


__all__ = [
    "RESPONSE_COLUMN",
    "REQUIRED_COLUMNS",
    "OPTIONAL_COLUMNS",
    "WORK_LEVELS",
    "load_kidiq",
    "simulate_kidiq",
    "prediction_grid",
]

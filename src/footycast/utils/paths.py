"""
Helper functions for the file paths used by the FootyCast store.
"""

from pathlib import Path

from footycast.config import DATA_DIR, MATCHES_FILENAME, PREDICTIONS_FILENAME


def get_data_dir(data_dir: Path | str | None = None) -> Path:
    """Return the store directory, creating it if needed."""
    path = Path(data_dir) if data_dir is not None else DATA_DIR
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_matches_path(data_dir: Path | str | None = None) -> Path:
    """
    Return the path to the stored matches CSV.

    Parameters
    ----------
    data_dir : pathlib.Path | str | None
        Store directory, or None for the configured default.

    Returns
    -------
    Path
        Full path to matches.csv.
    """
    return get_data_dir(data_dir) / MATCHES_FILENAME


def get_predictions_path(data_dir: Path | str | None = None) -> Path:
    """Return the path to the stored predictions (JSON lines)."""
    return get_data_dir(data_dir) / PREDICTIONS_FILENAME

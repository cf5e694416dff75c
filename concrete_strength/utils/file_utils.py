"""
File utility functions for locating data and writing reports.
"""

import os
import glob
import json
import logging
from typing import Any, Dict, Iterable

import pandas as pd

logger = logging.getLogger(__name__)


def find_data_file(directory: str, pattern: str = "*.csv") -> str:
    """
    Find the most recently modified file in a directory matching a pattern.

    Args:
        directory: The directory to search in
        pattern: The glob pattern to match files

    Returns:
        The path to the newest matching file

    Raises:
        FileNotFoundError: If no matching files are found
    """
    matching_files = glob.glob(os.path.join(directory, pattern))

    if not matching_files:
        logger.error(f"No files matching {pattern} found in {directory}")
        raise FileNotFoundError(f"No files matching {pattern} found in {directory}")

    latest_file = max(matching_files, key=os.path.getmtime)
    logger.debug(f"Latest file found: {latest_file}")
    return latest_file


def clean_old_files(directory: str, patterns: Iterable[str]) -> None:
    """
    Remove old files matching any of the given patterns from a directory.

    Args:
        directory: The directory containing the files
        patterns: Glob patterns of files to be removed
    """
    for pattern in patterns:
        for file_path in glob.glob(os.path.join(directory, pattern)):
            try:
                os.remove(file_path)
                logger.info(f"Deleted old file: {file_path}")
            except OSError as e:
                logger.warning(f"Could not delete file {file_path}: {e}")


def save_frame(df: pd.DataFrame, output_dir: str, filename: str, index: bool = False) -> str:
    """
    Save a DataFrame as CSV, creating the output directory if needed.

    Returns:
        Path to the saved CSV file
    """
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, filename)
    df.to_csv(output_path, index=index)
    logger.info(f"Saved {len(df)} rows to {output_path}")
    return output_path


def save_json(data: Dict[str, Any], output_dir: str, filename: str) -> str:
    """
    Save a dictionary as indented JSON.

    Returns:
        Path to the saved JSON file
    """
    os.makedirs(output_dir, exist_ok=True)
    output_path = os.path.join(output_dir, filename)

    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    logger.info(f"Summary saved to {output_path}")
    return output_path

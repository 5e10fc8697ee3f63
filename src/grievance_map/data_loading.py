"""
Data loading module for grievance records.

Reads the complaint dataset (CSV or JSON) with pandas, validates it and
converts each row into an immutable GrievanceRecord. Block names are kept
exactly as reported; normalization happens during aggregation.
"""

import logging
from pathlib import Path
from typing import List, Sequence, Union

import pandas as pd

from .models import GrievanceRecord

# Configure logging
logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = ['id', 'block', 'grievance', 'lat', 'lng']
SUPPORTED_SUFFIXES = {'.csv', '.json'}


def read_grievance_frame(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a grievance file into a DataFrame without validation.

    Args:
        path: .csv file, or .json file holding a list of objects

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the suffix is not supported
    """
    data_file = Path(path)

    if not data_file.exists():
        logger.error(f"Grievance file not found: {data_file}")
        raise FileNotFoundError(f"File does not exist: {data_file}")

    suffix = data_file.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported grievance file type '{suffix}', expected one of {sorted(SUPPORTED_SUFFIXES)}"
        )

    logger.info(f"Loading grievances from: {data_file}")

    if suffix == '.csv':
        # Keep block/grievance as text so names like "0001" are not parsed as numbers
        return pd.read_csv(data_file, dtype={'block': 'string', 'grievance': 'string'})
    return pd.read_json(data_file, orient='records', dtype={'block': 'string', 'grievance': 'string'})


def records_from_frame(df: pd.DataFrame) -> List[GrievanceRecord]:
    """
    Validate a grievance DataFrame and convert it to records.

    Cleaning rules:
    - All REQUIRED_COLUMNS must be present
    - ids must be positive integers and unique
    - Rows whose lat/lng are not numeric are dropped (logged)
    - Missing block names become None (skipped later by aggregation)
    - Missing grievance text becomes ""

    Args:
        df: DataFrame with at least REQUIRED_COLUMNS

    Returns:
        List of GrievanceRecord in row order

    Raises:
        ValueError: On missing columns or invalid/duplicate ids
    """
    missing_cols = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Missing required columns: {missing_cols}")

    if df.empty:
        logger.warning("Grievance dataset is empty")
        return []

    df_clean = df[REQUIRED_COLUMNS].copy()

    ids = pd.to_numeric(df_clean['id'], errors='coerce')
    bad_ids = ids.isna() | (ids <= 0) | (ids % 1 != 0)
    if bad_ids.any():
        raise ValueError(
            f"Grievance ids must be positive integers, invalid: {df_clean.loc[bad_ids, 'id'].tolist()}"
        )
    df_clean['id'] = ids.astype('int64')

    duplicated = df_clean['id'].duplicated(keep=False)
    if duplicated.any():
        raise ValueError(
            f"Duplicate grievance ids: {sorted(set(df_clean.loc[duplicated, 'id'].tolist()))}"
        )

    df_clean['lat'] = pd.to_numeric(df_clean['lat'], errors='coerce')
    df_clean['lng'] = pd.to_numeric(df_clean['lng'], errors='coerce')
    bad_coords = df_clean['lat'].isna() | df_clean['lng'].isna()
    if bad_coords.any():
        logger.warning(
            f"Dropping {int(bad_coords.sum())} grievances with invalid coordinates "
            f"(ids: {df_clean.loc[bad_coords, 'id'].tolist()})"
        )
        df_clean = df_clean[~bad_coords]

    records = []
    for row in df_clean.itertuples(index=False):
        block = None if pd.isna(row.block) else str(row.block)
        grievance = "" if pd.isna(row.grievance) else str(row.grievance)
        records.append(GrievanceRecord(
            id=int(row.id),
            block=block,
            grievance=grievance,
            lat=float(row.lat),
            lng=float(row.lng),
        ))

    missing_blocks = sum(1 for r in records if r.block is None)
    if missing_blocks:
        logger.warning(f"{missing_blocks} grievances have no block name and will not be mapped")

    return records


def load_grievances(path: Union[str, Path]) -> List[GrievanceRecord]:
    """
    Load grievance records from a CSV or JSON file.

    Example:
        >>> records = load_grievances('data/complaints.csv')
        >>> records[0].block
        'Kamakhyanagar'
    """
    records = records_from_frame(read_grievance_frame(path))
    logger.info(f"✓ Loaded {len(records)} grievances")
    return records


def records_to_frame(records: Sequence[GrievanceRecord]) -> pd.DataFrame:
    """Convert records back to a DataFrame (for tables and downloads)."""
    return pd.DataFrame(
        [
            {'id': r.id, 'block': r.block, 'grievance': r.grievance, 'lat': r.lat, 'lng': r.lng}
            for r in records
        ],
        columns=REQUIRED_COLUMNS,
    )

"""
Reader for GeoLife .plt trajectory files.

Layout: six header lines, then one sample per line with seven comma-separated
fields: latitude, longitude, 0, altitude (feet), days since 1899-12-30,
date string, time string. Only latitude, longitude and the day number are used.
"""

import csv
import logging
import os
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from itertools import islice
from pathlib import Path
from typing import Iterable, List, Tuple

from tqdm import tqdm

from .coordinates import RawSample
from .errors import PltParseError

HEADER_LINES = 6
FIELD_COUNT = 7
# Day number of 1970-01-01 in the spreadsheet (1899-12-30 based) calendar
UNIX_EPOCH_DAYS = 25569.0
SECONDS_PER_DAY = 86400.0


def _parse_decimal(text: str, kind: str, label: str, line_number: int) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise PltParseError(kind, f"Failed to parse {label}: {text!r}", line_number) from None
    if not value.is_finite():
        raise PltParseError(kind, f"Failed to parse {label}: {text!r}", line_number)
    return value


def _parse_instant(text: str, line_number: int) -> datetime:
    try:
        days = float(text)
        unix_timestamp = int((days - UNIX_EPOCH_DAYS) * SECONDS_PER_DAY)
    except (ValueError, OverflowError) as e:
        raise PltParseError(PltParseError.DATE_PARSE, f"Failed to parse date: {e}", line_number) from e
    try:
        return datetime.fromtimestamp(unix_timestamp, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        raise PltParseError(
            PltParseError.INVALID_TIMESTAMP, f"Invalid timestamp: {unix_timestamp}", line_number
        ) from None


def parse_plt_lines(lines: Iterable[str]) -> List[RawSample]:
    """
    Parse the lines of one .plt file (header included).

    Raises:
        PltParseError: on the first malformed line; no samples are returned.
    """
    samples = []
    rows = csv.reader(islice(lines, HEADER_LINES, None))
    for line_number, parts in enumerate(rows, start=HEADER_LINES + 1):
        if len(parts) != FIELD_COUNT:
            raise PltParseError(
                PltParseError.INVALID_FIELD_COUNT,
                f"Invalid number of fields in line (expected {FIELD_COUNT}, got {len(parts)})",
                line_number,
            )
        instant = _parse_instant(parts[4], line_number)
        latitude = _parse_decimal(parts[0], PltParseError.LATITUDE_PARSE, "latitude", line_number)
        longitude = _parse_decimal(parts[1], PltParseError.LONGITUDE_PARSE, "longitude", line_number)
        samples.append(RawSample(latitude=latitude, longitude=longitude, instant=instant))
    return samples


def parse_plt_file(path) -> List[RawSample]:
    with open(path, "r", encoding="utf-8", newline="") as f:
        try:
            return parse_plt_lines(f)
        except PltParseError as e:
            logging.error(f"[READ] {path}: {e}")
            raise


def find_plt_files(dir_path) -> List[Path]:
    dir_path = Path(dir_path)
    if not dir_path.is_dir():
        raise FileNotFoundError(f"Input directory not found: {dir_path}")
    return sorted(p for p in dir_path.iterdir() if p.suffix == ".plt" and p.is_file())


def read_plt_directory(dir_path, progress: bool = True) -> Tuple[List[RawSample], int]:
    """
    Read every .plt file in a directory.

    Returns:
        (samples sorted ascending by instant, total size of the files in bytes).
        The sort is stable, so samples sharing an instant keep file order.
    """
    files = find_plt_files(dir_path)
    if not files:
        logging.warning(f"[READ] No .plt files found in {dir_path}")
    samples: List[RawSample] = []
    total_bytes = 0
    for path in tqdm(files, desc="PLT files", disable=not progress):
        total_bytes += os.path.getsize(path)
        samples.extend(parse_plt_file(path))
    samples.sort(key=lambda s: s.instant)
    logging.info(f"[READ] Read {len(samples)} samples from {len(files)} files ({total_bytes} bytes)")
    return samples, total_bytes

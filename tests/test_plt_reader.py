from datetime import datetime, timezone
from decimal import Decimal

import pytest

from trajectory_compression.errors import PltParseError
from trajectory_compression.plt_reader import (
    find_plt_files,
    parse_plt_file,
    parse_plt_lines,
    read_plt_directory,
)

HEADER = [
    "Geolife trajectory",
    "WGS 84",
    "Altitude is in Feet",
    "Reserved 3",
    "0,2,255,My Track,0,0,2,8421376",
    "0",
]


def write_plt(path, rows):
    path.write_text("\n".join(HEADER + rows) + "\n", encoding="utf-8")
    return path


def test_parse_plt_lines():
    rows = [
        "39.984702,116.318417,0,492,39744.5,2008-10-23,12:00:00",
        "39.984683,116.31845,0,492,39744.25,2008-10-23,06:00:00",
    ]
    samples = parse_plt_lines(HEADER + rows)
    assert len(samples) == 2
    assert samples[0].latitude == Decimal("39.984702")
    assert samples[0].longitude == Decimal("116.318417")
    assert samples[0].instant == datetime(2008, 10, 23, 12, 0, 0, tzinfo=timezone.utc)
    # file order is preserved; sorting happens at directory level
    assert samples[1].instant == datetime(2008, 10, 23, 6, 0, 0, tzinfo=timezone.utc)


def test_header_only_file_has_no_samples():
    assert parse_plt_lines(HEADER) == []


def test_invalid_field_count():
    with pytest.raises(PltParseError) as excinfo:
        parse_plt_lines(HEADER + ["39.984702,116.318417,0,492,39744.5,2008-10-23"])
    assert excinfo.value.kind == PltParseError.INVALID_FIELD_COUNT
    assert excinfo.value.line_number == 7


@pytest.mark.parametrize(
    "row, kind",
    [
        ("abc,116.318417,0,492,39744.5,2008-10-23,12:00:00", PltParseError.LATITUDE_PARSE),
        ("39.984702,xyz,0,492,39744.5,2008-10-23,12:00:00", PltParseError.LONGITUDE_PARSE),
        ("39.984702,116.318417,0,492,not-a-date,2008-10-23,12:00:00", PltParseError.DATE_PARSE),
        ("39.984702,116.318417,0,492,1e12,2008-10-23,12:00:00", PltParseError.INVALID_TIMESTAMP),
    ],
)
def test_malformed_fields(row, kind):
    with pytest.raises(PltParseError) as excinfo:
        parse_plt_lines(HEADER + [row])
    assert excinfo.value.kind == kind


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_plt_lines(HEADER + ["1,2,3"])


def test_parse_plt_file(tmp_path):
    path = write_plt(tmp_path / "a.plt", ["39.9,116.3,0,492,39744.5,2008-10-23,12:00:00"])
    samples = parse_plt_file(path)
    assert [s.latitude for s in samples] == [Decimal("39.9")]


def test_parse_plt_file_logs_failure(tmp_path, caplog):
    path = write_plt(tmp_path / "bad.plt", ["39.9,116.3,0"])
    with pytest.raises(PltParseError):
        parse_plt_file(path)
    assert any("[READ]" in rec.message and "bad.plt" in rec.message for rec in caplog.records)


def test_read_plt_directory_sorts_by_instant(tmp_path):
    write_plt(tmp_path / "20081023.plt", [
        "39.2,116.2,0,492,39744.5,2008-10-23,12:00:00",
        "39.3,116.3,0,492,39744.75,2008-10-23,18:00:00",
    ])
    write_plt(tmp_path / "20081022.plt", [
        "39.1,116.1,0,492,39744.25,2008-10-23,06:00:00",
    ])
    (tmp_path / "notes.txt").write_text("ignored")

    samples, total_bytes = read_plt_directory(tmp_path, progress=False)

    assert [s.latitude for s in samples] == [Decimal("39.1"), Decimal("39.2"), Decimal("39.3")]
    expected_size = sum(p.stat().st_size for p in tmp_path.glob("*.plt"))
    assert total_bytes == expected_size


def test_read_plt_directory_empty(tmp_path, caplog):
    samples, total_bytes = read_plt_directory(tmp_path, progress=False)
    assert samples == []
    assert total_bytes == 0
    assert any("No .plt files" in rec.message for rec in caplog.records)


def test_find_plt_files_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        find_plt_files(tmp_path / "missing")

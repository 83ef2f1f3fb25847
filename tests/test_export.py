from __future__ import annotations

import csv
import io

from college_saver.core.projection import simulate
from college_saver.domain.export import CSV_COLUMNS, export_projection_csv


def test_csv_has_header_and_one_row_per_month():
    points = simulate(120.0, 1500.0, 0.05, 24)
    text = export_projection_csv(points)

    rows = list(csv.DictReader(io.StringIO(text)))
    assert text.splitlines()[0] == ",".join(CSV_COLUMNS)
    assert len(rows) == 25
    assert [int(row["month"]) for row in rows] == list(range(25))


def test_csv_values_are_not_rounded():
    points = simulate(123.456789, 1000.0, 0.07, 6)
    rows = list(csv.DictReader(io.StringIO(export_projection_csv(points))))

    for row, point in zip(rows, points):
        assert float(row["balance"]) == point.balance
        assert float(row["growth"]) == point.growth
        assert float(row["cumulative_contributions"]) == point.cumulative_contributions

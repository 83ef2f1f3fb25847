from __future__ import annotations

import csv
import io
from typing import Iterable

from college_saver.core.projection import ProjectionPoint

CSV_COLUMNS = [
    "month",
    "balance",
    "contribution",
    "growth",
    "cumulative_contributions",
    "cumulative_growth",
]


def export_projection_csv(points: Iterable[ProjectionPoint]) -> str:
    """Render the monthly table as CSV text. Values are written unrounded."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for point in points:
        writer.writerow({column: getattr(point, column) for column in CSV_COLUMNS})
    return buffer.getvalue()

"""CSV export for batches, compliance records and isotope results.

Rows are streamed one at a time so large exports can be sent as a
``StreamingResponse`` without building the whole file first.
"""

from __future__ import annotations

import csv
from io import StringIO
from typing import Iterator, Sequence

from pydantic import BaseModel

from cottontrace.reporting.export import to_rows


def export_csv(records: Sequence[BaseModel]) -> Iterator[str]:
    """Generate a CSV stream for any exportable record type.

    Yields:
        CSV rows as strings, header first (nothing for an empty collection)
    """
    rows = to_rows(records)
    if not rows:
        return

    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(list(rows[0]))
    yield output.getvalue()
    output.seek(0)
    output.truncate(0)

    for row in rows:
        writer.writerow(row.values())
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)


def export_csv_text(records: Sequence[BaseModel]) -> str:
    """Whole CSV document as one string."""
    return "".join(export_csv(records))

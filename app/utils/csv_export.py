"""
CSV export utilities
"""
import csv
import io
from typing import Iterable, Dict, List
from fastapi.responses import StreamingResponse


def _drain(output: io.StringIO) -> str:
    content = output.getvalue()
    output.seek(0)
    output.truncate(0)
    return content


def iter_csv(headers: List[str], rows: Iterable[Dict]) -> Iterable[str]:
    """
    Yield CSV text chunks: the header line, then one chunk per row.

    Text values are double-quoted and numbers are left bare; the header
    line is written with minimal quoting. Missing and None values become
    an empty quoted string.
    """
    output = io.StringIO()
    header_writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL)
    writer = csv.DictWriter(output, fieldnames=headers, quoting=csv.QUOTE_NONNUMERIC)

    header_writer.writerow(headers)
    yield _drain(output)

    for row in rows:
        row_data = {}
        for header in headers:
            value = row.get(header)
            row_data[header] = "" if value is None else value
        writer.writerow(row_data)
        yield _drain(output)


def stream_csv(headers: List[str], rows: Iterable[Dict], filename: str = "export.csv") -> StreamingResponse:
    """
    Stream CSV data as HTTP response

    Args:
        headers: List of column headers
        rows: Iterable of dictionaries keyed by header
        filename: Filename for Content-Disposition header

    Returns:
        StreamingResponse with CSV content
    """
    return StreamingResponse(
        iter_csv(headers, rows),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )

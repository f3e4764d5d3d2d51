"""Excel report upload parsing."""

import logging
from typing import Optional

import openpyxl

from .csv_parser import build_goal_data
from .models import CSVGoalData

logger = logging.getLogger('essencia.excel_parser')


def cell_text(value) -> str:
    """
    Render an Excel cell value the way it would appear in a CSV cell.

    Examples:
        None -> ""
        12.0 -> "12"
        1.3 -> "1.3"
        " 123456 " -> "123456"
    """
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_goal_workbook(filepath: str, sheet_name: Optional[str] = None) -> list[CSVGoalData]:
    """
    Parse a report workbook: header row first, then one player per row.

    Columns use the same names as the CSV upload. Rows missing a required
    field are skipped with a warning; blank rows are ignored.

    Args:
        filepath: Path to the .xlsx file
        sheet_name: Sheet to read (default: the active sheet)

    Returns:
        List of CSVGoalData objects, in row order
    """
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    try:
        ws = wb[sheet_name] if sheet_name else wb.active

        rows = ws.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            logger.warning(f'Workbook {filepath} has no header row')
            return []

        headers = [cell_text(value) for value in header_row]
        results = []

        for row_number, row in enumerate(rows, start=2):
            cells = [cell_text(value) for value in row]
            if not any(cells):
                continue

            fields = {header: cell for header, cell in zip(headers, cells) if header}
            goal_data = build_goal_data(fields)
            if goal_data is None:
                logger.warning(f'Skipping row {row_number} of {filepath}: missing required fields')
                continue
            results.append(goal_data)
    finally:
        wb.close()

    logger.info(f'Parsed {len(results)} player rows from {filepath}')
    return results

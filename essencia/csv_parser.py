"""Parse goal-data CSV uploads into CSVGoalData and ReportRecord."""

import csv
import logging
from collections.abc import Mapping
from typing import Optional

import requests

from .config import (
    get_csv_download_timeout,
    get_csv_max_bytes,
    get_default_cycle_days,
    get_percentage_tolerance,
)
from .constants import (
    CSV_CORE_METRICS,
    CSV_CYCLE_DAY,
    CSV_OPTIONAL_METRICS,
    CSV_PLAYER_ID,
    CSV_REQUIRED_FIELDS,
    CSV_REQUIRED_HEADERS,
    CSV_TOTAL_CYCLE_DAYS,
    metric_columns,
)
from .extraction import to_number
from .models import CSVGoalData, MetricValues
from .schemas import ReportRecord
from .validators import validate_cycle_days, validate_new_metrics

logger = logging.getLogger('essencia.csv_parser')

CSV_ACCEPT_HEADER = 'text/csv,text/plain,*/*'


def _read_rows(content: str) -> list[list[str]]:
    """Split CSV text into stripped rows, dropping blank lines and quotes."""
    rows = []
    for row in csv.reader(content.strip().splitlines()):
        cells = [cell.strip().replace('"', '') for cell in row]
        if any(cells):
            rows.append(cells)
    return rows


def safe_parse_float(value: Optional[str], field_name: str) -> float:
    """Parse a numeric cell, defaulting to 0 with a warning."""
    parsed = to_number(value)
    if parsed is None:
        logger.warning(f"Invalid numeric value for {field_name}: '{value}', using 0")
        return 0.0
    return parsed


def safe_parse_int(value: Optional[str], field_name: str) -> int:
    """Parse an integer cell (decimals truncate), defaulting to 0 with a warning."""
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid integer value for {field_name}: '{value}', using 0")
        return 0


def _parse_metric(fields: Mapping[str, str], metric: str) -> MetricValues:
    target_col, current_col, pct_col = metric_columns(metric)
    return MetricValues(
        target=safe_parse_float(fields.get(target_col), target_col),
        current=safe_parse_float(fields.get(current_col), current_col),
        percentage=safe_parse_float(fields.get(pct_col), pct_col),
    )


def _has_complete_group(headers, metric: str) -> bool:
    return all(column in headers for column in metric_columns(metric))


def build_goal_data(fields: Mapping[str, str]) -> Optional[CSVGoalData]:
    """
    Build CSVGoalData from one header -> cell mapping.

    Shared by the CSV and XLSX readers. Numeric cells that cannot be parsed
    become 0; optional metrics are populated only when all three of their
    columns are present.

    Args:
        fields: Column name -> raw cell text

    Returns:
        CSVGoalData, or None if a required field is missing or empty
    """
    for field_name in CSV_REQUIRED_FIELDS:
        value = fields.get(field_name)
        if value is None or not str(value).strip():
            logger.warning(f"Missing required field '{field_name}' in CSV")
            return None

    total_cycle_days = safe_parse_int(fields[CSV_TOTAL_CYCLE_DAYS], CSV_TOTAL_CYCLE_DAYS)
    if total_cycle_days <= 0:
        total_cycle_days = get_default_cycle_days()

    core = {metric: _parse_metric(fields, metric) for metric in CSV_CORE_METRICS}
    optional = {
        metric: _parse_metric(fields, metric)
        for metric in CSV_OPTIONAL_METRICS
        if _has_complete_group(fields, metric)
    }

    goal_data = CSVGoalData(
        player_id=str(fields[CSV_PLAYER_ID]).strip(),
        cycle_day=safe_parse_int(fields[CSV_CYCLE_DAY], CSV_CYCLE_DAY),
        total_cycle_days=total_cycle_days,
        **core,
        **optional,
    )

    warnings = validate_cycle_days(goal_data)
    warnings.extend(validate_new_metrics(goal_data, tolerance=get_percentage_tolerance()))
    for warning in warnings:
        logger.warning(f'Metric validation: {warning}')

    return goal_data


def validate_csv_structure(content: str) -> bool:
    """
    Check that CSV content has the expected header layout.

    All core headers must be present. Conversões and UPA are optional, but
    if any column of their group appears, all three must.

    Args:
        content: Raw CSV text

    Returns:
        True if the structure is valid
    """
    if not content or not isinstance(content, str):
        return False

    rows = _read_rows(content.lstrip('\ufeff'))
    if len(rows) < 2:
        return False

    headers = set(rows[0])

    for metric in CSV_OPTIONAL_METRICS:
        columns = metric_columns(metric)
        present = [column for column in columns if column in headers]
        if present and len(present) != len(columns):
            logger.warning(
                f'Incomplete {columns[0].rsplit(" ", 1)[0]} headers - all three '
                f'(Meta, Atual, %) must be present if any are included'
            )
            return False

    missing = [header for header in CSV_REQUIRED_HEADERS if header not in headers]
    if missing:
        logger.warning(f'CSV is missing required headers: {", ".join(missing)}')
        return False

    return True


def parse_goal_csv(content: str) -> Optional[CSVGoalData]:
    """
    Parse a one-header, one-data-row CSV into CSVGoalData.

    Args:
        content: Raw CSV text (UTF-8, comma-separated)

    Returns:
        CSVGoalData, or None for structurally unusable content

    Example:
        goal_data = parse_goal_csv(open('goals.csv', encoding='utf-8').read())
        if goal_data:
            print(goal_data.faturamento.percentage)
    """
    if not content or not isinstance(content, str):
        logger.warning('Invalid CSV content provided')
        return None

    rows = _read_rows(content.lstrip('\ufeff'))
    if len(rows) < 2:
        logger.warning('CSV has insufficient data - needs at least header and one data row')
        return None

    headers, data_row = rows[0], rows[1]
    if len(headers) != len(data_row):
        logger.warning(
            f'CSV header/data mismatch: {len(headers)} headers vs {len(data_row)} data fields'
        )
        return None

    goal_data = build_goal_data(dict(zip(headers, data_row)))
    if goal_data is not None:
        logger.info(f'Successfully parsed CSV goal data for player: {goal_data.player_id}')
    return goal_data


def download_and_parse_csv(
    url: str,
    timeout: Optional[float] = None,
    max_bytes: Optional[int] = None,
) -> Optional[CSVGoalData]:
    """
    Download a goal CSV and parse it.

    Every failure (bad URL, timeout, HTTP error, oversized or undecodable
    body) is logged and yields None.

    Args:
        url: http(s) URL of the CSV file
        timeout: Request timeout in seconds (default: configured value)
        max_bytes: Maximum accepted body size (default: configured value)

    Returns:
        CSVGoalData, or None on any failure
    """
    if not url or not isinstance(url, str) or not url.startswith('http'):
        logger.warning(f'Invalid CSV URL provided: {url}')
        return None

    timeout = timeout or get_csv_download_timeout()
    max_bytes = max_bytes or get_csv_max_bytes()

    logger.info(f'Downloading CSV from: {url}')

    try:
        with requests.get(
            url, timeout=timeout, headers={'Accept': CSV_ACCEPT_HEADER}, stream=True
        ) as response:
            if response.status_code == 404:
                logger.error(f'CSV file not found (404) for URL: {url}')
                return None
            if response.status_code == 403:
                logger.error(f'CSV access forbidden (403) for URL: {url}')
                return None
            if not 200 <= response.status_code < 300:
                logger.error(f'CSV download failed with status: {response.status_code} for URL: {url}')
                return None

            declared = response.headers.get('Content-Length')
            if declared and declared.isdigit() and int(declared) > max_bytes:
                logger.error(f'CSV body too large ({declared} bytes, max {max_bytes}) for URL: {url}')
                return None

            body = b''
            for chunk in response.iter_content(chunk_size=65536):
                body += chunk
                if len(body) > max_bytes:
                    logger.error(f'CSV body exceeds {max_bytes} bytes for URL: {url}')
                    return None
    except requests.Timeout:
        logger.error(f'CSV download timeout for URL: {url}')
        return None
    except requests.RequestException as e:
        logger.error(f'Unexpected error downloading CSV from {url}: {e}')
        return None

    if not body.strip():
        logger.warning(f'Empty CSV response from URL: {url}')
        return None

    try:
        content = body.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        logger.error(f'CSV body is not valid UTF-8 for URL: {url}: {e}')
        return None

    return parse_goal_csv(content)


def goal_data_to_report_record(goal_data: CSVGoalData, team: Optional[str] = None) -> ReportRecord:
    """
    Convert parsed goal data into a ReportRecord the processors accept.

    Args:
        goal_data: Parsed goal data
        team: Team type value to stamp on the record, if known

    Returns:
        ReportRecord with percentages, cycle fields and target/current values
    """
    percentages: dict[str, float] = {}
    targets: dict[str, float] = {}
    currents: dict[str, float] = {}

    for metric in CSV_CORE_METRICS + CSV_OPTIONAL_METRICS:
        values = getattr(goal_data, metric)
        if values is None:
            continue
        percentages[metric] = values.percentage
        targets[metric] = values.target
        currents[metric] = values.current

    return ReportRecord(
        player_id=goal_data.player_id,
        team=team,
        current_cycle_day=goal_data.cycle_day,
        total_cycle_days=goal_data.total_cycle_days,
        targets=targets,
        currents=currents,
        **percentages,
    )

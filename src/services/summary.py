from __future__ import annotations

from ..models.load_result import LoadResult
from .aggregation import KpiSummary

"""Summary line rendering for the CLI.

Format:
SUMMARY source={source} status={status} rows={raw} blank_rows={blank}
records={records} issues={issues} elapsed_sec={elapsed}
"""


def _format_number(value: float) -> str:
    """Integers without a decimal point, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 6))


def render_summary_line(result: LoadResult) -> str:
    """Render the SUMMARY line for one load.

    Examples:
        >>> from datetime import datetime, timezone
        >>> from src.models.load_result import LoadStatus
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = LoadResult(
        ...     source="range.csv", status=LoadStatus.SUCCESS, load_id=1,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ...     raw_rows=12, blank_rows=2, record_count=10,
        ... )
        >>> render_summary_line(result)
        'SUMMARY source=range.csv status=success rows=12 blank_rows=2 records=10 issues=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY source={result.source} "
        f"status={result.status.value} "
        f"rows={result.raw_rows} "
        f"blank_rows={result.blank_rows} "
        f"records={result.record_count} "
        f"issues={len(result.issues)} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )


def render_kpi_line(kpis: KpiSummary) -> str:
    """One-line KPI tile rendering: money to 2dp, units as whole numbers."""
    grades = " ".join(f"{label}={value:.2f}" for label, value in kpis.stock_value_by_grade)
    line = (
        f"KPI products={kpis.products} "
        f"units_this_year={kpis.units_this_year:.0f} "
        f"units_last_year={kpis.units_last_year:.0f} "
        f"revenue={kpis.revenue:.2f} "
        f"revenue_ytd={kpis.revenue_ytd:.2f} "
        f"revenue_last_year={kpis.revenue_last_year:.2f} "
        f"profit={kpis.profit:.2f} "
        f"stock_value={kpis.stock_value:.2f} "
        f"content_ready={kpis.content_ready}"
    )
    if grades:
        line += f" stock_value_by_grade[{grades}]"
    return line

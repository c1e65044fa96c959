"""
Plain-text comparable report.

Renders a ComparisonResult as a header block followed by one row per
comparable, most similar first.
"""

from typing import List

from core.similarity_engine import ComparisonResult, ScoredCandidate
from utils.formatting import format_area, format_currency


COLUMNS = (
    ("#", 3),
    ("Property", 12),
    ("Area", 12),
    ("Market", 12),
    ("Land", 11),
    ("Year", 5),
    ("Score", 8),
    ("Base", 8),
    ("Bias", 8),
)


def _row(values) -> str:
    return "  ".join(str(v).rjust(width) for v, (_, width) in zip(values, COLUMNS))


def _comp_row(rank: int, comp: ScoredCandidate) -> str:
    record = comp.record
    return _row((
        rank,
        record.id,
        format_area(record.area),
        format_currency(record.market_value),
        format_currency(record.land_value),
        record.year_built if record.year_built is not None else "-",
        f"{comp.similarity:.4f}",
        f"{comp.base_similarity:.4f}",
        f"{comp.price_bias_adjustment:.4f}",
    ))


def render_text_report(result: ComparisonResult) -> str:
    """
    Render a comparison result as a fixed-width text report.

    Args:
        result: Output of a comparable search

    Returns:
        Multi-line report string
    """
    target = result.target
    lines: List[str] = [
        f"Target property:   {target.id}",
        f"Subdivision:       {result.subdivision_code or '-'}",
        f"Area:              {format_area(target.area)}",
        f"Market value:      {format_currency(target.market_value)}",
        f"Land value:        {format_currency(target.land_value)}",
        f"Year built:        {target.year_built if target.year_built is not None else '-'}",
        f"Candidates:        {result.total_candidates} in subdivision, "
        f"{result.filtered_candidates} within cutoffs",
        "",
    ]

    if not result.comps:
        lines.append("No comparable properties found.")
        return "\n".join(lines)

    header = _row(name for name, _ in COLUMNS)
    lines.append(header)
    lines.append("-" * len(header))
    lines.extend(_comp_row(i, comp) for i, comp in enumerate(result.comps, start=1))

    return "\n".join(lines)

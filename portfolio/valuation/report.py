"""
Valuation report generator — markdown summaries of both views.
"""
from typing import Optional

from portfolio.valuation.contribution import format_percent
from portfolio.valuation.engine import ValuationState, ViewSummary

_VIEW_TITLES = {
    "current": "Current Allocation",
    "target": "Target Allocation",
}


def format_amount(amount: float) -> str:
    """1500 -> "1,500" (whole currency units)."""
    return f"{amount:,.0f}"


def _fmt_optional_percent(fraction: Optional[float]) -> str:
    text = format_percent(fraction)
    return f"{text}%" if text is not None else "N/A"


def generate_view_section(summary: ViewSummary) -> str:
    """Markdown section for one view: totals, risk band, category tables."""
    lines = []
    lines.append(f"## {_VIEW_TITLES.get(summary.view, summary.view)}")
    lines.append("")
    lines.append(
        f"**Total Amount**: {format_amount(summary.total_amount)} | "
        f"**Expected Annual Return**: {summary.total_contribution_percent:.2f}% | "
        f"**Risk Profile**: {summary.risk_profile.label} ({summary.risk_profile.risk_level} risk)"
    )
    lines.append("")

    if not summary.categories:
        lines.append("No holdings in this view.")
        lines.append("")
        return "\n".join(lines)

    lines.append("### By Amount")
    lines.append("")
    lines.append("| Category | Holdings | Amount | Allocation |")
    lines.append("|----------|---------:|-------:|-----------:|")
    for c in summary.categories_by_amount():
        lines.append(
            f"| {c.category} | {c.holding_count} | "
            f"{format_amount(c.total_amount)} | {c.allocation_percent:.1f}% |"
        )
    lines.append("")

    lines.append("### By Contribution")
    lines.append("")
    lines.append("| Category | CAGR | Allocation | Contribution |")
    lines.append("|----------|-----:|-----------:|-------------:|")
    for c in summary.categories_by_contribution():
        lines.append(
            f"| {c.category} | {c.weighted_growth_rate*100:.2f}% | "
            f"{c.allocation_percent:.1f}% | {c.contribution_percent:.2f}% |"
        )
    lines.append("")
    return "\n".join(lines)


def generate_valuation_summary(state: ValuationState, title: str = "Portfolio Valuation Summary") -> str:
    """
    Generate a markdown valuation summary.

    Includes: both view sections and a per-holding table with progress.
    """
    if not state.holdings:
        return f"# {title}\n\nNo holdings in portfolio."

    lines = []
    lines.append(f"# {title}")
    lines.append("")
    lines.append(
        f"**Holdings**: {len(state.holdings)} | "
        f"**Current**: {format_amount(state.current.total_amount)} | "
        f"**Target**: {format_amount(state.target.total_amount)}"
    )
    lines.append("")

    lines.append(generate_view_section(state.current))
    lines.append(generate_view_section(state.target))

    lines.append("## Holdings")
    lines.append("")
    lines.append(
        "| Symbol | Name | Category | Price | Current | Target | Progress "
        "| Cur. Alloc | Tgt. Alloc | CAGR | Cur. Contrib | Tgt. Contrib |"
    )
    lines.append(
        "|--------|------|----------|------:|--------:|-------:|---------:"
        "|-----------:|-----------:|-----:|-------------:|-------------:|"
    )
    for h in state.holdings:
        price = f"{h.price:,.2f}" if h.price is not None else "N/A"
        lines.append(
            f"| {h.symbol} | {h.name} | {h.category} | {price} | "
            f"{h.current_quantity:,} | {h.target_quantity:,} | {h.progress:.0f}% | "
            f"{h.current_allocation:.1f}% | {h.target_allocation:.1f}% | "
            f"{_fmt_optional_percent(h.growth_rate)} | "
            f"{_fmt_optional_percent(h.current_contribution)} | "
            f"{_fmt_optional_percent(h.target_contribution)} |"
        )
    lines.append("")

    return "\n".join(lines)

"""
Valuation — derived numbers for a holdings list.

- allocation / contribution / progress: per-holding calculators
- categories: category rollups with contribution and amount orderings
- risk: risk band from a view's total contribution
- engine: recompute() over the current and target views
- session: caller-owned state with the commit guard
- report: markdown valuation summaries
"""

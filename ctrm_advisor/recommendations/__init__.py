"""
Recommendation engine: scores the product catalog against questionnaire
answers and selects an ideal fit plus a strong alternative.

Modules
-------
rules    : Rule-group delta tables, bracket helpers, validate_rule_table().
scorer   : ScoreBreakdown dataclass + compute_breakdown() + score()
           — pure functions, no I/O.
selector : RankedProduct + rank_products() + select() + recommend().
"""

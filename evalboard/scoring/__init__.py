"""
scoring/ - Evaluation scoring engine (pure functions, no I/O)

Modules:
    score_calculator.py  - Criterion validation and total/average scores
    lifecycle.py         - Evaluation state machine rules
    leaderboard.py       - Leaderboard derivation, ranking and criteria breakdown
"""

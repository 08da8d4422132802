from __future__ import annotations

import csv
import io
from typing import Iterable, Optional

from evalboard.models.leaderboard import LeaderboardEntry

LEADERBOARD_CSV_HEADER = ["Rank", "Team", "TotalScore", "ProjectTitle"]


def format_score(value: Optional[float]) -> str:
    """92.0 -> '92', 78.5 -> '78.5', None -> ''."""
    if value is None:
        return ""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)


def leaderboard_to_csv(entries: Iterable[LeaderboardEntry]) -> str:
    """
    Render leaderboard rows as CSV text. Fields holding a comma, quote or
    newline are quoted and embedded quotes doubled (csv.QUOTE_MINIMAL).
    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(LEADERBOARD_CSV_HEADER)
    for entry in entries:
        writer.writerow([
            entry.rank,
            entry.team_name,
            format_score(entry.score),
            entry.project_title or "",
        ])
    return buf.getvalue()

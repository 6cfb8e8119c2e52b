"""Tabular export of a settlement run's audit trail."""

from __future__ import annotations

import io

import pandas as pd

from ..models.processing import ActionProcessingResults

COLUMNS = ["League", "Year", "Publisher", "Timestamp", "Action Type", "Description"]


def league_actions_dataframe(results: ActionProcessingResults) -> pd.DataFrame:
    """One row per league action, ordered by league-year then time."""
    names = {p.id: p.name for p in results.updated_publishers}

    rows = []
    for action in results.league_actions:
        rows.append({
            "League": action.league_id,
            "Year": action.year,
            "Publisher": names.get(action.publisher_id, action.publisher_id),
            "Timestamp": action.timestamp.isoformat(),
            "Action Type": action.action_type,
            "Description": action.description,
        })

    df = pd.DataFrame(rows, columns=COLUMNS)
    if not df.empty:
        # Stable sort keeps processing order within the same timestamp
        df = df.sort_values(["League", "Year", "Timestamp"], kind="stable").reset_index(drop=True)
    return df


def export_league_actions(results: ActionProcessingResults, format: str = "csv") -> tuple[io.IOBase, str, str]:
    """Render the audit trail; returns (buffer, media type, filename)."""
    df = league_actions_dataframe(results)

    if format.lower() == "xlsx":
        buf = io.BytesIO()
        with pd.ExcelWriter(buf, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="League Actions")
        buf.seek(0)
        return (
            buf,
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "league_actions.xlsx",
        )

    buf = io.StringIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return buf, "text/csv", "league_actions.csv"

# =============================================================================
# madrasa_core/services/analytics.py
# Dashboard, fee, attendance and budget summaries
# =============================================================================
"""
pandas summaries used by the Dashboard, Fees, Expenses and Reports pages.

Every function accepts either a DataFrame or a list of row dicts, so the
rows returned by a repository can be passed straight in.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from madrasa_core.data.models import AttendanceStatus, FeeStatus, StudentStatus, TransactionType

Rows = Union[pd.DataFrame, Iterable[Dict[str, Any]], None]

# Budget thresholds (percentage of the budget spent)
BUDGET_WARNING_PCT = 80.0
BUDGET_EXCEEDED_PCT = 100.0


def to_frame(rows: Rows) -> pd.DataFrame:
    """Coerce rows into a DataFrame (copy)."""
    if rows is None:
        return pd.DataFrame()
    if isinstance(rows, pd.DataFrame):
        return rows.copy()
    return pd.DataFrame(list(rows))


def _amounts(df: pd.DataFrame, column: str = "amount") -> pd.Series:
    if column not in df.columns:
        return pd.Series(0.0, index=df.index)
    return pd.to_numeric(df[column], errors="coerce").fillna(0.0)


def _dates(df: pd.DataFrame, column: str = "date") -> pd.Series:
    if column not in df.columns:
        return pd.Series(pd.NaT, index=df.index)
    return pd.to_datetime(df[column], errors="coerce")


# =============================================================================
# DASHBOARD
# =============================================================================

def dashboard_stats(
    students: Rows,
    teachers: Rows,
    classes: Rows,
    attendance: Rows,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Headline numbers for the dashboard.

    Returns:
        total_students, active_students, total_teachers, total_classes,
        attendance_rate (percent present or late today, None without records)
    """
    today = today or date.today()
    students_df = to_frame(students)
    attendance_df = to_frame(attendance)

    active = 0
    if "status" in students_df.columns:
        active = int((students_df["status"] == StudentStatus.ACTIVE.value).sum())

    rate = None
    if not attendance_df.empty and "status" in attendance_df.columns:
        todays = attendance_df[_dates(attendance_df).dt.date == today]
        if not todays.empty:
            attended = todays["status"].isin([AttendanceStatus.PRESENT.value, AttendanceStatus.LATE.value])
            rate = round(float(attended.mean()) * 100, 1)

    return {
        "total_students": len(students_df),
        "active_students": active,
        "total_teachers": len(to_frame(teachers)),
        "total_classes": len(to_frame(classes)),
        "attendance_rate": rate,
    }


# =============================================================================
# FEES
# =============================================================================

def fee_summary(fees: Rows) -> Dict[str, Any]:
    """
    Totals by fee status.

    Returns:
        total_amount, paid_amount, pending_amount, overdue_amount,
        partial_amount, counts (status -> number of fees), collection_rate
    """
    df = to_frame(fees)
    summary: Dict[str, Any] = {
        "total_amount": 0.0,
        "paid_amount": 0.0,
        "pending_amount": 0.0,
        "overdue_amount": 0.0,
        "partial_amount": 0.0,
        "counts": {s.value: 0 for s in FeeStatus},
        "collection_rate": 0.0,
    }
    if df.empty:
        return summary

    amounts = _amounts(df)
    status = df["status"] if "status" in df.columns else pd.Series("", index=df.index)
    summary["total_amount"] = float(amounts.sum())
    for fee_status in FeeStatus:
        mask = status == fee_status.value
        summary[f"{fee_status.value}_amount"] = float(amounts[mask].sum())
        summary["counts"][fee_status.value] = int(mask.sum())

    if summary["total_amount"] > 0:
        summary["collection_rate"] = round(summary["paid_amount"] / summary["total_amount"] * 100, 1)
    return summary


# =============================================================================
# ATTENDANCE
# =============================================================================

def attendance_summary(
    attendance: Rows,
    students: Rows = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> pd.DataFrame:
    """
    Per-student attendance counts between start and end (inclusive).

    Columns: student_id, name (when students given), present, absent, late,
    excused, total, rate (percent present or late).
    """
    statuses = [s.value for s in AttendanceStatus]
    columns = ["student_id", "name"] + statuses + ["total", "rate"]
    df = to_frame(attendance)
    if df.empty or not {"student_id", "status"} <= set(df.columns):
        return pd.DataFrame(columns=columns)

    dates = _dates(df).dt.date
    if start is not None:
        df = df[dates >= start]
        dates = dates[df.index]
    if end is not None:
        df = df[dates <= end]
    if df.empty:
        return pd.DataFrame(columns=columns)

    counts = pd.crosstab(df["student_id"], df["status"]).reindex(columns=statuses, fill_value=0)
    counts["total"] = counts.sum(axis=1)
    attended = counts[AttendanceStatus.PRESENT.value] + counts[AttendanceStatus.LATE.value]
    counts["rate"] = np.where(counts["total"] > 0, (attended / counts["total"] * 100).round(1), 0.0)
    counts = counts.reset_index()
    counts.columns.name = None

    students_df = to_frame(students)
    if not students_df.empty and {"id", "name"} <= set(students_df.columns):
        names = students_df.set_index(students_df["id"].astype(str))["name"]
        counts["name"] = counts["student_id"].astype(str).map(names).fillna("Unknown")
    else:
        counts["name"] = ""

    return counts[columns]


# =============================================================================
# BUDGETS & EXPENSES
# =============================================================================

def budget_status(percentage: float) -> str:
    """on_track below 80%, warning from 80% up to 100%, exceeded from 100%."""
    if percentage >= BUDGET_EXCEEDED_PCT:
        return "exceeded"
    if percentage >= BUDGET_WARNING_PCT:
        return "warning"
    return "on_track"


def budget_usage(
    budgets: Rows,
    expenses: Rows,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> pd.DataFrame:
    """
    Spending against each budget.

    Spent is the sum of expense-type entries in the budget's category and
    month. With month/year given only those budgets are returned.

    Columns: id, category, month, year, amount, spent, percentage,
    remaining, status.
    """
    columns = ["id", "category", "month", "year", "amount", "spent", "percentage", "remaining", "status"]
    budgets_df = to_frame(budgets)
    if budgets_df.empty:
        return pd.DataFrame(columns=columns)

    if "id" not in budgets_df.columns:
        budgets_df["id"] = None
    budgets_df["month"] = pd.to_numeric(budgets_df["month"], errors="coerce")
    budgets_df["year"] = pd.to_numeric(budgets_df["year"], errors="coerce")
    budgets_df = budgets_df.dropna(subset=["month", "year"])
    if month is not None:
        budgets_df = budgets_df[budgets_df["month"] == month]
    if year is not None:
        budgets_df = budgets_df[budgets_df["year"] == year]
    if budgets_df.empty:
        return pd.DataFrame(columns=columns)

    expenses_df = to_frame(expenses)
    spent_by_key: Dict[tuple, float] = {}
    if not expenses_df.empty and {"type", "category"} <= set(expenses_df.columns):
        expenses_df = expenses_df[expenses_df["type"] == TransactionType.EXPENSE.value].copy()
        dates = _dates(expenses_df)
        expenses_df["_month"] = dates.dt.month
        expenses_df["_year"] = dates.dt.year
        expenses_df["_amount"] = _amounts(expenses_df)
        grouped = expenses_df.groupby(["category", "_month", "_year"])["_amount"].sum()
        spent_by_key = {(c, int(m), int(y)): float(v) for (c, m, y), v in grouped.items()}

    result = budgets_df[["id", "category", "month", "year"]].copy()
    result["amount"] = _amounts(budgets_df)
    result["spent"] = [
        spent_by_key.get((row.category, int(row.month), int(row.year)), 0.0)
        for row in result.itertuples()
    ]
    result["percentage"] = np.where(
        result["amount"] > 0, (result["spent"] / result["amount"] * 100).round(1), 0.0
    )
    result["remaining"] = result["amount"] - result["spent"]
    result["status"] = result["percentage"].map(budget_status)
    return result[columns].reset_index(drop=True)


def _filter_month(df: pd.DataFrame, month: Optional[int], year: Optional[int]) -> pd.DataFrame:
    dates = _dates(df)
    mask = pd.Series(True, index=df.index)
    if month is not None:
        mask &= dates.dt.month == month
    if year is not None:
        mask &= dates.dt.year == year
    return df[mask]


def income_expense_balance(
    entries: Rows,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Income, expense and balance, plus per-category totals sorted largest first.

    Returns:
        income, expense, balance, by_category (DataFrame: category, type, amount)
    """
    df = to_frame(entries)
    empty = pd.DataFrame(columns=["category", "type", "amount"])
    if df.empty or "type" not in df.columns:
        return {"income": 0.0, "expense": 0.0, "balance": 0.0, "by_category": empty}

    df = _filter_month(df, month, year).copy()
    df["amount"] = _amounts(df)
    income = float(df.loc[df["type"] == TransactionType.INCOME.value, "amount"].sum())
    expense = float(df.loc[df["type"] == TransactionType.EXPENSE.value, "amount"].sum())

    if df.empty or "category" not in df.columns:
        by_category = empty
    else:
        by_category = (
            df.groupby(["category", "type"], as_index=False)["amount"].sum()
            .sort_values("amount", ascending=False)
            .reset_index(drop=True)
        )

    return {"income": income, "expense": expense, "balance": income - expense, "by_category": by_category}


def monthly_trend(entries: Rows, months: int = 6, today: Optional[date] = None) -> pd.DataFrame:
    """
    Income, expense and net for each of the last months (oldest first).

    Columns: month ("Jan 2025"), income, expense, net.
    """
    today = today or date.today()
    periods = pd.period_range(end=pd.Period(pd.Timestamp(today), freq="M"), periods=months, freq="M")
    df = to_frame(entries)

    totals = pd.DataFrame(0.0, index=periods, columns=["income", "expense"])
    if not df.empty and "type" in df.columns:
        df = df.copy()
        df["_period"] = _dates(df).dt.to_period("M")
        df["_amount"] = _amounts(df)
        grouped = df.groupby(["_period", "type"])["_amount"].sum()
        for (period, kind), amount in grouped.items():
            if period in totals.index and kind in totals.columns:
                totals.loc[period, kind] = float(amount)

    totals["net"] = totals["income"] - totals["expense"]
    totals.insert(0, "month", [p.strftime("%b %Y") for p in totals.index])
    return totals.reset_index(drop=True)


def lookup_names(rows: Rows, key: str = "id", label: str = "name") -> Dict[str, str]:
    """Map of id -> display name, used to show student/class names in tables."""
    df = to_frame(rows)
    if df.empty or key not in df.columns or label not in df.columns:
        return {}
    return dict(zip(df[key].astype(str), df[label].fillna("").astype(str)))


def replace_ids(df: pd.DataFrame, column: str, names: Dict[str, str], unknown: str = "Unknown") -> pd.DataFrame:
    """Copy of df with ids in column replaced by names."""
    if df.empty or column not in df.columns:
        return df
    out = df.copy()
    out[column] = out[column].map(lambda v: names.get(str(v), unknown) if pd.notna(v) else "")
    return out


__all__: List[str] = [
    "to_frame",
    "dashboard_stats",
    "fee_summary",
    "attendance_summary",
    "budget_status",
    "budget_usage",
    "income_expense_balance",
    "monthly_trend",
    "lookup_names",
    "replace_ids",
]

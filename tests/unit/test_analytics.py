# =============================================================================
# tests/unit/test_analytics.py
# Unit Tests for dashboard, fee, attendance and budget summaries
# =============================================================================

from datetime import date

import pandas as pd
import pytest


class TestDashboardStats:
    """Headline numbers"""

    def test_counts_and_attendance_rate(self, sample_students, sample_classes):
        from madrasa_core.services import analytics

        today = date(2024, 3, 4)
        attendance = [
            {"student_id": "s1", "date": "2024-03-04", "status": "present"},
            {"student_id": "s2", "date": "2024-03-04", "status": "absent"},
            {"student_id": "s2", "date": "2024-03-03", "status": "present"},
        ]

        stats = analytics.dashboard_stats(sample_students, [{"id": "t1"}], sample_classes, attendance, today=today)

        assert stats["total_students"] == 2
        assert stats["active_students"] == 2
        assert stats["total_teachers"] == 1
        assert stats["total_classes"] == 1
        assert stats["attendance_rate"] == 50.0

    def test_no_attendance_today(self):
        from madrasa_core.services import analytics

        stats = analytics.dashboard_stats([], [], [], [], today=date(2024, 3, 4))

        assert stats["total_students"] == 0
        assert stats["attendance_rate"] is None


class TestFeeSummary:
    """Totals by fee status"""

    def test_totals_and_collection_rate(self, sample_fees):
        from madrasa_core.services import analytics

        summary = analytics.fee_summary(sample_fees)

        assert summary["total_amount"] == 3500.0
        assert summary["paid_amount"] == 1500.0
        assert summary["pending_amount"] == 1500.0
        assert summary["overdue_amount"] == 500.0
        assert summary["counts"]["paid"] == 1
        assert summary["collection_rate"] == pytest.approx(42.9)

    def test_empty(self):
        from madrasa_core.services import analytics

        summary = analytics.fee_summary([])

        assert summary["total_amount"] == 0.0
        assert summary["collection_rate"] == 0.0

    def test_accepts_dataframe_with_text_amounts(self):
        from madrasa_core.services import analytics

        df = pd.DataFrame([{"amount": "200", "status": "paid"}, {"amount": "bad", "status": "pending"}])

        summary = analytics.fee_summary(df)

        assert summary["total_amount"] == 200.0
        assert summary["collection_rate"] == 100.0


class TestAttendanceSummary:
    """Per-student counts"""

    def test_counts_in_range(self, sample_students):
        from madrasa_core.services import analytics

        attendance = [
            {"student_id": "s1", "date": "2024-03-01", "status": "present"},
            {"student_id": "s1", "date": "2024-03-02", "status": "late"},
            {"student_id": "s1", "date": "2024-03-03", "status": "absent"},
            {"student_id": "s1", "date": "2024-04-01", "status": "absent"},
            {"student_id": "s2", "date": "2024-03-01", "status": "excused"},
        ]

        summary = analytics.attendance_summary(
            attendance, sample_students, start=date(2024, 3, 1), end=date(2024, 3, 31)
        )
        ahmad = summary[summary["student_id"] == "s1"].iloc[0]

        assert ahmad["name"] == "Ahmad"
        assert ahmad["total"] == 3
        assert ahmad["absent"] == 1
        assert ahmad["rate"] == pytest.approx(66.7)
        assert summary[summary["student_id"] == "s2"].iloc[0]["excused"] == 1

    def test_empty_has_columns(self):
        from madrasa_core.services import analytics

        summary = analytics.attendance_summary([])

        assert summary.empty
        assert "rate" in summary.columns


class TestBudgets:
    """Spending against monthly budgets"""

    @pytest.mark.parametrize("percentage,expected", [
        (10.0, "on_track"),
        (80.0, "warning"),
        (99.9, "warning"),
        (100.0, "exceeded"),
        (140.0, "exceeded"),
    ])
    def test_budget_status_thresholds(self, percentage, expected):
        from madrasa_core.services import analytics

        assert analytics.budget_status(percentage) == expected

    def test_budget_usage(self):
        from madrasa_core.services import analytics

        budgets = [
            {"id": "b1", "category": "utilities", "month": 3, "year": 2024, "amount": 1000},
            {"id": "b2", "category": "books", "month": 3, "year": 2024, "amount": 500},
            {"id": "b3", "category": "books", "month": 4, "year": 2024, "amount": 500},
        ]
        entries = [
            {"type": "expense", "category": "utilities", "amount": 850, "date": "2024-03-10"},
            {"type": "expense", "category": "books", "amount": 600, "date": "2024-03-12"},
            {"type": "income", "category": "books", "amount": 900, "date": "2024-03-12"},
            {"type": "expense", "category": "books", "amount": 50, "date": "2024-04-02"},
        ]

        usage = analytics.budget_usage(budgets, entries, month=3, year=2024).set_index("id")

        assert list(usage.index) == ["b1", "b2"]
        assert usage.loc["b1", "status"] == "warning"
        assert usage.loc["b2", "spent"] == 600.0
        assert usage.loc["b2", "status"] == "exceeded"
        assert usage.loc["b2", "remaining"] == -100.0


class TestIncomeExpense:
    """Ledger totals"""

    def test_balance_for_month(self):
        from madrasa_core.services import analytics

        entries = [
            {"type": "income", "category": "donations", "amount": 5000, "date": "2024-03-01"},
            {"type": "expense", "category": "salaries", "amount": 3000, "date": "2024-03-05"},
            {"type": "expense", "category": "utilities", "amount": 700, "date": "2024-02-05"},
        ]

        result = analytics.income_expense_balance(entries, month=3, year=2024)

        assert result["income"] == 5000.0
        assert result["expense"] == 3000.0
        assert result["balance"] == 2000.0
        assert result["by_category"].iloc[0]["category"] == "donations"

    def test_monthly_trend_covers_last_months(self):
        from madrasa_core.services import analytics

        entries = [
            {"type": "income", "amount": 100, "date": "2024-03-01"},
            {"type": "expense", "amount": 40, "date": "2024-03-09"},
            {"type": "expense", "amount": 999, "date": "2023-01-01"},
        ]

        trend = analytics.monthly_trend(entries, months=3, today=date(2024, 3, 15))

        assert list(trend["month"]) == ["Jan 2024", "Feb 2024", "Mar 2024"]
        assert trend.iloc[-1]["net"] == 60.0
        assert trend["expense"].sum() == 40.0


class TestLookups:
    """Id to name mapping"""

    def test_lookup_and_replace(self, sample_students):
        from madrasa_core.services import analytics

        names = analytics.lookup_names(sample_students)
        fees = pd.DataFrame([{"student_id": "s1"}, {"student_id": "zz"}, {"student_id": None}])

        replaced = analytics.replace_ids(fees, "student_id", names, unknown="?")

        assert names == {"s1": "Ahmad", "s2": "Bilal"}
        assert list(replaced["student_id"]) == ["Ahmad", "?", ""]

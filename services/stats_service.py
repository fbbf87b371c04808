"""
Stats Service
Read-only EXPENSE aggregations for the statistics screens.

Every view is household-wide unless ``mine_only`` is set, in which case only
transactions recorded by the caller are counted.
"""
from collections import defaultdict
from datetime import date

from dateutil.relativedelta import relativedelta
from sqlalchemy import func

from models.transactions import Transaction
from services.recurring_service import month_bounds
from services.transaction_service import TransactionService


def months_back(months, today=None):
    """First day of the month *months* before *today*."""
    today = today or date.today()
    return (today - relativedelta(months=months)).replace(day=1)


class StatsService:

    @staticmethod
    def _expenses(acting_user, mine_only=False):
        return (
            TransactionService.scoped_query(acting_user, mine_only=mine_only)
            .filter(Transaction.type == Transaction.EXPENSE)
        )

    @staticmethod
    def heatmap(acting_user, year, month, mine_only=False):
        """Daily expense totals of one month: ``[{date, count}]``."""
        start, end = month_bounds(year, month)
        rows = (
            StatsService._expenses(acting_user, mine_only)
            .filter(Transaction.transaction_date.between(start, end))
            .with_entities(Transaction.transaction_date, func.sum(Transaction.amount))
            .group_by(Transaction.transaction_date)
            .order_by(Transaction.transaction_date)
            .all()
        )
        return [{'date': day.isoformat(), 'count': int(total or 0)} for day, total in rows]

    @staticmethod
    def inflation(acting_user, months=6, mine_only=False, today=None):
        """Expense totals per ``YYYY-MM`` and category since *months* ago."""
        rows = (
            StatsService._expenses(acting_user, mine_only)
            .filter(Transaction.transaction_date >= months_back(months, today))
            .with_entities(Transaction.transaction_date, Transaction.category,
                           func.sum(Transaction.amount))
            .group_by(Transaction.transaction_date, Transaction.category)
            .all()
        )
        # Dates are folded into months here so the query stays backend-neutral
        totals = defaultdict(int)
        for day, category, total in rows:
            totals[(day.strftime('%Y-%m'), category)] += int(total or 0)
        return [
            {'month': month_key, 'category': category, 'total': total}
            for (month_key, category), total in sorted(totals.items())
        ]

    @staticmethod
    def pie(acting_user, year, month, mine_only=False):
        """Expense total per category in one month, largest first."""
        start, end = month_bounds(year, month)
        total = func.sum(Transaction.amount)
        rows = (
            StatsService._expenses(acting_user, mine_only)
            .filter(Transaction.transaction_date.between(start, end))
            .with_entities(Transaction.category, total)
            .group_by(Transaction.category)
            .order_by(total.desc())
            .all()
        )
        return [{'category': category, 'total': int(amount or 0)} for category, amount in rows]

    @staticmethod
    def category_averages(acting_user, months, mine_only=False, today=None):
        rows = (
            StatsService._expenses(acting_user, mine_only)
            .filter(Transaction.transaction_date >= months_back(months, today))
            .with_entities(Transaction.category, func.sum(Transaction.amount))
            .group_by(Transaction.category)
            .all()
        )
        averages = [
            {'category': category, 'avgAmount': int(amount or 0) / months}
            for category, amount in rows
        ]
        return sorted(averages, key=lambda row: row['avgAmount'], reverse=True)

    @staticmethod
    def averages(acting_user, mine_only=False, today=None):
        return {
            'avg6': StatsService.category_averages(acting_user, 6, mine_only, today),
            'avg12': StatsService.category_averages(acting_user, 12, mine_only, today),
        }

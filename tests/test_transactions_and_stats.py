"""
Tests for the transaction ledger, the spreadsheet export and the
statistics aggregations.
"""
from datetime import date
from io import BytesIO

import pytest
from openpyxl import load_workbook

from models.audit import AuditLog
from models.transactions import Transaction
from services.export_service import ExportService
from services.recurring_service import RecurringService
from services.stats_service import StatsService, months_back
from services.transaction_service import TransactionService
from utils.errors import NotAuthorized, NotFoundError

INCOME = Transaction.INCOME
EXPENSE = Transaction.EXPENSE


def _add(user, amount, type_, day, category=None, description=None):
    return TransactionService.create_transaction(user, amount, type_, day, category=category,
                                                 description=description)


class TestTransactions:
    def test_list_is_household_wide_and_dated(self, app, owner, member, household, outsider):
        _add(owner, 1000, EXPENSE, date(2024, 5, 3), description='mine')
        _add(member, 2000, EXPENSE, date(2024, 5, 4), description='theirs')
        _add(owner, 3000, EXPENSE, date(2024, 6, 1), description='june')
        _add(outsider, 4000, EXPENSE, date(2024, 5, 4), description='elsewhere')

        rows = TransactionService.list_transactions(owner, date(2024, 5, 1), date(2024, 5, 31))

        assert [t.description for t in rows] == ['theirs', 'mine']

    def test_default_category_and_audit(self, app, owner, household):
        txn = _add(owner, 1500, INCOME, date(2024, 5, 3))

        assert txn.category == 'Other'
        entry = AuditLog.query.filter_by(action_type='CREATE_TRANSACTION').one()
        assert entry.original_data == {'amount': 1500, 'description': None, 'type': INCOME,
                                       'recurringItemId': None}

    def test_only_creator_may_delete(self, app, owner, member, household):
        txn = _add(member, 1000, EXPENSE, date.today())

        with pytest.raises(NotAuthorized):
            TransactionService.delete_transaction(owner, txn.id)

        TransactionService.delete_transaction(member, txn.id)
        assert txn.deleted_at is not None
        assert TransactionService.list_transactions(member) == []
        entry = AuditLog.query.filter_by(action_type='DELETE_TRANSACTION').one()
        assert entry.original_data['id'] == txn.id

    def test_cannot_delete_other_households_transaction(self, app, owner, household, outsider):
        txn = _add(outsider, 1000, EXPENSE, date.today())
        with pytest.raises(NotFoundError):
            TransactionService.delete_transaction(owner, txn.id)

    def test_recurring_link_must_stay_in_household(self, app, owner, household, outsider):
        foreign = RecurringService.create_item(outsider, 'Their rent', 100)
        with pytest.raises(NotAuthorized):
            TransactionService.create_transaction(owner, 100, EXPENSE, date.today(),
                                                  recurring_item_id=foreign.id)
        assert Transaction.query.count() == 0


class TestExport:
    def _rows(self, stream):
        sheet = load_workbook(BytesIO(stream.read())).active
        return list(sheet.iter_rows(values_only=True))

    def test_rows_and_totals(self, app, owner, household):
        _add(owner, 5000, EXPENSE, date(2024, 5, 9), 'Food', 'Lunch')
        _add(owner, 200000, INCOME, date(2024, 5, 1), 'Salary')

        rows = self._rows(ExportService.export_transactions(owner, date(2024, 5, 1), date(2024, 5, 31)))

        assert rows[0] == ('Date', 'Type', 'Category', 'Amount', 'Description')
        assert [r[1] for r in rows[1:3]] == ['Income', 'Expense']
        assert rows[-3][0] == 'Total income:' and rows[-3][3] == 200000
        assert rows[-2][0] == 'Total expense:' and rows[-2][3] == 5000
        assert rows[-1][0] == 'Balance:' and rows[-1][3] == 195000

    def test_empty_period(self, app, owner, household):
        rows = self._rows(ExportService.export_transactions(owner, date(2024, 5, 1), date(2024, 5, 31)))
        assert rows[1][0] == 'No data for the selected period'


class TestStats:
    @pytest.fixture
    def spending(self, owner, member, household):
        _add(owner, 1000, EXPENSE, date(2024, 5, 3), 'Food')
        _add(owner, 500, EXPENSE, date(2024, 5, 3), 'Food')
        _add(member, 4000, EXPENSE, date(2024, 5, 20), 'Rent')
        _add(owner, 99999, INCOME, date(2024, 5, 1), 'Salary')
        _add(owner, 700, EXPENSE, date(2024, 3, 2), 'Food')

    def test_heatmap(self, app, owner, spending):
        assert StatsService.heatmap(owner, 2024, 5) == [
            {'date': '2024-05-03', 'count': 1500},
            {'date': '2024-05-20', 'count': 4000},
        ]

    def test_pie_household_vs_mine(self, app, owner, spending):
        assert StatsService.pie(owner, 2024, 5) == [
            {'category': 'Rent', 'total': 4000},
            {'category': 'Food', 'total': 1500},
        ]
        assert StatsService.pie(owner, 2024, 5, mine_only=True) == [
            {'category': 'Food', 'total': 1500},
        ]

    def test_inflation_groups_by_month(self, app, owner, spending):
        rows = StatsService.inflation(owner, today=date(2024, 6, 15))
        assert rows == [
            {'month': '2024-03', 'category': 'Food', 'total': 700},
            {'month': '2024-05', 'category': 'Food', 'total': 1500},
            {'month': '2024-05', 'category': 'Rent', 'total': 4000},
        ]

    def test_averages(self, app, owner, spending):
        result = StatsService.averages(owner, today=date(2024, 6, 15))
        assert result['avg6'] == [
            {'category': 'Rent', 'avgAmount': 4000 / 6},
            {'category': 'Food', 'avgAmount': 2200 / 6},
        ]
        assert result['avg12'][0] == {'category': 'Rent', 'avgAmount': 4000 / 12}

    def test_months_back(self):
        assert months_back(6, date(2024, 8, 31)) == date(2024, 2, 1)

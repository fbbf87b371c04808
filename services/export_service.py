"""
Export Service
Builds the transaction spreadsheet served by the export endpoint
"""
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from models.transactions import Transaction
from services.transaction_service import TransactionService

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

COLUMNS = [
    ('Date', 15),
    ('Type', 12),
    ('Category', 20),
    ('Amount', 15),
    ('Description', 30),
]


class ExportService:

    @staticmethod
    def transactions_in_range(acting_user, start_date, end_date, mine_only=False):
        return (
            TransactionService.scoped_query(acting_user, mine_only=mine_only)
            .filter(Transaction.transaction_date.between(start_date, end_date))
            .order_by(Transaction.transaction_date.asc(), Transaction.id.asc())
            .all()
        )

    @staticmethod
    def build_workbook(transactions):
        """Return an openpyxl workbook listing *transactions* with totals."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = 'Transactions'

        sheet.append([name for name, _ in COLUMNS])
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        for index, (_, width) in enumerate(COLUMNS):
            sheet.column_dimensions[chr(ord('A') + index)].width = width

        if not transactions:
            sheet.append(['No data for the selected period'])
            return workbook

        total_income = 0
        total_expense = 0
        for txn in transactions:
            sheet.append([
                txn.transaction_date,
                'Income' if txn.type == Transaction.INCOME else 'Expense',
                txn.category,
                txn.amount,
                txn.description or '',
            ])
            if txn.type == Transaction.INCOME:
                total_income += txn.amount
            else:
                total_expense += txn.amount

        sheet.append([])
        sheet.append(['Total income:', '', '', total_income])
        sheet.append(['Total expense:', '', '', total_expense])
        sheet.append(['Balance:', '', '', total_income - total_expense])
        return workbook

    @staticmethod
    def export_transactions(acting_user, start_date, end_date, mine_only=False):
        """Serialise the range to an in-memory ``.xlsx`` stream."""
        transactions = ExportService.transactions_in_range(acting_user, start_date, end_date, mine_only)
        workbook = ExportService.build_workbook(transactions)
        stream = BytesIO()
        workbook.save(stream)
        stream.seek(0)
        return stream

from flask import current_app, jsonify, request, send_file
from flask_login import current_user

from . import transactions_bp
from .forms import TransactionForm
from extensions import db
from services.export_service import XLSX_MIMETYPE, ExportService
from services.transaction_service import TransactionService
from utils.errors import HouseholdFinanceError, ValidationError
from utils.request_data import parse_form, query_date


def _date_range():
    """startDate/endDate from the query string, defaulting to the current month."""
    default_start, default_end = TransactionService.default_range()
    start_date = query_date('startDate', default_start)
    end_date = query_date('endDate', default_end)
    if start_date > end_date:
        raise ValidationError('startDate must not be after endDate.')
    return start_date, end_date


@transactions_bp.route('', methods=['GET'])
def list_transactions():
    """Household transactions in a date range, newest first"""
    start_date, end_date = _date_range()
    transactions = TransactionService.list_transactions(current_user, start_date, end_date)
    return jsonify([txn.to_dict() for txn in transactions])


@transactions_bp.route('', methods=['POST'])
def create_transaction():
    form = parse_form(TransactionForm)
    txn = TransactionService.create_transaction(
        current_user,
        amount=form.amount.data,
        type=form.type.data,
        transaction_date=form.date.data,
        category=form.category.data,
        description=form.description.data,
        recurring_item_id=form.recurringItemId.data,
    )
    return jsonify(txn.to_dict()), 201


@transactions_bp.route('/<int:transaction_id>', methods=['DELETE'])
def delete_transaction(transaction_id):
    TransactionService.delete_transaction(current_user, transaction_id)
    return jsonify(message='Transaction deleted.')


@transactions_bp.route('/export/excel', methods=['GET'])
def export_excel():
    """Stream the selected period as an .xlsx workbook"""
    start_date, end_date = _date_range()
    mine_only = request.args.get('scope') == 'mine'
    try:
        stream = ExportService.export_transactions(current_user, start_date, end_date, mine_only)
    except HouseholdFinanceError:
        raise
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception('Transaction export failed')
        return jsonify(error='Export failed', details=str(e)), 500

    return send_file(
        stream,
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f'transactions_{start_date.isoformat()}_{end_date.isoformat()}.xlsx',
    )

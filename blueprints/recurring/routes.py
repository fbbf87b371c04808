from flask import jsonify
from flask_login import current_user

from . import recurring_bp
from .forms import PayRecurringForm, RecurringItemForm, RecurringUpdateForm
from services.recurring_service import RecurringService
from utils.errors import ValidationError
from utils.request_data import parse_form, query_year_month, submitted_fields

# JSON key -> RecurringItem attribute
UPDATABLE_FIELDS = {
    'name': 'name',
    'amount': 'amount',
    'frequency': 'frequency',
    'category': 'category',
    'autoPay': 'auto_pay',
    'payDay': 'pay_day',
    'startDate': 'start_date',
    'active': 'active',
}

# Keys that may be sent but never cleared
REQUIRED_FIELDS = ('name', 'amount', 'frequency', 'startDate')


@recurring_bp.route('', methods=['GET'])
def list_items():
    return jsonify([item.to_dict() for item in RecurringService.list_items(current_user)])


@recurring_bp.route('', methods=['POST'])
def create_item():
    form = parse_form(RecurringItemForm)
    item = RecurringService.create_item(
        current_user,
        name=form.name.data,
        amount=form.amount.data,
        frequency=form.frequency.data,
        category=form.category.data,
        auto_pay=form.autoPay.data,
        pay_day=form.payDay.data,
        start_date=form.startDate.data,
    )
    return jsonify(item.to_dict()), 201


@recurring_bp.route('/<int:item_id>', methods=['PUT'])
def update_item(item_id):
    form = parse_form(RecurringUpdateForm)
    fields = submitted_fields(form)
    blank = {key: ['This field cannot be cleared'] for key in REQUIRED_FIELDS
             if key in fields and fields[key] in (None, '')}
    if blank:
        raise ValidationError(f'{next(iter(blank))}: This field cannot be cleared',
                              details={'fields': blank})
    updates = {UPDATABLE_FIELDS[key]: value for key, value in fields.items()}
    item = RecurringService.update_item(current_user, item_id, updates)
    return jsonify(item.to_dict())


@recurring_bp.route('/<int:item_id>', methods=['DELETE'])
def delete_item(item_id):
    RecurringService.deactivate_item(current_user, item_id)
    return jsonify(message='Recurring item deactivated.')


@recurring_bp.route('/due', methods=['GET'])
def due():
    year, month = query_year_month()
    rows = RecurringService.due_for_month(current_user, year, month)
    return jsonify([
        {
            'item': row['item'].to_dict(),
            'due': row['due'],
            'targetPaymentDate': row['targetPaymentDate'].isoformat() if row['targetPaymentDate'] else None,
            'paidTransaction': row['paidTransaction'].to_dict() if row['paidTransaction'] else None,
        }
        for row in rows
    ])


@recurring_bp.route('/<int:item_id>/pay', methods=['POST'])
def pay(item_id):
    form = parse_form(PayRecurringForm)
    txn = RecurringService.pay_item(
        current_user, item_id, form.year.data, form.month.data,
        amount=form.amount.data,
        payment_date=form.date.data,
        description=form.description.data,
    )
    return jsonify(txn.to_dict()), 201

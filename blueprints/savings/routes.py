from flask import jsonify
from flask_login import current_user

from . import savings_bp
from .forms import BalanceForm, SavingGoalForm, SavingGoalUpdateForm
from services.savings_service import UNSET, SavingsService
from utils.request_data import json_payload, parse_form


@savings_bp.route('', methods=['GET'])
def list_goals():
    return jsonify([goal.to_dict() for goal in SavingsService.list_goals(current_user)])


@savings_bp.route('', methods=['POST'])
def create_goal():
    form = parse_form(SavingGoalForm)
    goal = SavingsService.create_goal(
        current_user,
        name=form.name.data,
        current_amount=form.currentAmount.data,
        target_amount=form.targetAmount.data,
        color=form.color.data,
    )
    return jsonify(goal.to_dict()), 201


@savings_bp.route('/<int:goal_id>', methods=['PUT'])
def update_goal(goal_id):
    form = parse_form(SavingGoalUpdateForm)
    payload = json_payload()
    # "targetAmount": null clears the target, a missing key keeps it
    goal = SavingsService.edit_goal_metadata(
        current_user, goal_id,
        name=form.name.data if 'name' in payload else UNSET,
        target_amount=form.targetAmount.data if 'targetAmount' in payload else UNSET,
        color=form.color.data if 'color' in payload else UNSET,
    )
    return jsonify(goal.to_dict())


@savings_bp.route('/<int:goal_id>/balance', methods=['PUT'])
def update_balance(goal_id):
    form = parse_form(BalanceForm)
    goal = SavingsService.apply_balance_delta(current_user, goal_id, form.amountDiff.data,
                                              form.description.data)
    return jsonify(goal.to_dict())


@savings_bp.route('/<int:goal_id>', methods=['DELETE'])
def delete_goal(goal_id):
    SavingsService.delete_goal(current_user, goal_id)
    return jsonify(message='Saving goal deleted.')


@savings_bp.route('/<int:goal_id>/history', methods=['GET'])
def history(goal_id):
    return jsonify([entry.to_dict() for entry in SavingsService.history(current_user, goal_id)])

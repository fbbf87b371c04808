from flask import jsonify
from flask_login import current_user

from . import shopping_bp
from .forms import ShoppingItemForm, ShoppingItemUpdateForm, ShoppingListForm
from services.shopping_service import ShoppingService
from utils.request_data import parse_form, submitted_fields


@shopping_bp.route('', methods=['GET'])
def list_lists():
    return jsonify([sl.to_dict() for sl in ShoppingService.list_lists(current_user)])


@shopping_bp.route('', methods=['POST'])
def create_list():
    form = parse_form(ShoppingListForm)
    shopping_list = ShoppingService.create_list(current_user, form.name.data)
    return jsonify(shopping_list.to_dict()), 201


@shopping_bp.route('/<int:list_id>', methods=['DELETE'])
def delete_list(list_id):
    ShoppingService.delete_list(current_user, list_id)
    return jsonify(message='Shopping list deleted.')


@shopping_bp.route('/<int:list_id>/items', methods=['POST'])
def add_item(list_id):
    form = parse_form(ShoppingItemForm)
    item = ShoppingService.add_item(current_user, list_id, form.name.data,
                                    quantity=form.quantity.data, unit=form.unit.data)
    return jsonify(item.to_dict()), 201


@shopping_bp.route('/items/<int:item_id>', methods=['PUT'])
def update_item(item_id):
    form = parse_form(ShoppingItemUpdateForm)
    fields = submitted_fields(form)
    item = ShoppingService.update_item(current_user, item_id,
                                       purchased=fields.get('isBought'),
                                       quantity=fields.get('quantity'))
    return jsonify(item=item.to_dict(), listStatus=item.shopping_list.status)


@shopping_bp.route('/items/<int:item_id>', methods=['DELETE'])
def delete_item(item_id):
    shopping_list = ShoppingService.delete_item(current_user, item_id)
    return jsonify(message='Item deleted.', listStatus=shopping_list.status)

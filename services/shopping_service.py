"""
Shopping Service
Shared shopping lists and their items; list status follows the items
"""
from flask import current_app

from extensions import db
from models.shopping import ShoppingItem, ShoppingList
from services.audit_service import AuditService
from utils.db_helpers import household_query, live_get, unit_of_work
from utils.errors import NotAuthorized, NotFoundError
from utils.permissions import get_household_record, require_household


class ShoppingService:

    @staticmethod
    def list_lists(acting_user):
        household_id = require_household(acting_user)
        return (
            household_query(ShoppingList, household_id)
            .order_by(ShoppingList.created_at.desc(), ShoppingList.id.desc())
            .all()
        )

    @staticmethod
    def create_list(acting_user, name):
        household_id = require_household(acting_user)
        with unit_of_work():
            shopping_list = ShoppingList(
                household_id=household_id,
                name=name,
                status=ShoppingList.ACTIVE,
                created_by_id=acting_user.id,
            )
            db.session.add(shopping_list)
            db.session.flush()
            AuditService.record('CREATE_SHOPPING_LIST',
                                {'listId': shopping_list.id, 'name': name},
                                acting_user.id, household_id)
        return shopping_list

    @staticmethod
    def delete_list(acting_user, list_id):
        with unit_of_work():
            shopping_list = get_household_record(ShoppingList, list_id, acting_user,
                                                 for_update=True, label='Shopping list')
            AuditService.record('DELETE_SHOPPING_LIST',
                                {'listId': shopping_list.id, 'name': shopping_list.name},
                                acting_user.id, shopping_list.household_id)
            db.session.delete(shopping_list)
        current_app.logger.info(f'Shopping list {list_id} deleted by user {acting_user.id}')

    @staticmethod
    def add_item(acting_user, list_id, name, quantity=None, unit=None):
        with unit_of_work():
            shopping_list = get_household_record(ShoppingList, list_id, acting_user,
                                                 for_update=True, label='Shopping list')
            item = ShoppingItem(
                shopping_list=shopping_list,
                name=name,
                quantity=quantity if quantity is not None else 1,
                unit=unit or 'db',
                purchased=False,
                added_by_id=acting_user.id,
            )
            db.session.add(item)
            db.session.flush()
            shopping_list.recompute_status()
            AuditService.record('ADD_SHOPPING_ITEM', {
                'listId': shopping_list.id,
                'itemId': item.id,
                'name': item.name,
                'quantity': item.quantity,
                'unit': item.unit,
            }, acting_user.id, shopping_list.household_id)
        return item

    @staticmethod
    def update_item(acting_user, item_id, purchased=None, quantity=None):
        """Tick an item on/off or change its quantity, then recompute the list."""
        with unit_of_work():
            item, shopping_list = ShoppingService._item_for_user(acting_user, item_id)

            updates = {}
            if purchased is not None:
                item.purchased = bool(purchased)
                updates['purchased'] = item.purchased
            if quantity is not None:
                item.quantity = quantity
                updates['quantity'] = quantity

            db.session.flush()
            status = shopping_list.recompute_status()
            AuditService.record('UPDATE_SHOPPING_ITEM', {
                'listId': shopping_list.id,
                'itemId': item.id,
                'updates': updates,
                'listStatus': status,
            }, acting_user.id, shopping_list.household_id)
        return item

    @staticmethod
    def delete_item(acting_user, item_id):
        with unit_of_work():
            item, shopping_list = ShoppingService._item_for_user(acting_user, item_id)
            AuditService.record('DELETE_SHOPPING_ITEM',
                                {'listId': shopping_list.id, 'itemId': item.id, 'name': item.name},
                                acting_user.id, shopping_list.household_id)
            shopping_list.items.remove(item)
            db.session.flush()
            shopping_list.recompute_status()
        return shopping_list

    @staticmethod
    def _item_for_user(acting_user, item_id):
        household_id = require_household(acting_user)
        item = live_get(ShoppingItem, item_id, for_update=True)
        if item is None:
            raise NotFoundError('Shopping item not found.', details={'id': item_id})
        shopping_list = live_get(ShoppingList, item.list_id, for_update=True)
        if shopping_list.household_id != household_id:
            raise NotAuthorized()
        return item, shopping_list

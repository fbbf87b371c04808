"""
Tests for the append-only audit log and the shopping list status rules.
"""
import pytest

from extensions import db
from models.audit import AuditLog
from models.shopping import ShoppingItem, ShoppingList
from services.audit_service import AuditService
from services.shopping_service import ShoppingService
from utils.errors import NotAuthorized


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------

class TestAuditLog:
    def test_entries_cannot_be_updated(self, app, household):
        entry = AuditLog.query.first()
        entry.action_type = 'JOIN_HOUSEHOLD'
        with pytest.raises(RuntimeError):
            db.session.commit()
        db.session.rollback()

    def test_entries_cannot_be_deleted(self, app, household):
        db.session.delete(AuditLog.query.first())
        with pytest.raises(RuntimeError):
            db.session.commit()
        db.session.rollback()
        assert AuditLog.query.count() == 1

    def test_unknown_action_type_rejected(self, app, owner, household):
        with pytest.raises(ValueError):
            AuditService.record('DROP_TABLES', {}, owner.id, household.id)

    def test_recent_is_newest_first_and_capped(self, app, owner, household):
        app.config['AUDIT_LOG_PAGE_SIZE'] = 3
        try:
            for name in ('a', 'b', 'c', 'd'):
                ShoppingService.create_list(owner, name)
            entries = AuditService.recent(household.id)
        finally:
            app.config['AUDIT_LOG_PAGE_SIZE'] = 50

        assert [e.original_data['name'] for e in entries] == ['d', 'c', 'b']
        assert entries[0].to_dict()['actor'] == {'displayName': 'Owner'}

    def test_recent_is_household_scoped(self, app, owner, household, outsider):
        assert {e.household_id for e in AuditService.recent(household.id)} == {household.id}


# ---------------------------------------------------------------------------
# Shopping
# ---------------------------------------------------------------------------

@pytest.fixture
def groceries(owner, household):
    return ShoppingService.create_list(owner, 'Groceries')


class TestShoppingStatus:
    def test_empty_list_is_active(self, app, groceries):
        assert groceries.status == ShoppingList.ACTIVE
        assert groceries.recompute_status() == ShoppingList.ACTIVE

    def test_all_purchased_completes_and_unmarking_reopens(self, app, owner, member, groceries):
        milk = ShoppingService.add_item(owner, groceries.id, 'Milk', quantity=2, unit='l')
        bread = ShoppingService.add_item(member, groceries.id, 'Bread')

        ShoppingService.update_item(owner, milk.id, purchased=True)
        assert groceries.status == ShoppingList.ACTIVE

        ShoppingService.update_item(member, bread.id, purchased=True)
        assert groceries.status == ShoppingList.COMPLETED

        ShoppingService.update_item(owner, milk.id, purchased=False)
        assert groceries.status == ShoppingList.ACTIVE

    def test_deleting_last_open_item_completes(self, app, owner, groceries):
        milk = ShoppingService.add_item(owner, groceries.id, 'Milk')
        bread = ShoppingService.add_item(owner, groceries.id, 'Bread')
        ShoppingService.update_item(owner, milk.id, purchased=True)

        ShoppingService.delete_item(owner, bread.id)

        assert groceries.status == ShoppingList.COMPLETED
        assert ShoppingItem.query.count() == 1

    def test_quantity_update_is_audited(self, app, owner, groceries):
        milk = ShoppingService.add_item(owner, groceries.id, 'Milk')
        ShoppingService.update_item(owner, milk.id, quantity=3)

        entry = AuditLog.query.filter_by(action_type='UPDATE_SHOPPING_ITEM').one()
        assert entry.original_data == {
            'listId': groceries.id, 'itemId': milk.id,
            'updates': {'quantity': 3}, 'listStatus': ShoppingList.ACTIVE,
        }

    def test_items_carry_adder_name(self, app, member, groceries):
        ShoppingService.add_item(member, groceries.id, 'Eggs', quantity=10)
        item = groceries.to_dict()['items'][0]
        assert item['creator'] == {'displayName': 'Member'}
        assert item['unit'] == 'db'

    def test_delete_list_removes_items(self, app, owner, groceries):
        ShoppingService.add_item(owner, groceries.id, 'Milk')
        ShoppingService.delete_list(owner, groceries.id)

        assert ShoppingList.query.count() == 0
        assert ShoppingItem.query.count() == 0
        assert AuditLog.query.filter_by(action_type='DELETE_SHOPPING_LIST').count() == 1

    def test_other_household_cannot_tick_items(self, app, owner, outsider, groceries):
        milk = ShoppingService.add_item(owner, groceries.id, 'Milk')
        with pytest.raises(NotAuthorized):
            ShoppingService.update_item(outsider, milk.id, purchased=True)
        assert milk.purchased is False

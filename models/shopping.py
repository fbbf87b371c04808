from datetime import datetime, timezone
from extensions import db


class ShoppingList(db.Model):
    """Shared shopping list; status is derived from its items."""
    __tablename__ = 'shopping_lists'

    ACTIVE = 'ACTIVE'
    COMPLETED = 'COMPLETED'

    id = db.Column(db.Integer, primary_key=True)
    household_id = db.Column(db.Integer, db.ForeignKey('households.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(10), nullable=False, default=ACTIVE)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    items = db.relationship('ShoppingItem', back_populates='shopping_list',
                            cascade='all, delete-orphan', order_by='ShoppingItem.id')
    created_by = db.relationship('User', foreign_keys=[created_by_id])

    def recompute_status(self):
        """COMPLETED iff the list has items and every one is purchased."""
        items = list(self.items)
        if items and all(item.purchased for item in items):
            self.status = self.COMPLETED
        else:
            self.status = self.ACTIVE
        return self.status

    def to_dict(self, include_items=True):
        data = {
            'id': self.id,
            'name': self.name,
            'status': self.status,
            'householdId': self.household_id,
            'createdBy': self.created_by_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if include_items:
            data['items'] = [item.to_dict() for item in self.items]
        return data

    def __repr__(self):
        return f'<ShoppingList {self.name} {self.status}>'


class ShoppingItem(db.Model):
    __tablename__ = 'shopping_items'

    UNITS = ('db', 'kg', 'l')  # piece, kilogram, litre

    id = db.Column(db.Integer, primary_key=True)
    list_id = db.Column(db.Integer, db.ForeignKey('shopping_lists.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    unit = db.Column(db.String(3), nullable=False, default='db')
    quantity = db.Column(db.Float, nullable=False, default=1)
    purchased = db.Column(db.Boolean, nullable=False, default=False)
    added_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc).replace(tzinfo=None))

    shopping_list = db.relationship('ShoppingList', back_populates='items')
    creator = db.relationship('User', foreign_keys=[added_by_id])

    def to_dict(self):
        return {
            'id': self.id,
            'listId': self.list_id,
            'name': self.name,
            'unit': self.unit,
            'quantity': self.quantity,
            'purchased': self.purchased,
            'addedBy': self.added_by_id,
            'creator': {'displayName': self.creator.display_name} if self.creator else None,
        }

    def __repr__(self):
        return f'<ShoppingItem {self.name} x{self.quantity}{self.unit}>'

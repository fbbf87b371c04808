from datetime import datetime, timezone
from extensions import db


class SoftDeleteMixin:
    """Tombstone support: a row with ``deleted_at`` set is treated as gone.

    Household query helpers skip tombstoned rows unless asked for history.
    """
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = datetime.now(timezone.utc).replace(tzinfo=None)

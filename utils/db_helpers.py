"""
Database query helpers for household-scoped multi-tenancy.

All domain data in this application is scoped to a Household.  Every query
against a household-owned model should go through these helpers so that one
household can never see another household's records.

Usage
-----
In any service function::

    from utils.db_helpers import household_query, household_get, unit_of_work

    # List the live savings goals of a household
    goals = household_query(SavingGoal, household_id).all()

    # Fetch a single record safely (None if not found *or* wrong household)
    item = household_get(RecurringItem, item_id, household_id)

    # Commit a write together with its audit entry, or roll both back
    with unit_of_work():
        db.session.add(goal)
        AuditService.record(...)
"""
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError

from extensions import db
from utils.errors import InfrastructureError


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------

def household_query(model, household_id, include_deleted=False):
    """Return a query pre-filtered to *household_id*.

    Soft-deleted rows are excluded unless *include_deleted* is set.

    Examples::

        household_query(RecurringItem, hid).filter_by(active=True).all()
        household_query(SavingGoal, hid).count()
    """
    if not hasattr(model, 'household_id'):
        raise AttributeError(
            f"household_query() called on {model.__name__} but it has no household_id column."
        )
    if household_id is None:
        # Return a query that always yields zero rows rather than leaking data
        return model.query.filter(model.id == -1)
    query = model.query.filter_by(household_id=household_id)
    if not include_deleted and hasattr(model, 'deleted_at'):
        query = query.filter(model.deleted_at.is_(None))
    return query


def household_get(model, record_id, household_id):
    """Fetch a single live record by *record_id*, scoped to *household_id*.

    Returns ``None`` if the record does not exist or belongs to another household.
    """
    if household_id is None:
        return None
    return household_query(model, household_id).filter(model.id == record_id).first()


def live_get(model, record_id, for_update=False):
    """Fetch a record by primary key, skipping soft-deleted rows.

    The row is always re-read from the database.  With *for_update* it is
    locked until the surrounding transaction ends (``SELECT ... FOR UPDATE``
    on backends that support it).
    """
    record = db.session.get(model, record_id, populate_existing=True,
                            with_for_update=for_update or None)
    if record is not None and getattr(record, 'is_deleted', False):
        return None
    return record


@contextmanager
def unit_of_work():
    """Commit everything done inside the block, or roll all of it back.

    Lost connections and similar store failures surface as
    ``InfrastructureError``; everything else is re-raised unchanged.
    """
    try:
        yield db.session
        db.session.commit()
    except OperationalError as e:
        db.session.rollback()
        raise InfrastructureError(details={'error': str(e.orig)}) from e
    except Exception:
        db.session.rollback()
        raise

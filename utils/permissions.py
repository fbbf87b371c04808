"""
Permission helpers for household-level access control.

The model is deliberately binary:

    role      may do
    ────────  ─────────────────────────────────────────────────────────────
    owner     everything a member may, plus approve and remove members
    member    read/write household data (recurring, savings, transactions,
              shopping, audit log); approved members may send invitations
    anyone    leave their own household

There are no co-owners and no per-section roles.  "Owner" is always the
household's ``owner_id``; these helpers re-read it from the database rather
than trusting anything cached on the session user.
"""
from models.household import Household
from utils.db_helpers import live_get
from utils.errors import NoHousehold, NotAuthorized, NotFoundError, NotOwner


def require_household(user):
    """Return *user*'s household id, raising ``NoHousehold`` when there is none."""
    if user is None or user.household_id is None:
        raise NoHousehold()
    return user.household_id


def owned_household(user):
    """Return the household *user* owns, or ``None``."""
    if user is None:
        return None
    return Household.query.filter_by(owner_id=user.id).first()


def require_owner(user):
    """Return the household *user* owns, raising ``NotOwner`` otherwise."""
    household = owned_household(user)
    if household is None:
        raise NotOwner()
    return household


def require_approved_member(user):
    """Return *user*'s household id if the membership is approved."""
    household_id = require_household(user)
    if not user.is_approved:
        raise NotAuthorized('Only approved members can do this.')
    return household_id


def get_household_record(model, record_id, user, for_update=False, label=None):
    """Load *record_id* of *model* for *user*'s household.

    Raises ``NoHousehold`` if the user has none, ``NotFoundError`` if the
    record does not exist (or is soft-deleted) and ``NotAuthorized`` if it
    belongs to a different household.
    """
    household_id = require_household(user)
    record = live_get(model, record_id, for_update=for_update)
    if record is None:
        raise NotFoundError(f'{label or model.__name__} not found.', details={'id': record_id})
    if record.household_id != household_id:
        raise NotAuthorized()
    return record

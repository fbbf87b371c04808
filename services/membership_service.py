"""
Membership Service
Household creation, joining by invite code, owner approval and removal.

Every operation re-reads the acting user (and the member it touches) with a
row lock before deciding anything, so concurrent requests from other
household members never act on stale membership or ownership state.
"""
from flask import current_app

from extensions import db
from models.household import Household
from models.users import User
from services.audit_service import AuditService
from utils.codes import generate_invite_code, unique_code
from utils.db_helpers import live_get, unit_of_work
from utils.errors import (
    AlreadyMember, InvalidCode, MemberNotFound, NotAuthorized, ValidationError,
)
from utils.permissions import owned_household, require_owner


class MembershipService:

    @staticmethod
    def create_household(acting_user, name, currency=None):
        """Create a household owned (and auto-approved) by *acting_user*.

        Household row, owner membership and the CREATE_HOUSEHOLD entry are
        committed together or not at all.
        """
        name = (name or '').strip()
        if not name:
            raise ValidationError('Household name is required.', details={'field': 'name'})

        with unit_of_work():
            user = live_get(User, acting_user.id, for_update=True)
            if user.household_id is not None:
                raise AlreadyMember()

            invite_code = unique_code(
                generate_invite_code,
                Household.invite_code,
                current_app.config.get('INVITE_CODE_MAX_ATTEMPTS', 50),
            )
            household = Household(
                name=name,
                invite_code=invite_code,
                currency=currency or current_app.config.get('DEFAULT_CURRENCY', 'HUF'),
                owner_id=user.id,
            )
            db.session.add(household)
            db.session.flush()

            user.household_id = household.id
            user.membership_status = User.STATUS_APPROVED

            AuditService.record('CREATE_HOUSEHOLD', {'name': name, 'inviteCode': invite_code},
                                user.id, household.id)

        current_app.logger.info(f'Household {household.id} "{name}" created by user {user.id}')
        return household

    @staticmethod
    def join_household(acting_user, invite_code):
        """Join the household behind *invite_code* as a pending member.

        The code stays valid afterwards; any number of users may join with it.
        """
        code = (invite_code or '').strip()
        if not code:
            raise ValidationError('Invite code is required.', details={'field': 'code'})

        with unit_of_work():
            household = Household.query.filter_by(invite_code=code).first()
            if household is None:
                raise InvalidCode('Invalid invite code.')

            user = live_get(User, acting_user.id, for_update=True)
            if user.household_id is not None:
                raise AlreadyMember()

            user.household_id = household.id
            user.membership_status = User.STATUS_PENDING

            AuditService.record('JOIN_HOUSEHOLD', {'code': code}, user.id, household.id)

        current_app.logger.info(f'User {user.id} joined household {household.id} (pending)')
        return household.id

    @staticmethod
    def approve_member(acting_user, member_id):
        """Owner approves a pending member of their household."""
        with unit_of_work():
            household = require_owner(acting_user)

            member = live_get(User, member_id, for_update=True)
            if member is None or member.household_id != household.id:
                raise MemberNotFound(details={'memberId': member_id})

            member.membership_status = User.STATUS_APPROVED

            AuditService.record('APPROVE_MEMBER',
                                {'memberId': member.id, 'memberName': member.display_name},
                                acting_user.id, household.id)

        current_app.logger.info(f'User {member.id} approved in household {household.id}')
        return member

    @staticmethod
    def remove_member(acting_user, member_id):
        """Owner removes a member, or a user leaves their own household.

        A self-leave by a user without a household succeeds without writing
        an audit entry, since there is no household to attribute it to.
        """
        with unit_of_work():
            household = owned_household(acting_user)
            is_self = acting_user.id == member_id
            if household is None and not is_self:
                raise NotAuthorized()

            member = live_get(User, member_id, for_update=True)
            if member is None:
                raise MemberNotFound(details={'memberId': member_id})

            if household is not None and not is_self and member.household_id != household.id:
                raise MemberNotFound(details={'memberId': member_id})
            if household is not None and is_self and member.household_id == household.id:
                raise ValidationError('The owner cannot leave their own household.')

            audit_household_id = household.id if household is not None else member.household_id

            member.household_id = None
            member.membership_status = User.STATUS_PENDING

            if audit_household_id is not None:
                AuditService.record('REMOVE_MEMBER',
                                    {'memberId': member.id, 'memberName': member.display_name,
                                     'selfLeave': is_self},
                                    acting_user.id, audit_household_id)

        current_app.logger.info(
            f'User {member_id} removed from household {audit_household_id} by user {acting_user.id}'
        )
        return member

    @staticmethod
    def get_current_household(user):
        """Household of *user*, or ``None``."""
        fresh = live_get(User, user.id)
        if fresh is None or fresh.household_id is None:
            return None
        return db.session.get(Household, fresh.household_id)

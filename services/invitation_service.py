"""
Invitation Service
Targeted, per-email invitations into a household
"""
from datetime import datetime, timezone

from flask import current_app

from extensions import db
from models.household import Invitation
from models.users import User
from services.audit_service import AuditService
from utils.codes import generate_invitation_code, unique_code
from utils.db_helpers import live_get, unit_of_work
from utils.errors import (
    AlreadyInHousehold, AlreadyMember, DuplicatePending, InvalidCode, NotFoundError,
    SelfInvite, UnknownRecipient, ValidationError,
)
from utils.permissions import require_approved_member, require_household


class InvitationService:

    @staticmethod
    def send_invitation(acting_user, email):
        """Invite the registered user behind *email* into the caller's household."""
        email = (email or '').strip().lower()
        if not email:
            raise ValidationError('Email address is required.', details={'field': 'email'})

        with unit_of_work():
            household_id = require_approved_member(live_get(User, acting_user.id))

            target = User.query.filter_by(email=email).first()
            if target is None:
                raise UnknownRecipient(details={'email': email})
            if target.id == acting_user.id:
                raise SelfInvite()
            if target.household_id is not None:
                raise AlreadyInHousehold(details={'email': email})

            existing = Invitation.query.filter_by(
                email=email, household_id=household_id, status=Invitation.STATUS_PENDING
            ).first()
            if existing is not None:
                raise DuplicatePending(details={'email': email, 'invitationId': existing.id})

            code = unique_code(
                generate_invitation_code,
                Invitation.code,
                current_app.config.get('INVITATION_CODE_MAX_ATTEMPTS', 50),
            )
            invitation = Invitation(
                email=email,
                code=code,
                household_id=household_id,
                status=Invitation.STATUS_PENDING,
                created_by_id=acting_user.id,
            )
            db.session.add(invitation)
            db.session.flush()

            AuditService.record('SEND_INVITATION', {'invitationId': invitation.id, 'email': email},
                                acting_user.id, household_id)

        current_app.logger.info(f'Invitation {invitation.id} sent to {email} for household {household_id}')
        return invitation

    @staticmethod
    def revoke_invitation(acting_user, invitation_id):
        """Mark a pending invitation of the caller's household as revoked."""
        with unit_of_work():
            household_id = require_household(live_get(User, acting_user.id))

            invitation = live_get(Invitation, invitation_id, for_update=True)
            if invitation is None or invitation.household_id != household_id:
                raise NotFoundError('Invitation not found.', details={'id': invitation_id})
            if not invitation.is_pending:
                raise ValidationError('Only pending invitations can be revoked.',
                                      details={'status': invitation.status})

            invitation.status = Invitation.STATUS_REVOKED

            AuditService.record('REVOKE_INVITATION',
                                {'invitationId': invitation.id, 'email': invitation.email},
                                acting_user.id, household_id)
        return invitation

    @staticmethod
    def list_pending_invitations(acting_user):
        household_id = require_household(live_get(User, acting_user.id))
        return (
            Invitation.query
            .filter_by(household_id=household_id, status=Invitation.STATUS_PENDING)
            .order_by(Invitation.created_at.desc())
            .all()
        )

    @staticmethod
    def invitations_for_user(acting_user):
        """Pending invitations addressed to the caller's email."""
        return (
            Invitation.query
            .filter_by(email=acting_user.email, status=Invitation.STATUS_PENDING)
            .order_by(Invitation.created_at.desc())
            .all()
        )

    @staticmethod
    def accept_invitation(acting_user, code):
        """Join the inviting household as a pending member.

        Approval stays with the household owner; the invitation is consumed.
        """
        code = (code or '').strip()
        if not code:
            raise ValidationError('Invitation code is required.', details={'field': 'code'})

        with unit_of_work():
            user = live_get(User, acting_user.id, for_update=True)
            invitation = Invitation.query.filter_by(code=code).with_for_update().first()
            if invitation is None or not invitation.is_pending or invitation.email != user.email:
                raise InvalidCode('Invalid invitation code.')
            if user.household_id is not None:
                raise AlreadyMember()

            user.household_id = invitation.household_id
            user.membership_status = User.STATUS_PENDING
            invitation.status = Invitation.STATUS_ACCEPTED
            invitation.accepted_at = datetime.now(timezone.utc).replace(tzinfo=None)

            AuditService.record('ACCEPT_INVITATION',
                                {'invitationId': invitation.id, 'email': invitation.email},
                                user.id, invitation.household_id)

        current_app.logger.info(f'User {user.id} accepted invitation {invitation.id}')
        return invitation

"""
Tests for targeted invitations: send, revoke, accept.
"""
import pytest

from models.audit import AuditLog
from models.household import Invitation
from models.users import User
from services.invitation_service import InvitationService
from services.membership_service import MembershipService
from utils.errors import (
    AlreadyInHousehold, AlreadyMember, DuplicatePending, InvalidCode, NotAuthorized,
    NotFoundError, SelfInvite, UnknownRecipient, ValidationError,
)


@pytest.fixture
def invitee(make_user):
    return make_user('invitee@example.com', 'Invitee')


class TestSendInvitation:
    def test_creates_pending_invitation(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, 'Invitee@Example.com ')

        assert invitation.status == Invitation.STATUS_PENDING
        assert invitation.email == 'invitee@example.com'
        assert invitation.code.isdigit() and len(invitation.code) == 6
        entry = AuditLog.query.filter_by(action_type='SEND_INVITATION').one()
        assert entry.original_data == {'invitationId': invitation.id, 'email': 'invitee@example.com'}

    def test_unknown_recipient(self, app, owner, household):
        with pytest.raises(UnknownRecipient):
            InvitationService.send_invitation(owner, 'ghost@example.com')

    def test_cannot_invite_self(self, app, owner, household):
        with pytest.raises(SelfInvite):
            InvitationService.send_invitation(owner, owner.email)

    def test_recipient_already_in_a_household(self, app, owner, household, outsider):
        with pytest.raises(AlreadyInHousehold):
            InvitationService.send_invitation(owner, outsider.email)

    def test_duplicate_pending(self, app, owner, household, invitee):
        InvitationService.send_invitation(owner, invitee.email)
        with pytest.raises(DuplicatePending):
            InvitationService.send_invitation(owner, invitee.email)
        assert Invitation.query.count() == 1

    def test_pending_member_cannot_invite(self, app, household, make_user, invitee):
        joiner = make_user('joiner@example.com')
        MembershipService.join_household(joiner, household.invite_code)

        with pytest.raises(NotAuthorized):
            InvitationService.send_invitation(joiner, invitee.email)

    def test_code_collision_is_retried(self, app, owner, household, invitee, make_user, monkeypatch):
        first = InvitationService.send_invitation(owner, invitee.email)
        codes = iter([first.code, '123456'])
        monkeypatch.setattr('services.invitation_service.generate_invitation_code', lambda: next(codes))

        second = InvitationService.send_invitation(owner, make_user('second@example.com').email)

        assert second.code == '123456'


class TestRevokeInvitation:
    def test_revoke_marks_revoked(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)

        InvitationService.revoke_invitation(owner, invitation.id)

        assert invitation.status == Invitation.STATUS_REVOKED
        assert InvitationService.list_pending_invitations(owner) == []
        assert AuditLog.query.filter_by(action_type='REVOKE_INVITATION').count() == 1

    def test_revoke_allows_a_fresh_invitation(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        InvitationService.revoke_invitation(owner, invitation.id)

        again = InvitationService.send_invitation(owner, invitee.email)
        assert again.is_pending

    def test_cannot_revoke_other_households_invitation(self, app, owner, household, outsider, invitee):
        invitation = InvitationService.send_invitation(outsider, invitee.email)
        with pytest.raises(NotFoundError):
            InvitationService.revoke_invitation(owner, invitation.id)
        assert invitation.is_pending

    def test_cannot_revoke_twice(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        InvitationService.revoke_invitation(owner, invitation.id)
        with pytest.raises(ValidationError):
            InvitationService.revoke_invitation(owner, invitation.id)


class TestAcceptInvitation:
    def test_accept_joins_as_pending(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        assert [i.id for i in InvitationService.invitations_for_user(invitee)] == [invitation.id]

        InvitationService.accept_invitation(invitee, invitation.code)

        assert invitee.household_id == household.id
        assert invitee.membership_status == User.STATUS_PENDING
        assert invitation.status == Invitation.STATUS_ACCEPTED
        assert invitation.accepted_at is not None
        assert AuditLog.query.filter_by(action_type='ACCEPT_INVITATION').count() == 1

    def test_code_is_bound_to_the_invited_email(self, app, owner, household, invitee, make_user):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        stranger = make_user('stranger@example.com')

        with pytest.raises(InvalidCode):
            InvitationService.accept_invitation(stranger, invitation.code)
        assert stranger.household_id is None

    def test_revoked_code_is_invalid(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        InvitationService.revoke_invitation(owner, invitation.id)

        with pytest.raises(InvalidCode):
            InvitationService.accept_invitation(invitee, invitation.code)

    def test_invitee_who_joined_elsewhere_meanwhile(self, app, owner, household, invitee):
        invitation = InvitationService.send_invitation(owner, invitee.email)
        MembershipService.create_household(invitee, 'Own place')

        with pytest.raises(AlreadyMember):
            InvitationService.accept_invitation(invitee, invitation.code)
        assert invitation.is_pending

"""
Tests for MembershipService: household creation, joining by invite code,
owner approval and member removal.
"""
import re

import pytest

from extensions import db
from models.audit import AuditLog
from models.household import Household
from models.users import User
from services.membership_service import MembershipService
from utils.errors import (
    AlreadyMember, CodeGenerationExhausted, InvalidCode, MemberNotFound, NotAuthorized,
    NotOwner, ValidationError,
)


def _audit_types(household_id):
    return [e.action_type for e in AuditLog.query.filter_by(household_id=household_id)
            .order_by(AuditLog.id).all()]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

class TestCreateHousehold:
    def test_owner_is_approved_member(self, app, owner):
        household = MembershipService.create_household(owner, 'Home')

        assert re.fullmatch(r'HOME- \d{4}', household.invite_code)
        assert household.owner_id == owner.id
        assert household.currency == 'HUF'
        assert owner.household_id == household.id
        assert owner.membership_status == User.STATUS_APPROVED
        assert _audit_types(household.id) == ['CREATE_HOUSEHOLD']

    def test_audit_payload(self, app, owner):
        household = MembershipService.create_household(owner, 'Home')
        entry = AuditLog.query.filter_by(household_id=household.id).one()

        assert entry.performed_by_id == owner.id
        assert entry.original_data == {'name': 'Home', 'inviteCode': household.invite_code}

    def test_blank_name_rejected(self, app, owner):
        with pytest.raises(ValidationError):
            MembershipService.create_household(owner, '   ')
        assert Household.query.count() == 0

    def test_existing_member_cannot_create_another(self, app, owner, household):
        with pytest.raises(AlreadyMember):
            MembershipService.create_household(owner, 'Second home')
        assert Household.query.count() == 1
        assert AuditLog.query.count() == 1

    def test_invite_code_collision_is_retried(self, app, owner, make_user, monkeypatch):
        first = MembershipService.create_household(owner, 'Home')
        codes = iter([first.invite_code, 'HOME- 9999'])
        monkeypatch.setattr('services.membership_service.generate_invite_code', lambda: next(codes))

        second_owner = make_user('second@example.com')
        second = MembershipService.create_household(second_owner, 'Second')

        assert second.invite_code == 'HOME- 9999', \
            "A colliding invite code must be redrawn, not surfaced as an error"

    def test_exhausted_code_space_leaves_nothing_behind(self, app, owner, make_user, monkeypatch):
        first = MembershipService.create_household(owner, 'Home')
        monkeypatch.setattr('services.membership_service.generate_invite_code',
                            lambda: first.invite_code)
        app.config['INVITE_CODE_MAX_ATTEMPTS'] = 3
        try:
            second_owner = make_user('second@example.com')
            with pytest.raises(CodeGenerationExhausted):
                MembershipService.create_household(second_owner, 'Second')
        finally:
            app.config['INVITE_CODE_MAX_ATTEMPTS'] = 50

        assert Household.query.count() == 1
        assert second_owner.household_id is None


# ---------------------------------------------------------------------------
# Join / approve
# ---------------------------------------------------------------------------

class TestJoinAndApprove:
    def test_joiner_is_pending_owner_stays_approved(self, app, owner, household, make_user):
        joiner = make_user('joiner@example.com')

        household_id = MembershipService.join_household(joiner, household.invite_code)

        assert household_id == household.id
        assert joiner.household_id == household.id
        assert joiner.membership_status == User.STATUS_PENDING
        assert owner.membership_status == User.STATUS_APPROVED
        assert _audit_types(household.id) == ['CREATE_HOUSEHOLD', 'JOIN_HOUSEHOLD']

    def test_invite_code_is_reusable(self, app, household, make_user):
        for email in ('one@example.com', 'two@example.com'):
            MembershipService.join_household(make_user(email), household.invite_code)
        assert household.members.count() == 3

    def test_unknown_code(self, app, household, make_user):
        with pytest.raises(InvalidCode):
            MembershipService.join_household(make_user('joiner@example.com'), 'HOME- 0000')

    def test_member_cannot_join_twice(self, app, household, member):
        with pytest.raises(AlreadyMember):
            MembershipService.join_household(member, household.invite_code)

    def test_owner_approves(self, app, owner, household, make_user):
        joiner = make_user('joiner@example.com')
        MembershipService.join_household(joiner, household.invite_code)

        MembershipService.approve_member(owner, joiner.id)

        assert joiner.membership_status == User.STATUS_APPROVED
        assert _audit_types(household.id)[-1] == 'APPROVE_MEMBER'

    def test_non_owner_cannot_approve(self, app, household, member, make_user):
        joiner = make_user('joiner@example.com')
        MembershipService.join_household(joiner, household.invite_code)

        with pytest.raises(NotOwner):
            MembershipService.approve_member(member, joiner.id)
        assert joiner.membership_status == User.STATUS_PENDING

    def test_cannot_approve_member_of_other_household(self, app, owner, household, outsider):
        with pytest.raises(MemberNotFound):
            MembershipService.approve_member(owner, outsider.id)


# ---------------------------------------------------------------------------
# Remove / leave
# ---------------------------------------------------------------------------

class TestRemoveMember:
    def test_owner_removes_member(self, app, owner, household, member):
        before = AuditLog.query.filter_by(action_type='REMOVE_MEMBER').count()

        MembershipService.remove_member(owner, member.id)

        assert member.household_id is None
        entries = AuditLog.query.filter_by(action_type='REMOVE_MEMBER').all()
        assert len(entries) == before + 1, "Removing a member must write exactly one audit entry"
        assert entries[-1].original_data['memberId'] == member.id
        assert entries[-1].original_data['selfLeave'] is False

    def test_member_leaves(self, app, household, member):
        MembershipService.remove_member(member, member.id)

        assert member.household_id is None
        entry = AuditLog.query.filter_by(action_type='REMOVE_MEMBER').one()
        assert entry.household_id == household.id
        assert entry.original_data['selfLeave'] is True

    def test_leaving_without_household_is_a_quiet_no_op(self, app, make_user):
        loner = make_user('loner@example.com')

        MembershipService.remove_member(loner, loner.id)

        assert loner.household_id is None
        assert AuditLog.query.count() == 0, \
            "There is no household to attribute the entry to"

    def test_member_cannot_remove_someone_else(self, app, owner, member):
        with pytest.raises(NotAuthorized):
            MembershipService.remove_member(member, owner.id)
        assert owner.household_id is not None

    def test_owner_cannot_remove_outsider(self, app, owner, household, outsider):
        with pytest.raises(MemberNotFound):
            MembershipService.remove_member(owner, outsider.id)
        assert outsider.household_id is not None

    def test_owner_cannot_leave(self, app, owner, household):
        with pytest.raises(ValidationError):
            MembershipService.remove_member(owner, owner.id)
        db.session.refresh(owner)
        assert owner.household_id == household.id

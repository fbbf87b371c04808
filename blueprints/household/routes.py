"""
Household blueprint routes.

  POST   /create                       – create a household (caller becomes owner)
  POST   /join                         – join by invite code, pending approval
  GET    /current                      – household with its members
  PUT    /members/<id>/approve         – owner approves a pending member
  DELETE /members/<id>                 – owner removes a member, or self-leave
  GET    /invitations/list             – pending invitations of the household
  POST   /invitations                  – invite a registered user by email
  DELETE /invitations/<id>             – revoke a pending invitation
  GET    /invitations/mine             – pending invitations addressed to me
  POST   /invitations/accept           – accept an invitation by code
"""
from flask import jsonify
from flask_login import current_user

from blueprints.household import household_bp
from .forms import AcceptInvitationForm, CreateHouseholdForm, InvitationForm, JoinHouseholdForm
from services.invitation_service import InvitationService
from services.membership_service import MembershipService
from utils.errors import NotFoundError
from utils.request_data import parse_form


# ── Membership ────────────────────────────────────────────────────────────────

@household_bp.route('/create', methods=['POST'])
def create():
    form = parse_form(CreateHouseholdForm)
    household = MembershipService.create_household(current_user, form.name.data, form.currency.data)
    return jsonify(household.to_dict(include_members=True)), 201


@household_bp.route('/join', methods=['POST'])
def join():
    form = parse_form(JoinHouseholdForm)
    household_id = MembershipService.join_household(current_user, form.code.data)
    return jsonify(message='Join request sent. Waiting for the owner to approve.',
                   householdId=household_id)


@household_bp.route('/current', methods=['GET'])
def current():
    household = MembershipService.get_current_household(current_user)
    if household is None:
        raise NotFoundError('You do not belong to a household.')
    return jsonify(household.to_dict(include_members=True))


@household_bp.route('/members/<int:member_id>/approve', methods=['PUT'])
def approve_member(member_id):
    member = MembershipService.approve_member(current_user, member_id)
    return jsonify(message='Member approved.', member=member.to_member_dict())


@household_bp.route('/members/<int:member_id>', methods=['DELETE'])
def remove_member(member_id):
    MembershipService.remove_member(current_user, member_id)
    return jsonify(message='Member removed.')


# ── Invitations ───────────────────────────────────────────────────────────────

@household_bp.route('/invitations/list', methods=['GET'])
def list_invitations():
    invitations = InvitationService.list_pending_invitations(current_user)
    return jsonify([inv.to_dict() for inv in invitations])


@household_bp.route('/invitations', methods=['POST'])
def send_invitation():
    form = parse_form(InvitationForm)
    invitation = InvitationService.send_invitation(current_user, form.email.data)
    return jsonify(invitation.to_dict()), 201


@household_bp.route('/invitations/<int:invitation_id>', methods=['DELETE'])
def revoke_invitation(invitation_id):
    InvitationService.revoke_invitation(current_user, invitation_id)
    return jsonify(message='Invitation revoked.')


@household_bp.route('/invitations/mine', methods=['GET'])
def my_invitations():
    invitations = InvitationService.invitations_for_user(current_user)
    return jsonify([inv.to_dict() for inv in invitations])


@household_bp.route('/invitations/accept', methods=['POST'])
def accept_invitation():
    form = parse_form(AcceptInvitationForm)
    invitation = InvitationService.accept_invitation(current_user, form.code.data)
    return jsonify(message='Invitation accepted. Waiting for the owner to approve.',
                   householdId=invitation.household_id)

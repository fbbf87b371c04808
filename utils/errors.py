"""
Error taxonomy for household-scoped operations.

Services raise these; ``register_error_handlers`` in ``app.py`` turns them
into JSON responses.  Each category carries the HTTP status the API contract
assigns to it, so a route never has to translate errors by hand.

    category              status   raised for
    ────────────────────  ───────  ─────────────────────────────────────────
    ValidationError       400      missing/malformed input, no household
    AuthenticationError   401      bad or missing token / credentials
    AuthorizationError    403      authenticated but not permitted
    NotFoundError         404      id does not resolve for this caller
    ConflictError         400      duplicates, already a member, code exhaustion
    InvariantViolation    400      savings balance would go negative
    InfrastructureError   500      persistence / credential service failure
"""


class HouseholdFinanceError(Exception):
    """Base class for every error the API reports to the client."""

    status_code = 500
    default_message = 'Unexpected error.'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self):
        body = {'message': self.message}
        if self.details:
            body['details'] = self.details
        return body


# ── Categories ────────────────────────────────────────────────────────────────

class ValidationError(HouseholdFinanceError):
    status_code = 400
    default_message = 'Invalid request data.'


class AuthenticationError(HouseholdFinanceError):
    status_code = 401
    default_message = 'Authentication required.'


class AuthorizationError(HouseholdFinanceError):
    status_code = 403
    default_message = 'You are not allowed to perform this action.'


class NotFoundError(HouseholdFinanceError):
    status_code = 404
    default_message = 'Not found.'


class ConflictError(HouseholdFinanceError):
    status_code = 400
    default_message = 'The request conflicts with existing data.'


class InvariantViolation(HouseholdFinanceError):
    status_code = 400
    default_message = 'The operation would break a data invariant.'


class InfrastructureError(HouseholdFinanceError):
    status_code = 500
    default_message = 'Internal server error.'


# ── Named operation errors ────────────────────────────────────────────────────

class NoHousehold(ValidationError):
    default_message = 'You do not belong to a household.'


class SelfInvite(ValidationError):
    default_message = 'You cannot invite yourself.'


class NotOwner(AuthorizationError):
    default_message = 'Only the household owner can manage members.'


class NotAuthorized(AuthorizationError):
    default_message = 'You are not allowed to perform this action.'


class InvalidCode(NotFoundError):
    default_message = 'Invalid code.'


class MemberNotFound(NotFoundError):
    default_message = 'The member was not found in this household.'


class UnknownRecipient(NotFoundError):
    default_message = 'There is no registered user with this email address.'


class AlreadyMember(ConflictError):
    default_message = 'You are already a member of a household.'


class AlreadyInHousehold(ConflictError):
    default_message = 'This user is already a member of a household.'


class DuplicatePending(ConflictError):
    default_message = 'This user already has a pending invitation.'


class CodeGenerationExhausted(ConflictError):
    default_message = 'Could not generate a unique code, please try again.'


class EmailTaken(ConflictError):
    default_message = 'This email address is already registered.'


class InsufficientFunds(InvariantViolation):
    default_message = 'Insufficient funds for this withdrawal.'

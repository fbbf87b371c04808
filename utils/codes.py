"""
Join codes.

Two kinds of code exist:

* the household *invite code* (``HOME- 1234``) anyone may use to join, and
* the per-email *invitation code* (six digits) sent to one registered user.

Both are random and short, so collisions are expected; ``unique_code`` keeps
drawing until the store has no row with that value, up to a fixed number of
attempts.  A unique constraint on each column backs this up at the store.
"""
import secrets

from flask import current_app

from utils.errors import CodeGenerationExhausted


def generate_invite_code():
    """Return a household invite code such as ``'HOME- 4821'``."""
    return f'HOME- {1000 + secrets.randbelow(9000)}'


def generate_invitation_code():
    """Return a six-digit invitation code such as ``'402913'``."""
    return str(100000 + secrets.randbelow(900000))


def unique_code(generator, column, max_attempts):
    """Draw codes from *generator* until one is unused in *column*.

    Raises ``CodeGenerationExhausted`` after *max_attempts* collisions.
    """
    model = column.class_
    for attempt in range(1, max_attempts + 1):
        code = generator()
        if model.query.filter(column == code).first() is None:
            return code
        current_app.logger.warning(
            f'{model.__name__} code collision on attempt {attempt}/{max_attempts}: {code}'
        )
    raise CodeGenerationExhausted(details={'attempts': max_attempts})

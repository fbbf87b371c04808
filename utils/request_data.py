"""
Typed request bodies.

Every endpoint describes its JSON body with a WTForms form.  The JSON object
is fed to the form as form data so the usual field coercion and validators
apply, and a failed validation becomes a ``ValidationError`` carrying the
per-field messages.
"""
from datetime import date

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from utils.errors import ValidationError


class APIForm(FlaskForm):
    """Base form for JSON request bodies (bearer-token API, no CSRF token)."""

    class Meta:
        csrf = False


def json_payload():
    """Return the request's JSON object (empty dict for an empty body)."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object.')
    return payload


def json_formdata(payload=None):
    """Convert a JSON object into a ``MultiDict`` WTForms can process.

    ``null`` becomes an empty string so ``Optional()`` validators treat it as
    blank; booleans are passed through untouched for ``BooleanField``.
    """
    if payload is None:
        payload = json_payload()
    data = MultiDict()
    for key, value in payload.items():
        if value is None:
            value = ''
        elif isinstance(value, bool):
            pass
        elif isinstance(value, (int, float)):
            value = str(value)
        data.add(key, value)
    return data


def parse_form(form_class):
    """Validate the request body against *form_class* and return the form."""
    form = form_class(formdata=json_formdata())
    if not form.validate():
        raise ValidationError(_first_error(form.errors), details={'fields': form.errors})
    return form


def submitted_fields(form):
    """Return ``{field_name: data}`` for the fields present in the JSON body."""
    payload = json_payload()
    return {name: field.data for name, field in form._fields.items() if name in payload}


def _first_error(errors):
    for field, messages in errors.items():
        if messages:
            return f'{field}: {messages[0]}'
    return ValidationError.default_message


# ---------------------------------------------------------------------------
# Query-string helpers
# ---------------------------------------------------------------------------

def query_date(name, default=None):
    """Parse an ISO ``YYYY-MM-DD`` query-string argument."""
    raw = request.args.get(name)
    if not raw:
        return default
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f'{name} must be a date in YYYY-MM-DD format.', details={'field': name})


def query_year_month(today=None):
    """Return ``(year, month)`` from the query string, defaulting to *today*."""
    today = today or date.today()
    try:
        year = int(request.args.get('year', today.year))
        month = int(request.args.get('month', today.month))
    except ValueError:
        raise ValidationError('year and month must be integers.')
    if not 1 <= year <= 9999:
        raise ValidationError('year must be between 1 and 9999.', details={'field': 'year'})
    if not 1 <= month <= 12:
        raise ValidationError('month must be between 1 and 12.', details={'field': 'month'})
    return year, month

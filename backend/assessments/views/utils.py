"""Query-string helpers shared by the API views."""
from datetime import date

from django.utils.dateparse import parse_date

from ..errors import ValidationError


def query_param(request, *names):
    """First non-empty value among `names`; clients send camelCase or snake_case."""
    for name in names:
        value = request.query_params.get(name)
        if value not in (None, ''):
            return value
    return None


def int_param(request, *names, required=False):
    value = query_param(request, *names)
    if value is None:
        if required:
            raise ValidationError(f"{names[0]} is required", field=names[0])
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{names[0]} must be an integer", field=names[0])


def date_param(request, *names) -> date:
    value = query_param(request, *names)
    if value is None:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{names[0]} must be a date (YYYY-MM-DD)", field=names[0])
    return parsed

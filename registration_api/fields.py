"""
Boundary normalization for team and player payloads.

Clients send camelCase (divisionId), Exposure Events sends and expects
PascalCase (DivisionId) and the Python side works in snake_case
(division_id). Payloads are mapped onto the snake_case schema once, when they
cross into the service, and rendered back out with to_wire / to_exposure_team.
"""
from typing import Any, Dict, Iterable, Optional, Tuple

ADDRESS_FIELDS = ('city', 'state_region', 'postal_code')

PLAYER_FIELDS = (
    'external_player_id', 'first_name', 'last_name', 'number', 'email', 'phone',
    'grade', 'graduation_year', 'city', 'state_region', 'postal_code', 'active',
)

TEAM_FIELDS = (
    'id', 'event_id', 'division_id', 'name', 'email', 'phone', 'gender', 'paid',
    'status', 'notes', 'website', 'twitter_handle', 'abbreviation',
    'external_team_id', 'instagram_handle', 'facebook_page',
)

EXTRA_ALIASES = {
    'phone': ('phoneNumber', 'PhoneNumber', 'phone_number'),
    'graduation_year': ('gradudationYear', 'GradudationYear'),
}


def camel_case(field: str) -> str:
    head, *rest = field.split('_')
    return head + ''.join(part.title() for part in rest)


def pascal_case(field: str) -> str:
    return ''.join(part.title() for part in field.split('_'))


def aliases(field: str) -> Tuple[str, ...]:
    return (field, camel_case(field), pascal_case(field)) + EXTRA_ALIASES.get(field, ())


def _pick(data: Dict[str, Any], field: str) -> Tuple[bool, Any]:
    for alias in aliases(field):
        if data.get(alias) is not None:
            return True, data[alias]
    return False, None


def _normalize(data: Optional[Dict[str, Any]], fields: Iterable[str]) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    result = {}
    for field in fields:
        found, value = _pick(data, field)
        if found:
            result[field] = value
    return result


def normalize_address(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return _normalize(data, ADDRESS_FIELDS)


def normalize_player(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return _normalize(data, PLAYER_FIELDS)


def normalize_team(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Map a team payload in any casing onto canonical snake_case keys.

    Only keys present in the payload show up in the result, so the output
    doubles as a partial update. Nested Event / Division objects (as found in
    Exposure team records) fill event_id / division_id when the flat ids are
    missing.
    """
    if not isinstance(data, dict):
        return {}

    team = _normalize(data, TEAM_FIELDS)

    for field, nested in (('event_id', 'Event'), ('division_id', 'Division')):
        if field not in team and isinstance(data.get(nested), dict):
            nested_id = data[nested].get('Id')
            if nested_id is not None:
                team[field] = nested_id

    found, address = _pick(data, 'address')
    if found:
        team['address'] = normalize_address(address)

    found, players = _pick(data, 'players')
    if found:
        team['players'] = [normalize_player(p) for p in players or []]

    return team


def _render(canonical: Dict[str, Any], rename) -> Dict[str, Any]:
    rendered = {}
    for key, value in canonical.items():
        if key == 'address' and isinstance(value, dict):
            value = {rename(k): v for k, v in value.items()}
        elif key == 'players' and isinstance(value, list):
            value = [{rename(k): v for k, v in p.items()} for p in value]
        rendered[rename(key)] = value
    return rendered


def to_wire(canonical: Dict[str, Any]) -> Dict[str, Any]:
    """camelCase rendering used in this service's JSON responses."""
    return _render(canonical, camel_case)


def to_exposure_team(canonical: Dict[str, Any]) -> Dict[str, Any]:
    """PascalCase rendering expected by the Exposure Events team endpoints."""
    return _render(canonical, pascal_case)

import uuid
import threading
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional, Tuple, List

from exposure.errors import ValidationError
from .fields import normalize_team, to_wire


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _to_int(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


@dataclass
class Team:
    division_id: int
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_id: Optional[int] = None
    email: str = ''
    phone: str = ''
    gender: Optional[int] = None
    paid: bool = False
    status: int = 1
    address: dict = field(default_factory=dict)
    players: list = field(default_factory=list)
    notes: str = ''
    website: str = ''
    twitter_handle: str = ''
    abbreviation: str = ''
    external_team_id: str = ''
    instagram_handle: str = ''
    facebook_page: str = ''
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def to_canonical(self) -> dict:
        return asdict(self)

    def to_dict(self) -> dict:
        return to_wire(self.to_canonical())


class TeamStore:
    """
    In-memory team registrations.

    Lives for the process lifetime; nothing is written to disk.
    """

    def __init__(self):
        self._teams: List[Team] = []
        self._lock = threading.Lock()

    def create_team(self, data: dict) -> Team:
        """Register a new team. divisionId and name are required."""
        fields = normalize_team(data)

        if not fields.get('division_id'):
            raise ValidationError("divisionId is required")
        if not fields.get('name'):
            raise ValidationError("name is required")

        fields.pop('id', None)
        fields['division_id'] = _to_int(fields['division_id'], 'divisionId')
        fields['paid'] = bool(fields.get('paid', False))
        fields['status'] = _to_int(fields.get('status') or 1, 'status')

        team = Team(**fields)
        with self._lock:
            self._teams.append(team)
        return team

    def get_team(self, team_id: str) -> Optional[Team]:
        with self._lock:
            for team in self._teams:
                if team.id == team_id:
                    return team
        return None

    def list_teams(
        self,
        division_id: int = None,
        page: int = 1,
        page_size: int = 50
    ) -> Tuple[List[Team], int]:
        """Return one page of teams and the total matching the filter."""
        if page < 1 or page_size < 1:
            raise ValidationError("page and pageSize must be positive integers")

        with self._lock:
            teams = list(self._teams)

        if division_id is not None:
            teams = [t for t in teams if t.division_id == division_id]

        start = (page - 1) * page_size
        return teams[start:start + page_size], len(teams)

    def update_team(self, team_id: str, data: dict) -> Optional[Team]:
        """Apply a partial update. Address is merged, players are replaced."""
        changes = normalize_team(data)
        changes.pop('id', None)

        if 'division_id' in changes:
            if changes['division_id']:
                changes['division_id'] = _to_int(changes['division_id'], 'divisionId')
            else:
                del changes['division_id']
        if 'name' in changes and not changes['name']:
            del changes['name']
        if 'paid' in changes:
            changes['paid'] = bool(changes['paid'])
        if 'status' in changes:
            changes['status'] = _to_int(changes['status'], 'status')

        with self._lock:
            team = next((t for t in self._teams if t.id == team_id), None)
            if team is None:
                return None

            if 'address' in changes:
                changes['address'] = {**team.address, **changes['address']}

            for key, value in changes.items():
                setattr(team, key, value)
            team.updated_at = _now()
            return team

    def count(self) -> int:
        with self._lock:
            return len(self._teams)

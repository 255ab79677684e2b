"""
Google Sheets mirror for team and player registrations.

Every registration is appended to a per-age-group tab (Teams_U12,
Players_U12, ...). Mirroring is best effort: failures are logged and reported
as False, never raised into the request that triggered them.
"""
import base64
import binascii
import json
import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']

TEAM_HEADERS = [
    'Timestamp', 'Event ID', 'Team ID', 'Team Name', 'Division ID', 'Email',
    'Phone', 'State/Region', 'Notes', 'Abbreviation', 'Coach First Name',
    'Coach Last Name', 'Paid',
]

PLAYER_HEADERS = [
    'Timestamp', 'Event ID', 'Team ID', 'Division ID', 'Abbreviation',
    'First Name', 'Last Name', 'Email', 'Grade', 'Graduation Year', 'City',
    'State/Region', 'Postal Code', 'Active', 'Phone Number',
]

_CATEGORY_PATTERN = re.compile(r'u-?(\d{1,2})', re.IGNORECASE)


def extract_category(division_id, team_name: str = '') -> str:
    """Age group (U10, U12, ...) from the division or team name, else 'Other'."""
    combined = f"{division_id if division_id is not None else ''} {team_name or ''}"
    match = _CATEGORY_PATTERN.search(combined)
    if match:
        return f"U{match.group(1)}"
    return 'Other'


def _column(index: int) -> str:
    return chr(ord('A') + index - 1)


def parse_service_account_key(raw: str) -> Optional[dict]:
    """Service account key given as a JSON string or base64-encoded JSON."""
    try:
        return json.loads(raw)
    except ValueError:
        pass
    try:
        return json.loads(base64.b64decode(raw).decode('utf-8'))
    except (ValueError, binascii.Error):
        return None


class SheetsService:
    def __init__(self, spreadsheet_id: str, service_account_key: str, client=None):
        self.spreadsheet_id = spreadsheet_id
        self.service_account_key = service_account_key
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.spreadsheet_id and self.service_account_key)

    @property
    def client(self):
        """Lazy-load the Sheets API spreadsheets resource."""
        if self._client is None:
            if not self.enabled:
                logger.warning(
                    "Google Sheets integration not configured. Set GOOGLE_SHEETS_SPREADSHEET_ID "
                    "and GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY"
                )
                return None

            info = parse_service_account_key(self.service_account_key)
            if info is None:
                logger.error(
                    "Failed to parse GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY. Must be JSON or base64-encoded JSON"
                )
                return None

            from google.oauth2 import service_account
            from googleapiclient.discovery import build

            credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            self._client = build('sheets', 'v4', credentials=credentials, cache_discovery=False).spreadsheets()
            logger.info("Google Sheets client initialized")
        return self._client

    def _get_or_create_sheet(self, sheet_name: str, headers: List[str]) -> Optional[str]:
        sheets = self.client
        if sheets is None:
            return None

        try:
            spreadsheet = sheets.get(spreadsheetId=self.spreadsheet_id).execute()
            titles = {s['properties']['title'] for s in spreadsheet.get('sheets', [])}
            if sheet_name in titles:
                return sheet_name

            sheets.batchUpdate(
                spreadsheetId=self.spreadsheet_id,
                body={'requests': [{'addSheet': {'properties': {'title': sheet_name}}}]}
            ).execute()

            sheets.values().update(
                spreadsheetId=self.spreadsheet_id,
                range=f"{sheet_name}!A1:{_column(len(headers))}1",
                valueInputOption='RAW',
                body={'values': [headers]}
            ).execute()

            logger.info(f"Created new sheet: {sheet_name}")
            return sheet_name
        except Exception as e:
            logger.error(f"Error getting/creating sheet {sheet_name}: {e}")
            return None

    def _append(self, sheet_name: str, width: int, rows: List[list]):
        self.client.values().append(
            spreadsheetId=self.spreadsheet_id,
            range=f"{sheet_name}!A:{_column(width)}",
            valueInputOption='RAW',
            body={'values': rows}
        ).execute()

    def save_team(self, team: dict, action: str = 'created') -> bool:
        """Append one row for a team (canonical snake_case dict)."""
        if not self.enabled:
            return False

        category = extract_category(team.get('division_id'), team.get('name'))
        sheet_name = self._get_or_create_sheet(f"Teams_{category}", TEAM_HEADERS)
        if not sheet_name:
            logger.error(f"Failed to get/create sheet for category: {category}")
            return False

        players = team.get('players') or []
        coach = players[0] if players else {}
        address = team.get('address') or {}

        row = [
            datetime.now(timezone.utc).isoformat(),
            team.get('event_id') or '',
            team.get('id') or '',
            team.get('name') or '',
            team.get('division_id') or '',
            team.get('email') or '',
            team.get('phone') or '',
            address.get('state_region') or '',
            team.get('notes') or '',
            team.get('abbreviation') or '',
            coach.get('first_name') or '',
            coach.get('last_name') or '',
            False,
        ]

        try:
            self._append(sheet_name, len(TEAM_HEADERS), [row])
        except Exception as e:
            logger.error(f"Error saving team to Google Sheets: {e}")
            return False

        logger.info(f"Team saved to Google Sheets: {team.get('name')} ({category}) - {action}")
        return True

    def save_players(self, team: dict, players: List[dict]) -> bool:
        """Append one row per player (canonical snake_case dicts)."""
        if not self.enabled or not players:
            return False

        category = extract_category(team.get('division_id'), team.get('name'))
        sheet_name = self._get_or_create_sheet(f"Players_{category}", PLAYER_HEADERS)
        if not sheet_name:
            logger.error(f"Failed to get/create player sheet for category: {category}")
            return False

        timestamp = datetime.now(timezone.utc).isoformat()
        rows = []
        for player in players:
            rows.append([
                timestamp,
                team.get('event_id') or '',
                team.get('id') or '',
                team.get('division_id') or '',
                team.get('abbreviation') or '',
                player.get('first_name') or '',
                player.get('last_name') or '',
                player.get('email') or '',
                player.get('grade') or '',
                player.get('graduation_year') or '',
                player.get('city') or '',
                player.get('state_region') or '',
                player.get('postal_code') or '',
                player.get('active', True),
                player.get('phone') or '',
            ])

        try:
            self._append(sheet_name, len(PLAYER_HEADERS), rows)
        except Exception as e:
            logger.error(f"Error saving players to Google Sheets: {e}")
            return False

        logger.info(f"{len(players)} player(s) saved to Google Sheets: {team.get('name')} ({category})")
        return True

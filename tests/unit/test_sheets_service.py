"""
Unit tests for the Google Sheets mirror.
"""
import base64
import json

import pytest

from registration_api.sheets_service import (
    SheetsService,
    extract_category,
    parse_service_account_key,
    TEAM_HEADERS,
    PLAYER_HEADERS,
)

SERVICE_ACCOUNT = {'type': 'service_account', 'client_email': 'bot@example.iam.gserviceaccount.com'}


@pytest.fixture
def sheets_client(mocker):
    client = mocker.MagicMock()
    client.get.return_value.execute.return_value = {
        'sheets': [
            {'properties': {'title': 'Teams_U12'}},
            {'properties': {'title': 'Players_U12'}},
        ]
    }
    return client


@pytest.fixture
def service(sheets_client):
    return SheetsService('sheet-123', json.dumps(SERVICE_ACCOUNT), client=sheets_client)


@pytest.fixture
def team():
    return {
        'id': 'team-1',
        'event_id': 77,
        'division_id': 'U12 Gold',
        'name': 'Tigers',
        'email': 'coach@example.com',
        'phone': '555-0100',
        'address': {'state_region': 'TX'},
        'abbreviation': 'TGR',
        'players': [{'first_name': 'Pat', 'last_name': 'Coach'}],
    }


class TestExtractCategory:

    @pytest.mark.parametrize('division,name,expected', [
        ('U12 Gold', '', 'U12'),
        (None, 'Hawks u-14', 'U14'),
        ('u9', 'Tigers', 'U9'),
        (12, 'Tigers', 'Other'),
        (None, None, 'Other'),
    ])
    def test_categories(self, division, name, expected):
        assert extract_category(division, name) == expected


class TestParseServiceAccountKey:

    def test_json(self):
        assert parse_service_account_key(json.dumps(SERVICE_ACCOUNT)) == SERVICE_ACCOUNT

    def test_base64_json(self):
        encoded = base64.b64encode(json.dumps(SERVICE_ACCOUNT).encode()).decode()
        assert parse_service_account_key(encoded) == SERVICE_ACCOUNT

    def test_garbage(self):
        assert parse_service_account_key('%%% not a key %%%') is None


class TestClient:
    """Tests for lazy client construction."""

    def test_disabled_without_config(self):
        service = SheetsService('', '')
        assert not service.enabled
        assert service.client is None

    def test_unparsable_key(self):
        service = SheetsService('sheet-123', '%%%')
        assert service.enabled
        assert service.client is None

    def test_builds_google_client(self, mocker):
        from_info = mocker.patch('google.oauth2.service_account.Credentials.from_service_account_info')
        build = mocker.patch('googleapiclient.discovery.build')

        service = SheetsService('sheet-123', json.dumps(SERVICE_ACCOUNT))
        client = service.client

        from_info.assert_called_once_with(
            SERVICE_ACCOUNT, scopes=['https://www.googleapis.com/auth/spreadsheets']
        )
        build.assert_called_once_with(
            'sheets', 'v4', credentials=from_info.return_value, cache_discovery=False
        )
        assert client is build.return_value.spreadsheets.return_value
        assert service.client is client


class TestSaveTeam:
    """Tests for team rows."""

    def test_appends_row(self, service, sheets_client, team):
        assert service.save_team(team) is True

        kwargs = sheets_client.values.return_value.append.call_args.kwargs
        assert kwargs['spreadsheetId'] == 'sheet-123'
        assert kwargs['range'] == 'Teams_U12!A:M'
        row = kwargs['body']['values'][0]
        assert len(row) == len(TEAM_HEADERS)
        assert row[1:8] == [77, 'team-1', 'Tigers', 'U12 Gold', 'coach@example.com', '555-0100', 'TX']
        assert row[10:] == ['Pat', 'Coach', False]

    def test_creates_missing_sheet(self, service, sheets_client, team):
        team['division_id'] = 'U10'

        assert service.save_team(team) is True

        sheets_client.batchUpdate.assert_called_once_with(
            spreadsheetId='sheet-123',
            body={'requests': [{'addSheet': {'properties': {'title': 'Teams_U10'}}}]}
        )
        header_call = sheets_client.values.return_value.update.call_args.kwargs
        assert header_call['range'] == 'Teams_U10!A1:M1'
        assert header_call['body'] == {'values': [TEAM_HEADERS]}

    def test_append_failure_is_reported(self, service, sheets_client, team):
        sheets_client.values.return_value.append.return_value.execute.side_effect = Exception("quota exceeded")
        assert service.save_team(team) is False

    def test_lookup_failure_is_reported(self, service, sheets_client, team):
        sheets_client.get.return_value.execute.side_effect = Exception("forbidden")
        assert service.save_team(team) is False
        sheets_client.values.return_value.append.assert_not_called()

    def test_disabled(self, team):
        assert SheetsService('', '').save_team(team) is False


class TestSavePlayers:
    """Tests for player rows."""

    def test_one_row_per_player(self, service, sheets_client, team):
        players = [
            {'first_name': 'Sam', 'last_name': 'Lee', 'graduation_year': 2030},
            {'first_name': 'Alex', 'active': False, 'phone': '555'},
        ]

        assert service.save_players(team, players) is True

        kwargs = sheets_client.values.return_value.append.call_args.kwargs
        assert kwargs['range'] == 'Players_U12!A:O'
        rows = kwargs['body']['values']
        assert len(rows) == 2
        assert all(len(r) == len(PLAYER_HEADERS) for r in rows)
        assert rows[0][5:7] == ['Sam', 'Lee']
        assert rows[0][9] == 2030
        assert rows[0][13] is True
        assert rows[1][13] is False
        assert rows[1][14] == '555'

    def test_no_players(self, service, sheets_client, team):
        assert service.save_players(team, []) is False
        sheets_client.get.assert_not_called()

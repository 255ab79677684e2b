"""
Unit tests for TeamStore.
"""
import pytest

from exposure.errors import ValidationError
from registration_api.team_store import TeamStore, Team


@pytest.fixture
def store():
    return TeamStore()


class TestCreateTeam:
    """Tests for team registration."""

    def test_create_minimal(self, store):
        team = store.create_team({'divisionId': '12', 'name': 'Tigers'})

        assert isinstance(team, Team)
        assert team.division_id == 12
        assert team.name == 'Tigers'
        assert team.paid is False
        assert team.status == 1
        assert team.id
        assert team.created_at.endswith('Z')
        assert store.count() == 1

    def test_create_with_pascal_case(self, store):
        team = store.create_team({
            'DivisionId': 4,
            'Name': 'Hawks',
            'Email': 'coach@example.com',
            'Players': [{'FirstName': 'Sam'}],
        })
        assert team.email == 'coach@example.com'
        assert team.players == [{'first_name': 'Sam'}]

    def test_client_id_is_ignored(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A', 'id': 'mine'})
        assert team.id != 'mine'

    def test_missing_division(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.create_team({'name': 'Tigers'})
        assert exc_info.value.message == 'divisionId is required'
        assert store.count() == 0

    def test_missing_name(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.create_team({'divisionId': 1})
        assert exc_info.value.message == 'name is required'

    def test_non_integer_division(self, store):
        with pytest.raises(ValidationError):
            store.create_team({'divisionId': 'abc', 'name': 'Tigers'})

    def test_ids_are_unique(self, store):
        first = store.create_team({'divisionId': 1, 'name': 'A'})
        second = store.create_team({'divisionId': 1, 'name': 'A'})
        assert first.id != second.id

    def test_to_dict_is_camel_case(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A', 'twitterHandle': '@a'})
        data = team.to_dict()
        assert data['divisionId'] == 1
        assert data['twitterHandle'] == '@a'
        assert 'division_id' not in data


class TestListTeams:
    """Tests for pagination and filtering."""

    def test_pagination(self, store):
        for i in range(5):
            store.create_team({'divisionId': 1, 'name': f'Team {i}'})

        page, total = store.list_teams(page=2, page_size=2)

        assert total == 5
        assert [t.name for t in page] == ['Team 2', 'Team 3']

    def test_page_past_end(self, store):
        store.create_team({'divisionId': 1, 'name': 'A'})
        page, total = store.list_teams(page=3, page_size=10)
        assert page == []
        assert total == 1

    def test_division_filter(self, store):
        store.create_team({'divisionId': 1, 'name': 'A'})
        store.create_team({'divisionId': 2, 'name': 'B'})

        page, total = store.list_teams(division_id=2)

        assert total == 1
        assert page[0].name == 'B'

    @pytest.mark.parametrize('page,page_size', [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_paging(self, store, page, page_size):
        with pytest.raises(ValidationError):
            store.list_teams(page=page, page_size=page_size)


class TestUpdateTeam:
    """Tests for partial updates."""

    def test_partial_update(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A', 'email': 'a@x.com'})

        updated = store.update_team(team.id, {'notes': 'late'})

        assert updated.notes == 'late'
        assert updated.name == 'A'
        assert updated.email == 'a@x.com'

    def test_address_is_merged(self, store):
        team = store.create_team({
            'divisionId': 1,
            'name': 'A',
            'address': {'city': 'Austin', 'stateRegion': 'TX'},
        })

        updated = store.update_team(team.id, {'address': {'postalCode': '78701'}})

        assert updated.address == {'city': 'Austin', 'state_region': 'TX', 'postal_code': '78701'}

    def test_players_are_replaced(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A', 'players': [{'firstName': 'Old'}]})
        updated = store.update_team(team.id, {'players': [{'firstName': 'New'}]})
        assert updated.players == [{'first_name': 'New'}]

    def test_blank_name_is_ignored(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A'})
        assert store.update_team(team.id, {'name': ''}).name == 'A'

    def test_id_cannot_change(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A'})
        original_id = team.id
        store.update_team(team.id, {'id': 'other'})
        assert store.get_team(original_id) is team

    def test_missing_team(self, store):
        assert store.update_team('nope', {'name': 'B'}) is None

    def test_get_team(self, store):
        team = store.create_team({'divisionId': 1, 'name': 'A'})
        assert store.get_team(team.id) is team
        assert store.get_team('missing') is None

"""Pass-through routes to the Exposure Events API."""
import logging
from flask import Blueprint, request, jsonify, current_app

from exposure.client import build_endpoint
from exposure.errors import ApiError, ValidationError
from registration_api.fields import normalize_team, to_exposure_team

logger = logging.getLogger(__name__)

bp = Blueprint('exposure', __name__, url_prefix='/api/v1/exposure')

# Defaults applied when creating a team upstream
TEAM_DEFAULTS = {
    'paid': False,
    'status': 1,
    'players': [],
    'notes': '',
    'website': '',
    'twitter_handle': '',
    'abbreviation': '',
    'external_team_id': '',
    'instagram_handle': '',
    'facebook_page': '',
}

# Fields that fall back to '' rather than staying unset on update
TEXT_FIELDS = (
    'notes', 'website', 'twitter_handle', 'abbreviation',
    'external_team_id', 'instagram_handle', 'facebook_page',
)


# --- Authentication ---

@bp.route('/authenticate', methods=['POST'])
def authenticate():
    """Log in as an event director and keep the returned API keys."""
    data = request.get_json(silent=True) or {}
    result = current_app.credentials.authenticate(data.get('username'), data.get('password'))

    return jsonify({
        'success': True,
        'message': 'Authentication successful',
        'accountId': result['account_id'],
        'email': result['email']
    })


@bp.route('/logout', methods=['POST'])
def logout():
    current_app.credentials.logout()
    return jsonify({'success': True, 'message': 'Logged out'})


@bp.route('/auth-status', methods=['GET'])
def auth_status():
    info = current_app.credentials.account_info()
    return jsonify({
        'isAuthenticated': current_app.credentials.is_ready(),
        'state': current_app.credentials.state.value,
        'accountId': info['account_id'],
        'email': info['email']
    })


@bp.route('/test-auth', methods=['GET'])
def test_auth():
    """Check the stored keys by fetching a single event."""
    store = current_app.credentials
    info = store.account_info()
    keys = {
        'isAuthenticated': store.is_ready(),
        'accountId': info['account_id'],
        'email': info['email'],
        'baseUrl': f"{current_app.exposure.host}{current_app.exposure.api_prefix}"
    }

    try:
        sample = current_app.exposure.get(build_endpoint('/events', pageSize=1))
    except ApiError as e:
        return jsonify({
            'status': 'Authentication failed',
            'keys': keys,
            'error': e.message
        })

    return jsonify({
        'status': 'Authentication successful',
        'keys': keys,
        'testRequest': 'Success',
        'sampleData': sample
    })


# --- Events / divisions ---

@bp.route('/events', methods=['GET'])
def list_events():
    endpoint = build_endpoint(
        '/events',
        page=request.args.get('page'),
        pageSize=request.args.get('pageSize')
    )
    return jsonify(current_app.exposure.get(endpoint))


@bp.route('/events/<event_id>', methods=['GET'])
def get_event(event_id):
    return jsonify(current_app.exposure.get(f'/events/{event_id}'))


@bp.route('/divisions', methods=['GET'])
def list_divisions():
    endpoint = build_endpoint('/divisions', eventId=request.args.get('eventId'))
    return jsonify(current_app.exposure.get(endpoint))


# --- Teams ---

@bp.route('/teams', methods=['GET'])
def list_teams():
    endpoint = build_endpoint(
        '/teams',
        divisionId=request.args.get('divisionId'),
        eventId=request.args.get('eventId'),
        page=request.args.get('page'),
        pageSize=request.args.get('pageSize')
    )
    return jsonify(current_app.exposure.get(endpoint))


@bp.route('/teams/<team_id>', methods=['GET'])
def get_team(team_id):
    return jsonify(current_app.exposure.get(f'/teams/{team_id}'))


@bp.route('/teams', methods=['POST'])
def create_team():
    """Create a team upstream from a camelCase or PascalCase payload."""
    fields = normalize_team(request.get_json(silent=True) or {})
    fields.pop('id', None)
    team = {**TEAM_DEFAULTS, **fields}

    data = current_app.exposure.post('/teams', to_exposure_team(team))
    return jsonify(data), 201


@bp.route('/teams/<team_id>', methods=['PUT'])
def update_team(team_id):
    """Update a team upstream, keeping every field the request leaves out."""
    try:
        numeric_id = int(team_id)
    except ValueError:
        raise ValidationError(f"Team ID must be an integer: {team_id}")

    existing_response = current_app.exposure.get(f'/teams/{team_id}')
    if isinstance(existing_response, dict):
        existing = existing_response.get('Team') or existing_response
    else:
        existing = {}

    changes = normalize_team(request.get_json(silent=True) or {})
    team = {**normalize_team(existing), **changes}
    team['id'] = numeric_id
    team.setdefault('players', [])
    for field in TEXT_FIELDS:
        team.setdefault(field, '')

    logger.info(f"Updating Exposure team {team_id} (event {team.get('event_id')}, division {team.get('division_id')})")

    data = current_app.exposure.put('/teams', to_exposure_team(team))
    return jsonify(data)

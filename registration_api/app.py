import os
from datetime import datetime, timezone
from flask import Flask, request, jsonify

from exposure.client import ExposureClient, ReauthPolicy
from exposure.credentials import CredentialStore
from exposure.errors import ApiError
from .config import config
from .email_service import EmailService
from .fields import normalize_team
from .payments import PaymentService
from .sheets_service import SheetsService
from .team_store import TeamStore


def create_app(config_name: str = None) -> Flask:
    """Application factory for the registration service."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))

    # Services live on the app; nothing is module-global
    credentials = CredentialStore(
        host=app.config['EXPOSURE_HOST'],
        timeout=app.config['EXPOSURE_TIMEOUT']
    )
    policy = ReauthPolicy(
        credentials,
        username=app.config['EXPOSURE_USERNAME'],
        password=app.config['EXPOSURE_PASSWORD']
    )
    app.credentials = credentials
    app.exposure = ExposureClient(
        credentials,
        policy,
        host=app.config['EXPOSURE_HOST'],
        api_prefix=app.config['EXPOSURE_API_PREFIX'],
        timeout=app.config['EXPOSURE_TIMEOUT']
    )
    app.teams = TeamStore()
    app.payments = PaymentService(
        secret_key=app.config['STRIPE_SECRET_KEY'],
        public_key=app.config['STRIPE_PUBLIC_KEY'],
        webhook_secret=app.config['STRIPE_WEBHOOK_SECRET'],
        default_price_id=app.config['STRIPE_PRICE_ID']
    )
    app.sheets = SheetsService(
        spreadsheet_id=app.config['GOOGLE_SHEETS_SPREADSHEET_ID'],
        service_account_key=app.config['GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY']
    )
    app.email = EmailService(
        api_key=app.config['BREVO_API_KEY'],
        sender_email=app.config['SENDER_EMAIL'],
        sender_name=app.config['SENDER_NAME'],
        bcc_email=app.config['BCC_EMAIL']
    )

    register_error_handlers(app)
    register_api_routes(app)

    from .routes import exposure, payments
    app.register_blueprint(exposure.bp)
    app.register_blueprint(payments.bp)

    return app


def register_error_handlers(app: Flask):

    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested endpoint does not exist'
        }), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({
            'error': 'Method Not Allowed',
            'message': f'{request.method} is not supported on {request.path}'
        }), 405


def register_api_routes(app: Flask):
    """Register local team registration routes."""

    # ==================== Teams ====================

    @app.route('/api/v1/teams', methods=['GET'])
    def api_list_teams():
        """Get one team by id, or a page of teams filtered by division."""
        team_id = request.args.get('id')
        if team_id:
            team = app.teams.get_team(team_id)
            if not team:
                return jsonify({
                    'error': 'Team not found',
                    'message': f'No team found with ID: {team_id}'
                }), 404
            return jsonify({'team': team.to_dict()})

        division_id = request.args.get('divisionId', type=int)
        page = request.args.get('page', 1, type=int)
        page_size = request.args.get('pageSize', 50, type=int)

        teams, total = app.teams.list_teams(
            division_id=division_id,
            page=page,
            page_size=page_size
        )

        return jsonify({
            'teams': {
                'page': page,
                'pageSize': page_size,
                'totalResults': total,
                'results': [t.to_dict() for t in teams]
            }
        })

    @app.route('/api/v1/teams', methods=['POST'])
    def api_create_team():
        """Register a team, mirror it to Sheets and send the confirmation email."""
        data = request.get_json(silent=True) or {}
        team = app.teams.create_team(data)
        canonical = team.to_canonical()

        app.sheets.save_team(canonical, 'created')
        if team.players:
            app.sheets.save_players(canonical, team.players)

        email_sent = False
        if team.email:
            result = app.email.send_registration_email(team.email, team.name)
            email_sent = result['success']

        return jsonify({
            'message': 'Team created successfully',
            'team': team.to_dict(),
            'emailSent': email_sent
        }), 201

    @app.route('/api/v1/teams', methods=['PUT'])
    def api_update_team():
        """Partially update a team; new players get a confirmation email."""
        team_id = request.args.get('id')
        if not team_id:
            return jsonify({
                'error': 'Bad Request',
                'message': 'Team ID is required in query parameters'
            }), 400

        data = request.get_json(silent=True) or {}
        team = app.teams.update_team(team_id, data)
        if not team:
            return jsonify({
                'error': 'Team not found',
                'message': f'No team found with ID: {team_id}'
            }), 404

        canonical = team.to_canonical()
        app.sheets.save_team(canonical, 'updated')

        response = {
            'message': 'Team updated successfully',
            'team': team.to_dict()
        }

        players = normalize_team(data).get('players')
        if players:
            app.sheets.save_players(canonical, players)

            emails_sent = []
            for player in players:
                if not player.get('email'):
                    continue
                name = f"{player.get('first_name', '')} {player.get('last_name', '')}".strip()
                result = app.email.send_registration_email(player['email'], name)
                emails_sent.append({'email': player['email'], 'sent': result['success']})
            response['emailsSent'] = emails_sent

        return jsonify(response)

    # ==================== Health Check ====================

    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'OK',
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'teamsCount': app.teams.count()
        })

"""Stripe checkout routes for team registration fees."""
from flask import Blueprint, request, jsonify, current_app

bp = Blueprint('payments', __name__, url_prefix='/api/v1/payments')


@bp.route('/create-checkout-session', methods=['POST'])
def create_checkout_session():
    data = request.get_json(silent=True) or {}
    origin = request.headers.get('Origin') or current_app.config['DEFAULT_ORIGIN']

    result = current_app.payments.create_checkout_session(
        team_id=data.get('teamId'),
        team_name=data.get('teamName'),
        price_id=data.get('priceId'),
        quantity=data.get('quantity', 1),
        success_url=data.get('successUrl'),
        cancel_url=data.get('cancelUrl'),
        origin=origin
    )
    return jsonify(result)


@bp.route('/session/<session_id>', methods=['GET'])
def get_session(session_id):
    return jsonify({'session': current_app.payments.get_session(session_id)})


@bp.route('/verify/<session_id>', methods=['GET'])
def verify_payment(session_id):
    return jsonify(current_app.payments.verify_payment(session_id))


@bp.route('/team/<team_id>', methods=['GET'])
def team_payments(team_id):
    return jsonify(current_app.payments.team_payments(team_id))


@bp.route('/webhook', methods=['POST'])
def webhook():
    """Stripe webhook; the signature is checked against the raw body."""
    current_app.payments.handle_webhook(
        request.get_data(),
        request.headers.get('Stripe-Signature')
    )
    return jsonify({'received': True})


@bp.route('/prices', methods=['GET'])
def prices():
    return jsonify({'prices': current_app.payments.prices()})

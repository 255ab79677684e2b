"""
Stripe Checkout wrapper for team registration fees.

Checkout sessions are created and looked up through Stripe; a local record of
each session is kept in memory so a team's payment history can be listed
without going back to Stripe.
"""
import json
import logging
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import List, Optional

import stripe

from exposure.errors import ApiError, ValidationError
from .fields import to_wire

logger = logging.getLogger(__name__)


class PaymentError(ApiError):
    status_code = 500
    label = "Payment error"


class WebhookError(ApiError):
    status_code = 400
    label = "Webhook Error"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def _field(obj, name: str):
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


@dataclass
class PaymentRecord:
    session_id: str
    team_id: str
    team_name: Optional[str] = None
    amount: Optional[int] = None
    status: str = 'pending'
    created_at: str = None
    paid_at: Optional[str] = None

    def __post_init__(self):
        if self.created_at is None:
            self.created_at = _now()

    def to_dict(self) -> dict:
        return to_wire(asdict(self))


class PaymentSessionStore:
    def __init__(self):
        self._records: List[PaymentRecord] = []
        self._lock = threading.Lock()

    def add(self, record: PaymentRecord):
        with self._lock:
            self._records.append(record)

    def find(self, session_id: str) -> Optional[PaymentRecord]:
        with self._lock:
            return next((r for r in self._records if r.session_id == session_id), None)

    def mark_paid(self, session_id: str) -> bool:
        with self._lock:
            record = next((r for r in self._records if r.session_id == session_id), None)
            if record is None:
                return False
            record.status = 'paid'
            record.paid_at = _now()
            return True

    def for_team(self, team_id: str) -> List[PaymentRecord]:
        with self._lock:
            return [r for r in self._records if r.team_id == team_id]


class PaymentService:
    def __init__(
        self,
        secret_key: str,
        public_key: str = '',
        webhook_secret: str = '',
        default_price_id: str = '',
        store: PaymentSessionStore = None
    ):
        self.secret_key = secret_key
        self.public_key = public_key
        self.webhook_secret = webhook_secret
        self.default_price_id = default_price_id
        self.store = store or PaymentSessionStore()

    def create_checkout_session(
        self,
        team_id: str,
        team_name: str = None,
        price_id: str = None,
        quantity: int = 1,
        success_url: str = None,
        cancel_url: str = None,
        origin: str = 'http://localhost:3000'
    ) -> dict:
        """Create a card checkout session for one team's registration."""
        if not team_id:
            raise ValidationError("teamId is required")

        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                payment_method_types=['card'],
                line_items=[{'price': price_id or self.default_price_id, 'quantity': quantity}],
                mode='payment',
                success_url=success_url or f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=cancel_url or f"{origin}/cancel",
                metadata={'teamId': team_id, 'teamName': team_name or 'Unknown Team'},
                client_reference_id=team_id,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating checkout session for team {team_id}: {e}")
            raise PaymentError(str(e)) from e

        self.store.add(PaymentRecord(
            session_id=session.id,
            team_id=team_id,
            team_name=team_name,
            amount=_field(session, 'amount_total'),
        ))
        logger.info(f"Created checkout session {session.id} for team {team_id}")

        return {
            'sessionId': session.id,
            'url': _field(session, 'url'),
            'publicKey': self.public_key,
        }

    def _retrieve(self, session_id: str):
        try:
            return stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            logger.error(f"Error retrieving checkout session {session_id}: {e}")
            raise PaymentError(str(e)) from e

    def get_session(self, session_id: str) -> dict:
        session = self._retrieve(session_id)
        local = self.store.find(session_id)
        metadata = _field(session, 'metadata')
        created = _field(session, 'created')

        return {
            'id': session.id,
            'teamId': _field(metadata, 'teamId') or (local.team_id if local else None),
            'teamName': _field(metadata, 'teamName') or (local.team_name if local else None),
            'status': _field(session, 'payment_status'),
            'amount': _field(session, 'amount_total'),
            'currency': _field(session, 'currency'),
            'paymentIntent': _field(session, 'payment_intent'),
            'customerEmail': _field(_field(session, 'customer_details'), 'email'),
            'createdAt': (
                datetime.fromtimestamp(created, timezone.utc).isoformat().replace('+00:00', 'Z')
                if created else None
            ),
        }

    def verify_payment(self, session_id: str) -> dict:
        session = self._retrieve(session_id)
        metadata = _field(session, 'metadata')
        status = _field(session, 'payment_status')

        if status != 'paid':
            return {'verified': False, 'status': status, 'teamId': _field(metadata, 'teamId')}

        self.store.mark_paid(session_id)
        return {
            'verified': True,
            'status': 'paid',
            'teamId': _field(metadata, 'teamId'),
            'amount': _field(session, 'amount_total'),
            'currency': _field(session, 'currency'),
            'customerEmail': _field(_field(session, 'customer_details'), 'email'),
        }

    def team_payments(self, team_id: str) -> dict:
        records = self.store.for_team(team_id)
        return {
            'teamId': team_id,
            'payments': [r.to_dict() for r in records],
            'totalPayments': len(records),
            'paidPayments': len([r for r in records if r.status == 'paid']),
        }

    def handle_webhook(self, payload: bytes, signature: str = None) -> str:
        """Apply a Stripe webhook event and return its type."""
        try:
            if self.webhook_secret:
                event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
            else:
                # unsigned events are only accepted when no secret is configured
                event = json.loads(payload)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.error(f"Webhook error: {e}")
            raise WebhookError(str(e)) from e

        event_type = _field(event, 'type')
        obj = _field(_field(event, 'data'), 'object')

        if event_type == 'checkout.session.completed':
            session_id = _field(obj, 'id')
            logger.info(f"Payment successful: {session_id}")
            self.store.mark_paid(session_id)
        elif event_type == 'payment_intent.succeeded':
            logger.info(f"PaymentIntent succeeded: {_field(obj, 'id')}")
        elif event_type == 'payment_intent.payment_failed':
            logger.warning(f"Payment failed: {_field(obj, 'id')}")
        else:
            logger.info(f"Unhandled event type: {event_type}")

        return event_type

    def prices(self) -> List[dict]:
        return [{
            'id': self.default_price_id,
            'productName': 'Team Registration',
            'currency': 'usd',
            'type': 'one_time',
        }]

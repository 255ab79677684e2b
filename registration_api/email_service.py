import logging

import requests

logger = logging.getLogger(__name__)

BREVO_SEND_URL = 'https://api.brevo.com/v3/smtp/email'

REGISTRATION_SUBJECT = 'Registration Confirmation - DC34 Memorial Invitational'

REGISTRATION_HTML = """
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h2 style="color: #2c3e50;">Thank You for Registering!</h2>
      <p>Thank you for registering for the <strong>DC34 Memorial Invitational</strong> on <strong>May 30-31, 2026</strong>.</p>
      <p>Tournament details will be sent out as we get closer to the tournament date.</p>
      <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;">
      <p style="font-size: 12px; color: #666;">
        If you have any questions, please don't hesitate to contact us.
      </p>
    </div>
  </body>
</html>
"""

REGISTRATION_TEXT = (
    'Thank you for registering for the DC34 Memorial Invitational on May 30-31, 2026. '
    'Tournament details will be sent out as we get closer to the tournament date.'
)


class EmailService:
    """Sends transactional email through the Brevo API."""

    def __init__(
        self,
        api_key: str,
        sender_email: str,
        sender_name: str = '',
        bcc_email: str = '',
        session: requests.Session = None,
        timeout: float = 10
    ):
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name
        self.bcc_email = bcc_email
        self.session = session or requests.Session()
        self.timeout = timeout

    def send_registration_email(self, recipient_email: str, recipient_name: str = '') -> dict:
        """Send the registration confirmation. Never raises; reports success."""
        if not self.api_key:
            logger.warning(f"BREVO_API_KEY not set, skipping email to {recipient_email}")
            return {'success': False, 'error': 'Email service not configured', 'email': recipient_email}

        payload = {
            'sender': {'name': self.sender_name, 'email': self.sender_email},
            'to': [{'email': recipient_email, 'name': recipient_name}],
            'subject': REGISTRATION_SUBJECT,
            'htmlContent': REGISTRATION_HTML,
            'textContent': REGISTRATION_TEXT,
        }
        if self.bcc_email:
            payload['bcc'] = [{'email': self.bcc_email}]

        try:
            resp = self.session.post(
                BREVO_SEND_URL,
                json=payload,
                headers={'api-key': self.api_key, 'Accept': 'application/json'},
                timeout=self.timeout
            )
            resp.raise_for_status()
            message_id = resp.json().get('messageId')
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to send email to {recipient_email}: {e}")
            return {'success': False, 'error': str(e), 'email': recipient_email}

        logger.info(f"Email sent to {recipient_email}: {message_id}")
        return {'success': True, 'message_id': message_id, 'email': recipient_email}

import os


def _float_or_none(value: str):
    return float(value) if value else None


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-prod')
    TESTING = False

    # Exposure Events
    EXPOSURE_HOST = os.getenv('EXPOSURE_HOST', 'https://baseball.exposureevents.com')
    EXPOSURE_API_PREFIX = os.getenv('EXPOSURE_API_PREFIX', '/api/v1')
    EXPOSURE_USERNAME = os.getenv('EXPOSURE_USERNAME', '')
    EXPOSURE_PASSWORD = os.getenv('EXPOSURE_PASSWORD', '')
    EXPOSURE_TIMEOUT = _float_or_none(os.getenv('EXPOSURE_TIMEOUT', '30'))

    # Stripe
    STRIPE_SECRET_KEY = os.getenv('STRIPE_SECRET_KEY', '')
    STRIPE_PUBLIC_KEY = os.getenv('STRIPE_PUBLIC_KEY', '')
    STRIPE_WEBHOOK_SECRET = os.getenv('STRIPE_WEBHOOK_SECRET', '')
    STRIPE_PRICE_ID = os.getenv('STRIPE_PRICE_ID', 'price_1SQOyhPIlfT968CUdrbeDRTm')
    DEFAULT_ORIGIN = os.getenv('DEFAULT_ORIGIN', 'http://localhost:3000')

    # Google Sheets
    GOOGLE_SHEETS_SPREADSHEET_ID = os.getenv('GOOGLE_SHEETS_SPREADSHEET_ID', '')
    GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY = os.getenv('GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY', '')

    # Brevo transactional email
    BREVO_API_KEY = os.getenv('BREVO_API_KEY', '')
    SENDER_EMAIL = os.getenv('SENDER_EMAIL', 'noreply@dc34memorial.com')
    SENDER_NAME = os.getenv('SENDER_NAME', 'DC34 Memorial Invitational')
    BCC_EMAIL = os.getenv('BCC_EMAIL', '')


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    DEBUG = False
    TESTING = True
    EXPOSURE_HOST = 'https://exposure.test'
    EXPOSURE_USERNAME = 'director'
    EXPOSURE_PASSWORD = 'secret'
    STRIPE_SECRET_KEY = 'sk_test_dummy'
    STRIPE_PUBLIC_KEY = 'pk_test_dummy'
    STRIPE_WEBHOOK_SECRET = ''
    GOOGLE_SHEETS_SPREADSHEET_ID = ''
    GOOGLE_SHEETS_SERVICE_ACCOUNT_KEY = ''
    BREVO_API_KEY = ''


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

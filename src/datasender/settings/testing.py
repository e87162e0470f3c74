SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

IDENTITY_PROVIDER = "local"
FIREBASE_API_KEY = ""
AUTH_TIMEOUT_SECONDS = 1.0
DEMO_ACCOUNT = "tester@example.com:secret123:Test User"

DELIVERY_BACKEND = "log"
SMTP_HOST = "localhost"
SMTP_PORT = 25
SMTP_USER = ""
SMTP_PASSWORD = ""
SMTP_USE_TLS = False
MAIL_FROM = "datasender@example.com"
REPORT_RECIPIENTS = ["reports@example.com"]

SUBMISSION_TIMEOUT_SECONDS = 2.0
MAX_ATTACHMENTS = 10
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024

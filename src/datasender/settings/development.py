import os

from . import env_flag, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# "local" keeps accounts in memory; "firebase" talks to the hosted provider
IDENTITY_PROVIDER = os.getenv("IDENTITY_PROVIDER", "local")
FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "")
AUTH_TIMEOUT_SECONDS = float(os.getenv("AUTH_TIMEOUT_SECONDS", "10"))
# "email:password:name", seeded into the local provider on startup
DEMO_ACCOUNT = os.getenv("DEMO_ACCOUNT", "demo@example.com:demo123:Demo User")

# "log" only writes submissions to the log; "smtp" emails them
DELIVERY_BACKEND = os.getenv("DELIVERY_BACKEND", "log")
SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = env_flag("SMTP_USE_TLS", "1")
MAIL_FROM = os.getenv("MAIL_FROM", "datasender@localhost")
REPORT_RECIPIENTS = env_list("REPORT_RECIPIENTS")

SUBMISSION_TIMEOUT_SECONDS = float(os.getenv("SUBMISSION_TIMEOUT_SECONDS", "30"))
MAX_ATTACHMENTS = int(os.getenv("MAX_ATTACHMENTS", "10"))
MAX_ATTACHMENT_BYTES = int(os.getenv("MAX_ATTACHMENT_BYTES", str(10 * 1024 * 1024)))

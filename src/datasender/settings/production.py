import os

from . import env_flag, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

IDENTITY_PROVIDER = os.getenv("IDENTITY_PROVIDER", "firebase")
FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "")
AUTH_TIMEOUT_SECONDS = float(os.getenv("AUTH_TIMEOUT_SECONDS", "10"))
DEMO_ACCOUNT = ""

DELIVERY_BACKEND = os.getenv("DELIVERY_BACKEND", "smtp")
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = env_flag("SMTP_USE_TLS", "1")
MAIL_FROM = os.getenv("MAIL_FROM", "")
REPORT_RECIPIENTS = env_list("REPORT_RECIPIENTS")

SUBMISSION_TIMEOUT_SECONDS = float(os.getenv("SUBMISSION_TIMEOUT_SECONDS", "30"))
MAX_ATTACHMENTS = int(os.getenv("MAX_ATTACHMENTS", "10"))
MAX_ATTACHMENT_BYTES = int(os.getenv("MAX_ATTACHMENT_BYTES", str(10 * 1024 * 1024)))

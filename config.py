import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./auth.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_CLUSTER = bool(data.get("REDIS_CLUSTER", False))
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Sessions
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "auth_session")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", True))
    SESSION_EXPIRES_DAYS = data.get("SESSION_EXPIRES_DAYS", 30)

    # Secret tokens
    EMAIL_VERIFICATION_CODE_LENGTH = data.get("EMAIL_VERIFICATION_CODE_LENGTH", 8)
    EMAIL_VERIFICATION_EXPIRES_MINUTES = data.get("EMAIL_VERIFICATION_EXPIRES_MINUTES", 15)
    PASSWORD_RESET_EXPIRES_HOURS = data.get("PASSWORD_RESET_EXPIRES_HOURS", 2)
    PASSWORD_RESET_URL = data.get(
        "PASSWORD_RESET_URL", "http://localhost:5173/auth/password-reset/{token}"
    )

    # Password strength
    PASSWORD_BREACH_CHECK_ENABLED = bool(data.get("PASSWORD_BREACH_CHECK_ENABLED", True))
    PWNED_PASSWORDS_URL = data.get(
        "PWNED_PASSWORDS_URL", "https://api.pwnedpasswords.com/range/"
    )
    PWNED_PASSWORDS_TIMEOUT_SECONDS = data.get("PWNED_PASSWORDS_TIMEOUT_SECONDS", 5)

    # Passkeys (WebAuthn)
    WEBAUTHN_RP_ID = data.get("WEBAUTHN_RP_ID", "localhost")
    WEBAUTHN_ORIGINS = data.get("WEBAUTHN_ORIGINS", ["http://localhost:5173"])
    PASSKEY_CHALLENGE_EXPIRES_SECONDS = data.get("PASSKEY_CHALLENGE_EXPIRES_SECONDS", 300)

    # Two-factor (TOTP)
    TOTP_ISSUER = data.get("TOTP_ISSUER", "Auth Core")

    # Login throttling
    LOGIN_THROTTLE_TIMEOUT_SECONDS = data.get(
        "LOGIN_THROTTLE_TIMEOUT_SECONDS", [1, 2, 4, 8, 16, 30, 60, 180, 300, 600]
    )
    LOGIN_THROTTLE_GRACE = data.get("LOGIN_THROTTLE_GRACE", 5)
    LOGIN_THROTTLE_CUTOFF_SECONDS = data.get("LOGIN_THROTTLE_CUTOFF_SECONDS", 24 * 60 * 60)
    LOGIN_ACCOUNT_THROTTLE_GRACE = data.get("LOGIN_ACCOUNT_THROTTLE_GRACE", 20)

    # Token buckets
    EMAIL_VERIFICATION_BUCKET_MAX = data.get("EMAIL_VERIFICATION_BUCKET_MAX", 5)
    EMAIL_VERIFICATION_BUCKET_INTERVAL_SECONDS = data.get(
        "EMAIL_VERIFICATION_BUCKET_INTERVAL_SECONDS", 30 * 60
    )
    EMAIL_RESEND_BUCKET_MAX = data.get("EMAIL_RESEND_BUCKET_MAX", 5)
    EMAIL_RESEND_BUCKET_INTERVAL_SECONDS = data.get("EMAIL_RESEND_BUCKET_INTERVAL_SECONDS", 60)
    PASSWORD_RESET_BUCKET_MAX = data.get("PASSWORD_RESET_BUCKET_MAX", 3)
    PASSWORD_RESET_BUCKET_INTERVAL_SECONDS = data.get(
        "PASSWORD_RESET_BUCKET_INTERVAL_SECONDS", 60 * 60
    )
    TWO_FACTOR_BUCKET_MAX = data.get("TWO_FACTOR_BUCKET_MAX", 5)
    TWO_FACTOR_BUCKET_INTERVAL_SECONDS = data.get("TWO_FACTOR_BUCKET_INTERVAL_SECONDS", 60)

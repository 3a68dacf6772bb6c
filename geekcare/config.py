import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./geekcare.db")

# Supabase Auth Configuration
# Access tokens are verified locally; either the legacy HS256 JWT secret or the
# project's asymmetric signing keys (JWKS) can be used.
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")
if not SUPABASE_JWT_SECRET and not SUPABASE_URL:
    import warnings

    warnings.warn(
        "SUPABASE_JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    SUPABASE_JWT_SECRET = "INSECURE-DEV-JWT-SECRET-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Object storage (S3-compatible: Supabase Storage S3 endpoint or Cloudflare R2)
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_REGION = os.getenv("STORAGE_REGION", "auto")
STORAGE_BUCKET_NAME = os.getenv("STORAGE_BUCKET_NAME", "medical-files")

# Payment gateway - only the key secret is needed to verify completion callbacks
PAYMENT_GATEWAY_KEY_SECRET = os.getenv("PAYMENT_GATEWAY_KEY_SECRET")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

# Appointment times are stored as naive wall-clock times in this zone
CLINIC_TIMEZONE = os.getenv("CLINIC_TIMEZONE", "UTC")
DEFAULT_CONSULTATION_MINUTES = int(os.getenv("DEFAULT_CONSULTATION_MINUTES", "30"))

# Frontend base URL (CORS default)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

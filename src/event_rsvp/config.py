"""Configuration loader for Event RSVP with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)

MIB = 1024 * 1024

# Configuration dictionary - set once at initialization
config = {
    "database_url": os.getenv("DATABASE_URL"),
    "port": int(os.getenv("PORT", "8080")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "environment": os.getenv("ENVIRONMENT", "development"),
    # Which sink the form controller submits to: "database" or "google_form"
    "registration_sink": os.getenv("REGISTRATION_SINK", "database"),
    "api_base_url": os.getenv("API_BASE_URL", "http://localhost:8080"),
    # Proof-of-payment hosting (GitHub contents API)
    "github_token": os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT"),
    "github_owner": os.getenv("GITHUB_OWNER"),
    "github_repo": os.getenv("GITHUB_REPO"),
    "google_form_id": os.getenv("GOOGLE_FORM_ID"),
    "inline_proof_max_bytes": int(os.getenv("INLINE_PROOF_MAX_BYTES", 5 * MIB)),
    "hosted_proof_max_bytes": int(os.getenv("HOSTED_PROOF_MAX_BYTES", 8 * MIB)),
}

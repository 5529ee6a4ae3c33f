"""
Configuration management for the speaking tutor gateway.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """Configuration class for the gateway."""

    # Provider
    GEMINI_API_URL = os.getenv("GEMINI_API_URL", "")
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    LLM_BACKEND = os.getenv("LLM_BACKEND", "gemini")
    STRICT_ASSESSMENT = _env_bool("STRICT_ASSESSMENT", "false")

    # Server
    PORT = int(os.getenv("PORT", "4000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path(__file__).parent / "uploads"))

    # Rate limiting (per client address)
    RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "60"))
    RATE_LIMIT_WINDOW_S = int(os.getenv("RATE_LIMIT_WINDOW_S", "3600"))
    TRUST_PROXY = _env_bool("TRUST_PROXY", "true")

    @classmethod
    def missing(cls) -> list:
        """Names of required settings that are not set."""
        required = ["GEMINI_API_URL", "GEMINI_API_KEY"]
        return [key for key in required if not getattr(cls, key)]

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        missing = cls.missing()
        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Copy .env.example to .env and set them, then restart the server")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Provider URL: {'✓ Set' if Config.GEMINI_API_URL else '✗ Missing'}")
    print(f"  Provider Key: {'✓ Set' if Config.GEMINI_API_KEY else '✗ Missing'}")
    print(f"  LLM Backend: {Config.LLM_BACKEND}")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")

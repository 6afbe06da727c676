import os
from dotenv import load_dotenv

load_dotenv()

_PROMPTS_DIR = os.path.join(os.path.dirname(__file__), "llm", "prompts")


class Settings:
    # Optional shared key for the turn endpoints; empty disables the check.
    API_KEY: str = os.getenv("API_KEY", "")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Reply generation (Gemini Developer API, REST)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-flash-latest")
    GEMINI_BASE_URL: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    ).rstrip("/")
    # Single request, no retries: this is the whole budget for one reply.
    GEMINI_TIMEOUT_SEC: float = float(os.getenv("GEMINI_TIMEOUT_SEC", "15"))
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.8"))
    GEMINI_TOP_P: float = float(os.getenv("GEMINI_TOP_P", "0.9"))
    GEMINI_TOP_K: int = int(os.getenv("GEMINI_TOP_K", "40"))
    GEMINI_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "200"))

    PERSONA_PROMPT_PATH: str = os.getenv(
        "PERSONA_PROMPT_PATH", os.path.join(_PROMPTS_DIR, "persona_system.txt")
    )

    # Redact message bodies in structured logs
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"


settings = Settings()

# prepwise/core/config.py
from pydantic_settings import BaseSettings
from typing import Optional, List, Union

class Settings(BaseSettings):
    # API Settings
    PROJECT_NAME: str = "PrepWise API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Interview structures, candidate profiles and personalized interview generation"

    # Text generation
    OPENAI_API_KEY: str = ""
    GENERATION_MODEL: str = "gpt-4o-mini"
    GENERATION_TEMPERATURE: float = 0.7
    GENERATION_MAX_TOKENS: int = 2000

    # JWT Configuration
    SECRET_KEY: str = "your-secret-key-here"  # Change in production
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 10080  # 7 days
    FIREBASE_AUTH_ENABLED: bool = False

    # Firebase Configuration (empty private key -> application default credentials)
    FIREBASE_CONFIG__type: str = "service_account"
    FIREBASE_CONFIG__project_id: str = ""
    FIREBASE_CONFIG__private_key_id: str = ""
    FIREBASE_CONFIG__private_key: str = ""
    FIREBASE_CONFIG__client_email: str = ""
    FIREBASE_CONFIG__client_id: str = ""
    FIREBASE_CONFIG__auth_uri: str = "https://accounts.google.com/o/oauth2/auth"
    FIREBASE_CONFIG__token_uri: str = "https://oauth2.googleapis.com/token"
    FIREBASE_CONFIG__auth_provider_x509_cert_url: str = "https://www.googleapis.com/oauth2/v1/certs"
    FIREBASE_CONFIG__client_x509_cert_url: str = ""

    # Collections
    MOCK_STRUCTURES_COLLECTION: str = "mock_interview_structures"
    JOB_STRUCTURES_COLLECTION: str = "job_interview_structures"
    MOCK_INTERVIEWS_COLLECTION: str = "mock_interviews"
    JOB_INTERVIEWS_COLLECTION: str = "job_interviews"
    PROFILES_COLLECTION: str = "profiles"
    USERS_COLLECTION: str = "users"

    # Interview structure limits
    MIN_TOTAL_QUESTIONS: int = 5
    MAX_TOTAL_QUESTIONS: int = 20

    # CORS Settings
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = ["*"]

    # Application Settings
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @property
    def firebase_credentials(self) -> Optional[dict]:
        """Service-account credentials, or None to fall back to application default credentials"""
        if not self.FIREBASE_CONFIG__private_key:
            return None
        return {
            "type": self.FIREBASE_CONFIG__type,
            "project_id": self.FIREBASE_CONFIG__project_id,
            "private_key_id": self.FIREBASE_CONFIG__private_key_id,
            "private_key": self.FIREBASE_CONFIG__private_key.replace("\\n", "\n"),
            "client_email": self.FIREBASE_CONFIG__client_email,
            "client_id": self.FIREBASE_CONFIG__client_id,
            "auth_uri": self.FIREBASE_CONFIG__auth_uri,
            "token_uri": self.FIREBASE_CONFIG__token_uri,
            "auth_provider_x509_cert_url": self.FIREBASE_CONFIG__auth_provider_x509_cert_url,
            "client_x509_cert_url": self.FIREBASE_CONFIG__client_x509_cert_url
        }

    @property
    def cors_origins(self) -> List[str]:
        """Get CORS origins as a list"""
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            if self.BACKEND_CORS_ORIGINS == "*":
                return ["*"]
            return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",")]
        return self.BACKEND_CORS_ORIGINS

    def structure_collection(self, category: str) -> str:
        return self.JOB_STRUCTURES_COLLECTION if category == "job" else self.MOCK_STRUCTURES_COLLECTION

    def interview_collection(self, category: str) -> str:
        return self.JOB_INTERVIEWS_COLLECTION if category == "job" else self.MOCK_INTERVIEWS_COLLECTION

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_parse_none_str = None

# Global settings instance
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get settings instance (singleton pattern)"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional, List, Union


class Settings(BaseSettings):
    # Database (unset = degraded mode, every store access fails with Unavailable)
    database_url: Optional[str] = None
    database_echo: bool = False
    
    # Firebase
    firebase_project_id: Optional[str] = None
    firebase_credentials_path: Optional[str] = None
    
    # Owner account, promoted to admin on first login
    owner_uid: Optional[str] = None
    
    # API
    api_v1_str: str = "/api/v1"
    
    # Environment
    environment: str = "development"
    debug: bool = True
    
    # Billing
    subscription_period_days: int = 30
    
    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]
    
    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from environment variable (comma-separated) or use default list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v
    
    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()

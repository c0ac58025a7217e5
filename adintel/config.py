from pydantic_settings import BaseSettings
from typing import Optional
import os


class Settings(BaseSettings):
    # Meta App Credentials (per-account access tokens live on the user row)
    meta_app_id: Optional[str] = None
    meta_app_secret: Optional[str] = None
    meta_api_version: str = "v18.0"
    
    # Database
    database_url: str = "sqlite:///./ad_intelligence.db"
    
    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4-turbo-preview"
    openai_vision_model: str = "gpt-4-vision-preview"
    
    # Billing tiers
    free_tier_analysis_limit: int = 5
    
    # Scheduler
    enable_scheduler: bool = True
    import_hour: int = 1
    
    # Application
    environment: str = "development"
    api_port: int = int(os.getenv("PORT", 8000))  # Use PORT from Render
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

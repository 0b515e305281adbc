"""
Ad Creative Optimizer Configuration
Load settings from environment variables
"""
from functools import lru_cache
from typing import Optional, List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    # ============================================
    # Application Settings
    # ============================================
    APP_NAME: str = "Ad Creative Optimizer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production
    LOG_LEVEL: str = "INFO"
    
    # ============================================
    # Database Settings
    # ============================================
    POSTGRES_USER: str = "postgres"
    POSTGRES_PWD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "adcreative"
    DATABASE_URL: Optional[str] = None
    
    @property
    def database_url(self) -> str:
        """Get database URL, construct from parts if not provided"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PWD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
    
    # ============================================
    # CORS Settings
    # ============================================
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    
    # ============================================
    # Meta (Facebook) Marketing API Settings
    # ============================================
    META_ACCESS_TOKEN: Optional[str] = None
    META_API_VERSION: str = "v18.0"
    META_API_BASE_URL: str = "https://graph.facebook.com"
    META_API_TIMEOUT_SECONDS: float = 30.0
    
    @property
    def meta_api_url(self) -> str:
        return f"{self.META_API_BASE_URL}/{self.META_API_VERSION}"
    
    # ============================================
    # Text Generation Settings
    # ============================================
    # Providers are tried in order; any OpenAI-compatible chat completions API works
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_ORGANIZATION: Optional[str] = None
    OPENAI_BASE_URL: str = "https://api.openai.com"
    TOGETHER_API_KEY: Optional[str] = None
    TOGETHER_BASE_URL: str = "https://api.together.xyz"
    TEXT_GENERATION_MODEL: str = "mistralai/Mistral-7B-Instruct-v0.1"
    TEXT_GENERATION_TIMEOUT_SECONDS: float = 60.0
    
    # ============================================
    # Optimizer Settings
    # ============================================
    OPTIMIZER_HISTORY_LIMIT: int = 100  # records considered per optimize call
    RECOMMENDATION_HISTORY_LIMIT: int = 50
    DEFAULT_EXPLORATION_RATE: float = 0.2
    DEFAULT_LEARNING_RATE: float = 0.1
    
    # Product context used in generation prompts when the caller sends none
    DEFAULT_PRODUCT_NAME: str = "Teal Shirt"
    DEFAULT_PRODUCT_PRICE: str = "$10"
    DEFAULT_PRODUCT_CATEGORY: str = "Fashion"
    DEFAULT_TARGET_AUDIENCE: str = "Fashion-conscious consumers aged 18-35"
    
    # ============================================
    # Scheduler Settings
    # ============================================
    SCHEDULER_ENABLED: bool = False
    INGEST_AD_ACCOUNT_IDS: List[str] = []
    INGEST_INTERVAL_MINUTES: int = 60
    INGEST_DATE_RANGE: str = "last_30d"
    AB_TEST_SWEEP_INTERVAL_MINUTES: int = 30
    
    @property
    def text_generation_providers(self) -> List[dict]:
        """
        Configured text generation providers, in fallback order.
        Providers without an API key are skipped.
        """
        providers = []
        if self.OPENAI_API_KEY:
            providers.append({
                "name": "openai",
                "base_url": self.OPENAI_BASE_URL,
                "api_key": self.OPENAI_API_KEY,
                "organization": self.OPENAI_ORGANIZATION,
            })
        if self.TOGETHER_API_KEY:
            providers.append({
                "name": "togetherai",
                "base_url": self.TOGETHER_BASE_URL,
                "api_key": self.TOGETHER_API_KEY,
                "organization": None,
            })
        return providers

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields from .env


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Global settings instance
settings = get_settings()

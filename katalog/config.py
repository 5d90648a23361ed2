"""
Uygulama ayarları.
Ortam değişkenleri ve .env dosyasından okunur.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Uygulama
    APP_NAME: str = "B2B Ürün Kataloğu"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"                         # DEBUG=True iken yok sayılır

    # Arama
    SEARCH_LOG_DELAY_SECONDS: float = 1.0          # arama kaydı için bekleme
    UNSUCCESSFUL_SEARCH_DELAY_SECONDS: float = 2.0  # sonuçsuz arama kaydı için bekleme
    MIN_LOGGED_QUERY_LENGTH: int = 3
    SUGGESTION_THRESHOLD: float = 0.6
    MAX_SUGGESTIONS: int = 3

    # Katalog
    TOP_CHEAPEST_COUNT: int = 5
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_SORT: str = "stock_code"
    MAX_COMPARE_ITEMS: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()

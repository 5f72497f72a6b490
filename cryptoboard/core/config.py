from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

DedupKey = Literal["url", "link", "title"]

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    db_path: str = Field(default="./data/cryptoboard.db", alias="DB_PATH")
    port: int = Field(default=8082, alias="PORT")

    search_query: str = Field(default="cryptocurrency", alias="SEARCH_QUERY")

    guardian_api_key: str = Field(default="test", alias="GUARDIAN_API_KEY")
    guardian_base_url: str = Field(default="https://content.guardianapis.com/search", alias="GUARDIAN_BASE_URL")
    guardian_page_size: int = Field(default=200, alias="GUARDIAN_PAGE_SIZE")
    guardian_dedup_key: DedupKey = Field(default="url", alias="GUARDIAN_DEDUP_KEY")

    times_api_key: str = Field(default="default_nytimes_key", alias="NYTIMES_API_KEY")
    times_base_url: str = Field(
        default="https://api.nytimes.com/svc/search/v2/articlesearch.json", alias="NYTIMES_BASE_URL"
    )
    times_dedup_key: DedupKey = Field(default="url", alias="NYTIMES_DEDUP_KEY")

    # "client_id:client_secret", sent as HTTP Basic auth on the token exchange
    social_client_id_secret: str = Field(default="client:secret", alias="REDDIT_CLIENT_ID_SECRET")
    social_username: str = Field(default="default_reddit_username", alias="REDDIT_USERNAME")
    social_password: str = Field(default="default_reddit_password", alias="REDDIT_PASSWORD")
    social_token_url: str = Field(default="https://www.reddit.com/api/v1/access_token", alias="REDDIT_TOKEN_URL")
    social_search_url: str = Field(default="https://oauth.reddit.com/search", alias="REDDIT_BASE_URL")
    social_search_limit: int = Field(default=100, alias="REDDIT_SEARCH_LIMIT")
    social_dedup_key: DedupKey = Field(default="link", alias="REDDIT_DEDUP_KEY")

    cache_ttl_seconds: int = Field(default=3600, alias="CACHE_TTL_SECONDS")
    refresh_interval_minutes: int = Field(default=60, alias="REFRESH_INTERVAL_MINUTES")
    trending_limit: int = Field(default=20, alias="TRENDING_LIMIT")

    price_url: str = Field(
        default="https://api.coingecko.com/api/v3/coins/{coin}/market_chart", alias="PRICE_URL"
    )
    price_coin: str = Field(default="bitcoin", alias="PRICE_COIN")
    price_days: int = Field(default=30, alias="PRICE_DAYS")
    projection_days: int = Field(default=7, alias="PROJECTION_DAYS")

    request_timeout_seconds: int = Field(default=20, alias="REQUEST_TIMEOUT_SECONDS")
    user_agent: str = Field(default="cryptoboard/1.0", alias="USER_AGENT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")

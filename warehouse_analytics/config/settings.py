"""
Sales Warehouse Analytics
Centralized Configuration Management

Configuration is loaded with Pydantic settings from environment variables
and an optional ``.env`` file, validated and cached for the process.
"""

from functools import lru_cache
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Warehouse database configuration"""

    model_config = SettingsConfigDict(env_prefix="WAREHOUSE_DB_")

    url: str = Field(default="sqlite:///./data/warehouse.db", description="SQLAlchemy database URL")
    echo: bool = Field(default=False, description="Echo SQL queries")
    insert_chunk_size: int = Field(default=5000, description="Rows per INSERT batch during bulk loads")


class DataLakeSettings(BaseSettings):
    """File locations for CSV sources and report outputs"""

    model_config = SettingsConfigDict(env_prefix="DATA_")

    source_path: str = Field(default="./data/csv-files", description="Directory holding the warehouse CSV files")
    output_path: str = Field(default="./data/reports", description="Directory for written reports")
    output_format: str = Field(default="parquet", description="Report file format: parquet or csv")

    customers_file: str = Field(default="gold.dim_customers.csv", description="Customers CSV file name")
    products_file: str = Field(default="gold.dim_products.csv", description="Products CSV file name")
    sales_file: str = Field(default="gold.fact_sales.csv", description="Sales CSV file name")
    null_values: List[str] = Field(
        default=["", "NULL", "null", "None", "NA", "N/A"],
        description="Strings read as null from CSV files",
    )

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Only parquet and csv writers exist"""
        if v.lower() not in ("parquet", "csv"):
            raise ValueError("output_format must be 'parquet' or 'csv'")
        return v.lower()


class MonitoringSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="console", alias="LOG_FORMAT", description="Log format: json or console")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="warehouse-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # API Server
    api_host: str = Field(default="127.0.0.1", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    data_lake: DataLakeSettings = Field(default_factory=DataLakeSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance
    """
    return Settings()

"""
Configuration management for the reservation ledger
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CabinConfig(BaseSettings):
    """Cabin geometry configuration"""
    rows: int = Field(default=40, ge=1)
    columns: str = Field(default="ABCDEF", min_length=1, max_length=26)
    name_max_length: int = Field(default=49, ge=1)

    model_config = SettingsConfigDict(env_prefix="CABIN_")


class DatasetConfig(BaseSettings):
    """Passenger dataset configuration"""
    path: str = Field(default="Flite_passenger_Dataset.csv")
    delimiter: str = Field(default=",", min_length=1, max_length=1)
    encoding: str = Field(default="utf-8")
    has_header: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="DATASET_")


class PerformanceConfig(BaseSettings):
    """Performance thresholds configuration"""
    max_load_latency: int = Field(default=5000)  # 5 seconds
    max_lookup_latency: int = Field(default=100)
    max_mutation_latency: int = Field(default=100)
    max_operation_latency: int = Field(default=2000)

    model_config = SettingsConfigDict(env_prefix="PERFORMANCE_")


class LoggingConfig(BaseSettings):
    """Logging configuration"""
    level: str = Field(default="WARNING")
    enable_audit: bool = Field(default=True)
    enable_metrics: bool = Field(default=True)
    log_format: str = Field(default="text")  # json or text

    model_config = SettingsConfigDict(env_prefix="LOGGING_")


class Config:
    """Main configuration class"""

    def __init__(self):
        self.cabin = CabinConfig()
        self.dataset = DatasetConfig()
        self.performance = PerformanceConfig()
        self.logging = LoggingConfig()


# Global configuration instance
config = Config()

"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based
configuration of the simulator, the gateway and the dashboard.
"""

from pydantic_settings import BaseSettings
from typing import List


class CBSConfig(BaseSettings):
    """CBS demo stack configuration"""
    
    # Simulator configuration
    simulator_host: str = "0.0.0.0"
    simulator_port: int = 30001
    
    # Gateway configuration
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 3000
    simulator_url: str = "http://localhost:30001"
    proxy_timeout: float = 5.0  # seconds per CBS call
    
    # Dashboard configuration
    dashboard_host: str = "127.0.0.1"
    dashboard_port: int = 3001
    gateway_url: str = "http://localhost:3000"
    
    # CORS
    cors_origins: List[str] = ["*"]
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    # Business rules configuration
    reject_non_positive_amounts: bool = True
    
    environment: str = "development"
    
    class Config:
        env_prefix = "CBS_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = CBSConfig()


def get_config() -> CBSConfig:
    """Get global configuration instance"""
    return config

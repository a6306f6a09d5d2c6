"""Configurações Pydantic Settings para o serviço de carrinho."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    """Configurações da aplicação. Carrega de env e .env.

    Todas as credenciais devem vir via env. Nunca hardcode.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CS_", case_sensitive=False)

    # Flask
    flask_debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    auth_header: str = Field(default="X-Auth-Id", description="Header com a identidade autenticada (auth_id)")

    # DB
    database_url: str = Field(..., description="URL do banco, ex: postgresql+psycopg://user:pass@db:5432/app")
    database_echo: bool = Field(default=False)
    create_schema: bool = Field(default=False, description="Cria as tabelas no bootstrap (dev/SQLite)")

    # Logging
    log_level: str = Field(default="INFO")

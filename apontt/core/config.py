from decimal import Decimal
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações globais do Apontt CRM.
    Lê automaticamente variáveis do arquivo .env.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Projeto
    project_name: str = "Apontt CRM API"
    api_prefix: str = "/api"
    debug: bool = False
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV", "ENVIRONMENT"),
    )
    port: int = 5000

    # Segurança / JWT
    session_secret: str = "dev-secret-key"
    access_token_expire_minutes: int = 720
    algorithm: str = "HS256"

    # Usuário administrador criado no primeiro boot
    admin_username: str = "admin"
    admin_password: Optional[str] = None

    # Banco de dados
    database_url: str = "sqlite:///./apontt.db"

    # CORS
    allowed_origins: List[str] = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # URL pública (links de assinatura e painel do parceiro)
    public_app_url: str = "http://localhost:5000"

    # Links de assinatura: None = links de longa duração
    signature_link_ttl_hours: Optional[int] = None

    # Asaas
    asaas_api_key: Optional[str] = None
    asaas_base_url: Optional[str] = None
    asaas_timeout_seconds: float = 20.0

    # Contratos / comissões
    default_admin_fee_rate: Decimal = Decimal("5.00")
    contract_payment_due_days: int = 7

    # Dados da empresa usados nos modelos de documento
    company_name: str = "Apontt Serviços Financeiros LTDA"
    company_cnpj: str = "00.000.000/0001-00"
    company_address: str = "São Paulo - SP"
    company_email: str = "contato@apontt.com.br"
    document_location: str = "São Paulo"

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def resolved_public_app_url(self) -> str:
        """Resolve a URL pública base usada nos links enviados aos clientes."""
        return (self.public_app_url or "").strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Retorna a instância de configurações globais (cacheada)."""
    return Settings()


settings = get_settings()

# check_asaas.py
# Uso: python scripts/check_asaas.py
# Verifica a conexão com o Asaas usando ASAAS_API_KEY do ambiente (ou do .env).

from apontt.core.config import settings
from apontt.core.exceptions import PaymentProviderError
from apontt.services.asaas import AsaasProvider

if not settings.asaas_api_key:
    raise SystemExit("ASAAS_API_KEY não configurada: o sistema está em modo simulação.")

provider = AsaasProvider(
    settings.asaas_api_key,
    base_url=settings.asaas_base_url,
    timeout_seconds=settings.asaas_timeout_seconds,
)
print(f"Ambiente: {provider.environment} ({provider.base_url})")
try:
    account = provider.get_account()
except PaymentProviderError as exc:
    raise SystemExit(f"Falha na conexão: {exc.message}")

print(f"Conta: {account.get('name') or account.get('companyName')} | E-mail: {account.get('email')}")

import logging
import re
import sys
from pathlib import Path

from apontt.core.config import settings

handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
if settings.log_file:
    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
    handlers=handlers,
)

logger = logging.getLogger('apontt')

_CONTROL_CHARS = re.compile(r"[\r\n\t\x00-\x1f\x7f]+")
_UNSAFE_CHARS = re.compile(r"[<>'\"&]")


def sanitize_for_log(value: object, max_length: int = 200) -> str:
    """Remove quebras de linha e caracteres de marcação de textos enviados pelo usuário."""
    text = _CONTROL_CHARS.sub(" ", str(value))
    text = _UNSAFE_CHARS.sub("", text).strip()
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text

# src/strata_config/logging_config.py
"""
Configuração de logging estruturado para aplicações que usam o Strata Config.

A biblioteca apenas emite eventos em loggers por módulo
(`logging.getLogger(__name__)`); instalar handlers é decisão da aplicação.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from strata_config.settings import get_settings

# Atributos padrão de LogRecord; o restante veio de `extra=`.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class StructuredFormatter(logging.Formatter):
    """Formata cada registro como uma linha JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RESERVED and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str, ensure_ascii=False)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Instala um handler JSON em stdout no logger raiz.

    Args:
        level: Nível de log (DEBUG, INFO, ...). None usa `Settings.log_level`.
    """
    level = level or get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if root_logger.handlers:
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info("Logging configurado", extra={"log_level": level})

import logging
import logging.handlers
import os
import sys
from typing import Optional

from app.core.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or default_settings

    # Preparar directorio de logs
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_file = os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME)

    # Limpiar handlers previos para evitar duplicados en reinicios
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    level = resolve_level(settings.LOG_LEVEL)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Rota por tamaño para que el archivo no crezca sin límite
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    root.setLevel(level)
    root.addHandler(console_handler)
    root.addHandler(file_handler)

    # httpx loguea cada request en INFO; el cliente de TalkJS ya lo hace
    logging.getLogger("httpx").setLevel(logging.WARNING)

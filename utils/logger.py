import logging
import logging.config

from config import CockpitConfig


def configure_logging(config: CockpitConfig) -> logging.Logger:
    """Применить dictConfig из конфигурации приложения"""
    if config.log_to_file:
        config.log_dir.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config.get_logging_config())
    return logging.getLogger("cockpit")

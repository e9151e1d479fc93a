from datetime import timedelta
import logging
from pathlib import Path
import sys

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict


logging.getLogger("aiohttp").setLevel(logging.INFO)
logging.getLogger("asyncio").setLevel(logging.INFO)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

for handler in logging.root.handlers[:]:
    logging.root.removeHandler(handler)


loggers = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "asyncio",
    "aiohttp.client",
)

for logger_name in loggers:
    logging_logger = logging.getLogger(logger_name)
    logging_logger.handlers = []
    logging_logger.propagate = True


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PASSFORGE_")

    environment: str = "prod"
    log_level: str | None = None
    log_file_path: Path | None = None

    # Adversary model for crack time estimates
    guesses_per_second: float = 1e9

    breach_range_url: str = "https://api.pwnedpasswords.com/range"
    breach_request_timeout_seconds: float = 10.0
    breach_user_agent: str = "passforge-breach-check"
    breach_add_padding: bool = False

    common_passwords_file: Path | None = None
    keyboard_patterns_file: Path | None = None

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    @property
    def is_dev(self) -> bool:
        return self.environment == "dev"


config = Config()

if not config.log_level:
    config.log_level = "DEBUG" if config.is_dev else "INFO"


class InterceptHandler(logging.Handler):
    def emit(self, record):
        # Get corresponding Loguru level
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller to get correct stack depth
        frame, depth = logging.currentframe(), 2
        while frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

logger.remove()
logger.add(
    sys.stderr,
    level=config.log_level,
    backtrace=True,
    diagnose=False,
)

if config.log_file_path is not None:
    config.log_file_path.parent.mkdir(exist_ok=True, parents=True)
    logger.add(
        config.log_file_path.resolve(),
        rotation="10 MB",
        retention=timedelta(days=7),
        backtrace=True,
        diagnose=False,
        level=config.log_level,
    )

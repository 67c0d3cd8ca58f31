import logging
import logging.config
import yaml, os, sys
from importlib import resources
from pathlib import Path

# shipped as package data next to this module
DEFAULT_LOGGING_CONFIG = resources.files(__package__).joinpath("logging.yml")


def log_level_from_env():
    levels = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    return levels.get(os.environ.get("SINPREC_LOG_LEVEL", "INFO").upper(), logging.INFO)


def logging_config_path():
    override = os.environ.get("SINPREC_LOGGING_CONFIG")
    return Path(override) if override else DEFAULT_LOGGING_CONFIG


def _configure_fallback_console():
    # stdout carries the report records; keep log lines on stderr
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def _prepare_logging_paths(config: dict) -> dict:
    handlers = config.get("handlers", {}) or {}
    for h in handlers.values():
        if not isinstance(h, dict):
            continue
        # dictConfig canonical format uses "filename" for file handlers
        filename = h.get("filename")
        if filename:
            expanded = os.path.expanduser(os.path.expandvars(str(filename)))
            expanded = os.path.normpath(expanded)
            parent = os.path.dirname(expanded)
            if parent:
                os.makedirs(parent, exist_ok=True)
            h["filename"] = expanded
    return config


class RunLogger:
    _logger = None
    _initialized = False

    @classmethod
    def _initialize(cls):
        if not cls._initialized:
            path = logging_config_path()
            try:
                with path.open("r") as f:
                    config = yaml.safe_load(f.read())
                config = _prepare_logging_paths(config)
                logging.config.dictConfig(config)
            except Exception as e:
                _configure_fallback_console()
                logging.getLogger(__name__).warning(
                    f"[RunLogger] Falling back to console logging; failed to apply {path}: {e}"
                )
            cls._logger = logging.getLogger("sinprec")
            cls._initialized = True
            cls._logger.setLevel(log_level_from_env())

    @classmethod
    def reset(cls):
        cls._logger = None
        cls._initialized = False

    @classmethod
    def debug(cls, st):
        cls._initialize()
        cls._logger.debug(st)

    @classmethod
    def info(cls, st):
        cls._initialize()
        cls._logger.info(st)

    @classmethod
    def warning(cls, st):
        cls._initialize()
        cls._logger.warning(st)

    @classmethod
    def error(cls, st):
        cls._initialize()
        cls._logger.error(st)

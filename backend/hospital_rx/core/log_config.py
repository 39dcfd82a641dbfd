"""Module: log_config."""

import logging.config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_logging_config(level: str = "INFO") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "hospital_rx": {"level": level.upper(), "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING"},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


# Apply the process-wide logging configuration once at startup.
def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(level))

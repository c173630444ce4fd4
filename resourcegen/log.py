import logging.config


def configure_logging(debug: bool = False) -> None:
    """Install the JSON-line console logging used by the API and the CLI."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": "DEBUG" if debug else "INFO", "handlers": ["console"]},
        }
    )

"""Application entry point for the powerdash server."""

from powerdash.app import App
from powerdash.config import Config
from powerdash.logging import setup_logging
from powerdash.web.runner import run_server


def main() -> None:
    config = Config()  # Raises pydantic.ValidationError when controller settings are missing
    setup_logging(config.log_level, config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()

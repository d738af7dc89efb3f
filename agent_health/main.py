"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service.
"""

import argparse

import uvicorn

from agent_health.bootstrap import bootstrap_create_application
from agent_health.config import config_load_settings


def main() -> None:
    """Start the API server with validated startup configuration.

    Command-line flags take precedence over environment variables and dotenv.
    Uvicorn stops accepting connections and exits cleanly on SIGTERM/SIGINT.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Agent Health API runtime entrypoint")
    argument_parser.add_argument("--host", dest="application_host", type=str, help="Bind address override")
    argument_parser.add_argument("--port", dest="application_port", type=int, help="Listening port override")
    argument_parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        choices=("critical", "error", "warning", "info", "debug"),
        help="Log verbosity override",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings(
        application_host=parsed_arguments.application_host,
        application_port=parsed_arguments.application_port,
        log_level=parsed_arguments.log_level,
    )
    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()

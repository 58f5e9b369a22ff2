from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    controller_url: str  # Base URL of the management controller, e.g. https://10.0.0.5
    controller_username: str
    controller_password: str
    controller_system_path: str = "/redfish/v1/Systems/System.Embedded.1"
    controller_timeout: float = 5.0  # Seconds before a controller call fails as unreachable
    # Management controllers usually ship self-signed certificates. Only the controller client honours this flag.
    controller_verify_tls: bool = False
    database_path: str = "./data/powerdash.db"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    log_level: str = "INFO"
    debug: bool = False
    cookie_secure: bool = False  # Set to True when served over HTTPS

    model_config = {
        "env_file": [".env"],
        "env_prefix": "POWERDASH_",
        "extra": "ignore",
    }

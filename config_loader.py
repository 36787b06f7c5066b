import os

import toml
from models import Config, DashboardConfig, ServerConfig, UpstreamConfig

# Environment variables that override config.toml, as (section, field)
ENV_OVERRIDES = {
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
    "WEATHER_API_KEY": ("upstream", "api_key"),
    "WEATHER_API_URL": ("upstream", "base_url"),
    "WEATHER_PROXY_URL": ("dashboard", "proxy_url"),
}


class ConfigError(Exception):
    pass


def load_config(config_path: str = None) -> Config:
    """Load configuration from a TOML file and the environment.

    A missing file is not an error: every setting has a default, and the
    upstream credential normally arrives through WEATHER_API_KEY.
    """
    config_path = config_path or os.getenv("CONFIG_PATH", "config.toml")
    config_data = {}
    try:
        if os.path.exists(config_path):
            with open(config_path, "r") as f:
                config_data = toml.load(f)

        sections = {
            "server": dict(config_data.get("server", {})),
            "upstream": dict(config_data.get("upstream", {})),
            "dashboard": dict(config_data.get("dashboard", {})),
        }
        for env_name, (section, field) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                sections[section][field] = value

        return Config(
            server=ServerConfig(**sections["server"]),
            upstream=UpstreamConfig(**sections["upstream"]),
            dashboard=DashboardConfig(**sections["dashboard"]),
        )

    except Exception as e:
        # Never echo the parsed sections: they may hold the credential
        raise ConfigError(f"Failed to load config from {config_path}: {type(e).__name__}") from e

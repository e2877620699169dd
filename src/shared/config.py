import json
from pathlib import Path
from typing import Dict, Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Global configuration settings for the KV speed benchmark."""

    host: str = "localhost"
    redis_port: int = 6379
    dragonfly_port: int = 6380
    redis_label: str = "Redis"
    dragonfly_label: str = "DragonflyDB"
    socket_connect_timeout: float = 5.0
    socket_timeout: Optional[float] = None
    scenario_timeout: Optional[float] = None
    bench_dir: Path = Path("bench")
    log_level: str = "INFO"
    library_log_levels: Dict[str, str] = {
        "redis": "WARNING",
        "matplotlib": "WARNING",
        "PIL": "WARNING"
    }

    model_config = SettingsConfigDict(
        env_prefix='KV_BENCH_',
    )

    @classmethod
    def load_config_from_json(cls) -> Dict[str, Any]:
        """Load configuration from config.json file."""
        config_path = Path("config.json")
        if config_path.exists():
            with open(config_path, 'r') as f:
                config = json.load(f)
                if "bench_dir" in config:
                    config["bench_dir"] = Path(config["bench_dir"])
                return config
        return {}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """
        Customise the sources for settings.

        Order of precedence (highest to lowest):
        1. Environment variables
        2. Init settings (kwargs passed to constructor)
        3. JSON config file
        4. Default values
        """
        def json_source():
            return cls.load_config_from_json()

        return (
            env_settings,
            init_settings,
            json_source,
        )

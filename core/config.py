"""
Configuration for the Context Bridge server.

Settings come from environment variables; a .env file in the working
directory (or any parent) is loaded first.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SEED_PATH = Path(__file__).parent.parent / 'store' / 'seed_data.yaml'


@dataclass
class AppConfig:
    """Runtime settings for the API server."""
    host: str
    port: int
    env: str
    log_level: str
    seed_data_path: Optional[Path]
    cors_origins: str

    @property
    def is_production(self) -> bool:
        return self.env == 'production'


def load_config() -> AppConfig:
    """
    Build the application configuration from the environment.

    An empty SEED_DATA_PATH starts the server with an empty store.
    """
    seed_env = os.getenv('SEED_DATA_PATH')
    if seed_env is None:
        seed_path = DEFAULT_SEED_PATH
    elif seed_env.strip():
        seed_path = Path(seed_env.strip())
    else:
        seed_path = None

    return AppConfig(
        host=os.getenv('HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', '5000')),
        env=os.getenv('FLASK_ENV', 'development'),
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        seed_data_path=seed_path,
        cors_origins=os.getenv('CORS_ORIGINS', '*'),
    )

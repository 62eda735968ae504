"""Configuration management for the Basket shopping list server."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Shopping list behaviour
DEFAULT_USER: Final[str] = os.getenv('DEFAULT_USER', 'default')
# hide | mark | off
DEFAULT_PANTRY_MODE: Final[str] = os.getenv('DEFAULT_PANTRY_MODE', 'mark').lower()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('BASKET_DATA_DIR', str(BASE_DIR / 'data'))).resolve()

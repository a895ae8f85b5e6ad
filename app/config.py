"""Configuration management."""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent.parent

# Load .env file if it exists
env_file = BASE_DIR / '.env'
if env_file.exists():
    load_dotenv(env_file)

DEFAULT_CORS_ORIGINS = ['http://localhost:5173', 'http://localhost:5174', 'http://localhost:3000']


def _split_origins(value: Any) -> list:
    if isinstance(value, str):
        return [origin.strip() for origin in value.split(',') if origin.strip()]
    return list(value or [])


def load_config() -> Dict[str, Any]:
    """Load configuration from YAML file and environment variables."""
    config_file = BASE_DIR / 'config' / 'config.yaml'

    # Load from YAML
    if config_file.exists():
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}
    else:
        config = {}

    # Override with environment variables
    config['ANTHROPIC_API_KEY'] = (
        os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY') or config.get('anthropic_api_key', '')
    )
    config['CLAUDE_MODEL'] = os.getenv('CLAUDE_MODEL', config.get('claude_model', 'claude-sonnet-4-20250514'))
    config['PROMPT_FILE'] = os.getenv('PROMPT_FILE', config.get('prompt_file', 'config/prompts/family_activities.md'))
    config['REQUEST_TIMEOUT'] = float(os.getenv('REQUEST_TIMEOUT', config.get('request_timeout', 45)))
    config['CORS_ORIGINS'] = _split_origins(os.getenv('CORS_ORIGINS') or config.get('cors_origins') or DEFAULT_CORS_ORIGINS)
    config['PORT'] = int(os.getenv('PORT', config.get('port', 3001)))
    config['HOST'] = os.getenv('HOST', config.get('host', '0.0.0.0'))
    config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', config.get('log_level', 'INFO')).upper()
    config['DEBUG'] = os.getenv('DEBUG', 'false').lower() == 'true' or config.get('debug', False)

    return config


def get_config() -> Dict[str, Any]:
    """Get current configuration."""
    return load_config()


def resolve_prompt_file(config: Dict[str, Any]) -> Path:
    """Prompt file path; relative paths are taken from the project root."""
    path = Path(config['PROMPT_FILE']).expanduser()
    if not path.is_absolute():
        path = BASE_DIR / path
    return path

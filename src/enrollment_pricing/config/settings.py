"""
Centralized settings and path configuration for the enrollment pricing service.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


DEFAULT_ALLOWED_ORIGINS = (
    'https://uslearningcenter-1.vercel.app',
    'http://localhost:5173',
    'http://localhost:5174',
    'http://localhost:5175',
    'http://localhost:5176',
    'http://localhost:5177',
    'http://localhost:5178',
)


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def _env_list(value: Optional[str]) -> Optional[tuple]:
    if not value:
        return None
    return tuple(v.strip() for v in value.split(',') if v.strip())


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Directory holding levels.csv / packages.csv / promo_codes.csv
    pricing_dir: Path

    default_currency: str = 'USD'

    # HTTP service
    api_host: str = '0.0.0.0'
    api_port: int = 5073
    allowed_origins: tuple = DEFAULT_ALLOWED_ORIGINS
    frontend_url: str = 'http://localhost:5173'

    # Payment gateway context (only presence of the token is ever reported)
    square_environment: str = 'sandbox'
    square_location_id: Optional[str] = None
    square_access_token: Optional[str] = field(default=None, repr=False)

    log_level: str = 'INFO'

    @property
    def is_production(self) -> bool:
        return self.square_environment == 'production'

    @property
    def square_configured(self) -> bool:
        return bool(self.square_access_token and self.square_location_id)

    @classmethod
    def load(cls, project_root: Optional[Path] = None, environ: Optional[dict] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()
        env = os.environ if environ is None else environ

        pricing_dir = env.get('PRICING_DATA_DIR')

        return cls(
            project_root=root,
            pricing_dir=Path(pricing_dir) if pricing_dir else Path(__file__).resolve().parent.parent / 'data',
            default_currency=env.get('PRICING_DEFAULT_CURRENCY', 'USD'),
            api_host=env.get('API_HOST', '0.0.0.0'),
            api_port=int(env.get('PORT', 5073)),
            allowed_origins=_env_list(env.get('ALLOWED_ORIGINS')) or DEFAULT_ALLOWED_ORIGINS,
            frontend_url=env.get('FRONTEND_URL', 'http://localhost:5173').rstrip('/'),
            square_environment=env.get('SQUARE_ENVIRONMENT', 'sandbox').lower(),
            square_location_id=env.get('SQUARE_LOCATION_ID') or None,
            square_access_token=env.get('SQUARE_ACCESS_TOKEN') or None,
            log_level=env.get('LOG_LEVEL', 'INFO').upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None

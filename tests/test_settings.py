from pathlib import Path

from enrollment_pricing.config import settings as settings_module
from enrollment_pricing.config.settings import DEFAULT_ALLOWED_ORIGINS, Settings


def test_defaults_without_environment():
    settings = Settings.load(environ={})
    assert settings.api_port == 5073
    assert settings.default_currency == 'USD'
    assert settings.square_environment == 'sandbox'
    assert settings.allowed_origins == DEFAULT_ALLOWED_ORIGINS
    assert settings.pricing_dir.name == 'data'
    assert (settings.pricing_dir / 'levels.csv').exists()
    assert not settings.square_configured
    assert not settings.is_production


def test_environment_overrides(tmp_path):
    settings = Settings.load(project_root=tmp_path, environ={
        'PORT': '8080',
        'PRICING_DATA_DIR': str(tmp_path / 'pricing'),
        'ALLOWED_ORIGINS': 'https://a.example.com, https://b.example.com',
        'FRONTEND_URL': 'https://a.example.com/',
        'SQUARE_ENVIRONMENT': 'Production',
        'SQUARE_LOCATION_ID': 'LOC',
        'SQUARE_ACCESS_TOKEN': 'secret-token',
        'LOG_LEVEL': 'debug',
    })
    assert settings.project_root == tmp_path
    assert settings.api_port == 8080
    assert settings.pricing_dir == tmp_path / 'pricing'
    assert settings.allowed_origins == ('https://a.example.com', 'https://b.example.com')
    assert settings.frontend_url == 'https://a.example.com'
    assert settings.is_production
    assert settings.square_configured
    assert settings.log_level == 'DEBUG'


def test_access_token_not_in_repr():
    settings = Settings.load(environ={'SQUARE_ACCESS_TOKEN': 'secret-token'})
    assert 'secret-token' not in repr(settings)


def test_get_settings_is_cached_until_reset(monkeypatch):
    settings_module.reset_settings()
    first = settings_module.get_settings()
    assert settings_module.get_settings() is first

    monkeypatch.setenv('PORT', '9999')
    settings_module.reset_settings()
    assert settings_module.get_settings().api_port == 9999
    settings_module.reset_settings()

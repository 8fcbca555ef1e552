from crm_api.core.config import Settings, settings

def test_settings_loaded():
    assert settings.HOST == "0.0.0.0"
    assert settings.PORT == 8000
    assert settings.SECRET_KEY

def test_database_url():
    assert "sqlite" in settings.effective_database_url

def test_postgres_parts_take_precedence():
    config = Settings(
        SECRET_KEY="x",
        DATABASE_URL="sqlite:///ignored.db",
        POSTGRES_HOST="db",
        POSTGRES_USER="crm",
        POSTGRES_PASSWORD="pw",
        POSTGRES_DB="crm_test",
    )
    assert config.effective_database_url == "postgresql+asyncpg://crm:pw@db:5432/crm_test"

def test_cors_origins_from_comma_string():
    config = Settings(SECRET_KEY="x", CORS_ORIGINS="http://a.test, http://b.test")
    assert config.CORS_ORIGINS == ["http://a.test", "http://b.test"]

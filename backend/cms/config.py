import os
from datetime import timedelta
from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.getenv("JWT_ACCESS_TOKEN_MINUTES", "60")))

    # Rendered pages and menu trees are cached by slug
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = int(os.getenv("CACHE_DEFAULT_TIMEOUT", "300"))
    RENDERED_PAGE_TTL = int(os.getenv("RENDERED_PAGE_TTL", "1800"))
    MENU_TREE_TTL = int(os.getenv("MENU_TREE_TTL", "3600"))

    # Served at the site root when no slug is requested
    HOME_PAGE_SLUG = os.getenv("HOME_PAGE_SLUG", "home")
    MAIN_MENU_SLUG = os.getenv("MAIN_MENU_SLUG", "main")

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "/uploads")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///cms-dev.db")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    # One shared connection, otherwise every checkout sees an empty database
    SQLALCHEMY_ENGINE_OPTIONS = {
        "poolclass": StaticPool,
        "connect_args": {"check_same_thread": False},
    }
    JWT_SECRET_KEY = "testing-jwt-secret-key-with-enough-bytes"
    CACHE_TYPE = "SimpleCache"

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    CACHE_TYPE = os.getenv("CACHE_TYPE", "RedisCache")
    CACHE_REDIS_URL = os.getenv("CACHE_REDIS_URL", "redis://localhost:6379/0")

config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}

import os

# --- Config ---
BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('LOCALLIBRARY_SECRET') or "dev-secret-change-me"
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or f"sqlite:///{os.path.join(BASE_DIR, 'locallibrary.db')}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Thread pool size for the concurrent reads issued by each view
    CATALOG_MAX_WORKERS = int(os.environ.get('CATALOG_MAX_WORKERS', '8'))


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = 'DEBUG'
    # Connections are shared across the view worker threads
    SQLALCHEMY_ENGINE_OPTIONS = {'connect_args': {'check_same_thread': False}}

# predictpro/config/settings.py
import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    LOGS_PATH = os.getenv('LOGS_PATH', os.path.join(BASE_DIR, '../../logs'))

    # MySQL configuration from .env
    MYSQL_HOST = os.getenv('MYSQL_HOST', 'localhost')
    MYSQL_PORT = os.getenv('MYSQL_PORT', '3306')
    MYSQL_USER = os.getenv('MYSQL_USER', 'root')
    MYSQL_PASSWORD = os.getenv('MYSQL_PASSWORD', '')
    MYSQL_DATABASE = os.getenv('MYSQL_DATABASE', 'predictpro')

    SQLALCHEMY_DATABASE_URI = os.getenv(
        'DATABASE_URL',
        f"mysql+pymysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DATABASE}"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SECRET_KEY = os.getenv('SECRET_KEY', 'your-secret-key')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'your-jwt-secret-key')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv('JWT_ACCESS_TOKEN_HOURS', 12)))
    DEBUG = os.getenv('FLASK_DEBUG', 'True') == 'True'
    # Route every error through handle_api_error instead of Flask-RESTful's generic 500
    PROPAGATE_EXCEPTIONS = True

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Generative AI
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
    AI_MAX_TOOL_ROUNDS = int(os.getenv('AI_MAX_TOOL_ROUNDS', 4))
    AI_FEEDBACK_ADAPTATION = os.getenv('AI_FEEDBACK_ADAPTATION', 'False') == 'True'
    PROMPT_CACHE_TTL = int(os.getenv('PROMPT_CACHE_TTL', 5 * 60))  # seconds

    # 'local' or 'ai'
    PREDICTION_ENGINE = os.getenv('PREDICTION_ENGINE', 'local')

    COMMISSION_AMOUNT = float(os.getenv('COMMISSION_AMOUNT', 150))  # KES
    DEFAULT_CURRENCY = os.getenv('DEFAULT_CURRENCY', 'KES')
    SUPPORT_EMAIL = os.getenv('SUPPORT_EMAIL', 'support@predictpro.com')
    ASSISTANT_EMAIL = os.getenv('ASSISTANT_EMAIL', 'assistant@predictpro.com')

    SEED_DEFAULTS = os.getenv('SEED_DEFAULTS', 'True') == 'True'
    PAGE_SIZE = int(os.getenv('PAGE_SIZE', 20))
    MAX_PAGE_SIZE = 100

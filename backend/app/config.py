import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from the app directory or parent directory
env_path = Path(__file__).parent / '.env'
if not env_path.exists():
    env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
    MONGO_DBNAME = os.getenv('MONGO_DBNAME', 'splitshare')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:5173,http://localhost:8080').split(',')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    RECENT_ACTIVITY_LIMIT = int(os.getenv('RECENT_ACTIVITY_LIMIT', 20))
    MAX_ACTIVITY_LIMIT = 100


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-with-enough-length-for-hs256'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length-for-hs256'
    MONGO_DBNAME = 'splitshare_test'
    LOG_LEVEL = 'WARNING'

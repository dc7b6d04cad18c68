from dotenv import load_dotenv
import os

load_dotenv()

# Database settings
DB_HOST = os.environ.get('DB_HOST')
DB_USER = os.environ.get('DB_USER')
DB_NAME = os.environ.get('DB_NAME')
DB_PASS = os.environ.get('DB_PASS')
DB_PORT = os.environ.get('DB_PORT')
DB_ECHO = os.environ.get('DB_ECHO', 'false').lower() in ('1', 'true', 'yes')

DATABASE_URL = os.environ.get(
    'DATABASE_URL',
    f'postgresql+asyncpg://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}'
)

# Security settings
SECRET_KEY = os.environ.get('SECRET_KEY', 'animez-dev-secret-change-me')
ALGORITHM = 'HS256'
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get('ACCESS_TOKEN_EXPIRE_MINUTES', '60'))

# File upload settings
UPLOAD_DIR = os.environ.get('UPLOAD_DIR', 'uploads')
# Extension of stored uploads, by content type
IMAGE_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
}
ALLOWED_IMAGE_TYPES = list(IMAGE_EXTENSIONS)
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

# Jikan (MyAnimeList) API
JIKAN_BASE_URL = os.environ.get('JIKAN_BASE_URL', 'https://api.jikan.moe/v4').rstrip('/')
JIKAN_TIMEOUT = float(os.environ.get('JIKAN_TIMEOUT', '8.0'))

# Feed and moderation
AUTO_APPROVE_POSTS = os.environ.get('AUTO_APPROVE_POSTS', 'false').lower() in ('1', 'true', 'yes')
FEED_LIMIT = int(os.environ.get('FEED_LIMIT', '50'))
TRENDING_WINDOW_DAYS = int(os.environ.get('TRENDING_WINDOW_DAYS', '7'))
NOTIFICATIONS_LIMIT = int(os.environ.get('NOTIFICATIONS_LIMIT', '10'))

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

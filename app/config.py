"""
Configuration constants và settings
"""
import os

# Storage
DATABASE_PATH = os.getenv('DATABASE_PATH', 'smartattend.db')
DATA_FOLDER = os.getenv('DATA_FOLDER', 'data')
FACE_DATA_DIR = os.getenv('FACE_DATA_DIR', os.path.join(DATA_FOLDER, 'faces'))
STORE_ENROLLMENT_PHOTOS = os.getenv('STORE_ENROLLMENT_PHOTOS', '1') == '1'

# Upload configuration (giới hạn body JSON chứa ảnh base64)
MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(8 * 1024 * 1024)))  # 8MB

# Face recognition configuration
MATCH_THRESHOLD = float(os.getenv('MATCH_THRESHOLD', '0.6'))
FACE_DETECTION_MODEL = os.getenv('FACE_DETECTION_MODEL', 'hog')  # hog | cnn
FACE_NUM_JITTERS = max(1, int(os.getenv('FACE_NUM_JITTERS', '1')))
EMBEDDING_TIMEOUT_SECONDS = float(os.getenv('EMBEDDING_TIMEOUT_SECONDS', '10'))
EMBEDDING_WORKERS = max(1, int(os.getenv('EMBEDDING_WORKERS', '2')))
WARMUP_ON_STARTUP = os.getenv('WARMUP_ON_STARTUP', '1') == '1'

# Logging
LOG_DIR = os.getenv('LOG_DIR', 'logs')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

# CORS
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')


def as_dict():
    """Các giá trị mặc định dưới dạng dict để nạp vào app.config."""
    return {
        'DATABASE_PATH': DATABASE_PATH,
        'FACE_DATA_DIR': FACE_DATA_DIR,
        'STORE_ENROLLMENT_PHOTOS': STORE_ENROLLMENT_PHOTOS,
        'MAX_CONTENT_LENGTH': MAX_CONTENT_LENGTH,
        'MATCH_THRESHOLD': MATCH_THRESHOLD,
        'FACE_DETECTION_MODEL': FACE_DETECTION_MODEL,
        'FACE_NUM_JITTERS': FACE_NUM_JITTERS,
        'EMBEDDING_TIMEOUT_SECONDS': EMBEDDING_TIMEOUT_SECONDS,
        'EMBEDDING_WORKERS': EMBEDDING_WORKERS,
        'WARMUP_ON_STARTUP': WARMUP_ON_STARTUP,
        'LOG_DIR': LOG_DIR,
        'LOG_LEVEL': LOG_LEVEL,
        'CORS_ORIGINS': CORS_ORIGINS,
    }

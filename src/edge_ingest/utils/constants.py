"""
Constants used throughout the ingest pipeline
"""

# OAuth scope for every Google API call
CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# API endpoints
PUBSUB_API = "https://pubsub.googleapis.com/v1"
STORAGE_UPLOAD_API = "https://storage.googleapis.com/upload/storage/v1"
CLOUDIOT_API = "https://cloudiot.googleapis.com/v1"
ML_API = "https://ml.googleapis.com/v1"

# Pull long-poll
DEFAULT_MAX_MESSAGES = 1
PULL_CONNECT_TIMEOUT = 10  # Seconds
PULL_READ_TIMEOUT = 600  # Seconds, the service holds the request open

# Bounded timeout for every other external call
DEFAULT_CALL_TIMEOUT = 30  # Seconds
WEBHOOK_TIMEOUT = 10  # Seconds

# Pull failure backoff
BACKOFF_BASE_DELAY = 1.0  # Seconds
BACKOFF_MAX_DELAY = 60.0  # Seconds

# Detection and dashboard policy
SCORE_THRESHOLD = 0.2  # Detections must score strictly above this
DEBOUNCE_SECONDS = 20  # Minimum gap between config writes per device
DEFAULT_REGION = "us-central1"
DASHBOARD_URL_FIELD = "dashboard_url"

# Object storage
IMAGE_CONTENT_TYPE = "image/jpeg"
ORIGINAL_PREFIX = "original"
ANNOTATED_PREFIX = "annotated"

# Environment variables
ENV_PROJECT = "PROJECT"
ENV_INPUT_SUBSCRIPTION = "INPUT_SUBSCRIPTION"
ENV_SAVE_BUCKET = "SAVE_BUCKET"
ENV_BLOCKS_URL = "BLOCKS_URL"
ENV_BLOCKS_TOKEN = "BLOCKS_TOKEN"
ENV_ML_MODEL = "ML_MODEL"
ENV_IOT_REGISTRY = "IOT_REGISTRY"
ENV_IOT_REGION = "IOT_REGION"

TIKTOK_SHARE_PREFIX = "https://www.tiktokv.com/share/video/"

DEFAULT_FANOUT = 10
DEFAULT_TOP_N = 5
DEFAULT_WORKER_TIMEOUT_SECONDS = 30.0
DEFAULT_PORT = 8000

API_KEY_FIELD = "api_key"
URLS_FIELD = "urls"
ALLOWED_PAYLOAD_KEYS = frozenset({API_KEY_FIELD, URLS_FIELD})

HASHTAGS_FIELD = "hashtags"
CREATORS_FIELD = "creators"

UNAUTHORIZED_ACCESS_MESSAGE = "You aren't allowed to use this :("
INCORRECT_FORMATTING_MESSAGE = (
    "Incorrect formatting of request: Request Body must have exactly one key "
    "'urls' that maps to an array of strings"
)
FAULTY_CONTENT_MESSAGE = (
    "Urls aren't properly formatted: One or more urls in the request aren't "
    "a valid tiktok share-post link"
)
FAILURE_MESSAGE = "Failed to get hashtags"

AGGREGATION_MODE_HEADER = "X-Aggregation-Mode"

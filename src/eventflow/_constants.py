"""Internal constants shared across the library."""

BASE_URL = "http://localhost:5000"
API_PREFIX = "/api"
USER_AGENT = "eventflow-python"

# Local store namespacing (matches the keys the web client writes).
KEY_PREFIX = "eventflow-localapi"
PROFILE_MEMORY_KEY = "wedding-planner-user"

PROFILE_COLLECTION = "users"
OWNED_COLLECTIONS: tuple[str, ...] = ("expenses", "vendors", "guests", "tasks", "inspirations")
COLLECTIONS: frozenset[str] = frozenset({PROFILE_COLLECTION, *OWNED_COLLECTIONS})

ID_FIELD = "id"
OWNER_FIELD = "userId"

# Timestamp fields assigned by the store on insert, per collection.
STORE_TIMESTAMP_FIELDS: dict[str, str] = {
    "users": "createdAt",
    "expenses": "date",
}

# nanoid-compatible id shape
ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-"
ID_LENGTH = 21

JSON_CONTENT_TYPES: tuple[str, ...] = ("application/json",)

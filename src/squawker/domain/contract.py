"""Content URIs, column names and author keys shared across layers."""

AUTHORITY = "squawker.provider"
BASE_CONTENT_URI = f"content://{AUTHORITY}"
PATH_MESSAGES = "messages"
MESSAGES_URI = f"{BASE_CONTENT_URI}/{PATH_MESSAGES}"

TABLE_NAME = "messages"
COLUMN_ID = "_id"
COLUMN_AUTHOR = "author"
COLUMN_AUTHOR_KEY = "authorKey"
COLUMN_MESSAGE = "message"
COLUMN_DATE = "date"

# Column name -> Squawk attribute name
COLUMN_ATTRIBUTES: dict[str, str] = {
    COLUMN_ID: "id",
    COLUMN_AUTHOR: "author",
    COLUMN_AUTHOR_KEY: "author_key",
    COLUMN_MESSAGE: "message",
    COLUMN_DATE: "date",
}

DEFAULT_SORT_ORDER = f"{COLUMN_DATE} DESC"

# Topic keys as stored in the authorKey column
ASSER_KEY = "key_asser"
CEZANNE_KEY = "key_cezanne"
JLIN_KEY = "key_jlin"
LYLA_KEY = "key_lyla"
NIKITA_KEY = "key_nikita"
TEST_ACCOUNT_KEY = "key_test"
INSTRUCTOR_KEYS: tuple[str, ...] = (
    ASSER_KEY,
    CEZANNE_KEY,
    JLIN_KEY,
    LYLA_KEY,
    NIKITA_KEY,
)


def message_uri(message_id: int) -> str:
    """Return the item URI for a message id."""
    return f"{MESSAGES_URI}/{message_id}"

"""Project-wide constants (root sentinel, page size, thumbnail widths)."""

ROOT_PARENT_ID: int = 0

PAGE_SIZE: int = 20

FOLDER = "folder"
FILE = "file"
IMAGE = "image"
FILE_TYPES = (FOLDER, FILE, IMAGE)

THUMBNAIL_WIDTHS = (500, 250, 100)

SESSION_KEY_PREFIX = "auth_"

DEFAULT_SESSION_TTL_SECONDS: int = 60 * 60 * 24

# sqlite INTEGER upper bound
MAX_ID = 2 ** 63 - 1

"""
Global constants for the SVNX CLI.
"""

# Retrieval defaults
DEFAULT_BATCH_SIZE = 1000
DEFAULT_START_REVISION = 1
DEFAULT_PREVIEW_LENGTH = 100
TRUNCATION_MARKER = "..."
CONTENT_ENCODING = "utf-8"

# Progress estimation
SPEED_WINDOW_SIZE = 5  # Track last 5 batches for smoothing

# Revision properties already surfaced as first-class record fields
RESERVED_REVISION_PROPERTIES = frozenset({"svn:log", "svn:author", "svn:date"})
MIME_TYPE_PROPERTY = "svn:mime-type"
BINARY_MIME_PREFIXES = ("application", "image")

# svn command line
DEFAULT_SVN_BINARY = "svn"
SVN_PROPERTY_NOT_FOUND = "W200017"
SUPPORTED_URL_SCHEMES = ("svn", "svn+ssh", "http", "https", "file")
CONTENT_CHUNK_SIZE = 8192

# Authors export
DEFAULT_EMAIL_DOMAIN = "example.com"

# Logging constants
LOG_APP_NAME = "SVNX"
LOG_FILE_NAME = "svnx"
LOG_RETENTION_DAYS = 7
LOG_LINES_TO_SHOW = 20
LOG_DIR_ENV = "SVNX_LOG_DIR"
SVN_LOGGER_NAME = "svnx.svn"

# Sensitive data keys for sanitization
SENSITIVE_KEYS = (
    "password", "passwd", "token", "secret", "authorization",
    "username", "cookie", "session",
)

"""
Runtime configuration for the context replacer.

Values are read from the environment once at import time. Scripts load
.env.local / .env with python-dotenv before importing this module.
"""

import os

LOG_LEVEL = os.getenv("SNIPPET_REWRITER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv(
    "SNIPPET_REWRITER_LOG_FORMAT",
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Max characters of a snippet shown in log lines and error previews
PREVIEW_CHARS = int(os.getenv("SNIPPET_REWRITER_PREVIEW_CHARS", "100"))

# Encoding used by scripts when reading/writing source and request files
FILE_ENCODING = os.getenv("SNIPPET_REWRITER_ENCODING", "utf-8")

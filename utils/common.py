# utils/common.py
"""Common utilities: filenames, MIME types, and path management"""
import mimetypes
import os
import re
from pathlib import Path

# ⚠️ DO NOT import settings here - causes circular import with config.py


# ============= Path Management =============

def get_project_root() -> str:
    """Returns the absolute path to the project's root directory."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def get_log_file_path() -> str:
    """Creates the log directory if it doesn't exist and returns the full log file path."""
    project_root = get_project_root()
    log_dir = os.path.join(project_root, 'log')

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    return os.path.join(log_dir, 'support_chat.log')


# ============= File Utilities =============

def sanitize_filename(filename: str) -> str:
    """Remove dangerous characters from filename."""
    safe_name = re.sub(r'[^\w\-_\.]', '_', filename)
    safe_name = os.path.basename(safe_name)
    return safe_name[:100]


def get_file_extension(filename: str) -> str:
    """Extracts and normalizes the file extension from a filename."""
    return Path(filename).suffix[1:].lower()


def guess_mime_type(filename: str, declared: str = "") -> str:
    """Prefer the declared content type; fall back to guessing from the filename."""
    if declared and declared != "application/octet-stream":
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or declared or "application/octet-stream"


def is_image_mime(mime_type: str) -> bool:
    return (mime_type or "").lower().startswith("image/")

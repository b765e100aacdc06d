# file_api/core/validation.py - Filename validation for the file store

import re

MAX_FILENAME_LENGTH = 255
# Letters, digits, hyphen, underscore and dot only
VALID_FILENAME_PATTERN = re.compile(r'^[A-Za-z0-9\-_.]+$')

def is_valid_filename(filename) -> bool:
    """
    Checks that a filename is a safe, flat name inside the base directory.

    Rejects empty or over-long names, anything outside the allowed character
    set, names containing '..' or path separators, and hidden (dot) files.
    Never raises; non-string input is simply invalid.
    """
    if not isinstance(filename, str):
        return False
    if not 0 < len(filename) <= MAX_FILENAME_LENGTH:
        return False
    if not VALID_FILENAME_PATTERN.fullmatch(filename):
        return False
    if '..' in filename:  # Directory traversal
        return False
    if filename.startswith('.'):  # Hidden files
        return False
    if '/' in filename or '\\' in filename:
        return False
    return True

"""Helpers turning show names into safe path components."""

import re
import unicodedata

_PATH_UNSAFE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_SPACES = re.compile(r"\s+")


def file_name_cleaner(name: str) -> str:
    """Make a string usable as a file name on any common file system."""
    name = unicodedata.normalize("NFC", name)
    name = _PATH_UNSAFE.sub("-", name)
    name = _SPACES.sub(" ", name).strip()
    # Windows refuses names ending with a dot or a space
    return name.rstrip(". ")


def path_name_cleaner(name: str) -> str:
    """Make a string usable as a directory name."""
    return file_name_cleaner(name)


def format_2_digits(value: str) -> str:
    """Left pad a numeric string with zeros to two digits.

    An empty value gives ``00``, non numeric values are returned stripped
    but unchanged.
    """
    value = value.strip()
    if value == "" or value.isdigit():
        return value.zfill(2)
    return value

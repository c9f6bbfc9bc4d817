from .kana import kana_to_romaji_keywords
from .mime import FOLDER_MIME, is_folder
from .time import elapsed_since, normalize_dt, now_utc, parse_rfc3339, to_rfc3339

__all__ = [
    "FOLDER_MIME",
    "is_folder",
    "kana_to_romaji_keywords",
    "now_utc",
    "parse_rfc3339",
    "to_rfc3339",
    "normalize_dt",
    "elapsed_since",
]

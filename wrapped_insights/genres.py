"""Canonicalization of raw genre and tag strings"""
import re
from typing import FrozenSet, Iterable, Optional

from wrapped_insights.models.snapshot import Track

# Folded variant -> canonical genre key. Keys are looked up after folding,
# so "Hip-Hop", "hip_hop" and "HIP & HOP" all reach the "hip hop" entry.
GENRE_ALIASES = {
    "hiphop": "hip hop",
    "hip hop": "hip hop",
    "rap hip hop": "hip hop",
    "r b": "rnb",
    "r and b": "rnb",
    "r n b": "rnb",
    "rnb": "rnb",
    "rhythm and blues": "rnb",
    "d b": "drum and bass",
    "dnb": "drum and bass",
    "drum bass": "drum and bass",
    "drum n bass": "drum and bass",
    "drumandbass": "drum and bass",
    "edm": "electronic dance music",
    "electronic dance": "electronic dance music",
    "lofi": "lo fi",
    "lo fi hip hop": "lo fi",
    "dubstep": "dubstep",
    "synthpop": "synth pop",
    "kpop": "k pop",
    "alt rock": "alternative rock",
    "alternative": "alternative rock",
    "hardstyle": "hardstyle",
    "trap music": "trap",
}

TAG_SEPARATORS = re.compile(r"[,;]")
_GENRE_PREFIX = re.compile(r"^genre[\s:-]*")
_MUSIC_SUFFIX = re.compile(r"[\s-]*music$")
_PUNCTUATION = re.compile(r"[-_/&.+]+")
_WHITESPACE = re.compile(r"\s+")
_QUOTES = "\"'`"


def normalize_genre(raw: Optional[str]) -> str:
    """
    Fold one raw label to its canonical key, or "" when nothing remains.

    >>> normalize_genre("Hip-Hop")
    'hip hop'
    """
    if not raw:
        return ""
    folded = raw.strip().strip(_QUOTES).lower()
    folded = _GENRE_PREFIX.sub("", folded)
    folded = _MUSIC_SUFFIX.sub("", folded)
    folded = _PUNCTUATION.sub(" ", folded)
    folded = _WHITESPACE.sub(" ", folded).strip()
    return GENRE_ALIASES.get(folded, folded)


def split_tags(tag_list: Optional[str]) -> Iterable[str]:
    """Split a free-text tag list on commas and semicolons"""
    if not tag_list:
        return []
    return [token for token in TAG_SEPARATORS.split(tag_list) if token.strip()]


def extract_genres(genre: Optional[str] = None, genre_family: Optional[str] = None,
                   tag_list: Optional[str] = None) -> FrozenSet[str]:
    """Canonical genre keys for one track's raw genre, genre family and tags"""
    keys = set()
    for raw in (genre, genre_family, *split_tags(tag_list)):
        key = normalize_genre(raw)
        if key:
            keys.add(key)
    return frozenset(keys)


def track_genres(track: Track) -> FrozenSet[str]:
    return extract_genres(track.genre, track.genre_family, track.tag_list)

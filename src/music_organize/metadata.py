from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Protocol, Union

from .models import DependencyUnavailable, RawTags, TagReadError, TrackRecord

try:
    from mutagen import File
except ModuleNotFoundError:  # pragma: no cover - depends on local env
    File = None


DEFAULT_EXTENSIONS = (
    ".mp3",
    ".flac",
    ".m4a",
    ".ogg",
    ".opus",
    ".wma",
    ".wav",
    ".aiff",
    ".aac",
)

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"

# Control characters; never present in a display name.
ALBUM_KEY_SEPARATOR = "\x1f\x1e"

# Easy-interface keys first, then raw ID3, Vorbis, MP4 and ASF names.
TAG_KEYS = {
    "album_artist": ("albumartist", "ALBUMARTIST", "album artist", "TPE2", "aART", "WM/AlbumArtist"),
    "performer": ("artist", "ARTIST", "performer", "TPE1", "\u00a9ART", "Author"),
    "album": ("album", "ALBUM", "TALB", "\u00a9alb", "WM/AlbumTitle"),
    "title": ("title", "TITLE", "TIT2", "\u00a9nam", "Title"),
    "track": ("tracknumber", "TRACKNUMBER", "TRCK", "trkn", "WM/TrackNumber"),
    "disc": ("discnumber", "DISCNUMBER", "TPOS", "disk", "WM/PartOfSet"),
    "disc_count": ("disctotal", "DISCTOTAL", "totaldiscs", "TOTALDISCS"),
}


class TagReader(Protocol):
    def read(self, path: Path) -> RawTags:
        ...


def is_audio_file(path: Path, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    # macOS AppleDouble sidecar files (._*) are metadata blobs, not audio.
    if path.name.startswith("._"):
        return False
    return path.suffix.lower() in {ext.lower() for ext in extensions}


def _first(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        if not value:
            return ""
        return str(value[0]).strip()
    return str(value).strip()


def _tag_value(tags: object, *keys: str) -> str:
    if tags is None:
        return ""

    for key in keys:
        try:
            value = tags.get(key)
        except (KeyError, ValueError, TypeError):
            value = None
        if value:
            return _first(value)

    return ""


class MutagenTagReader:
    """Read the organizing fields from any format mutagen understands."""

    def read(self, path: Path) -> RawTags:
        if File is None:
            raise DependencyUnavailable("mutagen is not installed")

        try:
            audio = File(path, easy=True)
        except Exception as exc:
            raise TagReadError(f"{path}: {exc}") from exc
        if audio is None:
            raise TagReadError(f"{path}: unrecognized audio format")

        tags = getattr(audio, "tags", None)
        if not tags:
            return RawTags()

        return RawTags(**{field: _tag_value(tags, *keys) or None for field, keys in TAG_KEYS.items()})


def load_tag_reader() -> TagReader:
    if File is None:
        raise DependencyUnavailable(
            "mutagen is required to read audio tags; install it with 'pip install mutagen'"
        )
    return MutagenTagReader()


def _text(value: Union[str, int, None]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value if value else None


def _number_parts(value: Union[str, int, None]) -> tuple[int, int]:
    """Split a numeric tag into (number, total); "3/12" -> (3, 12)."""
    if value is None or isinstance(value, bool):
        return 0, 0
    if isinstance(value, int):
        return max(value, 0), 0

    number, _, total = str(value).strip().partition("/")
    return _to_count(number), _to_count(total)


def _to_count(value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return 0
    return parsed if parsed > 0 else 0


def _key_part(value: Optional[str], fallback: str) -> str:
    return (value or fallback).strip().casefold()


def album_key(artist: Optional[str], album: Optional[str]) -> str:
    return _key_part(artist, UNKNOWN_ARTIST) + ALBUM_KEY_SEPARATOR + _key_part(album, UNKNOWN_ALBUM)


def resolved_artist(tags: RawTags) -> Optional[str]:
    return _text(tags.album_artist) or _text(tags.performer)


def normalize(path: Path, tags: RawTags) -> TrackRecord:
    """Build the canonical record for one successfully read file.

    Artist prefers the album artist and falls back to the performer. Blank
    text fields stay ``None``; display fallbacks are applied only when a
    destination path is built. Unparsable numbers become 0 (unset).
    """
    artist = resolved_artist(tags)
    album = _text(tags.album)
    track_number, _ = _number_parts(tags.track)
    disc_number, disc_total = _number_parts(tags.disc)
    disc_count, _ = _number_parts(tags.disc_count)

    return TrackRecord(
        source_path=path,
        artist=artist,
        album=album,
        title=_text(tags.title),
        track_number=track_number,
        disc_number=disc_number,
        disc_count=disc_count or disc_total,
        album_key=album_key(artist, album),
        extension=path.suffix,
    )

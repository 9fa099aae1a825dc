"""Inline annotation parser.

Turns ``"[C]Amazing [F]grace"`` into a :class:`~chordsheet.models.ParsedLine`
(lyrics ``"Amazing grace"``, chords at lyric offsets 0 and 8) and back.

Chord text inside brackets is not validated here; anything between ``[`` and
the next ``]`` is carried through as an opaque chord string.  An unterminated
``[`` and an empty ``[]`` are ordinary lyric text.
"""

from collections.abc import Iterable

from .grammar import BRACKET_RE
from .models import ChordPosition, ParsedLine


def parse_line_with_chords(line: str) -> ParsedLine:
    """Split one annotated line into lyric text and lyric-relative chord positions."""
    if not isinstance(line, str):
        raise TypeError(f"line must be str, not {type(line).__name__}")

    chords: list[ChordPosition] = []
    lyrics: list[str] = []
    lyric_pos = 0
    cursor = 0

    for m in BRACKET_RE.finditer(line):
        before = line[cursor:m.start()]
        lyrics.append(before)
        lyric_pos += len(before)
        chords.append(ChordPosition(chord=m.group(1), position=lyric_pos))
        cursor = m.end()

    lyrics.append(line[cursor:])
    return ParsedLine(lyrics="".join(lyrics), chords=tuple(chords))


def parse_lyrics(text: str) -> list[ParsedLine]:
    """Parse every line of a full lyric text."""
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")
    return [parse_line_with_chords(line) for line in text.splitlines()]


def insert_chords(lyrics: str, chords: Iterable[ChordPosition]) -> str:
    """Insert ``[chord]`` markers into *lyrics* at each chord's position.

    Markers go in from the highest position to the lowest so earlier
    insertions never shift later offsets.  Chords sharing a position keep
    their original order, and positions past the end of *lyrics* are
    clamped to it.
    """
    ordered = sorted(
        enumerate(chords),
        key=lambda item: (item[1].position, item[0]),
        reverse=True,
    )
    result = lyrics
    for _, cp in ordered:
        pos = max(0, min(cp.position, len(lyrics)))
        result = result[:pos] + f"[{cp.chord}]" + result[pos:]
    return result


def extract_chords_from_lyrics(lyrics: str) -> list[str]:
    """Return every distinct bracketed chord in *lyrics*, in order of first appearance."""
    if not isinstance(lyrics, str):
        raise TypeError(f"lyrics must be str, not {type(lyrics).__name__}")
    return list(dict.fromkeys(BRACKET_RE.findall(lyrics)))

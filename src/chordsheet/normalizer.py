"""Chord-above-lyric → inline normalizer.

Songs are often typed with a chord line stacked over the lyric it belongs
to, aligned by column::

      C                 Am
    I heard there was a secret chord

This module turns that into ``"I [C]heard there was a [Am]secret chord"``,
the inline form :mod:`chordsheet.parser` understands.

Two chord-line heuristics are kept side by side, each used by a different
entry path:

  "density" — is_likely_chord_line(): chord-like characters make up more
              than 60% of the line.  Used by parse_ultimate_guitar_format().
  "short"   — is_short_chord_line(): the line has at most 10 non-space
              characters.  Used by transform_chords() when seeding songs.

Both misclassify now and then (short lyric lines, lyrics full of capital
note letters); the two are deliberately not unified.
"""

import re

from .grammar import CHORD_LINE_TOKEN_RE
from .models import ChordPosition, ParsedSong, ParsedSongLine, SongLineType
from .parser import insert_chords

CHORD_DENSITY_THRESHOLD = 0.6
SHORT_CHORD_LINE_MAX = 10

STRATEGIES = ("density", "short")


# ---------------------------------------------------------------------------
# Chord-line heuristics
# ---------------------------------------------------------------------------


def is_likely_chord_line(line: str) -> bool:
    """Return True if chord-like text makes up most of *line*.

    Example: ``"C G Am F"`` → True, ``"I love you so much"`` → False.
    """
    stripped = line.strip()
    if not stripped:
        return False
    chord_length = sum(len(m.group()) for m in CHORD_LINE_TOKEN_RE.finditer(stripped))
    non_space_length = len(re.sub(r"\s", "", stripped))
    return chord_length / non_space_length > CHORD_DENSITY_THRESHOLD


def is_short_chord_line(line: str) -> bool:
    """Return True if *line* is non-blank with at most 10 non-space characters."""
    collapsed = re.sub(r"\s+", "", line)
    return 0 < len(collapsed) <= SHORT_CHORD_LINE_MAX


# ---------------------------------------------------------------------------
# Chord extraction
# ---------------------------------------------------------------------------


def extract_chords_with_positions(line: str) -> list[ChordPosition]:
    """Return each chord on a chord line with its raw column, left to right."""
    return [
        ChordPosition(chord=m.group(), position=m.start())
        for m in CHORD_LINE_TOKEN_RE.finditer(line)
    ]


# ---------------------------------------------------------------------------
# Density strategy: structured parse
# ---------------------------------------------------------------------------


def parse_ultimate_guitar_format(text: str) -> ParsedSong:
    """Parse chord-above-lyric text into a :class:`~chordsheet.models.ParsedSong`.

    Algorithm
    ---------
    1. Blank lines become ``EMPTY`` lines.
    2. A chord line followed by a non-blank line is merged with it into a
       ``BOTH`` line.  Chord columns are kept as-is, so a chord past the end
       of the lyric points past its end.
    3. A chord line with nothing below it becomes a ``CHORD`` line.
    4. Everything else is a ``LYRIC`` line.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")

    lines = text.split("\n")
    parsed: list[ParsedSongLine] = []
    all_chords: dict[str, None] = {}

    i = 0
    while i < len(lines):
        line = lines[i]
        next_line = lines[i + 1] if i + 1 < len(lines) else ""

        if not line.strip():
            parsed.append(ParsedSongLine(type=SongLineType.EMPTY))
            i += 1
            continue

        if is_likely_chord_line(line):
            chords = tuple(extract_chords_with_positions(line))
            all_chords.update(dict.fromkeys(cp.chord for cp in chords))
            if next_line.strip():
                parsed.append(ParsedSongLine(SongLineType.BOTH, next_line, chords))
                i += 2
            else:
                parsed.append(ParsedSongLine(SongLineType.CHORD, "", chords))
                i += 1
            continue

        parsed.append(ParsedSongLine(SongLineType.LYRIC, line))
        i += 1

    return ParsedSong(lines=tuple(parsed), chords=tuple(all_chords))


def convert_to_inline_format(song: ParsedSong) -> str:
    """Render a parsed song back into inline ``[Chord]`` text."""
    out: list[str] = []
    for line in song.lines:
        if line.type == SongLineType.BOTH:
            out.append(insert_chords(line.content, line.chords))
        elif line.type == SongLineType.CHORD:
            out.append(" ".join(f"[{cp.chord}]" for cp in line.chords))
        else:
            out.append(line.content)
    return "\n".join(out)


# ---------------------------------------------------------------------------
# Short strategy: seeding path
# ---------------------------------------------------------------------------


def transform_chords(text: str) -> str:
    """Convert chord-above-lyric text to inline form using the short-line test.

    Blank lines are dropped.  Every non-space token on a chord line counts as
    a chord, and the lyric below is padded to the chord line's width so
    chords past its end are kept.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")

    lines = [line for line in re.split(r"\r?\n", text) if line.strip()]
    out: list[str] = []

    i = 0
    while i < len(lines):
        if is_short_chord_line(lines[i]) and i + 1 < len(lines):
            chord_line, lyric_line = lines[i], lines[i + 1]
            padded = lyric_line.ljust(len(chord_line))
            result = ""
            cursor = 0
            for m in re.finditer(r"\S+", chord_line):
                result += padded[cursor:m.start()] + f"[{m.group()}]"
                cursor = m.start()
            result += padded[cursor:]
            out.append(result.rstrip())
            i += 2
        else:
            out.append(lines[i].strip())
            i += 1

    return "\n".join(out)


def normalize(text: str, strategy: str = "density") -> str:
    """Normalize chord-above-lyric *text* to inline form.

    Args:
        text:     Raw song text.
        strategy: ``"density"`` (structured parse) or ``"short"`` (seeding path).
    """
    if strategy == "density":
        return convert_to_inline_format(parse_ultimate_guitar_format(text))
    if strategy == "short":
        return transform_chords(text)
    raise ValueError(f"Unknown chord-line strategy {strategy!r}; expected one of {STRATEGIES}")

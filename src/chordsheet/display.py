"""Render parsed lines for display.

Four layouts are supported:

  tokenize_line()             — one DisplayToken per lyric character, with
                                the chord (if any) that sits above it
  render_inline_line()        — back to ``[C]Amazing [F]grace``
  render_stacked_line()       — a chord row over the lyric row
  convert_to_display_format() — a whole ParsedSong as stacked text
"""

from .models import DisplayToken, ParsedLine, ParsedSong, SongLineType
from .parser import insert_chords

DISPLAY_WIDTH = 100


def tokenize_line(line: ParsedLine) -> list[DisplayToken]:
    """Return exactly ``len(line.lyrics)`` tokens.

    When several chords share a position the first one in ``line.chords``
    wins.  Chords positioned at or past the end of the lyric get no token.
    """
    first_at: dict[int, str] = {}
    for cp in line.chords:
        first_at.setdefault(cp.position, cp.chord)
    return [DisplayToken(char=ch, chord=first_at.get(i, "")) for i, ch in enumerate(line.lyrics)]


def render_inline_line(line: ParsedLine) -> str:
    return insert_chords(line.lyrics, line.chords)


def render_stacked_line(line: ParsedLine) -> tuple[str, str]:
    """Return ``(chord_row, lyric_row)`` with each chord above its character.

    A chord that would run into the previous one is pushed right so at least
    one space separates them.
    """
    row = ""
    for cp in sorted(line.chords, key=lambda cp: cp.position):
        column = cp.position
        if row:
            column = max(column, len(row) + 1)
        row = row.ljust(column) + cp.chord
    return row.rstrip(), line.lyrics


def _chord_row(chords, width: int = DISPLAY_WIDTH) -> str:
    buffer = [" "] * width
    for cp in chords:
        text = cp.chord[:width]
        start = max(0, min(cp.position, width - len(text)))
        buffer[start:start + len(text)] = text
    return "".join(buffer).rstrip()


def convert_to_display_format(song: ParsedSong) -> str:
    """Render a parsed song as chord rows stacked over lyric rows.

    Each chord row is a fixed-width buffer; a chord that would overflow the
    right edge is moved left to fit, and one wider than the buffer is clipped.
    """
    out: list[str] = []
    for line in song.lines:
        if line.type == SongLineType.BOTH:
            out.append(_chord_row(line.chords) + "\n" + line.content)
        elif line.type == SongLineType.CHORD:
            out.append(_chord_row(line.chords))
        else:
            out.append(line.content)
    return "\n".join(out)

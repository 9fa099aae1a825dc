"""ChordPro export.

Renders a :class:`~chordsheet.models.Song` to ChordPro (``.cho``) text,
optionally transposed.

Section marker → ChordPro directive mapping
-------------------------------------------

A lyric line consisting only of a marker such as ``[Verse 1]`` or
``[Chorus]`` starts a new section.

+--------------------------------------+------------------------------------+
| Label (case-insensitive prefix)      | Directive pair                     |
+======================================+====================================+
| ``Verse``, ``Verse N``               | ``{start_of_verse: Verse N}`` /    |
|                                      | ``{end_of_verse}``                 |
+--------------------------------------+------------------------------------+
| ``Chorus``                           | ``{start_of_chorus}`` /            |
|                                      | ``{end_of_chorus}``                |
+--------------------------------------+------------------------------------+
| ``Bridge``                           | ``{start_of_bridge}`` /            |
|                                      | ``{end_of_bridge}``                |
+--------------------------------------+------------------------------------+
| ``Intro``, ``Outro``, ``Solo``, etc. | ``{comment: <label>}``             |
+--------------------------------------+------------------------------------+
| no marker                            | no wrapper directive               |
+--------------------------------------+------------------------------------+

Usage::

    from chordsheet.chordpro import ChordProFormatter
    text = ChordProFormatter().render(song, semitones=2)
    Path("output.cho").write_text(text)
"""

import re

from .grammar import parse_note, section_label
from .key_detection import detect_key
from .models import Section, Song
from .parser import extract_chords_from_lyrics
from .theory import DEFAULT_THEORY, MusicTheory
from .transposer import get_transposed_key_name, transpose_lyrics

_KEY_ROOT_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)

# Section labels whose directives ChordPro has standardised.
_STRUCTURED = {
    "verse": ("start_of_verse", "end_of_verse"),
    "chorus": ("start_of_chorus", "end_of_chorus"),
    "bridge": ("start_of_bridge", "end_of_bridge"),
}


class ChordProFormatter:
    """Render a :class:`~chordsheet.models.Song` to ChordPro text."""

    def __init__(self, theory: MusicTheory = DEFAULT_THEORY):
        self.theory = theory

    def render(self, song: Song, semitones: int = 0, use_flats: bool = False) -> str:
        """Return ChordPro text for *song* moved by *semitones*.

        The ``{key}`` directive is the song's key, or the key detected from
        its lyrics if it has none, transposed along with the chords and
        spelled with the same sharp/flat preference.  The returned string
        ends with a single newline.
        """
        lyrics = transpose_lyrics(song.lyrics, semitones, use_flats, self.theory)
        parts: list[str] = []

        # --- Metadata block ---
        parts.append(f"{{title: {song.title}}}")
        parts.append(f"{{artist: {song.artist}}}")
        key = _resolve_key(song, semitones, use_flats, self.theory)
        if key:
            parts.append(f"{{key: {key}}}")
        if song.capo:
            parts.append(f"{{capo: {song.capo}}}")

        # --- Section blocks ---
        for section in split_sections(lyrics):
            parts.append("")  # blank line before every section
            parts.extend(_render_section(section))

        return "\n".join(parts) + "\n"


def split_sections(lyrics: str) -> list[Section]:
    """Group inline lyrics into sections at ``[Verse 1]``-style marker lines.

    Leading and trailing blank lines of each section are dropped.
    """
    sections: list[Section] = []
    current = Section(label=None)

    for line in lyrics.splitlines():
        label = section_label(line)
        if label is not None:
            if _trim(current.lines):
                sections.append(current)
            current = Section(label=label)
            continue
        current.lines.append(line.rstrip())

    if _trim(current.lines):
        sections.append(current)
    for section in sections:
        section.lines = _trim(section.lines)
    return sections


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _trim(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def _resolve_key(song: Song, semitones: int, use_flats: bool, theory: MusicTheory) -> str | None:
    """Return the ``{key}`` label: the song's key (or the one detected from
    its untransposed lyrics) moved by *semitones*, with the root spelled the
    way the transposed chords are.
    """
    key = song.key
    if not key and extract_chords_from_lyrics(song.lyrics):
        key = detect_key(song.lyrics, theory)
    if not key or semitones == 0:
        return key or None
    transposed = get_transposed_key_name(key, semitones)
    m = _KEY_ROOT_RE.match(transposed)
    if not m:
        return transposed
    root = theory.enharmonic(parse_note(m.group(1)), use_flats)
    return f"{root}{m.group(2)}"


def _render_section(section: Section) -> list[str]:
    """Return a list of lines for one section (no trailing blank line)."""
    label = section.label
    lines = section.lines

    if not label:
        return lines

    label_lower = label.lower().split()[0]  # first word, e.g. "verse" from "Verse 1"

    if label_lower in _STRUCTURED:
        start_dir, end_dir = _STRUCTURED[label_lower]
        # Full label for verses ("Verse 2"), bare directive for chorus/bridge
        if label_lower == "verse":
            start_line = f"{{{start_dir}: {label}}}"
        else:
            start_line = f"{{{start_dir}}}"
        return [start_line, *lines, f"{{{end_dir}}}"]

    # Intro, Outro, Solo and anything else ChordPro has no block for
    return [f"{{comment: {label}}}", *lines]

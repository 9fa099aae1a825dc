"""Best-fit major key from the chords in a song.

Scoring
-------
Each distinct chord in the lyrics contributes its root's pitch class to a
frequency table (one count per distinct chord, not per occurrence).  Every
pitch class in the table is a candidate tonic and scores:

  * ``frequency * 2`` for each table entry that lies in its major scale
  * ``frequency * 3`` extra for its own entry (tonic bonus)

The highest score wins; ties go to the candidate whose root appeared first.
A key is reported by the spelling of the first chord root seen for it.
"""

import logging

from .exceptions import ChordParseError
from .parser import extract_chords_from_lyrics
from .theory import DEFAULT_THEORY, MusicTheory, simplify

logger = logging.getLogger(__name__)

DEFAULT_KEY = "C"

SCALE_WEIGHT = 2
TONIC_WEIGHT = 3


def detect_key(lyrics: str, theory: MusicTheory = DEFAULT_THEORY) -> str:
    """Return the most likely major key (a root note name) for *lyrics*.

    Returns ``"C"`` when no chord in the lyrics can be read.
    """
    # pitch class -> [label, frequency], in order of first appearance
    table: dict[int, list] = {}
    for chord in extract_chords_from_lyrics(lyrics):
        try:
            root = theory.parse_chord(chord).root
        except ChordParseError:
            logger.debug("Ignoring %r for key detection", chord)
            continue
        entry = table.setdefault(root.pitch_class, [str(simplify(root)), 0])
        entry[1] += 1

    if not table:
        return DEFAULT_KEY
    if len(table) == 1:
        return next(iter(table.values()))[0]

    scores = {pc: _score(pc, label, table, theory) for pc, (label, _) in table.items()}
    best = max(scores, key=scores.get)
    logger.debug("Key scores: %s", {table[pc][0]: score for pc, score in scores.items()})
    return table[best][0]


def _score(candidate: int, label: str, table: dict[int, list], theory: MusicTheory) -> int:
    tonic = theory.parse_chord(label).root
    scale = {note.pitch_class for note in theory.scale_notes(tonic)}
    score = sum(freq * SCALE_WEIGHT for pc, (_, freq) in table.items() if pc in scale)
    return score + table[candidate][1] * TONIC_WEIGHT

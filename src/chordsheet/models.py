from dataclasses import dataclass, field
from enum import Enum, auto

STEPS = ("C", "D", "E", "F", "G", "A", "B")

# Semitone value of each natural step, C = 0.
STEP_VALUES = (0, 2, 4, 5, 7, 9, 11)

_ACCIDENTALS = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "##"}


@dataclass(frozen=True)
class Note:
    """A spelled pitch: a letter step plus an accidental count.

    ``Note("C", 1)`` is C#, ``Note("D", -1)`` is Db.  Two notes with the same
    :attr:`pitch_class` may still be spelled differently.
    """

    step: str
    alteration: int = 0

    @property
    def pitch_class(self) -> int:
        return (STEP_VALUES[STEPS.index(self.step)] + self.alteration) % 12

    def __str__(self) -> str:
        accidental = _ACCIDENTALS.get(self.alteration)
        if accidental is None:
            sign = "#" if self.alteration > 0 else "b"
            accidental = sign * abs(self.alteration)
        return f"{self.step}{accidental}"


@dataclass(frozen=True)
class Interval:
    """A transposition distance counted in letter steps and in semitones.

    Up a perfect fourth is ``Interval(3, 5)``; up an augmented third lands
    on the same pitch but is ``Interval(2, 5)`` and spells it differently.
    Negative values mean downwards.
    """

    diatonic: int
    chromatic: int


@dataclass(frozen=True)
class ChordSymbol:
    """A parsed chord: root note, opaque quality suffix, optional slash bass."""

    root: Note
    quality: str = ""
    bass: Note | None = None

    def __str__(self) -> str:
        text = f"{self.root}{self.quality}"
        if self.bass is not None:
            text += f"/{self.bass}"
        return text


@dataclass(frozen=True)
class ChordPosition:
    """A chord bound to a character offset.

    In a :class:`ParsedLine` the offset indexes into the stripped lyric.  In a
    :class:`ParsedSongLine` it is the raw column in the original chord line.
    """

    chord: str
    position: int


@dataclass(frozen=True)
class ParsedLine:
    """A lyric with its chord markers stripped out.

    Example: ``"[C]Amazing [F]grace"`` parses to lyrics ``"Amazing grace"``
    with chords at positions 0 and 8.
    """

    lyrics: str
    chords: tuple[ChordPosition, ...] = ()


class SongLineType(Enum):
    EMPTY = auto()  # blank line
    LYRIC = auto()  # lyric with no chord line above it
    CHORD = auto()  # chord line with no lyric below it
    BOTH = auto()  # chord line merged with the lyric line below it


@dataclass(frozen=True)
class ParsedSongLine:
    """One line of a song written in the chord-above-lyric convention."""

    type: SongLineType
    content: str = ""
    chords: tuple[ChordPosition, ...] = ()


@dataclass(frozen=True)
class ParsedSong:
    lines: tuple[ParsedSongLine, ...] = ()
    chords: tuple[str, ...] = ()  # unique, in order of first appearance


@dataclass(frozen=True)
class DisplayToken:
    """One lyric character plus the chord drawn above it ("" when none)."""

    char: str
    chord: str = ""


@dataclass
class Section:
    """A labelled section of a song (verse, chorus, bridge, etc.)."""

    label: str | None  # e.g. "Verse 1", "Chorus", None for unlabelled passages
    lines: list[str] = field(default_factory=list)


@dataclass
class Song:
    """A song as handed over by the storage layer: metadata plus inline lyrics."""

    title: str
    artist: str
    lyrics: str = ""
    key: str | None = None
    capo: int | None = None

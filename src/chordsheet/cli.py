import logging
import re
import sys
from pathlib import Path

import click

from .chordpro import ChordProFormatter
from .display import render_stacked_line
from .exceptions import ImportFormatError
from .key_detection import detect_key
from .models import Song
from .normalizer import STRATEGIES, normalize
from .parser import extract_chords_from_lyrics, parse_lyrics
from .transposer import transpose_lyrics, transpose_parsed_line
from .ug_import import extract_song


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str) -> str:
    return f"{_slugify(artist)}-{_slugify(title)}.cho"


def _emit_chordpro(song: Song, semitones: int, flats: bool, output_path: str | None, stdout: bool) -> None:
    chordpro_text = ChordProFormatter().render(song, semitones=semitones, use_flats=flats)
    if stdout:
        click.echo(chordpro_text, nl=False)
        return
    dest = Path(output_path) if output_path else Path(_default_filename(song.artist, song.title))
    dest.write_text(chordpro_text, encoding="utf-8")
    click.echo(f"Written to {dest}")


semitones_option = click.option(
    "-s", "--semitones", default=0, show_default=True, type=int,
    help="Semitones to transpose by (negative = down).",
)
flats_option = click.option(
    "--flats", is_flag=True, default=False,
    help="Spell transposed chords with flats instead of sharps.",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr.")
def main(verbose: bool) -> None:
    """Parse, transpose and format chord-annotated lyrics.

    \b
    Lyrics use inline chords: "[C]Amazing [F]grace".
    Use --two-line (or `normalize`) for chords stacked above lyrics.
    SOURCE arguments accept "-" for stdin.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source", type=click.File("r"))
@semitones_option
@flats_option
@click.option("--stacked", is_flag=True, default=False,
              help="Print chords on their own row above each lyric.")
@click.option("--two-line", is_flag=True, default=False,
              help="Input has chord lines above lyric lines.")
def transpose(source, semitones: int, flats: bool, stacked: bool, two_line: bool) -> None:
    """Transpose every chord in SOURCE."""
    text = source.read()
    if two_line:
        text = normalize(text)

    if not stacked:
        click.echo(transpose_lyrics(text, semitones, flats))
        return

    for parsed in parse_lyrics(text):
        chord_row, lyric_row = render_stacked_line(transpose_parsed_line(parsed, semitones, flats))
        if chord_row:
            click.echo(chord_row)
        click.echo(lyric_row)


@main.command()
@click.argument("source", type=click.File("r"))
@semitones_option
def key(source, semitones: int) -> None:
    """Print the most likely major key of SOURCE."""
    text = source.read()
    click.echo(detect_key(transpose_lyrics(text, semitones)))


@main.command()
@click.argument("source", type=click.File("r"))
@semitones_option
@flats_option
def chords(source, semitones: int, flats: bool) -> None:
    """List the distinct chords in SOURCE, one per line."""
    text = transpose_lyrics(source.read(), semitones, flats)
    for chord in extract_chords_from_lyrics(text):
        click.echo(chord)


@main.command("normalize")
@click.argument("source", type=click.File("r"))
@click.option("--strategy", type=click.Choice(STRATEGIES), default="density", show_default=True,
              help="Chord-line detection: character density or short-line length.")
def normalize_command(source, strategy: str) -> None:
    """Convert chord-above-lyric SOURCE to inline [Chord] form."""
    click.echo(normalize(source.read(), strategy))


@main.command()
@click.argument("source", type=click.File("r"))
@click.option("--title", default="Untitled", show_default=True)
@click.option("--artist", default="Unknown", show_default=True)
@click.option("--key", "song_key", default=None, help="Original key (detected when omitted).")
@click.option("--capo", default=None, type=int)
@semitones_option
@flats_option
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def chordpro(source, title: str, artist: str, song_key: str | None, capo: int | None,
             semitones: int, flats: bool, output_path: str | None, stdout: bool) -> None:
    """Export inline-annotated SOURCE as a ChordPro file."""
    song = Song(title=title, artist=artist, lyrics=source.read(), key=song_key, capo=capo)
    _emit_chordpro(song, semitones, flats, output_path, stdout)


@main.command("import-ug")
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strategy", type=click.Choice(STRATEGIES), default="density", show_default=True)
@click.option("--chordpro", "as_chordpro", is_flag=True, default=False,
              help="Write ChordPro instead of printing inline lyrics.")
@semitones_option
@flats_option
@click.option("-o", "--output", "output_path", default=None, metavar="PATH")
@click.option("--stdout", is_flag=True, default=False)
def import_ug(page: Path, strategy: str, as_chordpro: bool, semitones: int, flats: bool,
              output_path: str | None, stdout: bool) -> None:
    """Convert a saved tabs.ultimate-guitar.com PAGE to inline lyrics."""
    try:
        song = extract_song(page.read_text(encoding="utf-8"), strategy)
    except ImportFormatError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if as_chordpro:
        _emit_chordpro(song, semitones, flats, output_path, stdout)
        return
    click.echo(transpose_lyrics(song.lyrics, semitones, flats))

"""
CLI viewer for Street Fighter 6 frame data.

Usage:
    framedata <character>            # List a character's moves
    framedata <character> <move>     # Show one move's frame data
    framedata --all                  # Load the roster, print the load report
"""

import argparse
import asyncio
import sys
from typing import Optional

from .config import config
from .core.catalog import Catalog
from .core.loader import load, load_all
from .core.models import Move
from .errors import CharacterLoadError, RosterLoadError, UnknownCharacter
from .logging_config import setup_logging
from .roster import resolve_character
from .scrapers.supercombo import PageSource


def _value(move: Move, field_id) -> str:
    value = move.get(field_id)
    return value.display() if value is not None else ""


def show_character(catalog: Catalog, character_id: str):
    moves = catalog.get(character_id)
    print(f"\n{'='*60}")
    print(f"  {character_id}: {len(moves)} moves")
    print(f"{'='*60}\n")

    print(f"  {'Move':<20} {'Startup':>7} {'Active':>7} {'Recovery':>8} {'Hit':>8} {'Block':>8}")
    print(f"  {'─'*20} {'─'*7} {'─'*7} {'─'*8} {'─'*8} {'─'*8}")
    for move in moves:
        print(
            f"  {move.canonical_notation:<20} {_value(move, 'startup'):>7} {_value(move, 'active'):>7} "
            f"{_value(move, 'recovery'):>8} {_value(move, 'on_hit'):>8} {_value(move, 'on_block'):>8}"
        )

    warnings = catalog.warnings.get(character_id, ())
    if warnings:
        print(f"\n  {len(warnings)} warnings")
    print()


def show_move(move: Move):
    print(f"\n{'='*60}")
    print(f"  {move.display_name} [{move.canonical_notation}]")
    if move.alias_notations:
        print(f"  aka: {', '.join(sorted(move.alias_notations))}")
    print(f"{'='*60}\n")

    for field_id, value in move.fields.items():
        print(f"  {field_id.value:<26} {value.display()}")
    for key, value in move.extra.items():
        print(f"  {key:<26} {value.display()}  (extra)")
    if move.image_url:
        print(f"\n  image: {move.image_url}")
    print()


def show_report(catalog: Catalog):
    print(f"\n{'='*60}")
    print(f"  {len(catalog)} characters loaded, {len(catalog.failures)} failed")
    print(f"{'='*60}\n")

    for cid in catalog:
        print(f"  {cid:<15} {len(catalog.get(cid)):>4} moves {len(catalog.warnings.get(cid, ())):>4} warnings")
    for cid, error in catalog.failures.items():
        print(f"  {cid:<15} FAILED ({error.stage}): {error.cause}")
    print()


def main(argv: Optional[list[str]] = None, source: Optional[PageSource] = None) -> int:
    parser = argparse.ArgumentParser(prog="framedata", description="Street Fighter 6 frame data viewer")
    parser.add_argument("character", nargs="?", help="Character id, name or alias (e.g. 'chun')")
    parser.add_argument("move", nargs="?", help="Move notation, alias or name fragment (e.g. 'cr.mk')")
    parser.add_argument("--all", action="store_true", help="Load every character and print the load report")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level (default: %(default)s)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    for issue in config.validate():
        print(f"  config: {issue}", file=sys.stderr)

    if not args.all and not args.character:
        parser.print_help()
        return 2

    try:
        if args.all:
            show_report(asyncio.run(load_all(source)))
            return 0

        character = resolve_character(args.character)
        catalog = asyncio.run(load(character, source))
    except (UnknownCharacter, CharacterLoadError, RosterLoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not args.move:
        show_character(catalog, character.id)
        return 0

    move = catalog.find_move(character.id, args.move)
    if move is None:
        print(f"\n  No move matching '{args.move}' for {character.display_name}")
        return 1
    show_move(move)
    return 0


if __name__ == "__main__":
    sys.exit(main())

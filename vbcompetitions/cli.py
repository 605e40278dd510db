"""
Command line validation of competition documents.

Usage:
    vbc-validate competition.json [more.json ...]
    vbc-validate --standings competition.json
    python -m vbcompetitions competition.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from vbcompetitions.config import get_settings
from vbcompetitions.exceptions import CompetitionError
from vbcompetitions.models.competition import Competition
from vbcompetitions.models.group import League
from vbcompetitions.services.loader import load_competition
from vbcompetitions.types import ValidationResultDict


def validate_file(path: str) -> tuple[ValidationResultDict, Optional[Competition]]:
    """
    Load one document and report whether it is valid.

    Returns:
        Tuple of (result, competition) where competition is None if loading failed
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        return {"path": path, "valid": False, "error": f"Cannot read file: {e}"}, None

    try:
        competition = load_competition(text)
    except CompetitionError as e:
        return {"path": path, "valid": False, "error": str(e)}, None
    return {"path": path, "valid": True, "error": None}, competition


def print_standings(competition: Competition, name_width: int) -> None:
    """Print every league table in the competition."""
    for stage in competition.get_stages():
        for group in stage.groups:
            if not isinstance(group, League):
                continue
            table = group.get_league_table()
            title = group.name or group.key
            print(f"\n=== {title} ===")
            if table.get_ordering_text():
                print(table.get_ordering_text())
            header = f"{'Team':<{name_width}} {'P':>3} {'W':>3} {'L':>3}"
            if table.has_draws:
                header += f" {'D':>3}"
            if table.has_sets:
                header += f" {'SF':>4} {'SA':>4}"
            header += f" {'PF':>5} {'PA':>5} {'PTS':>4}"
            print(header)
            for entry in table.entries:
                row = f"{entry.team[:name_width]:<{name_width}} {entry.played:>3} {entry.wins:>3} {entry.losses:>3}"
                if table.has_draws:
                    row += f" {entry.draws:>3}"
                if table.has_sets:
                    row += f" {entry.sf:>4} {entry.sa:>4}"
                row += f" {entry.pf:>5} {entry.pa:>5} {entry.pts:>4}"
                print(row)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Validate volleyball competition documents')
    parser.add_argument('files', nargs='+', metavar='FILE',
                        help='Competition JSON documents to validate')
    parser.add_argument('--standings', action='store_true',
                        help='Print the league tables of each valid document')
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    failures = 0
    for path in args.files:
        print(f"[*] Validating {path}")
        result, competition = validate_file(path)
        if not result["valid"]:
            failures += 1
            print(f"[-] {path}: {result['error']}")
            continue
        print(f"[+] {path}: valid")
        if args.standings:
            print_standings(competition, settings.TABLE_NAME_WIDTH)

    if failures:
        print(f"\n[-] {failures} of {len(args.files)} documents failed validation")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

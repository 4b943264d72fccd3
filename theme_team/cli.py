# theme_team/cli.py
"""
Command-line runner for the theme team recommender.
Generates teams without starting FastAPI.

- Single theme: prints the JSON response (same shape as the HTTP API)
- Batch: reads a Theme column from CSV/XLSX, runs each unique theme once,
  and writes a strict two-column CSV with headers: Theme, Key
- --seed makes a run reproducible
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from loguru import logger
from pydantic import ValidationError

from .catalog import load_catalog
from .config import GenerateTeamRequest
from .exceptions import QueryValidationError, ThemeTeamError
from .generator import generate_for_theme
from .logging_setup import configure_logging
from .mapping import map_result_to_response
from .models import Catalog, EvolutionStage, TeamResult
from .normalize import normalize_whitespace
from .random_util import get_rng
from .validation import to_query


def load_themes(path: Path) -> List[str]:
    ext = path.suffix.lower()
    df = pd.read_excel(path) if ext in {".xlsx", ".xls"} else pd.read_csv(path)
    cols = {c.lower(): c for c in df.columns}
    tcol = cols.get("theme")
    if not tcol:
        raise ValueError(f"Expected column 'Theme' in {path}. Found: {list(df.columns)}")
    # normalise to one-line themes
    return df[tcol].fillna("").astype(str).map(normalize_whitespace).tolist()


def _dedup_preserve_order(seq: Sequence[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for s in seq:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def write_two_column_csv(teams: Dict[str, List[str]], themes: Sequence[str], out_path: Path) -> int:
    """
    Write exactly two columns: Theme, Key.  Each (theme, team member key)
    becomes a row; themes keep the order given.
    """
    rows: List[Tuple[str, str]] = []
    for theme in themes:
        for key in teams.get(theme, []):
            rows.append((theme, key))
    df = pd.DataFrame(rows, columns=["Theme", "Key"])
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    return len(rows)


def _request_from_args(args: argparse.Namespace, theme: str) -> GenerateTeamRequest:
    return GenerateTeamRequest(
        theme_text=theme,
        team_size=args.size,
        evolution_stage=EvolutionStage(args.stage),
        generations=args.gen or None,
        exclude_legendaries=args.exclude_legendaries,
        allow_forms=args.allow_forms,
        allow_mega=args.allow_mega,
        allow_gmax=args.allow_gmax,
        allow_same_species_multiple=args.allow_same_species,
        allow_same_form_duplicates=args.allow_duplicates,
        include_types=args.include_type or None,
        exclude_types=args.exclude_type or None,
        debug=args.debug,
    )


def run_theme(
    args: argparse.Namespace,
    theme: str,
    catalog: Catalog,
    rng: np.random.Generator,
) -> TeamResult:
    query = to_query(_request_from_args(args, theme))
    return generate_for_theme(query, catalog, rng=rng)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate a themed team from the catalog.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--theme", type=str, help="theme text, e.g. 'spooky dogs'")
    src.add_argument("--in", dest="inp", type=str, help="CSV/XLSX file with a Theme column")
    ap.add_argument("--out", dest="out", type=str, default="artifacts/teams.csv", help="batch output CSV")
    ap.add_argument("--data-dir", type=str, default=None, help="directory holding the catalog JSON files")
    ap.add_argument("--size", type=int, default=None, help="team size 1-6 (default 6)")
    ap.add_argument("--stage", choices=[s.value for s in EvolutionStage], default=EvolutionStage.ANY.value)
    ap.add_argument("--gen", type=int, action="append", default=[], help="allowed generation (repeatable)")
    ap.add_argument("--include-legendaries", dest="exclude_legendaries", action="store_false")
    ap.add_argument("--allow-forms", action="store_true")
    ap.add_argument("--allow-mega", action="store_true")
    ap.add_argument("--allow-gmax", action="store_true")
    ap.add_argument("--allow-same-species", action="store_true")
    ap.add_argument("--allow-duplicates", action="store_true")
    ap.add_argument("--include-type", action="append", default=[])
    ap.add_argument("--exclude-type", action="append", default=[])
    ap.add_argument("--seed", type=int, default=None, help="seed for reproducible picks")
    ap.add_argument("--debug", action="store_true", help="include scored candidates in JSON output")
    ap.add_argument("--log-level", type=str, default=None)
    ap.set_defaults(exclude_legendaries=True)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        catalog = load_catalog(Path(args.data_dir) if args.data_dir else None)
    except ThemeTeamError as e:
        logger.error("Cannot load catalog: {}", e)
        return 2
    rng = get_rng(args.seed)

    if args.theme is not None:
        try:
            result = run_theme(args, args.theme, catalog, rng)
        except (QueryValidationError, ValidationError) as e:
            print(f"Invalid request: {e}", file=sys.stderr)
            return 1
        response = map_result_to_response(result, debug=args.debug)
        print(response.model_dump_json(by_alias=True, exclude_none=True, indent=2))
        return 0

    try:
        themes = load_themes(Path(args.inp))
    except (OSError, ValueError) as e:
        print(f"Cannot read themes: {e}", file=sys.stderr)
        return 1
    print(f"Loaded {len(themes)} themes from {args.inp}")
    unique_themes = _dedup_preserve_order(themes)
    print(f"Unique themes to run: {len(unique_themes)}")

    teams: Dict[str, List[str]] = {}
    for i, theme in enumerate(unique_themes, 1):
        try:
            result = run_theme(args, theme, catalog, rng)
            teams[theme] = [m.key for m in result.team]
        except (QueryValidationError, ValidationError) as e:
            logger.warning("{}/{} skipped '{}': {}", i, len(unique_themes), theme, e)
            teams[theme] = []
        if i % 10 == 0 or i == len(unique_themes):
            print(f"Processed {i}/{len(unique_themes)} unique themes")

    total_rows = write_two_column_csv(teams, unique_themes, Path(args.out))
    print(f"Wrote {total_rows} rows to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Command-line entry point: ``python -m playtype_roles``."""

import argparse
from pathlib import Path

from playtype_roles import config
from playtype_roles.data_sources import (
    fetch_season_from_nba_api,
    load_season_from_csv,
    load_season_from_sqlite,
    store_season_in_sqlite,
)
from playtype_roles.pipeline import export_results, run_analysis


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Cluster NBA players into offensive roles by play type")
    parser.add_argument("--season", default=config.DEFAULT_SEASON, help="Season, e.g. 2021-22")
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Pull the season from stats.nba.com and refresh the SQLite cache first",
    )
    parser.add_argument("--csv-dir", type=Path, default=None, help="Read season CSV exports from this directory")
    parser.add_argument("--db", type=Path, default=None, help="SQLite cache path")
    parser.add_argument("--k", type=int, default=config.N_CLUSTERS, help="Number of roles")
    parser.add_argument(
        "--min-games",
        type=int,
        default=config.MIN_GAMES,
        help="Players need more than this many games to be clustered",
    )
    parser.add_argument("--seed", type=int, default=config.RANDOM_STATE, help="K-means random state")
    parser.add_argument("--n-init", type=int, default=config.N_INIT, help="K-means restarts")
    parser.add_argument("--max-k", type=int, default=max(config.ELBOW_K_RANGE), help="Largest k on the elbow curve")
    parser.add_argument(
        "--labeling",
        choices=["index", "profile"],
        default="index",
        help="Name roles by fixed cluster number lookup or by centroid profile",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="Output root (data/, figures/, models/)")
    parser.add_argument("--no-plots", action="store_true", help="Skip figures")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)

    if args.csv_dir is not None:
        print(f"Loading {args.season} from {args.csv_dir}...")
        data = load_season_from_csv(args.csv_dir, args.season)
    elif args.fetch:
        data = fetch_season_from_nba_api(args.season)
        store_season_in_sqlite(data, args.db)
    else:
        print(f"Loading {args.season} from SQLite cache...")
        data = load_season_from_sqlite(args.season, args.db)

    result = run_analysis(
        data,
        n_clusters=args.k,
        min_games=args.min_games,
        random_state=args.seed,
        n_init=args.n_init,
        k_range=range(1, args.max_k + 1),
        labeling=args.labeling,
    )
    written = export_results(result, args.output_dir, make_plots=not args.no_plots)
    print(f"\nDone. Report: {written['report']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

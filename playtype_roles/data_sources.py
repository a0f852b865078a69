"""
Season data access.

Three logical tables feed the analysis, all keyed by player id:

- totals:      season totals per player (games, minutes, makes, attempts, ...)
- positions:   roster team and listed position per player
- frequencies: share of offensive possessions per play type

They can come from the NBA Stats API (``nba_api``), from a local SQLite cache,
or from CSV exports. Every loader returns the same lower-case schema.
"""

import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
from nba_api.stats.endpoints import LeagueDashPlayerStats, PlayerIndex, SynergyPlayTypes

from playtype_roles import config


TOTALS_TABLE = "player_season_totals"
POSITIONS_TABLE = "player_positions"
FREQUENCY_TABLE = "player_playtype_frequency"

TOTALS_COLUMNS = ["player_id", "player_name", "age", "gp"] + config.PER_GAME_STATS + config.PERCENT_STATS
POSITION_COLUMNS = ["player_id", "team", "position"]
FREQUENCY_COLUMNS = ["player_id"] + config.FREQUENCY_FEATURES

# NBA Stats column names that do not simply lower-case into the schema
RENAME_MAP = {
    "person_id": "player_id",
    "team_abbreviation": "team",
}


@dataclass
class SeasonData:
    season: str
    totals: pd.DataFrame
    positions: pd.DataFrame
    frequencies: pd.DataFrame


def _normalize_columns(df, required, source):
    """Lower-case NBA Stats headers, apply renames and keep the schema columns."""
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    df = df.rename(columns=RENAME_MAP)

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{source} missing required columns: {', '.join(missing)}")

    df = df[required].copy()
    df["player_id"] = df["player_id"].astype(str).str.strip()
    return df


def normalize_totals(df):
    totals = _normalize_columns(df, TOTALS_COLUMNS, "totals")
    numeric_cols = [c for c in TOTALS_COLUMNS if c not in ("player_id", "player_name")]
    for col in numeric_cols:
        totals[col] = pd.to_numeric(totals[col], errors="coerce")
    return totals


def normalize_positions(df):
    positions = _normalize_columns(df, POSITION_COLUMNS, "positions")
    for col in ["team", "position"]:
        positions[col] = positions[col].astype("string").str.strip().replace("", pd.NA)
    # One roster row per player; the API lists each player once but CSV exports may not
    return positions.drop_duplicates("player_id", keep="last")


def normalize_frequencies(df):
    freqs = _normalize_columns(df, FREQUENCY_COLUMNS, "frequencies")
    for col in config.FREQUENCY_FEATURES:
        freqs[col] = pd.to_numeric(freqs[col], errors="coerce")
    return freqs


def combine_playtype_frames(frames):
    """
    Pivot per-play-type frames into one row per player.

    ``frames`` maps an NBA Stats play type key (``"Isolation"``, ``"Cut"``, ...)
    to the API result for that play type. Traded players appear once per team
    stint; their shares are combined weighted by possessions when the frame
    carries ``POSS``, and averaged otherwise.
    """
    combined = None
    for play_type, df in frames.items():
        column = config.PLAY_TYPES.get(play_type)
        if column is None:
            raise ValueError(f"Unknown play type: {play_type}")
        if df is None or df.empty:
            continue

        df = df.copy()
        df.columns = [str(c).strip().upper() for c in df.columns]
        df["PLAYER_ID"] = df["PLAYER_ID"].astype(str).str.strip()
        df["POSS_PCT"] = pd.to_numeric(df["POSS_PCT"], errors="coerce")
        if "POSS" in df.columns:
            # Stint possessions over stint total, where total = POSS / POSS_PCT
            df["POSS"] = pd.to_numeric(df["POSS"], errors="coerce")
            df["TOTAL_POSS"] = df["POSS"] / df["POSS_PCT"].where(df["POSS_PCT"] > 0)
        grouped = df.groupby("PLAYER_ID")
        if "POSS" in df.columns:
            share = grouped["POSS"].sum(min_count=1) / grouped["TOTAL_POSS"].sum(min_count=1)
            share = share.fillna(grouped["POSS_PCT"].mean())
        else:
            share = grouped["POSS_PCT"].mean()
        agg = share.rename(column).rename_axis("player_id").reset_index()
        combined = agg if combined is None else combined.merge(agg, on="player_id", how="outer")

    if combined is None:
        combined = pd.DataFrame(columns=["player_id"])

    for column in config.FREQUENCY_FEATURES:
        if column not in combined.columns:
            combined[column] = np.nan

    return combined[FREQUENCY_COLUMNS].sort_values("player_id").reset_index(drop=True)


# =============================================================================
# NBA Stats API
# =============================================================================

def fetch_totals(season, season_type=config.SEASON_TYPE):
    stats = LeagueDashPlayerStats(
        season=season,
        season_type_all_star=season_type,
        per_mode_detailed="Totals",
    )
    return normalize_totals(stats.get_data_frames()[0])


def fetch_positions(season):
    index = PlayerIndex(season=season)
    return normalize_positions(index.get_data_frames()[0])


def fetch_playtype_frequencies(season, season_type=config.SEASON_TYPE, pause=0.6):
    frames = {}
    for play_type in config.PLAY_TYPES:
        print(f"  Fetching {play_type} play type frequencies...")
        result = SynergyPlayTypes(
            season=season,
            season_type_all_star=season_type,
            player_or_team_abbreviation="P",
            play_type_nullable=play_type,
            type_grouping_nullable="offensive",
            per_mode_simple="Totals",
        )
        frames[play_type] = result.get_data_frames()[0]
        time.sleep(pause)
    return combine_playtype_frames(frames)


def fetch_season_from_nba_api(season, season_type=config.SEASON_TYPE, pause=0.6):
    """
    Pull totals, positions and play type frequencies from stats.nba.com.

    No retries: a failed request aborts the run.
    """
    print(f"Fetching {season} {season_type} data from NBA Stats...")
    totals = fetch_totals(season, season_type)
    time.sleep(pause)
    positions = fetch_positions(season)
    time.sleep(pause)
    frequencies = fetch_playtype_frequencies(season, season_type, pause=pause)
    print(
        f"Fetched {len(totals)} player totals, {len(positions)} roster rows, "
        f"{len(frequencies)} play type rows"
    )
    return SeasonData(season=season, totals=totals, positions=positions, frequencies=frequencies)


# =============================================================================
# SQLite cache
# =============================================================================

def _table_exists(con, table):
    row = con.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    ).fetchone()
    return row is not None


def store_season_in_sqlite(data, db_path=None):
    """Replace one season's rows in the SQLite cache."""
    db_path = Path(db_path) if db_path else config.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    tables = {
        TOTALS_TABLE: data.totals,
        POSITIONS_TABLE: data.positions,
        FREQUENCY_TABLE: data.frequencies,
    }
    with sqlite3.connect(str(db_path)) as con:
        for table, df in tables.items():
            if _table_exists(con, table):
                con.execute(f"DELETE FROM {table} WHERE season = ?", (data.season,))
            out = df.copy()
            out.insert(0, "season", data.season)
            out.to_sql(table, con, if_exists="append", index=False)
    print(f"Saved: {db_path} ({data.season})")
    return db_path


def _read_season_table(con, table, season):
    if not _table_exists(con, table):
        raise ValueError(f"SQLite DB has no {table} table")
    df = pd.read_sql_query(f"SELECT * FROM {table} WHERE season = ?", con, params=[season])
    if df.empty:
        raise ValueError(f"No {table} rows found for season {season}")
    return df.drop(columns=["season"])


def load_season_from_sqlite(season, db_path=None):
    db_path = Path(db_path) if db_path else config.DB_PATH
    if not db_path.exists():
        raise FileNotFoundError(
            f"Missing {db_path}. Run with --fetch first to build the local cache."
        )

    with sqlite3.connect(str(db_path)) as con:
        totals = _read_season_table(con, TOTALS_TABLE, season)
        positions = _read_season_table(con, POSITIONS_TABLE, season)
        frequencies = _read_season_table(con, FREQUENCY_TABLE, season)

    return SeasonData(
        season=season,
        totals=normalize_totals(totals),
        positions=normalize_positions(positions),
        frequencies=normalize_frequencies(frequencies),
    )


# =============================================================================
# CSV exports
# =============================================================================

def load_season_from_csv(directory, season):
    """Read ``totals_<season>.csv``, ``positions_<season>.csv`` and ``playtypes_<season>.csv``."""
    directory = Path(directory)
    paths = {
        "totals": directory / f"totals_{season}.csv",
        "positions": directory / f"positions_{season}.csv",
        "playtypes": directory / f"playtypes_{season}.csv",
    }
    for path in paths.values():
        if not path.exists():
            raise FileNotFoundError(f"Missing {path}")

    def read(path):
        return pd.read_csv(path, dtype={"player_id": str, "PLAYER_ID": str, "PERSON_ID": str})

    return SeasonData(
        season=season,
        totals=normalize_totals(read(paths["totals"])),
        positions=normalize_positions(read(paths["positions"])),
        frequencies=normalize_frequencies(read(paths["playtypes"])),
    )

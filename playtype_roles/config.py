"""
Configuration for the play-type role analysis.

Paths can be overridden with environment variables; analysis constants are
plain module-level values so they are easy to tweak per season.
"""

import os
from pathlib import Path


# Paths
REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DB_PATH = REPO_ROOT / "data" / "nba_playtypes.sqlite"
DB_PATH = Path(os.getenv("PLAYTYPE_ROLES_DB_PATH", str(DEFAULT_DB_PATH))).expanduser()
OUTPUT_DIR = Path(os.getenv("PLAYTYPE_ROLES_OUTPUT_DIR", str(REPO_ROOT / "output"))).expanduser()
DEFAULT_SEASON = os.getenv("PLAYTYPE_ROLES_SEASON", "2021-22")
SEASON_TYPE = "Regular Season"

# NBA Stats play type key -> feature column
PLAY_TYPES = {
    "Transition": "freq_transition",
    "Isolation": "freq_isolation",
    "PRBallHandler": "freq_pnr_handler",
    "PRRollman": "freq_pnr_roll",
    "Postup": "freq_postup",
    "Spotup": "freq_spotup",
    "Handoff": "freq_handoff",
    "Cut": "freq_cut",
    "OffScreen": "freq_offscreen",
    "OffRebound": "freq_putback",
}
FREQUENCY_FEATURES = list(PLAY_TYPES.values())

FREQUENCY_LABELS = {
    "freq_transition": "Transition",
    "freq_isolation": "Isolation",
    "freq_pnr_handler": "P&R Ball Handler",
    "freq_pnr_roll": "P&R Roll Man",
    "freq_postup": "Post Up",
    "freq_spotup": "Spot Up",
    "freq_handoff": "Hand Off",
    "freq_cut": "Cut",
    "freq_offscreen": "Off Screen",
    "freq_putback": "Putback",
}

# Counting stats converted to per-game rates
PER_GAME_STATS = [
    "min",
    "fgm",
    "fga",
    "fg3m",
    "fg3a",
    "ftm",
    "fta",
    "pts",
    "ast",
    "oreb",
    "dreb",
    "reb",
    "blk",
    "stl",
    "pf",
    "tov",
]
PERCENT_STATS = ["fg_pct", "fg3_pct", "ft_pct"]

# Decimal places; anything not listed rounds to DEFAULT_PRECISION
DEFAULT_PRECISION = 2
STAT_PRECISION = {
    "min": 3,
    "fg3_pct": 3,
}

STAT_LABELS = {
    "min": "Minutes",
    "fgm": "FG Made",
    "fga": "FG Attempted",
    "fg3m": "3PT Made",
    "fg3a": "3PT Attempted",
    "ftm": "FT Made",
    "fta": "FT Attempted",
    "pts": "Points",
    "ast": "Assists",
    "oreb": "Off. Rebounds",
    "dreb": "Def. Rebounds",
    "reb": "Rebounds",
    "blk": "Blocks",
    "stl": "Steals",
    "pf": "Fouls",
    "tov": "Turnovers",
    "fg_pct": "FG%",
    "fg3_pct": "3PT%",
    "ft_pct": "FT%",
}

# Hybrid labels collapse onto their first (primary) category
POSITION_MAP = {
    "Guard": "Guard",
    "Guard-Forward": "Guard",
    "Forward": "Forward",
    "Forward-Guard": "Forward",
    "Forward-Center": "Forward",
    "Center": "Center",
    "Center-Forward": "Center",
    "G": "Guard",
    "G-F": "Guard",
    "F": "Forward",
    "F-G": "Forward",
    "F-C": "Forward",
    "C": "Center",
    "C-F": "Center",
}
POSITIONS = ["Guard", "Forward", "Center"]

# Clustering
MIN_GAMES = 29  # players need strictly more games than this
N_CLUSTERS = 7
ELBOW_K_RANGE = range(1, 21)
N_INIT = 50
MAX_ITER = 300
RANDOM_STATE = 42

# Cluster number (1-based) -> role. Tied to RANDOM_STATE and the input order;
# check with clustering.validate_role_labels after changing either.
ROLE_LABELS = {
    1: "Big Man Shooter",
    2: "Dynamic Shooter",
    3: "Primary Ball Handler",
    4: "Big Man Post Up",
    5: "Static Shooter",
    6: "Secondary Ball Handler",
    7: "Big Man Rim Runner",
}

ROLE_COLORS = {
    "Big Man Shooter": "#1f77b4",
    "Dynamic Shooter": "#ff7f0e",
    "Primary Ball Handler": "#2ca02c",
    "Big Man Post Up": "#d62728",
    "Static Shooter": "#9467bd",
    "Secondary Ball Handler": "#8c564b",
    "Big Man Rim Runner": "#e377c2",
}

FIGURE_DPI = 200


def get_paths(output_dir=None):
    """Resolve and create the data/figures/models output directories."""
    root = Path(output_dir).expanduser() if output_dir else OUTPUT_DIR
    paths = {
        "root": root,
        "data": root / "data",
        "figures": root / "figures",
        "models": root / "models",
    }
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths

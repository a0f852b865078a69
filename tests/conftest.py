import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from playtype_roles import config
from playtype_roles.data_sources import (
    SeasonData,
    normalize_frequencies,
    normalize_positions,
    normalize_totals,
)


# transition, isolation, pnr_handler, pnr_roll, postup, spotup, handoff, cut, offscreen, putback
PROTOTYPES = {
    "Big Man Shooter": ([0.08, 0.02, 0.01, 0.18, 0.08, 0.35, 0.01, 0.12, 0.01, 0.10], "Forward-Center"),
    "Dynamic Shooter": ([0.15, 0.03, 0.08, 0.00, 0.00, 0.30, 0.12, 0.07, 0.18, 0.01], "Guard-Forward"),
    "Primary Ball Handler": ([0.15, 0.15, 0.45, 0.00, 0.02, 0.10, 0.03, 0.03, 0.02, 0.01], "Guard"),
    "Big Man Post Up": ([0.06, 0.08, 0.02, 0.10, 0.40, 0.12, 0.02, 0.12, 0.01, 0.07], "Center"),
    "Static Shooter": ([0.20, 0.03, 0.04, 0.01, 0.01, 0.50, 0.03, 0.08, 0.03, 0.02], "Forward"),
    "Secondary Ball Handler": ([0.18, 0.06, 0.25, 0.00, 0.01, 0.25, 0.06, 0.06, 0.05, 0.01], "G"),
    "Big Man Rim Runner": ([0.10, 0.00, 0.00, 0.30, 0.03, 0.05, 0.01, 0.30, 0.00, 0.15], "C-F"),
}
PLAYERS_PER_ROLE = 6

# Per-game rates used to build totals for prototype players
BASE_RATES = {
    "min": 24.0, "fgm": 4.0, "fga": 9.0, "fg3m": 1.0, "fg3a": 3.0, "ftm": 1.5, "fta": 2.0,
    "pts": 10.5, "ast": 2.0, "oreb": 1.0, "dreb": 3.0, "reb": 4.0, "blk": 0.5, "stl": 0.7,
    "pf": 2.0, "tov": 1.2,
}

NBA_TOTALS_COLUMNS = {
    "player_id": "PLAYER_ID", "player_name": "PLAYER_NAME", "age": "AGE", "gp": "GP",
    "min": "MIN", "fgm": "FGM", "fga": "FGA", "fg_pct": "FG_PCT", "fg3m": "FG3M", "fg3a": "FG3A",
    "fg3_pct": "FG3_PCT", "ftm": "FTM", "fta": "FTA", "ft_pct": "FT_PCT", "oreb": "OREB",
    "dreb": "DREB", "reb": "REB", "ast": "AST", "tov": "TOV", "stl": "STL", "blk": "BLK",
    "pf": "PF", "pts": "PTS",
}


def _totals_row(player_id, name, gp, scale=1.0, **overrides):
    row = {"player_id": player_id, "player_name": name, "age": 26, "gp": gp}
    for stat, rate in BASE_RATES.items():
        row[stat] = round(rate * scale * gp)
    row.update({"fg_pct": 0.456, "fg3_pct": 0.3567, "ft_pct": 0.789})
    row.update(overrides)
    return row


def _freq_row(player_id, values):
    return {"player_id": player_id, **dict(zip(config.FREQUENCY_FEATURES, values))}


def build_raw_season():
    """Raw NBA Stats style frames: totals, player index and play type shares."""
    rng = np.random.default_rng(7)
    totals, positions, freqs = [], [], []
    pid = 1000

    for role, (prototype, position) in PROTOTYPES.items():
        for i in range(PLAYERS_PER_ROLE):
            pid += 1
            player_id = str(pid)
            name = f"{role} {i + 1}"
            totals.append(_totals_row(player_id, name, gp=40 + 5 * i, scale=1.0 + 0.1 * i))
            positions.append({"PERSON_ID": player_id, "TEAM_ABBREVIATION": "BOS", "POSITION": position})
            noise = rng.uniform(-0.005, 0.005, size=len(prototype))
            freqs.append(_freq_row(player_id, np.clip(np.array(prototype) + noise, 0, 1)))

    # Exactly 82 games and 574 field goals
    totals.append(_totals_row("2001", "Round Numbers", gp=82, fgm=574))
    positions.append({"PERSON_ID": "2001", "TEAM_ABBREVIATION": "LAL", "POSITION": "Guard"})
    freqs.append(_freq_row("2001", PROTOTYPES["Static Shooter"][0]))

    # No play type signal at all
    totals.append(_totals_row("2002", "No Signal", gp=70))
    positions.append({"PERSON_ID": "2002", "TEAM_ABBREVIATION": "LAL", "POSITION": "Forward"})
    freqs.append(_freq_row("2002", [0.0] * 10))

    # Not on any roster
    totals.append(_totals_row("2003", "No Team", gp=70))
    freqs.append(_freq_row("2003", PROTOTYPES["Static Shooter"][0]))

    # On the games threshold, so kept in features but not clustered
    totals.append(_totals_row("2004", "Short Season", gp=29))
    positions.append({"PERSON_ID": "2004", "TEAM_ABBREVIATION": "MIA", "POSITION": "Center"})
    freqs.append(_freq_row("2004", PROTOTYPES["Big Man Rim Runner"][0]))

    # Listed with an empty team
    totals.append(_totals_row("2005", "Free Agent", gp=50))
    positions.append({"PERSON_ID": "2005", "TEAM_ABBREVIATION": "", "POSITION": "Guard"})
    freqs.append(_freq_row("2005", PROTOTYPES["Primary Ball Handler"][0]))

    # Missing from the play type pull entirely
    totals.append(_totals_row("2006", "Untracked", gp=50))
    positions.append({"PERSON_ID": "2006", "TEAM_ABBREVIATION": "MIA", "POSITION": "Guard"})

    totals_df = pd.DataFrame(totals).rename(columns=NBA_TOTALS_COLUMNS)
    return totals_df, pd.DataFrame(positions), pd.DataFrame(freqs)


@pytest.fixture
def raw_season():
    return build_raw_season()


@pytest.fixture
def season_data(raw_season):
    totals, positions, freqs = raw_season
    return SeasonData(
        season="2021-22",
        totals=normalize_totals(totals),
        positions=normalize_positions(positions),
        frequencies=normalize_frequencies(freqs),
    )


@pytest.fixture
def prototype_roles():
    """player_name -> role of the prototype the player was drawn from."""
    return {
        f"{role} {i + 1}": role
        for role in PROTOTYPES
        for i in range(PLAYERS_PER_ROLE)
    }

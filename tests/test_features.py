import numpy as np
import pandas as pd
import pytest

from playtype_roles import config
from playtype_roles.features import (
    build_feature_table,
    normalize_frequencies,
    normalize_position,
    select_cluster_input,
    to_per_game,
)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Guard", "Guard"),
        ("Guard-Forward", "Guard"),
        ("Forward-Guard", "Forward"),
        ("Forward-Center", "Forward"),
        ("Center-Forward", "Center"),
        ("C", "Center"),
        ("g-f", "Guard"),
        (" F-C ", "Forward"),
    ],
)
def test_normalize_position(label, expected):
    assert normalize_position(label) == expected


@pytest.mark.parametrize("label", [None, np.nan, "", "Coach"])
def test_normalize_position_unknown(label):
    assert pd.isna(normalize_position(label))


def test_to_per_game_known_totals():
    totals = pd.DataFrame([{
        "player_id": "1", "gp": 82, "fgm": 574, "min": 2870, "fga": 1200, "fg3m": 0, "fg3a": 0,
        "ftm": 0, "fta": 0, "pts": 1500, "ast": 0, "oreb": 0, "dreb": 0, "reb": 0, "blk": 0,
        "stl": 0, "pf": 0, "tov": 0, "fg_pct": 0.47833, "fg3_pct": 0.35678, "ft_pct": 0.8,
    }])

    per_game = to_per_game(totals).iloc[0]

    assert per_game["fgm"] == 7.0
    assert per_game["fga"] == 14.63
    assert per_game["min"] == 35.0
    assert per_game["pts"] == 18.29
    assert per_game["fg_pct"] == 0.48
    assert per_game["fg3_pct"] == 0.357


def test_to_per_game_zero_games():
    totals = pd.DataFrame([{"player_id": "1", "gp": 0, **{s: 5 for s in config.PER_GAME_STATS}}])

    per_game = to_per_game(totals).iloc[0]

    for stat in config.PER_GAME_STATS:
        assert per_game[stat] == 0


def test_normalize_frequencies_percent_scale():
    freqs = pd.DataFrame({"player_id": ["1", "2"], "freq_spotup": [25.0, 50.0], "freq_cut": [0.1, None]})

    normalized = normalize_frequencies(freqs)

    assert normalized["freq_spotup"].tolist() == pytest.approx([0.25, 0.5])
    assert normalized["freq_cut"].tolist() == pytest.approx([0.001, 0.0])
    assert (normalized["freq_isolation"] == 0).all()


def test_normalize_frequencies_percent_scale_shared_across_columns():
    freqs = pd.DataFrame({
        "player_id": ["1", "2"],
        "freq_spotup": [40.0, 60.0],
        "freq_offscreen": [0.5, 0.9],
    })

    normalized = normalize_frequencies(freqs)

    assert normalized["freq_offscreen"].tolist() == pytest.approx([0.005, 0.009])
    assert (normalized[config.FREQUENCY_FEATURES].sum(axis=1) <= 1).all()


def test_normalize_frequencies_fractions_unchanged():
    freqs = pd.DataFrame({"player_id": ["1"], "freq_spotup": [0.6], "freq_cut": [0.4]})

    normalized = normalize_frequencies(freqs)

    assert normalized.loc[0, "freq_spotup"] == pytest.approx(0.6)
    assert normalized.loc[0, "freq_cut"] == pytest.approx(0.4)


def test_feature_table_per_game_matches_totals(season_data):
    features = build_feature_table(season_data.totals, season_data.positions, season_data.frequencies)
    raw = season_data.totals.set_index("player_id")

    for _, row in features.iterrows():
        gp = raw.loc[row["player_id"], "gp"]
        for stat in config.PER_GAME_STATS:
            precision = config.STAT_PRECISION.get(stat, config.DEFAULT_PRECISION)
            expected = round(raw.loc[row["player_id"], stat] / gp, precision)
            assert row[stat] == pytest.approx(expected, abs=10 ** -precision)


def test_feature_table_exclusions(season_data):
    features = build_feature_table(season_data.totals, season_data.positions, season_data.frequencies)
    ids = set(features["player_id"])

    assert "2001" in ids
    assert "2004" in ids
    assert "2002" not in ids  # all-zero frequencies
    assert "2003" not in ids  # not on a roster
    assert "2005" not in ids  # blank team
    assert "2006" not in ids  # no play type rows
    assert (features[config.FREQUENCY_FEATURES].sum(axis=1) > 0).all()
    assert features["team"].notna().all()
    assert set(features["position"].dropna()) <= set(config.POSITIONS)


def test_feature_table_round_numbers_player(season_data):
    features = build_feature_table(season_data.totals, season_data.positions, season_data.frequencies)
    row = features.set_index("player_id").loc["2001"]

    assert row["gp"] == 82
    assert row["fgm"] == 7.0
    assert row["team"] == "LAL"
    assert row["position"] == "Guard"


def test_select_cluster_input_threshold(season_data):
    features = build_feature_table(season_data.totals, season_data.positions, season_data.frequencies)

    default = select_cluster_input(features)
    lower = select_cluster_input(features, min_games=20)

    assert (default["gp"] > 29).all()
    assert "2004" not in set(default["player_id"])
    assert "2004" in set(lower["player_id"])
    assert default["player_id"].is_unique
    assert default["player_id"].tolist() == sorted(default["player_id"])

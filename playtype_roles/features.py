"""
Feature engineering: per-game rates, position normalization and the
play type frequency matrix used for clustering.
"""

import numpy as np
import pandas as pd

from playtype_roles import config


def normalize_position(label):
    """Collapse hybrid labels like 'Guard-Forward' onto their primary category."""
    if label is None or pd.isna(label):
        return np.nan
    text = str(label).strip()
    if text in config.POSITION_MAP:
        return config.POSITION_MAP[text]
    return config.POSITION_MAP.get(text.upper(), np.nan)


def _precision(col):
    return config.STAT_PRECISION.get(col, config.DEFAULT_PRECISION)


def to_per_game(totals):
    """
    Convert season totals to per-game rates.

    Counting stats are divided by games played; percentages are kept as-is.
    Players with zero games get zero rates.
    """
    df = totals.copy()
    gp = pd.to_numeric(df["gp"], errors="coerce").fillna(0)
    games = gp.replace(0, np.nan)

    for col in config.PER_GAME_STATS:
        values = pd.to_numeric(df[col], errors="coerce").fillna(0)
        df[col] = (values / games).fillna(0).round(_precision(col))

    for col in config.PERCENT_STATS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).round(_precision(col))

    df["gp"] = gp.astype(int)
    return df


def normalize_frequencies(frequencies):
    """Bring play type frequencies onto a [0, 1] scale with missing values as 0."""
    df = frequencies.copy()
    for col in config.FREQUENCY_FEATURES:
        if col not in df.columns:
            df[col] = 0.0
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0)

    # Some exports report 0-100 percentages instead of fractions; the scale
    # is shared by every play type column
    if df[config.FREQUENCY_FEATURES].to_numpy().max(initial=0.0) > 1:
        df[config.FREQUENCY_FEATURES] = df[config.FREQUENCY_FEATURES] / 100.0
    df[config.FREQUENCY_FEATURES] = df[config.FREQUENCY_FEATURES].clip(0, 1)
    return df


def build_feature_table(totals, positions, frequencies):
    """
    Join totals, roster positions and play type frequencies into one table.

    Players without a roster team and players with no play type signal are
    dropped silently. Any other missing numeric value becomes 0.
    """
    per_game = to_per_game(totals)

    roster = positions[["player_id", "team", "position"]].copy()
    roster["position"] = roster["position"].apply(normalize_position)

    freqs = normalize_frequencies(frequencies)[["player_id"] + config.FREQUENCY_FEATURES]

    features = per_game.merge(roster, on="player_id", how="left")
    features = features.merge(freqs, on="player_id", how="left")

    numeric_cols = features.select_dtypes(include="number").columns
    features[numeric_cols] = features[numeric_cols].fillna(0)

    n_start = len(features)
    features = features[features["team"].notna()]
    n_no_team = n_start - len(features)

    has_signal = features[config.FREQUENCY_FEATURES].sum(axis=1) > 0
    n_no_signal = int((~has_signal).sum())
    features = features[has_signal]

    print(
        f"Feature table: {len(features)} players "
        f"(dropped {n_no_team} without team, {n_no_signal} without play type data)"
    )

    front = ["player_id", "player_name", "team", "position", "age", "gp"]
    rest = [c for c in features.columns if c not in front]
    return features[front + rest].reset_index(drop=True)


def select_cluster_input(features, min_games=config.MIN_GAMES):
    """Players with more than ``min_games`` games, in a stable order."""
    subset = features[features["gp"] > min_games].copy()
    subset = subset.sort_values("player_id", kind="mergesort").reset_index(drop=True)
    print(f"Clustering input: {len(subset)} players with more than {min_games} games")
    return subset


def frequency_matrix(df):
    return df[config.FREQUENCY_FEATURES].to_numpy(dtype=float)

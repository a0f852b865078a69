"""
Role-level summaries and the 2-D projection used for charts.

Nothing here feeds back into cluster assignment.
"""

import pandas as pd
from sklearn.decomposition import PCA
from sklearn.preprocessing import StandardScaler

from playtype_roles import config
from playtype_roles.features import frequency_matrix


SUMMARY_STATS = config.PER_GAME_STATS + config.PERCENT_STATS


def role_summary(labeled, stats=None):
    """Mean and standard deviation of each stat per role, with player counts."""
    if stats is None:
        stats = SUMMARY_STATS
    stats = [s for s in stats if s in labeled.columns]

    grouped = labeled.groupby("role")[stats]
    summary = grouped.agg(["mean", "std"]).round(3)
    summary.columns = [f"{stat}_{agg}" for stat, agg in summary.columns]
    summary["count"] = labeled.groupby("role").size()
    return summary.reset_index()


def league_comparison(labeled, stats=None):
    """
    Per-role mean, std and difference from the league mean, long format.

    League = every labeled player.
    """
    if stats is None:
        stats = SUMMARY_STATS
    stats = [s for s in stats if s in labeled.columns]

    league_mean = labeled[stats].mean()
    rows = []
    for role, group in labeled.groupby("role"):
        for stat in stats:
            mean = group[stat].mean()
            rows.append({
                "role": role,
                "stat": stat,
                "role_mean": mean,
                "role_std": group[stat].std(),
                "league_mean": league_mean[stat],
                "diff_from_league": mean - league_mean[stat],
            })
    return pd.DataFrame(rows)


def pca_projection(labeled, n_components=2):
    """
    Project the frequency matrix onto its first principal components.

    Features are centered and scaled first. Returns a copy with ``pca_1``,
    ``pca_2`` columns and the explained variance ratio.
    """
    X = frequency_matrix(labeled)
    X_scaled = StandardScaler().fit_transform(X)

    pca = PCA(n_components=n_components)
    X_pca = pca.fit_transform(X_scaled)

    projected = labeled.copy()
    for i in range(n_components):
        projected[f"pca_{i + 1}"] = X_pca[:, i]
    return projected, pca.explained_variance_ratio_


def role_position_breakdown(labeled):
    """Player counts by role and (normalized) position."""
    positions = labeled["position"].fillna("Unknown")
    breakdown = pd.crosstab(labeled["role"], positions)
    ordered = [p for p in config.POSITIONS if p in breakdown.columns]
    extra = [p for p in breakdown.columns if p not in ordered]
    return breakdown[ordered + extra]


def select_representative_players(labeled, n=3, volume_col="min"):
    """Top ``n`` players per role by ``volume_col`` (minutes per game by default)."""
    rep_map = {}
    for role, group in labeled.groupby("role"):
        group = group.sort_values([volume_col, "player_name"], ascending=[False, True])
        rep_map[role] = group["player_name"].head(n).tolist()
    return rep_map

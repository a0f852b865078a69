"""
Static charts for the role analysis.

Every function writes one PNG and prints where it went.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from playtype_roles import config
from playtype_roles.utils.plot_utils import ordered_roles, role_colors, save_figure, stat_label


def plot_elbow(elbow, output_path, chosen_k=None):
    """WSS against k, with the chosen k marked."""
    output_path = Path(output_path)
    if elbow is None or elbow.empty:
        print("Skipping elbow plot: no data available.")
        return None

    wss_col = "wss_monotone" if "wss_monotone" in elbow.columns else "wss"

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(elbow["k"], elbow[wss_col], "o-", color="#1f77b4")

    if chosen_k is not None and chosen_k in set(elbow["k"]):
        chosen = elbow[elbow["k"] == chosen_k]
        ax.axvline(chosen_k, color="red", linestyle="--", alpha=0.7)
        ax.scatter(chosen["k"], chosen[wss_col], s=140, color="red", edgecolors="black", zorder=5)
        ax.annotate(
            f"k = {chosen_k}",
            (chosen_k, chosen[wss_col].iloc[0]),
            xytext=(10, 10),
            textcoords="offset points",
            color="red",
        )

    ax.set_xticks(elbow["k"])
    ax.set_xlabel("Number of Clusters (k)")
    ax.set_ylabel("Total Within-Cluster Sum of Squares")
    ax.set_title("Elbow Method for Choosing k", fontsize=13)
    ax.grid(alpha=0.3)

    plt.tight_layout()
    return save_figure(fig, output_path)


def plot_role_scatter(projected, output_path, explained=None, rep_map=None):
    """2D PCA scatter of players colored by role."""
    output_path = Path(output_path)
    fig, ax = plt.subplots(figsize=(14, 10))

    roles = ordered_roles(projected["role"].unique())
    colors = role_colors(roles)

    for role in roles:
        mask = projected["role"] == role
        ax.scatter(
            projected.loc[mask, "pca_1"],
            projected.loc[mask, "pca_2"],
            label=f"{role} (n={int(mask.sum())})",
            s=80,
            alpha=0.7,
            c=[colors[role]],
            edgecolors="black",
            linewidths=0.5,
        )

    if rep_map:
        for role, names in rep_map.items():
            rows = projected[(projected["role"] == role) & (projected["player_name"].isin(names))]
            for _, row in rows.iterrows():
                ax.annotate(row["player_name"], (row["pca_1"], row["pca_2"]), fontsize=8)

    xlabel, ylabel = "PCA Component 1", "PCA Component 2"
    if explained is not None and len(explained) >= 2:
        xlabel = f"{xlabel} ({explained[0]:.1%} of variance)"
        ylabel = f"{ylabel} ({explained[1]:.1%} of variance)"
    ax.set_xlabel(xlabel, fontsize=12)
    ax.set_ylabel(ylabel, fontsize=12)
    ax.set_title("Player Roles by Play Type Frequency (K-Means)", fontsize=14)

    ax.legend(
        title="Role",
        loc="upper center",
        bbox_to_anchor=(0.5, -0.10),
        ncol=3,
        frameon=True,
        fontsize=9,
        title_fontsize=10,
    )

    plt.tight_layout(rect=[0, 0.08, 1, 1])
    return save_figure(fig, output_path)


def plot_role_comparison(comparison, output_path, stats=None):
    """
    Role mean (with one standard deviation) against the league mean, one
    panel per stat.
    """
    output_path = Path(output_path)
    if comparison is None or comparison.empty:
        print("Skipping role comparison plot: no data available.")
        return None

    if stats is None:
        stats = ["pts", "ast", "reb", "fg3a", "fta", "tov"]
    stats = [s for s in stats if s in set(comparison["stat"])]

    roles = ordered_roles(comparison["role"].unique())
    colors = role_colors(roles)

    ncols = 3
    nrows = int(np.ceil(len(stats) / ncols))
    fig, axes = plt.subplots(nrows, ncols, figsize=(6 * ncols, 4.5 * nrows), squeeze=False)

    for ax, stat in zip(axes.flat, stats):
        data = comparison[comparison["stat"] == stat].set_index("role").reindex(roles)
        x = np.arange(len(roles))
        ax.bar(
            x,
            data["role_mean"],
            yerr=data["role_std"].fillna(0),
            color=[colors[r] for r in roles],
            edgecolor="black",
            linewidth=0.5,
            capsize=3,
        )
        ax.axhline(data["league_mean"].iloc[0], color="gray", linestyle="--", label="League mean")
        ax.set_xticks(x)
        ax.set_xticklabels(roles, rotation=45, ha="right", fontsize=8)
        ax.set_title(f"{stat_label(stat)} per Game", fontsize=11)
        ax.legend(frameon=False, fontsize=8)

    for ax in list(axes.flat)[len(stats):]:
        ax.axis("off")

    fig.suptitle("Role Averages vs League Average", fontsize=14)
    plt.tight_layout()
    return save_figure(fig, output_path)


def plot_centroid_heatmap(profiles, output_path, role_labels=None):
    """Cluster centroids (play type frequency) as an annotated heatmap."""
    output_path = Path(output_path)
    if role_labels is None:
        role_labels = config.ROLE_LABELS

    row_labels = [role_labels.get(int(c), f"Cluster {int(c)}") for c in profiles.index]
    col_labels = [stat_label(c) for c in profiles.columns]
    values = profiles.to_numpy()

    fig, ax = plt.subplots(figsize=(12, 7))
    im = ax.imshow(values, cmap="YlOrRd", vmin=0, vmax=max(values.max(), 1e-9), aspect="auto")

    ax.set_xticks(np.arange(len(col_labels)))
    ax.set_yticks(np.arange(len(row_labels)))
    ax.set_xticklabels(col_labels, rotation=45, ha="right")
    ax.set_yticklabels(row_labels)
    ax.tick_params(axis="both", length=0)

    threshold = values.max() * 0.6
    for i in range(values.shape[0]):
        for j in range(values.shape[1]):
            value = values[i, j]
            color = "white" if value >= threshold else "black"
            ax.text(j, i, f"{value:.2f}", ha="center", va="center", color=color, fontsize=8)

    ax.set_title("Play Type Frequency by Role (Cluster Centroids)", fontsize=14)
    cbar = plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label("Share of Possessions", fontsize=10)

    plt.tight_layout()
    return save_figure(fig, output_path)


def plot_position_breakdown(breakdown, output_path):
    """Stacked bars of listed position within each role."""
    output_path = Path(output_path)
    if breakdown is None or breakdown.empty:
        print("Skipping position breakdown plot: no data available.")
        return None

    roles = ordered_roles(breakdown.index)
    breakdown = breakdown.reindex(roles).fillna(0)
    position_colors = {"Guard": "#1f77b4", "Forward": "#2ca02c", "Center": "#d62728"}

    fig, ax = plt.subplots(figsize=(12, 6))
    x = np.arange(len(roles))
    bottom = np.zeros(len(roles))
    for position in breakdown.columns:
        values = breakdown[position].to_numpy(dtype=float)
        ax.bar(
            x,
            values,
            bottom=bottom,
            label=position,
            color=position_colors.get(position, "#7f7f7f"),
            edgecolor="black",
            linewidth=0.5,
        )
        bottom += values

    ax.set_ylabel("Players")
    ax.set_title("Listed Position within Each Role", fontsize=14)
    ax.set_xticks(x)
    ax.set_xticklabels(roles, rotation=30, ha="right")
    ax.legend(title="Position", frameon=False)

    plt.tight_layout()
    return save_figure(fig, output_path)

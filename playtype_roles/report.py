"""
Markdown write-up of a role analysis run.
"""

import os
from pathlib import Path

from playtype_roles.utils.plot_utils import ordered_roles, stat_label


ROLE_DESCRIPTIONS = {
    "Big Man Shooter": "Bigs who space the floor: spot-ups and pick-and-pop looks mixed with some work inside.",
    "Dynamic Shooter": "Shooters who move to get open, running off screens and hand-offs.",
    "Primary Ball Handler": "Offensive engines who live in the pick-and-roll and in isolation.",
    "Big Man Post Up": "Bigs whose offense runs through post touches.",
    "Static Shooter": "Floor spacers who mostly wait on the perimeter for spot-up chances.",
    "Secondary Ball Handler": "Players who run some pick-and-roll but share creation duties.",
    "Big Man Rim Runner": "Bigs who roll to the rim, cut and clean up the offensive glass.",
}

TABLE_STATS = ["min", "pts", "ast", "reb", "fg3a", "fta", "tov"]


def _table(df, floatfmt=".2f"):
    return df.to_markdown(index=False, floatfmt=floatfmt)


def _figure_link(title, path, report_dir):
    rel = os.path.relpath(Path(path), report_dir)
    return f"![{title}]({Path(rel).as_posix()})"


def build_markdown_report(result, figures=None, report_dir=None):
    figures = figures or {}
    report_dir = Path(report_dir) if report_dir else Path(".")
    labeled = result.labeled
    roles = ordered_roles(labeled["role"].unique())

    lines = [
        f"# Offensive Roles in the NBA, {result.season}",
        "",
        f"{len(result.features)} players had a team and at least one tracked play type. "
        f"Of those, {len(labeled)} played more than {result.min_games} games and were "
        f"clustered into {result.n_clusters} roles using k-means on the share of their "
        "possessions spent in each of ten play types.",
        "",
        "## Choosing the number of roles",
        "",
        "Total within-cluster sum of squares for each candidate k:",
        "",
        _table(result.elbow, floatfmt=".4f"),
        "",
        f"k = {result.n_clusters} was chosen for the role model below.",
        "",
    ]
    if "elbow" in figures:
        lines += [_figure_link("Elbow curve", figures["elbow"], report_dir), ""]

    lines += ["## The roles", ""]
    counts = labeled["role"].value_counts()
    for role in roles:
        reps = ", ".join(result.representatives.get(role, []))
        lines.append(f"### {role} ({int(counts.get(role, 0))} players)")
        lines.append("")
        description = ROLE_DESCRIPTIONS.get(role)
        if description:
            lines.append(description)
            lines.append("")
        if reps:
            lines.append(f"Most minutes: {reps}.")
            lines.append("")

    lines += ["## Play type profile", ""]
    profiles = result.profiles.copy()
    profiles.insert(0, "role", [result.role_map.get(int(c), f"Cluster {int(c)}") for c in profiles.index])
    profiles.columns = ["role"] + [stat_label(c) for c in profiles.columns[1:]]
    lines += [_table(profiles.reset_index(drop=True)), ""]
    if "centroids" in figures:
        lines += [_figure_link("Centroid heatmap", figures["centroids"], report_dir), ""]
    if "scatter" in figures:
        ev = result.explained_variance
        lines += [
            f"The first two principal components explain {ev[0]:.1%} and {ev[1]:.1%} of the "
            "variance in the (standardized) play type frequencies.",
            "",
            _figure_link("Roles in PCA space", figures["scatter"], report_dir),
            "",
        ]

    lines += ["## How the roles compare", "", "Per-game averages by role (league average in the last row):", ""]
    stats = [s for s in TABLE_STATS if s in labeled.columns]
    means = labeled.groupby("role")[stats].mean().reindex(roles)
    means.loc["League"] = labeled[stats].mean()
    means = means.reset_index()
    means.columns = ["role"] + [stat_label(s) for s in stats]
    lines += [_table(means), ""]
    if "comparison" in figures:
        lines += [_figure_link("Role vs league", figures["comparison"], report_dir), ""]

    lines += ["## Positions", ""]
    breakdown = result.position_breakdown.reindex(roles).fillna(0).astype(int)
    breakdown.index.name = "role"
    breakdown.columns.name = None
    breakdown = breakdown.reset_index()
    lines += [_table(breakdown), ""]
    if "positions" in figures:
        lines += [_figure_link("Positions by role", figures["positions"], report_dir), ""]

    if result.label_mismatches is not None and not result.label_mismatches.empty:
        lines += [
            "## Note on role labels",
            "",
            "Some cluster numbers carry a name that does not match their centroid profile:",
            "",
            _table(result.label_mismatches),
            "",
        ]

    return "\n".join(lines).rstrip() + "\n"


def write_markdown_report(result, output_path, figures=None):
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    text = build_markdown_report(result, figures=figures, report_dir=output_path.parent)
    output_path.write_text(text, encoding="utf-8")
    print(f"Saved: {output_path}")
    return output_path

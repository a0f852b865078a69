"""
End-to-end role analysis: features -> elbow curve -> k-means -> roles -> reports.
"""

from dataclasses import dataclass, field
from pathlib import Path

import joblib
import numpy as np
import pandas as pd

from playtype_roles import config, plots
from playtype_roles.clustering import (
    centroid_profiles,
    cluster_players,
    elbow_curve,
    label_roles,
    validate_role_labels,
)
from playtype_roles.features import build_feature_table, frequency_matrix, select_cluster_input
from playtype_roles.report import write_markdown_report
from playtype_roles.reporting import (
    league_comparison,
    pca_projection,
    role_position_breakdown,
    role_summary,
    select_representative_players,
)


OUTPUT_COLUMNS = (
    ["player_id", "player_name", "position", "team", "age", "gp"]
    + config.PER_GAME_STATS
    + config.PERCENT_STATS
    + config.FREQUENCY_FEATURES
    + ["cluster", "role"]
)


@dataclass
class AnalysisResult:
    season: str
    n_clusters: int
    min_games: int
    features: pd.DataFrame
    cluster_input: pd.DataFrame
    elbow: pd.DataFrame
    labeled: pd.DataFrame
    model: object
    profiles: pd.DataFrame
    role_map: dict
    summary: pd.DataFrame
    comparison: pd.DataFrame
    projection: pd.DataFrame
    explained_variance: np.ndarray
    position_breakdown: pd.DataFrame
    representatives: dict
    label_mismatches: pd.DataFrame = field(default_factory=pd.DataFrame)


def run_analysis(
    data,
    n_clusters=config.N_CLUSTERS,
    min_games=config.MIN_GAMES,
    random_state=config.RANDOM_STATE,
    n_init=config.N_INIT,
    max_iter=config.MAX_ITER,
    k_range=config.ELBOW_K_RANGE,
    role_labels=None,
    labeling="index",
):
    """Run the full analysis on one season of data, in memory."""
    if role_labels is None:
        role_labels = config.ROLE_LABELS

    print(f"\n{'=' * 60}\nFEATURE ENGINEERING ({data.season})\n{'=' * 60}")
    features = build_feature_table(data.totals, data.positions, data.frequencies)
    cluster_input = select_cluster_input(features, min_games=min_games)

    print(f"\n{'=' * 60}\nMODEL SELECTION\n{'=' * 60}")
    elbow = elbow_curve(
        frequency_matrix(cluster_input),
        k_range=k_range,
        random_state=random_state,
        n_init=n_init,
        max_iter=max_iter,
    )

    print(f"\n{'=' * 60}\nCLUSTERING (k={n_clusters})\n{'=' * 60}")
    labeled, model = cluster_players(
        cluster_input,
        n_clusters=n_clusters,
        random_state=random_state,
        n_init=n_init,
        max_iter=max_iter,
    )
    labeled = label_roles(labeled, model, labeling=labeling, role_labels=role_labels)
    labeled = labeled[[c for c in OUTPUT_COLUMNS if c in labeled.columns]]

    profiles = centroid_profiles(model)
    pairs = labeled[["cluster", "role"]].drop_duplicates().sort_values("cluster")
    role_map = {int(c): r for c, r in zip(pairs["cluster"], pairs["role"])}
    if labeling == "index":
        mismatches = validate_role_labels(profiles, role_labels)
    else:
        mismatches = pd.DataFrame(columns=["cluster", "configured_role", "profile_role"])

    print("\nPlayers per role:")
    print(labeled["role"].value_counts().to_string())

    projection, explained = pca_projection(labeled)

    return AnalysisResult(
        season=data.season,
        n_clusters=n_clusters,
        min_games=min_games,
        features=features,
        cluster_input=cluster_input,
        elbow=elbow,
        labeled=labeled,
        model=model,
        profiles=profiles,
        role_map=role_map,
        summary=role_summary(labeled),
        comparison=league_comparison(labeled),
        projection=projection,
        explained_variance=explained,
        position_breakdown=role_position_breakdown(labeled),
        representatives=select_representative_players(labeled),
        label_mismatches=mismatches,
    )


def export_results(result, output_dir=None, make_plots=True):
    """Write tables, the fitted model, figures and the Markdown report."""
    paths = config.get_paths(output_dir)
    season = result.season
    written = {}

    tables = {
        "labeled": (result.labeled, f"player_roles_{season}.csv"),
        "summary": (result.summary, f"role_summary_{season}.csv"),
        "comparison": (result.comparison, f"role_vs_league_{season}.csv"),
        "elbow": (result.elbow, f"elbow_{season}.csv"),
        "profiles": (result.profiles.reset_index(), f"role_centroids_{season}.csv"),
    }
    for key, (df, filename) in tables.items():
        path = paths["data"] / filename
        df.to_csv(path, index=False)
        print(f"Saved: {path}")
        written[key] = path

    model_path = paths["models"] / f"kmeans_roles_{season}.joblib"
    joblib.dump(
        {
            "model": result.model,
            "features": config.FREQUENCY_FEATURES,
            "role_map": result.role_map,
            "min_games": result.min_games,
        },
        model_path,
    )
    print(f"Saved: {model_path}")
    written["model"] = model_path

    figures = {}
    if make_plots:
        figures_dir = paths["figures"]
        figures["elbow"] = plots.plot_elbow(
            result.elbow, figures_dir / f"elbow_{season}.png", chosen_k=result.n_clusters
        )
        figures["scatter"] = plots.plot_role_scatter(
            result.projection,
            figures_dir / f"role_pca_{season}.png",
            explained=result.explained_variance,
            rep_map=result.representatives,
        )
        figures["comparison"] = plots.plot_role_comparison(
            result.comparison, figures_dir / f"role_vs_league_{season}.png"
        )
        figures["centroids"] = plots.plot_centroid_heatmap(
            result.profiles, figures_dir / f"role_centroids_{season}.png", role_labels=result.role_map
        )
        figures["positions"] = plots.plot_position_breakdown(
            result.position_breakdown, figures_dir / f"role_positions_{season}.png"
        )
        figures = {k: v for k, v in figures.items() if v is not None}
        written.update({f"figure_{k}": v for k, v in figures.items()})

    report_path = paths["root"] / f"player_roles_{season}.md"
    write_markdown_report(result, report_path, figures=figures)
    written["report"] = report_path
    return written


def load_model_bundle(path):
    """Load a bundle written by ``export_results``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing {path}. Run the analysis first.")
    return joblib.load(path)

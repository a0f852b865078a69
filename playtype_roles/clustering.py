"""
K-means role clustering on play type frequencies.

Model selection follows the elbow method: fit k-means for a range of k and
record the total within-cluster sum of squares. Picking the knee is left to
whoever reads the curve; the final fit uses a fixed k (7 by default).

Cluster numbers are 1-based throughout so they match the role lookup table.
"""

import warnings

import numpy as np
import pandas as pd
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from playtype_roles import config
from playtype_roles.features import frequency_matrix


# Greedy centroid-profile rules, applied in order. Each rule claims the
# remaining cluster with the highest summed frequency over its columns.
PROFILE_RULES = [
    ("Big Man Post Up", ["freq_postup"]),
    ("Big Man Rim Runner", ["freq_pnr_roll", "freq_cut", "freq_putback"]),
    ("Primary Ball Handler", ["freq_pnr_handler", "freq_isolation"]),
    ("Secondary Ball Handler", ["freq_pnr_handler", "freq_isolation"]),
    ("Dynamic Shooter", ["freq_offscreen", "freq_handoff"]),
    ("Big Man Shooter", ["freq_pnr_roll", "freq_putback", "freq_postup", "freq_cut"]),
    ("Static Shooter", ["freq_spotup"]),
]


def fit_kmeans(
    X,
    n_clusters,
    random_state=config.RANDOM_STATE,
    n_init=config.N_INIT,
    max_iter=config.MAX_ITER,
):
    """
    Fit k-means and keep the restart with the lowest inertia.

    A restart that hits ``max_iter`` before converging still competes on
    inertia; the convergence warning is not treated as an error.
    """
    model = KMeans(
        n_clusters=n_clusters,
        init="k-means++",
        n_init=n_init,
        max_iter=max_iter,
        random_state=random_state,
        algorithm="lloyd",
    )
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", category=ConvergenceWarning)
        model.fit(X)
    return model


def elbow_curve(
    X,
    k_range=config.ELBOW_K_RANGE,
    random_state=config.RANDOM_STATE,
    n_init=config.N_INIT,
    max_iter=config.MAX_ITER,
):
    """
    Total within-cluster sum of squares for each k.

    Values of k larger than the number of samples are skipped. ``wss`` is the
    inertia of the best fit at each k; ``wss_monotone`` never increases with k.
    """
    X = np.asarray(X, dtype=float)
    n_samples = X.shape[0]

    rows = []
    print("Computing elbow curve...")
    for k in k_range:
        if k < 1 or k > n_samples:
            continue
        model = fit_kmeans(X, k, random_state=random_state, n_init=n_init, max_iter=max_iter)
        rows.append({"k": k, "wss": float(model.inertia_)})
        print(f"  k={k:2d}  WSS={model.inertia_:.4f}")

    elbow = pd.DataFrame(rows, columns=["k", "wss"])
    # Independent fits per k can land a hair above the previous optimum;
    # wss keeps the fitted inertia, wss_monotone is its running minimum
    elbow["wss_monotone"] = np.minimum.accumulate(elbow["wss"].to_numpy(dtype=float))
    return elbow


def cluster_players(
    cluster_input,
    n_clusters=config.N_CLUSTERS,
    random_state=config.RANDOM_STATE,
    n_init=config.N_INIT,
    max_iter=config.MAX_ITER,
):
    """
    Run the final k-means fit on the frequency columns.

    Returns a copy of ``cluster_input`` with a 1-based ``cluster`` column and
    the fitted model.
    """
    if len(cluster_input) < n_clusters:
        raise ValueError(
            f"Need at least {n_clusters} players to fit {n_clusters} clusters, got {len(cluster_input)}"
        )

    X = frequency_matrix(cluster_input)
    model = fit_kmeans(X, n_clusters, random_state=random_state, n_init=n_init, max_iter=max_iter)

    labeled = cluster_input.copy()
    labeled["cluster"] = model.labels_.astype(int) + 1
    return labeled, model


def assign_roles(labeled, role_labels=None):
    """Attach role names via the static cluster number lookup."""
    if role_labels is None:
        role_labels = config.ROLE_LABELS

    labeled = labeled.copy()
    labeled["role"] = [
        role_labels.get(int(c), f"Cluster {int(c)}") for c in labeled["cluster"]
    ]
    return labeled


def centroid_profiles(model, feature_cols=None):
    """Cluster centroids as a (cluster x frequency feature) table."""
    if feature_cols is None:
        feature_cols = config.FREQUENCY_FEATURES
    centers = model.cluster_centers_
    return pd.DataFrame(
        centers,
        columns=feature_cols,
        index=pd.Index(np.arange(1, centers.shape[0] + 1), name="cluster"),
    )


def profile_role_labels(profiles):
    """
    Name clusters from their centroid profile instead of their number.

    Only defined for the seven-role scheme.
    """
    if len(profiles) != len(PROFILE_RULES):
        raise ValueError(
            f"Profile labeling needs exactly {len(PROFILE_RULES)} clusters, got {len(profiles)}"
        )

    remaining = list(profiles.index)
    labels = {}
    for role, cols in PROFILE_RULES:
        scores = profiles.loc[remaining, cols].sum(axis=1)
        best = scores.idxmax()
        labels[int(best)] = role
        remaining.remove(best)
    return labels


def validate_role_labels(profiles, role_labels=None):
    """
    Compare the static lookup against profile-derived names.

    Returns one row per disagreeing cluster; an empty frame means the lookup
    still matches the centroids.
    """
    if role_labels is None:
        role_labels = config.ROLE_LABELS
    columns = ["cluster", "configured_role", "profile_role"]

    if len(profiles) != len(PROFILE_RULES):
        print(f"Skipping role label validation: needs {len(PROFILE_RULES)} clusters, got {len(profiles)}")
        return pd.DataFrame(columns=columns)

    derived = profile_role_labels(profiles)
    rows = []
    for cluster in profiles.index:
        configured = role_labels.get(int(cluster))
        if configured != derived[int(cluster)]:
            rows.append({
                "cluster": int(cluster),
                "configured_role": configured,
                "profile_role": derived[int(cluster)],
            })

    mismatches = pd.DataFrame(rows, columns=columns)
    if not mismatches.empty:
        print(f"Warning: {len(mismatches)} cluster(s) carry a role label that does not match the centroid profile")
    return mismatches


def label_roles(labeled, model, labeling="index", role_labels=None):
    """Attach role names by static lookup (``"index"``) or centroid profile (``"profile"``)."""
    if labeling == "index":
        return assign_roles(labeled, role_labels)
    if labeling == "profile":
        return assign_roles(labeled, profile_role_labels(centroid_profiles(model)))
    raise ValueError(f"Unknown labeling: {labeling}")

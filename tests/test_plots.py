import pandas as pd

from playtype_roles import plots
from playtype_roles.utils.plot_utils import ordered_roles, role_colors


def test_ordered_roles_follow_lookup_table():
    roles = ["Static Shooter", "Cluster 9", "Big Man Shooter", "Big Man Post Up"]

    assert ordered_roles(roles) == ["Big Man Shooter", "Big Man Post Up", "Static Shooter", "Cluster 9"]


def test_role_colors_cover_unknown_roles():
    colors = role_colors(["Static Shooter", "Cluster 8"])

    assert colors["Static Shooter"] == "#9467bd"
    assert "Cluster 8" in colors


def test_plot_elbow_writes_png(tmp_path):
    elbow = pd.DataFrame({"k": [1, 2, 3], "wss": [3.0, 1.5, 1.0]})

    path = plots.plot_elbow(elbow, tmp_path / "elbow.png", chosen_k=2)

    assert path.exists()


def test_plot_elbow_skips_empty(tmp_path):
    assert plots.plot_elbow(pd.DataFrame(columns=["k", "wss"]), tmp_path / "elbow.png") is None
    assert not (tmp_path / "elbow.png").exists()


def test_plot_elbow_uses_monotone_curve(tmp_path):
    elbow = pd.DataFrame({"k": [1, 2, 3], "wss": [3.0, 1.4, 1.5], "wss_monotone": [3.0, 1.4, 1.4]})

    path = plots.plot_elbow(elbow, tmp_path / "elbow.png", chosen_k=3)

    assert path.exists()


def test_plot_position_breakdown_writes_png(tmp_path):
    breakdown = pd.DataFrame(
        {"Guard": [5, 0], "Center": [0, 4]},
        index=pd.Index(["Primary Ball Handler", "Big Man Post Up"], name="role"),
    )

    path = plots.plot_position_breakdown(breakdown, tmp_path / "nested" / "positions.png")

    assert path.exists()

"""
Shared matplotlib helpers for the role charts.

Keeps colors, labels and figure saving consistent across plots.
"""

import matplotlib.pyplot as plt
import numpy as np

from playtype_roles import config


def role_colors(roles):
    """
    Map each role to a color.

    Known roles keep their fixed color; anything else (e.g. 'Cluster 8')
    takes the next Set2 color.
    """
    roles = list(roles)
    unknown = [r for r in roles if r not in config.ROLE_COLORS]
    fallback = plt.cm.Set2(np.linspace(0, 1, max(len(unknown), 1)))
    colors = {}
    for role in roles:
        if role in config.ROLE_COLORS:
            colors[role] = config.ROLE_COLORS[role]
        else:
            colors[role] = fallback[unknown.index(role)]
    return colors


def ordered_roles(roles):
    """Roles in lookup-table order, unknown roles appended alphabetically."""
    roles = set(roles)
    known = [r for r in config.ROLE_LABELS.values() if r in roles]
    return known + sorted(roles - set(known))


def stat_label(stat):
    return config.STAT_LABELS.get(stat, config.FREQUENCY_LABELS.get(stat, stat.replace("_", " ").title()))


def save_figure(fig, output_path, dpi=config.FIGURE_DPI):
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    print(f"Saved: {output_path}")
    plt.close(fig)
    return output_path

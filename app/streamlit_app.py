import os
from pathlib import Path

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from playtype_roles import config
from playtype_roles.reporting import league_comparison, pca_projection, select_representative_players
from playtype_roles.utils.plot_utils import ordered_roles, stat_label

APP_BG = "#0B0F1A"
PANEL_BG = "#121826"
TEXT_COLOR = "#E6E8EE"
MUTED_TEXT = "#98A1B3"
ACCENT = "#F5C84C"
PLOT_HEIGHT = 620


def resolve_output_dir(sidebar_value: str) -> Path:
    env_path = os.getenv("PLAYTYPE_ROLES_OUTPUT_DIR")
    candidate = sidebar_value or env_path or str(config.OUTPUT_DIR)
    return Path(candidate).expanduser()


@st.cache_data(show_spinner=False)
def get_seasons(data_dir: str) -> list[str]:
    files = sorted(Path(data_dir).glob("player_roles_*.csv"))
    return [f.stem.replace("player_roles_", "") for f in files]


@st.cache_data(show_spinner=False)
def load_roles(data_dir: str, season: str) -> pd.DataFrame:
    path = Path(data_dir) / f"player_roles_{season}.csv"
    return pd.read_csv(path, dtype={"player_id": str})


def plot_pca_scatter(df: pd.DataFrame, explained) -> go.Figure:
    roles = ordered_roles(df["role"].unique())
    fig = px.scatter(
        df,
        x="pca_1",
        y="pca_2",
        color="role",
        category_orders={"role": roles},
        color_discrete_map=config.ROLE_COLORS,
        hover_name="player_name",
        hover_data={"team": True, "position": True, "pts": ":.1f", "pca_1": False, "pca_2": False},
        height=PLOT_HEIGHT,
    )
    fig.update_traces(marker=dict(size=10, line=dict(width=0.5, color="black")))
    fig.update_layout(
        paper_bgcolor=APP_BG,
        plot_bgcolor=PANEL_BG,
        font_color=TEXT_COLOR,
        xaxis_title=f"PCA Component 1 ({explained[0]:.1%})",
        yaxis_title=f"PCA Component 2 ({explained[1]:.1%})",
        legend_title_text="Role",
    )
    return fig


def plot_role_profile(df: pd.DataFrame, role: str) -> go.Figure:
    features = config.FREQUENCY_FEATURES
    role_means = df.loc[df["role"] == role, features].mean()
    league_means = df[features].mean()
    labels = [stat_label(f) for f in features]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=role_means.values, name=role, marker_color=ACCENT))
    fig.add_trace(go.Bar(x=labels, y=league_means.values, name="League", marker_color=MUTED_TEXT))
    fig.update_layout(
        barmode="group",
        paper_bgcolor=APP_BG,
        plot_bgcolor=PANEL_BG,
        font_color=TEXT_COLOR,
        yaxis_title="Share of Possessions",
        height=420,
    )
    return fig


def main():
    st.set_page_config(page_title="NBA Offensive Roles", layout="wide")
    st.title("NBA Offensive Roles")

    with st.sidebar:
        st.header("Filters")
        default_dir = os.getenv("PLAYTYPE_ROLES_OUTPUT_DIR", str(config.OUTPUT_DIR))
        dir_input = st.text_input("Output directory", value=default_dir)
        data_dir = resolve_output_dir(dir_input) / "data"
        if not data_dir.exists():
            st.error(f"No analysis output at {data_dir}. Run `python -m playtype_roles` first.")
            st.stop()

        seasons = get_seasons(str(data_dir))
        if not seasons:
            st.error("No player_roles_*.csv files found.")
            st.stop()
        season = st.selectbox("Season", seasons, index=len(seasons) - 1)

        df = load_roles(str(data_dir), season)
        roles = ordered_roles(df["role"].unique())
        role = st.selectbox("Role", roles)
        teams = ["All Teams"] + sorted(df["team"].dropna().unique().tolist())
        team_choice = st.selectbox("Team", teams)

    projected, explained = pca_projection(df)
    st.caption(f"{season} | {len(df)} players | {len(roles)} roles")

    tab_map, tab_role, tab_table = st.tabs(["Role Map", "Role Profile", "Players"])

    with tab_map:
        st.plotly_chart(plot_pca_scatter(projected, explained), use_container_width=True)

    with tab_role:
        role_df = df[df["role"] == role]
        reps = select_representative_players(df, n=5).get(role, [])
        col1, col2, col3 = st.columns(3)
        col1.metric("Players", len(role_df))
        col2.metric("Points per Game", f"{role_df['pts'].mean():.1f}")
        col3.metric("Minutes per Game", f"{role_df['min'].mean():.1f}")
        if reps:
            st.markdown("**Most minutes:** " + ", ".join(reps))
        st.plotly_chart(plot_role_profile(df, role), use_container_width=True)

        comparison = league_comparison(df)
        comparison = comparison[comparison["role"] == role].copy()
        comparison["stat"] = comparison["stat"].map(stat_label)
        st.dataframe(
            comparison[["stat", "role_mean", "role_std", "league_mean", "diff_from_league"]].round(3),
            use_container_width=True,
            hide_index=True,
        )

    with tab_table:
        table = df if team_choice == "All Teams" else df[df["team"] == team_choice]
        cols = ["player_name", "team", "position", "role", "gp", "min", "pts", "ast", "reb"] + config.FREQUENCY_FEATURES
        st.dataframe(
            table[cols].sort_values(["role", "min"], ascending=[True, False]),
            use_container_width=True,
            hide_index=True,
        )


if __name__ == "__main__":
    main()

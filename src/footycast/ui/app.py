"""
Streamlit UI for FootyCast – daily football fixture predictions.

Run from project root:

    streamlit run src/footycast/ui/app.py
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from footycast.data.store import PredictionStore
from footycast.features.profile_builder import build_head_to_head, build_team_profile
from footycast.scoring import DEFAULT_PREDICTION, evaluate


@st.cache_resource(show_spinner=False)
def get_store() -> PredictionStore:
    return PredictionStore()


@st.cache_data(ttl=60, show_spinner=False)
def load_matches() -> pd.DataFrame:
    """Stored fixtures (refreshed every minute)."""
    df = get_store().load_matches()
    df["match_date"] = df["match_date"].astype(str)
    return df


@st.cache_data(ttl=60, show_spinner=False)
def load_predictions() -> List[Dict[str, Any]]:
    return get_store().latest_predictions()


def predictions_table(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Flatten stored prediction records into one display row per fixture.
    """
    rows = []
    for r in records:
        p = r["prediction"]
        winner = p["winner_probability"]
        xg = p["expected_goals"]
        rows.append(
            {
                "Kick-off": r.get("match_time_local", ""),
                "League": r.get("league", ""),
                "Match": f"{r['home_team']} vs {r['away_team']}",
                "Home %": winner["home"],
                "Draw %": winner["draw"],
                "Away %": winner["away"],
                "BTTS %": p["btts_probability"],
                "Late goal %": p["late_goal_probability"],
                "xG": xg["total"],
                "Strong markets": ", ".join(
                    f"{m['market_name']} ({m['probability']}%)"
                    for m in p["strong_markets"]
                ),
                "Confidence": r.get("confidence_score", 0),
                "Default": r.get("is_default", False),
            }
        )
    return pd.DataFrame(rows)


def render_prediction(prediction: Dict[str, Any]) -> None:
    winner = prediction["winner_probability"]
    prob_df = pd.DataFrame(
        {
            "Outcome": ["Home", "Draw", "Away"],
            "Probability": [winner["home"], winner["draw"], winner["away"]],
        }
    ).set_index("Outcome")
    st.bar_chart(prob_df)

    xg = prediction["expected_goals"]
    col1, col2, col3 = st.columns(3)
    col1.metric("BTTS", f"{prediction['btts_probability']}%")
    col2.metric("Late goal", f"{prediction['late_goal_probability']}%")
    col3.metric("xG", f"{xg['home']} - {xg['away']}", f"total {xg['total']}")

    if prediction["strong_markets"]:
        st.success(
            "Strong markets: "
            + ", ".join(
                f"**{m['market_name']}** ({m['probability']}%)"
                for m in prediction["strong_markets"]
            )
        )
    else:
        st.info("No strong markets for this fixture.")


def render_today_mode(matches_df: pd.DataFrame, records: List[Dict[str, Any]]) -> None:
    """Stored fixtures and predictions side by side."""
    col_left, col_right = st.columns([2, 3])

    with col_left:
        st.subheader(f"Fixtures ({len(matches_df)})")
        st.dataframe(
            matches_df[
                ["match_time_local", "league_name", "home_team", "away_team", "status"]
            ],
            use_container_width=True,
            height=500,
        )

    with col_right:
        st.subheader(f"Predictions ({len(records)})")
        if not records:
            st.info("No predictions stored yet.")
            return
        table = predictions_table(records)
        only_strong = st.checkbox("Only fixtures with strong markets")
        if only_strong:
            table = table[table["Strong markets"] != ""]
        st.dataframe(table, use_container_width=True, height=500)

    st.markdown("---")
    labels = {f"{r['home_team']} vs {r['away_team']} ({r['match_id']})": r for r in records}
    selected = st.selectbox("Prediction details", options=list(labels.keys()))
    record = labels[selected]
    if record.get("is_default"):
        st.warning("Not enough history for these teams; showing the default prediction.")
    render_prediction(record["prediction"])


def render_team_mode(matches_df: pd.DataFrame) -> None:
    """Score any pairing of stored teams on the spot."""
    st.sidebar.header("Prediction by teams")

    teams = sorted(
        set(matches_df["home_team"].dropna()) | set(matches_df["away_team"].dropna())
    )
    if len(teams) < 2:
        st.info("Not enough teams stored yet.")
        return

    selected_home = st.sidebar.selectbox("Home team", options=teams, index=0)
    selected_away = st.sidebar.selectbox("Away team", options=teams, index=1)

    if selected_home == selected_away:
        st.warning("Home and away team must be different.")
        return

    history = get_store().load_matches()
    home = build_team_profile(history, selected_home)
    away = build_team_profile(history, selected_away)
    h2h = build_head_to_head(history, selected_home, selected_away)

    st.subheader(f"{selected_home} vs {selected_away}")
    st.caption(
        f"Head-to-head: {h2h.total_matches} played, {h2h.home_wins} "
        f"{selected_home} wins, {h2h.away_wins} {selected_away} wins, "
        f"{h2h.draws} draws"
    )

    prediction = evaluate(home, away, h2h)
    if prediction is DEFAULT_PREDICTION:
        st.warning("Not enough history for these teams; showing the default prediction.")
    render_prediction(prediction.to_dict())


def main() -> None:
    st.set_page_config(
        page_title="FootyCast – Football Predictions",
        layout="wide",
    )

    st.title("⚽ FootyCast – Daily Football Predictions")

    matches_df = load_matches()
    records = load_predictions()

    if matches_df.empty:
        st.error(
            "No fixtures stored yet.\n\n"
            "Fetch them first:\n\n"
            "```bash\n"
            "python -m footycast.jobs.predict_job --fetch --predict\n"
            "```"
        )
        return

    mode = st.radio(
        "Mode",
        options=["Today's predictions", "Prediction by teams"],
        horizontal=True,
    )

    if mode == "Today's predictions":
        render_today_mode(matches_df, records)
    else:
        render_team_mode(matches_df)


if __name__ == "__main__":
    main()

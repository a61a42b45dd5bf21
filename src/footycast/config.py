"""
Global configuration for the FootyCast project.

This module centralizes paths, provider settings and model parameters
(e.g., home advantage, strong-market threshold), so you can tweak them in
one place. Secrets and deployment values come from the environment; a local
`.env` file is loaded first if present.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root = folder that contains "src", "data", etc.
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]

# Store directory (matches.csv / predictions.jsonl)
DATA_DIR: Path = Path(os.getenv("FOOTYCAST_DATA_DIR", PROJECT_ROOT / "data"))
MATCHES_FILENAME: str = "matches.csv"
PREDICTIONS_FILENAME: str = "predictions.jsonl"

# Provider settings
API_FOOTBALL_KEY: str = os.getenv("API_FOOTBALL_KEY", "")
API_FOOTBALL_URL: str = "https://v3.football.api-sports.io/fixtures"
FOOTBALL_DATA_KEY: str = os.getenv("FOOTBALL_DATA_KEY", "")
FOOTBALL_DATA_URL: str = "https://api.football-data.org/v4/matches"
REQUEST_TIMEOUT_S: int = 15

# Top leagues + World Cup qualifiers (API-Football league ids)
TARGET_LEAGUES = [39, 140, 135, 78, 61, 94, 88, 203, 2, 3, 32, 34, 33]

# Number of fixtures kept when none of the target leagues play that day
FALLBACK_FIXTURE_LIMIT: int = 50

# Fixture times are displayed (and "today" is computed) in this timezone
DISPLAY_TIMEZONE: str = "Asia/Karachi"

# Scoring model parameters
HOME_ADVANTAGE: float = 1.2
STRONG_MARKET_THRESHOLD: int = 85

# Profile building parameters
RECENT_FORM_WINDOW: int = 10  # number of previous finished matches per team

# Goals per match that maps to an attack index of 100 (and a defense index of 0)
ATTACK_GOALS_CEILING: float = 3.0

# Share of a team's goals assumed to come in the final phase when the
# provider does not report late goals
LATE_GOAL_SHARE: float = 0.2

# Job parameters
MAX_FIXTURES_PER_RUN: int = 100
MAX_STORED_PREDICTIONS: int = 100
FETCH_INTERVAL_MINUTES: int = 15
PREDICT_INTERVAL_MINUTES: int = 5
STREAM_INTERVAL_SECONDS: int = 300

# Fixture statuses that still need a prediction
PENDING_STATUSES = ["NS", "1H", "HT", "2H", "ET", "P", "LIVE"]
FINISHED_STATUS: str = "FT"

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)

"""
Official Pips puzzle fetcher.

Downloads the puzzle for a random date and difficulty from the puzzle
archive API and converts it with the NYT parser. The endpoint and its key
come from the environment:

  PIPS_PUZZLE_API_URL   REST endpoint of the puzzle table
  PIPS_PUZZLE_API_KEY   API key sent as ``apikey`` and bearer token
"""
import os
import random
from datetime import date, timedelta
from typing import Optional

import requests

from grid import Puzzle
from nyt_parser import convert_external_puzzle
from exceptions import ExternalPuzzleError
from logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_API_URL = "https://ovqddebgtyeetciffqsy.supabase.co/rest/v1/puzzles"
START_DATE = date(2025, 8, 18)
REQUEST_TIMEOUT = 5

DIFFICULTY_COLUMNS = ("easy_puzzle", "medium_puzzle", "hard_puzzle")
DIFFICULTY_LABELS = {
    "easy_puzzle": "EASY",
    "medium_puzzle": "MEDIUM",
    "hard_puzzle": "HARD",
}


def random_date(rng: random.Random, today: Optional[date] = None) -> date:
    """A random day between the first archived puzzle and today."""
    today = today or date.today()
    span = max(0, (today - START_DATE).days)
    return START_DATE + timedelta(days=rng.randint(0, span))


def ordinal_suffix(day: int) -> str:
    if 10 <= day % 100 <= 20:
        return "TH"
    return {1: "ST", 2: "ND", 3: "RD"}.get(day % 10, "TH")


def source_label(puzzle_date: date, column: str) -> str:
    """Display label such as 'PIPS FROM 18TH AUGUST EASY'."""
    month = puzzle_date.strftime("%B").upper()
    day = puzzle_date.day
    return f"PIPS FROM {day}{ordinal_suffix(day)} {month} {DIFFICULTY_LABELS[column]}"


def fetch_pips_row(puzzle_date: date, column: str, session=None) -> Optional[dict]:
    """
    Fetch one puzzle column for a date. Returns the decoded row or None.
    Raises requests.RequestException on network failure.
    """
    url = os.environ.get("PIPS_PUZZLE_API_URL", DEFAULT_API_URL)
    api_key = os.environ.get("PIPS_PUZZLE_API_KEY", "")
    headers = {
        'Accept': 'application/vnd.pgrst.object+json',
        'Accept-Profile': 'public',
    }
    if api_key:
        headers['apikey'] = api_key
        headers['Authorization'] = f'Bearer {api_key}'

    params = {
        'select': column,
        'print_date': f'eq.{puzzle_date.isoformat()}',
        'type': 'eq.pips',
        'limit': 1,
    }
    http = session or requests
    response = http.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT)
    if response.status_code != 200:
        LOGGER.warning("Puzzle API returned status %s for %s", response.status_code, puzzle_date)
        return None
    return response.json()


def fetch_official_puzzle(
    rng: Optional[random.Random] = None,
    puzzle_date: Optional[date] = None,
    column: Optional[str] = None,
    session=None,
) -> Optional[Puzzle]:
    """
    Fetch and convert an official puzzle.

    Any failure (network, HTTP status, missing fields, puzzle too large for
    the grid) is logged and reported as None so callers can generate a
    fresh puzzle instead.
    """
    rng = rng or random.Random()
    puzzle_date = puzzle_date or random_date(rng)
    column = column or rng.choice(DIFFICULTY_COLUMNS)

    try:
        row = fetch_pips_row(puzzle_date, column, session=session)
    except (requests.RequestException, ValueError) as exc:
        LOGGER.warning("Fetching puzzle for %s failed: %s", puzzle_date, exc)
        return None

    if not isinstance(row, dict):
        return None
    puzzle_data = row.get(column)
    if not isinstance(puzzle_data, dict) or not all(
        puzzle_data.get(key) for key in ("regions", "dominoes", "solution")
    ):
        LOGGER.warning("Puzzle row for %s has no usable %s", puzzle_date, column)
        return None

    try:
        return convert_external_puzzle(puzzle_data, source_label(puzzle_date, column))
    except ExternalPuzzleError as exc:
        LOGGER.warning("Puzzle for %s could not be converted: %s", puzzle_date, exc)
        return None

"""
Static configuration shared by the search engine and the CLI.

Everything here is a plain module constant. The CLI can override the
endpoint URLs and the request timeout with flags; nothing is read from
the environment.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

BASE_URL = "http://localhost:5173"
MAJORS_URL = f"{BASE_URL}/schedules-majors.json"
LIBERAL_ARTS_URL = f"{BASE_URL}/schedules-liberal-arts.json"

REQUEST_TIMEOUT = 30


# ---------------------------------------------------------------------------
# Search behaviour
# ---------------------------------------------------------------------------

PAGE_SIZE = 100
DEBOUNCE_SECONDS = 0.3

# Separator token embedded in major and schedule strings
SEPARATOR = "<p>"


# ---------------------------------------------------------------------------
# Timetable grid
# ---------------------------------------------------------------------------

DAY_LABELS = ("월", "화", "수", "목", "금", "토")

GRADES = (1, 2, 3, 4)

CREDIT_OPTIONS = (1, 2, 3)

# Slot id -> wall-clock period. 1-18 are 30 minute slots, 19-24 are 50 minutes.
TIME_SLOTS: dict[int, str] = {
    1: "09:00~09:30",
    2: "09:30~10:00",
    3: "10:00~10:30",
    4: "10:30~11:00",
    5: "11:00~11:30",
    6: "11:30~12:00",
    7: "12:00~12:30",
    8: "12:30~13:00",
    9: "13:00~13:30",
    10: "13:30~14:00",
    11: "14:00~14:30",
    12: "14:30~15:00",
    13: "15:00~15:30",
    14: "15:30~16:00",
    15: "16:00~16:30",
    16: "16:30~17:00",
    17: "17:00~17:30",
    18: "17:30~18:00",
    19: "18:00~18:50",
    20: "18:55~19:45",
    21: "19:50~20:40",
    22: "20:45~21:35",
    23: "21:40~22:30",
    24: "22:35~23:25",
}

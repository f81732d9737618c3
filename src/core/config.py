"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("PLANNER_DB_PATH", PROJECT_ROOT / "data" / "db" / "podas-planner.db")
)
OUTPUT_DIR = PROJECT_ROOT / "output"

JSON_EXPORT_NAME = "podas-planner-export.json"
ICS_EXPORT_NAME = "podas-planner-calendar.ics"
EXCEL_REPORT_NAME = "podas-planner-report.xlsx"

# =============================================================================
# PLANNER DOMAIN
# =============================================================================

ASSIGNEES = ("Vincent", "Jannes", "Joy", "Partners")

TASK_TAGS = (
    "Physical BD",
    "Cold-call",
    "Marketing",
    "Build",
    "Admin",
    "Content",
    "Networking",
    "Tooling",
    "Referral",
    "Audit",
)

VIEWS = ("day", "week", "month", "timeline")
DEFAULT_VIEW = "week"

# =============================================================================
# CONSTRAINT POLICIES
# =============================================================================

# Vincent wants two evenings a week free
VINCENT_LATE_NIGHT_HOUR = 19
VINCENT_MAX_LATE_NIGHTS = 5

JANNES_MAX_WEEKLY_HOURS = 15.0
JANNES_LATE_EVENING_HOUR = 21

PHYSICAL_BD_TAG = "Physical BD"
PHYSICAL_BD_WEEKDAYS = {3, 5}  # ISO weekdays: Wednesday, Friday
WORKING_WEEKDAYS = {1, 2, 3, 4, 5}

WARNING_TYPES = (
    "vincent-evenings",
    "jannes-hours",
    "jannes-late-evenings",
    "physical-bd-days",
)

VINCENT_EVENINGS_MESSAGE = "Vincent has >5 long work nights this week (wants 2 evenings free)"
JANNES_HOURS_MESSAGE = "Jannes is scheduled for {hours} hours this week (>15 hour limit)"
JANNES_LATE_EVENINGS_MESSAGE = "Jannes is scheduled after 21:00 on a weekday evening"
PHYSICAL_BD_DAYS_MESSAGE = (
    "Physical-business-dev task scheduled on day other than Wednesday or Friday"
)

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

TASK_HEADERS = ["ID", "Date", "Week", "Assignee", "Start", "End", "Hours", "Title", "Tags", "Notes"]
WARNING_HEADERS = ["Type", "Date", "Assignee", "Task", "Message"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

PLANNER_API_KEY = os.environ.get("PLANNER_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"

TASKS_TABLE = "tasks"
HABITS_TABLE = "habits"
VISION_TABLE = "vision_items"
REFLECTIONS_TABLE = "reflections"

SETTINGS_TABLE = "settings"
LOCAL_TASKS_KEY = "lumina_tasks"
LOCAL_VISION_KEY = "lumina_vision"

PREF_THEME_KEY = "ui.theme"
PREF_INSTALL_PROMPTED_KEY = "ui.install_prompted"
PREF_NOTIFICATION_PROMPTED_KEY = "ui.notification_prompted"
PREF_NOTIFICATIONS_ENABLED_KEY = "ui.notifications_enabled"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

PRIORITIES = ["low", "medium", "high"]
DEFAULT_PRIORITY = "medium"
PRIORITY_META = {
    "high": {"label": "High", "color": "#e11d48"},
    "medium": {"label": "Medium", "color": "#6366f1"},
    "low": {"label": "Low", "color": "#94a3b8"},
}

DEFAULT_VISION_CATEGORY = "Dream"
GENERATED_VISION_CATEGORY = "Personal"

HABIT_COLORS = ["indigo", "rose", "emerald", "amber", "sky", "violet"]
DEFAULT_HABIT_COLOR = "indigo"
HABIT_COLOR_HEX = {
    "indigo": "#6366f1",
    "rose": "#f43f5e",
    "emerald": "#10b981",
    "amber": "#f59e0b",
    "sky": "#0ea5e9",
    "violet": "#8b5cf6",
}

MOODS = ["Radiant", "Happy", "Calm", "Neutral", "Tired", "Sad", "Stressed"]
MOOD_EMOJI = {
    "Radiant": "🤩",
    "Happy": "😊",
    "Calm": "😌",
    "Neutral": "😐",
    "Tired": "😴",
    "Sad": "😔",
    "Stressed": "😣",
}
DEFAULT_ENERGY_LEVEL = 5

VIEW_DASHBOARD = "dashboard"
VIEW_DAY = "day"
VIEW_WEEK = "week"
VIEW_MONTH = "month"
VIEW_YEAR = "year"
VIEW_VISION = "vision"
VIEW_LABELS = {
    VIEW_DASHBOARD: "Today",
    VIEW_DAY: "Day",
    VIEW_WEEK: "Week",
    VIEW_MONTH: "Month",
    VIEW_YEAR: "Year",
    VIEW_VISION: "Vision",
}
VIEW_OPTIONS = list(VIEW_LABELS.keys())
DATED_VIEWS = {VIEW_DAY, VIEW_WEEK, VIEW_MONTH, VIEW_YEAR}

WEEKDAY_LABELS = ["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"]
WEEK_BOARD_HOURS = list(range(8, 22))
MONTH_CELL_TASK_LIMIT = 3

FALLBACK_INSIGHT = "Every small step you take today builds the year you are dreaming of."

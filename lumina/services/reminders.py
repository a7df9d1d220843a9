from lumina.aggregations import undone_habits


def build_habit_reminder(habits, today_iso, max_names=3):
    pending = undone_habits(habits, today_iso)
    if not pending:
        return None
    names = [habit.title for habit in pending[:max_names]]
    extra = len(pending) - len(names)
    label = ", ".join(names)
    if extra > 0:
        label = f"{label} and {extra} more"
    noun = "habit" if len(pending) == 1 else "habits"
    return f"{len(pending)} {noun} still open today: {label}."


def should_remind(habits, today_iso, last_reminded_key, now_slot):
    """Remind at most once per slot (for example once per hour)."""
    if not undone_habits(habits, today_iso):
        return False
    return last_reminded_key != f"{today_iso}:{now_slot}"

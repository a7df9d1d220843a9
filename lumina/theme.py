import streamlit as st

THEME_PRESETS = {
    "light": {
        "bg_main": "#f8f7fb",
        "bg_glow": "#ffe4ec",
        "bg_card": "#ffffff",
        "bg_panel": "#fdf2f8",
        "border": "#ece7f2",
        "text_main": "#0f172a",
        "text_soft": "#64748b",
        "accent": "#e11d48",
        "accent_soft": "rgba(225, 29, 72, 0.08)",
        "muted_day": "rgba(15, 23, 42, 0.25)",
        "today_bg": "#e11d48",
        "today_text": "#ffffff",
        "plot_grid": "#ece7f2",
        "energy_high": "#10b981",
        "energy_mid": "#f59e0b",
        "energy_low": "#f43f5e",
    },
    "dark": {
        "bg_main": "#1c1c1e",
        "bg_glow": "#2c1a24",
        "bg_card": "#2c2c2e",
        "bg_panel": "rgba(244, 63, 94, 0.06)",
        "border": "rgba(255, 255, 255, 0.08)",
        "text_main": "#f8fafc",
        "text_soft": "#94a3b8",
        "accent": "#f43f5e",
        "accent_soft": "rgba(244, 63, 94, 0.12)",
        "muted_day": "rgba(248, 250, 252, 0.22)",
        "today_bg": "#f43f5e",
        "today_text": "#ffffff",
        "plot_grid": "#3a3a3c",
        "energy_high": "#34d399",
        "energy_mid": "#fbbf24",
        "energy_low": "#fb7185",
    },
}


def get_active_theme(ctx):
    name = ctx.theme if ctx.theme in THEME_PRESETS else "light"
    return name, THEME_PRESETS[name]


def energy_color(theme, level):
    if level >= 8:
        return theme["energy_high"]
    if level >= 5:
        return theme["energy_mid"]
    return theme["energy_low"]


def inject_theme_css(ctx) -> dict:
    _, active_theme = get_active_theme(ctx)

    theme_vars_css = f"""
:root {{
    --bg-main: {active_theme['bg_main']};
    --bg-glow: {active_theme['bg_glow']};
    --bg-card: {active_theme['bg_card']};
    --bg-panel: {active_theme['bg_panel']};
    --border: {active_theme['border']};
    --text-main: {active_theme['text_main']};
    --text-soft: {active_theme['text_soft']};
    --accent: {active_theme['accent']};
    --accent-soft: {active_theme['accent_soft']};
    --muted-day: {active_theme['muted_day']};
    --today-bg: {active_theme['today_bg']};
    --today-text: {active_theme['today_text']};
}}
"""

    st.markdown(
        """
<style>
@import url('https://fonts.googleapis.com/css2?family=Inter:wght@400;500;700;900&display=swap');
"""
        + theme_vars_css
        + """

html, body, [class*="css"] {
    font-family: 'Inter', sans-serif;
    color: var(--text-main);
}

.stApp {
    background: radial-gradient(1200px 800px at 15% 0%, var(--bg-glow) 0%, var(--bg-main) 55%);
    color: var(--text-main);
}

.page-title {
    font-size: 30px;
    font-weight: 900;
    letter-spacing: -0.5px;
}

.section-title {
    font-size: 14px;
    font-weight: 700;
    text-transform: uppercase;
    letter-spacing: 1.2px;
    margin: 0 0 8px 0;
}

.small-label {
    color: var(--text-soft);
    font-size: 12px;
    letter-spacing: 0.2px;
}

.card {
    background: var(--bg-card);
    border: 1px solid var(--border);
    border-radius: 24px;
    padding: 18px 20px;
    margin-bottom: 14px;
}

.insight-card {
    background: var(--accent-soft);
    border-radius: 24px;
    padding: 18px 20px;
    font-size: 18px;
    font-weight: 600;
}

.urgent-card {
    background: var(--accent);
    color: #ffffff;
    border-radius: 24px;
    padding: 18px 20px;
}

.task-done {
    color: var(--text-soft);
    text-decoration: line-through;
}

.month-cell {
    min-height: 96px;
    border: 1px solid var(--border);
    border-radius: 16px;
    padding: 6px 8px;
    background: var(--bg-card);
}

.month-cell.outside {
    opacity: 0.25;
}

.month-cell.today .day-number {
    background: var(--today-bg);
    color: var(--today-text);
    border-radius: 10px;
    padding: 0 6px;
}

.day-number {
    font-weight: 900;
    font-size: 13px;
}

.chip {
    display: block;
    font-size: 11px;
    border-radius: 8px;
    padding: 2px 6px;
    margin-top: 3px;
    background: var(--bg-panel);
    border: 1px solid var(--border);
    overflow: hidden;
    white-space: nowrap;
    text-overflow: ellipsis;
}

.chip.high {
    border-color: var(--accent);
}

.vision-caption {
    font-size: 12px;
    color: var(--text-soft);
}
</style>
""",
        unsafe_allow_html=True,
    )
    return active_theme

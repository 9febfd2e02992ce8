from models.chart_models import ThemeColors

LIGHT_COLORS = ["#00B2B2", "#007A8C", "#00D9D9", "#6B7280", "#F59E0B", "#EF4444"]
DARK_COLORS = ["#00D9D9", "#00B2B2", "#007A8C", "#94A3B8", "#FBBF24", "#F87171"]


def theme_colors(dark_mode: bool = False) -> ThemeColors:
    # Colours only; the flag never affects data or truncation
    if dark_mode:
        return ThemeColors(
            dark=True,
            grid="#334155",
            text="#94A3B8",
            primary="#00B2B2",
            secondary="#007A8C",
            background="#1E293B",
            palette=list(DARK_COLORS),
        )
    return ThemeColors(
        grid="#E5E7EB",
        text="#6B7280",
        primary="#00B2B2",
        secondary="#007A8C",
        background="#FFFFFF",
        palette=list(LIGHT_COLORS),
    )

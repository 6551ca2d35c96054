# utils/productivity/constants.py
"""
Constants for the Productivity Dashboard Module

Centralized configuration for:
- Period definitions
- Fallback labels
- Color schemes
- Chart settings
- Export styles
"""

# =====================================================================
# PERIOD DEFINITIONS
# =====================================================================

PERIOD_TYPES = ['week', 'month', 'quarter']

PERIOD_LABELS = {
    'week': 'Semana',
    'month': 'Mês',
    'quarter': 'Trimestre',
}

PERIOD_DESCRIPTIONS = {
    'week': 'Esta semana',
    'month': 'Este mês',
    'quarter': 'Este trimestre',
}

# Trailing window used for "weekly updates" on rankings
WEEKLY_WINDOW_DAYS = 7

# Maximum number of week buckets plotted on the dashboard
DEFAULT_MAX_WEEKS = 6

# Number of months shown on the agent detail chart
DEFAULT_MAX_MONTHS = 6

# =====================================================================
# FALLBACK LABELS
# =====================================================================

UNKNOWN_LABEL = 'Unknown'
NOT_AVAILABLE = 'N/A'
ALL_AGENTS = 'all'

WEEK_LABEL_FORMAT = '{n}ª semana'

MONTH_ABBR_PT = {
    1: 'jan', 2: 'fev', 3: 'mar', 4: 'abr',
    5: 'mai', 6: 'jun', 7: 'jul', 8: 'ago',
    9: 'set', 10: 'out', 11: 'nov', 12: 'dez'
}

# =====================================================================
# RECORD COLUMNS
# =====================================================================

RECORD_COLUMNS = [
    'id',
    'agent_id',
    'leadership_role_id',
    'updates_count',
    'date',
    'created_at',
    'agent_name',
    'leadership_role_name',
]

PERFORMANCE_COLUMNS = [
    'agent_id',
    'agent_name',
    'total_updates',
    'weekly_updates',
    'daily_average',
    'last_update',
]

# =====================================================================
# TEAM SCREEN
# =====================================================================

TEAM_SORT_OPTIONS = {
    'total_updates': 'Total de atualizações',
    'weekly_updates': 'Semana atual',
    'name': 'Nome',
}

# =====================================================================
# COLOR SCHEME
# =====================================================================

AGENT_COLORS = [
    '#3b82f6',  # Blue
    '#22c55e',  # Green
    '#8b5cf6',  # Purple
    '#dc2626',  # Red
    '#eab308',  # Yellow
    '#f97316',  # Orange
]

ROLE_COLORS = ['#8B5DFF', '#06B6D4', '#10B981', '#F59E0B', '#EF4444', '#8B5CF6']

COLORS = {
    "updates": "#3b82f6",
    "trend_up": "#28a745",
    "trend_down": "#dc3545",
    "text_dark": "#333333",
    "text_light": "#666666",
    "grid": "#e0e0e0",
}

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_WIDTH = 800
CHART_HEIGHT = 350

PIE_CHART_WIDTH = 300
PIE_CHART_HEIGHT = 250

TOP_AGENTS_IN_WEEKLY_CHART = 4
TOP_AGENTS_IN_RANKING = 5
RECENT_ACTIVITY_SIZE = 6

# =====================================================================
# EXPORT SETTINGS
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "3b82f6",
    "header_font_color": "FFFFFF",
    "number_format": '#,##0',
    "date_format": 'DD/MM/YYYY',
}

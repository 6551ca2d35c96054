# utils/productivity/aggregation.py
"""
Aggregation Engine for the Productivity Dashboard

Turns a flat list of productivity records into:
- Period metrics (totals, active agents, average, top performer)
- Per-agent performance ranking
- Week-bucketed series for the trend chart
- Agent detail views (role distribution, monthly series, summary, trend)

Every function is a pure function of its arguments: no I/O, no module
state, inputs are never mutated. "now" is always injectable.

Record dates are calendar days. They are parsed as naive local-midnight
timestamps and never through UTC, otherwise a "YYYY-MM-DD" value shifts
to the previous day in timezones behind UTC.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

from .constants import (
    ALL_AGENTS,
    DEFAULT_MAX_MONTHS,
    DEFAULT_MAX_WEEKS,
    MONTH_ABBR_PT,
    NOT_AVAILABLE,
    PERFORMANCE_COLUMNS,
    UNKNOWN_LABEL,
    WEEK_LABEL_FORMAT,
    WEEKLY_WINDOW_DAYS,
)

logger = logging.getLogger(__name__)

Records = Union[pd.DataFrame, Iterable[Dict[str, Any]], None]
Lookup = Union[pd.DataFrame, Iterable[Dict[str, Any]], Dict[str, str], None]

EPOCH = datetime(1970, 1, 1)

NORMALIZED_COLUMNS = [
    'id',
    'agent_id',
    'leadership_role_id',
    'updates_count',
    'date',
    'date_str',
    'created_at',
    'agent_name',
    'leadership_role_name',
]

WEEKLY_BASE_COLUMNS = ['week_start', 'week_label', 'total_updates']


# =============================================================================
# DATE RANGE
# =============================================================================

@dataclass(frozen=True)
class DateRange:
    """
    Explicit date range. Either bound may be missing.

    Attributes:
        start: First included day (None = unbounded past)
        end: Last included day (None = today)
    """
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None


def _coerce_range(date_range) -> Optional[DateRange]:
    if date_range is None:
        return None
    if isinstance(date_range, DateRange):
        return date_range
    if isinstance(date_range, dict):
        start = date_range.get('from', date_range.get('start'))
        end = date_range.get('to', date_range.get('end'))
    else:
        start, end = date_range
    start_day = _parse_day(start)
    end_day = _parse_day(end)
    return DateRange(
        start=start_day.date() if start_day is not None else None,
        end=end_day.date() if end_day is not None else None,
    )


def _weekday_sunday_first(day: date) -> int:
    """Weekday number where Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def _start_of_day(value: Union[date, datetime]) -> datetime:
    return datetime(value.year, value.month, value.day)


def _end_of_day(value: Union[date, datetime]) -> datetime:
    return datetime(value.year, value.month, value.day, 23, 59, 59, 999000)


def _explicit_bounds(
    date_range,
    now: datetime
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Bounds of an explicit range, or (None, None) when no bound is given."""
    date_range = _coerce_range(date_range)
    if date_range is None or date_range.is_empty:
        return None, None

    start = _start_of_day(date_range.start) if date_range.start else EPOCH
    end = _end_of_day(date_range.end if date_range.end else now)
    return start, end


def resolve_date_range(
    period: Optional[str] = 'week',
    date_range=None,
    now: datetime = None
) -> Tuple[datetime, datetime]:
    """
    Resolve the [start, end] window used by the dashboard metrics.

    An explicit range wins when either bound is present. Otherwise:
    - week: most recent Sunday on/before now
    - month: first day of the current month
    - quarter: first day of the current 3-month block

    The end of the window is always ceilinged to 23:59:59.999.

    Raises:
        ValueError: unknown period (programming error, not bad data)
    """
    now = now or datetime.now()

    start, end = _explicit_bounds(date_range, now)
    if start is not None:
        return start, end

    today = _start_of_day(now)

    if period == 'week':
        start = today - timedelta(days=_weekday_sunday_first(today))
    elif period == 'month':
        start = today.replace(day=1)
    elif period == 'quarter':
        quarter_first_month = ((today.month - 1) // 3) * 3 + 1
        start = today.replace(month=quarter_first_month, day=1)
    else:
        raise ValueError(f"Unknown period: {period!r}")

    return start, _end_of_day(now)


# =============================================================================
# WEEK HELPERS
# =============================================================================

def week_start_of(day: Union[date, datetime]) -> date:
    """Sunday that starts the week containing `day`."""
    day = day.date() if isinstance(day, datetime) else day
    return day - timedelta(days=_weekday_sunday_first(day))


def week_of_month_label(day: Union[date, datetime]) -> str:
    """
    Label like "2ª semana": number of Sunday boundaries between the week of
    `day` and the week containing the 1st of that month, counted from 1.
    """
    day = day.date() if isinstance(day, datetime) else day
    first_sunday = week_start_of(day.replace(day=1))
    n = (week_start_of(day) - first_sunday).days // 7 + 1
    return WEEK_LABEL_FORMAT.format(n=max(1, n))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# NORMALIZATION
# =============================================================================

def _has_value(value: Any) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return str(value).strip() != ''


def _parse_day(value: Any) -> Optional[datetime]:
    """Parse a record date to local midnight. None when missing or invalid."""
    if not _has_value(value):
        return None
    if isinstance(value, (datetime, date)):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d')
    except ValueError:
        logger.debug(f"Unparseable record date: {value!r}")
        return None


def _to_frame(records: Records) -> pd.DataFrame:
    if records is None:
        return pd.DataFrame()
    if isinstance(records, pd.DataFrame):
        return records.copy()
    return pd.DataFrame(list(records))


def _lookup_map(table: Lookup) -> Dict[str, str]:
    """id -> name mapping from a lookup table."""
    if table is None:
        return {}
    if isinstance(table, dict):
        return {str(k): v for k, v in table.items() if _has_value(v)}
    if isinstance(table, pd.DataFrame):
        if table.empty or not {'id', 'name'}.issubset(table.columns):
            return {}
        rows = table[['id', 'name']].to_dict('records')
    else:
        rows = list(table)

    mapping = {}
    for row in rows:
        if _has_value(row.get('id')) and _has_value(row.get('name')):
            mapping.setdefault(str(row['id']), str(row['name']))
    return mapping


def _resolve_name(
    row: Dict[str, Any],
    id_col: str,
    name_col: str,
    joined_col: str,
    lookup: Dict[str, str]
) -> str:
    joined = row.get(joined_col)
    if isinstance(joined, dict) and _has_value(joined.get('name')):
        return str(joined['name'])
    if _has_value(row.get(name_col)):
        return str(row[name_col])
    ref = row.get(id_col)
    if _has_value(ref) and str(ref) in lookup:
        return lookup[str(ref)]
    return UNKNOWN_LABEL


def _empty_normalized() -> pd.DataFrame:
    df = pd.DataFrame(columns=NORMALIZED_COLUMNS)
    df['date'] = pd.to_datetime(df['date'])
    df['updates_count'] = df['updates_count'].astype(int)
    return df


def normalize_records(
    records: Records,
    agents: Lookup = None,
    roles: Lookup = None
) -> pd.DataFrame:
    """
    Normalize raw store rows into the frame every aggregation works on.

    Accepts a DataFrame or a list of dicts. Agent and role display names
    come from the joined value (nested dict or flat *_name column), then
    from the lookup table, then fall back to "Unknown". A missing
    updates_count counts as 0; a missing or invalid date becomes NaT.

    Returns:
        DataFrame with NORMALIZED_COLUMNS, in input order
    """
    df = _to_frame(records)

    if df.empty:
        return _empty_normalized()

    agent_lookup = _lookup_map(agents)
    role_lookup = _lookup_map(roles)
    rows = df.to_dict('records')

    out = pd.DataFrame({
        'id': df['id'] if 'id' in df.columns else None,
        'agent_id': df['agent_id'] if 'agent_id' in df.columns else None,
        'leadership_role_id': df['leadership_role_id'] if 'leadership_role_id' in df.columns else None,
        'created_at': df['created_at'] if 'created_at' in df.columns else None,
    }, index=df.index)

    if 'updates_count' in df.columns:
        counts = pd.to_numeric(df['updates_count'], errors='coerce').fillna(0)
    else:
        counts = pd.Series(0, index=df.index)
    out['updates_count'] = counts.astype(int)

    raw_dates = df['date'] if 'date' in df.columns else pd.Series([None] * len(df), index=df.index)
    out['date'] = pd.to_datetime([_parse_day(v) for v in raw_dates], errors='coerce')
    out['date_str'] = out['date'].dt.strftime('%Y-%m-%d')

    out['agent_name'] = [
        _resolve_name(row, 'agent_id', 'agent_name', 'agent', agent_lookup)
        for row in rows
    ]
    out['leadership_role_name'] = [
        _resolve_name(row, 'leadership_role_id', 'leadership_role_name', 'leadership_role', role_lookup)
        for row in rows
    ]

    unknown = (out['agent_name'] == UNKNOWN_LABEL).sum()
    if unknown:
        logger.debug(f"{unknown} record(s) with unresolved agent grouped as '{UNKNOWN_LABEL}'")

    return out[NORMALIZED_COLUMNS].reset_index(drop=True)


# =============================================================================
# FILTERING
# =============================================================================

def _agent_mask(df: pd.DataFrame, agent_id: Optional[str]) -> pd.Series:
    if not agent_id or agent_id == ALL_AGENTS:
        return pd.Series(True, index=df.index)
    return df['agent_id'].astype(str) == str(agent_id)


def _date_mask(
    df: pd.DataFrame,
    start: Optional[datetime],
    end: Optional[datetime]
) -> pd.Series:
    mask = pd.Series(True, index=df.index)
    if start is None and end is None:
        return mask
    mask &= df['date'].notna()
    if start is not None:
        mask &= df['date'] >= pd.Timestamp(start)
    if end is not None:
        mask &= df['date'] <= pd.Timestamp(end)
    return mask


# =============================================================================
# DASHBOARD METRICS
# =============================================================================

def _empty_metrics() -> Dict:
    return {
        'total_updates': 0,
        'total_agents': 0,
        'average_updates_per_agent': 0,
        'top_performer': {
            'agent_name': NOT_AVAILABLE,
            'updates_count': 0,
        },
    }


def compute_metrics(
    records: Records,
    period: str = 'week',
    date_range=None,
    agent_id: Optional[str] = None,
    agents: Lookup = None,
    now: datetime = None
) -> Dict:
    """
    Calculate the dashboard metric cards.

    Args:
        records: Productivity records (DataFrame or list of dicts)
        period: 'week', 'month' or 'quarter'
        date_range: Explicit DateRange; overrides period when a bound is set
        agent_id: Optional single-agent filter
        agents: Agent lookup table used to resolve names
        now: Reference time (defaults to the local clock)

    Returns:
        Dict with total_updates, total_agents, average_updates_per_agent
        and top_performer {agent_name, updates_count}. Equal totals keep
        the first agent encountered in the input.
    """
    start, end = resolve_date_range(period, date_range, now)

    df = normalize_records(records, agents)
    if df.empty:
        return _empty_metrics()

    filtered = df[_date_mask(df, start, end) & _agent_mask(df, agent_id)]
    if filtered.empty:
        return _empty_metrics()

    # sort=False keeps first-encounter order, idxmax returns the first maximum
    agent_totals = filtered.groupby('agent_name', sort=False)['updates_count'].sum()

    total_updates = int(filtered['updates_count'].sum())
    total_agents = len(agent_totals)
    top_name = agent_totals.idxmax()

    return {
        'total_updates': total_updates,
        'total_agents': total_agents,
        'average_updates_per_agent': _round_half_up(total_updates / total_agents) if total_agents else 0,
        'top_performer': {
            'agent_name': top_name,
            'updates_count': int(agent_totals[top_name]),
        },
    }


# =============================================================================
# AGENT PERFORMANCE
# =============================================================================

def _empty_performance() -> pd.DataFrame:
    return pd.DataFrame(columns=PERFORMANCE_COLUMNS)


def compute_agent_performance(
    records: Records,
    agent_id: Optional[str] = None,
    date_range=None,
    agents: Lookup = None,
    now: datetime = None
) -> pd.DataFrame:
    """
    Rank agents by total updates.

    Totals and last update honour the agent and explicit date-range
    filters. weekly_updates always looks at the trailing 7 days from
    `now` over the agent-filtered records, whatever the date range.

    Returns:
        DataFrame with agent_id, agent_name, total_updates, weekly_updates,
        daily_average, last_update. Sorted by total_updates descending;
        ties keep first-encounter order.
    """
    now = now or datetime.now()

    df = normalize_records(records, agents)
    if df.empty:
        return _empty_performance()

    scoped = df[_agent_mask(df, agent_id)]
    start, end = _explicit_bounds(date_range, now)
    in_range = scoped[_date_mask(scoped, start, end)]

    if in_range.empty:
        return _empty_performance()

    summary = in_range.groupby('agent_name', sort=False).agg(
        total_updates=('updates_count', 'sum')
    )

    window_start = pd.Timestamp(now - timedelta(days=WEEKLY_WINDOW_DAYS))
    recent = scoped[scoped['date'].notna() & (scoped['date'] >= window_start)]
    weekly = recent.groupby('agent_name', sort=False)['updates_count'].sum()
    summary['weekly_updates'] = weekly.reindex(summary.index, fill_value=0)

    # YYYY-MM-DD sorts chronologically, so the max date string is the latest day
    dated = in_range.dropna(subset=['date'])
    last = dated.groupby('agent_name', sort=False)['date_str'].max()
    summary['last_update'] = last.reindex(summary.index).fillna('')

    name_to_id = {}
    for agent_key, agent_name in _lookup_map(agents).items():
        name_to_id.setdefault(agent_name, agent_key)

    summary = summary.reset_index()
    summary['agent_id'] = summary['agent_name'].map(lambda n: name_to_id.get(n, ''))
    summary['total_updates'] = summary['total_updates'].astype(int)
    summary['weekly_updates'] = summary['weekly_updates'].astype(int)
    summary['daily_average'] = summary['weekly_updates'].map(
        lambda w: _round_half_up(w / WEEKLY_WINDOW_DAYS)
    )

    summary = summary.sort_values('total_updates', ascending=False, kind='stable')

    return summary[PERFORMANCE_COLUMNS].reset_index(drop=True)


# =============================================================================
# WEEKLY SERIES
# =============================================================================

def compute_weekly_series(
    records: Records,
    agent_id: Optional[str] = None,
    date_range=None,
    agents: Lookup = None,
    max_weeks: Optional[int] = DEFAULT_MAX_WEEKS,
    now: datetime = None
) -> pd.DataFrame:
    """
    Bucket records into Sunday-start weeks for the trend chart.

    Returns:
        Wide DataFrame: week_start, week_label, total_updates, then one
        column per agent name with that agent's updates in the week (an
        agent named like a base column gets the suffix ' (agente)').
        Weeks with zero updates are dropped; rows are ascending by
        week_start and only the `max_weeks` most recent weeks are kept.
    """
    now = now or datetime.now()

    df = normalize_records(records, agents)
    if df.empty:
        return pd.DataFrame(columns=WEEKLY_BASE_COLUMNS)

    start, end = _explicit_bounds(date_range, now)
    scoped = df[_agent_mask(df, agent_id) & _date_mask(df, start, end) & df['date'].notna()]

    if scoped.empty:
        return pd.DataFrame(columns=WEEKLY_BASE_COLUMNS)

    offsets = pd.to_timedelta((scoped['date'].dt.dayofweek + 1) % 7, unit='D')
    scoped = scoped.assign(
        week_start=scoped['date'] - offsets,
        week_label=[week_of_month_label(d) for d in scoped['date']],
    )

    # Label of a month-straddling week comes from its earliest record
    labels = (
        scoped.sort_values('date', kind='stable')
        .groupby('week_start')['week_label']
        .first()
    )

    agent_order = scoped['agent_name'].drop_duplicates().tolist()
    wide = (
        scoped.groupby(['week_start', 'agent_name'], sort=False)['updates_count']
        .sum()
        .unstack(fill_value=0)
        .reindex(columns=agent_order, fill_value=0)
    )
    # totals stay outside `wide` so an agent may be named like a base column
    totals = wide.sum(axis=1)
    wide = wide[totals > 0].sort_index()

    if max_weeks:
        wide = wide.tail(max_weeks)

    if wide.empty:
        return pd.DataFrame(columns=WEEKLY_BASE_COLUMNS)

    active_agents = [a for a in agent_order if wide[a].sum() > 0]

    per_agent = wide[active_agents].astype(int).reset_index(drop=True)
    per_agent.columns = _agent_columns(active_agents)

    base = pd.DataFrame({
        'week_start': wide.index.to_numpy(),
        'week_label': labels.reindex(wide.index).to_numpy(),
        'total_updates': wide.sum(axis=1).astype(int).to_numpy(),
    })

    return pd.concat([base, per_agent], axis=1)


def _agent_columns(names: List[str]) -> List[str]:
    """Agent names as column labels; a clash with a base column gets ' (agente)'."""
    taken = set(WEEKLY_BASE_COLUMNS)
    columns = []
    for name in names:
        column = name
        while column in taken:
            column = f"{column} (agente)"
        taken.add(column)
        columns.append(column)
    return columns


# =============================================================================
# AGENT DETAILS
# =============================================================================

def compute_role_distribution(
    records: Records,
    agent_name: Optional[str] = None,
    roles: Lookup = None,
    agents: Lookup = None
) -> pd.DataFrame:
    """
    Updates per leadership role, optionally for a single agent.

    Returns:
        DataFrame with role_name, updates_count, percent (share of total)
    """
    df = normalize_records(records, agents=agents, roles=roles)
    if agent_name is not None:
        df = df[df['agent_name'] == agent_name]

    if df.empty:
        return pd.DataFrame(columns=['role_name', 'updates_count', 'percent'])

    dist = (
        df.groupby('leadership_role_name', sort=False)['updates_count']
        .sum()
        .reset_index()
    )
    dist.columns = ['role_name', 'updates_count']
    dist['updates_count'] = dist['updates_count'].astype(int)

    total = dist['updates_count'].sum()
    dist['percent'] = (dist['updates_count'] / total * 100).round(1) if total else 0.0

    return dist.sort_values('updates_count', ascending=False, kind='stable').reset_index(drop=True)


def compute_monthly_series(
    records: Records,
    agent_name: Optional[str] = None,
    months: int = DEFAULT_MAX_MONTHS,
    agents: Lookup = None
) -> pd.DataFrame:
    """Monthly totals (chronological, most recent `months` non-empty months)."""
    columns = ['month_start', 'month_label', 'updates_count']

    df = normalize_records(records, agents=agents)
    if agent_name is not None:
        df = df[df['agent_name'] == agent_name]
    df = df.dropna(subset=['date'])

    if df.empty:
        return pd.DataFrame(columns=columns)

    df = df.assign(month_start=df['date'].dt.to_period('M').dt.to_timestamp())
    monthly = df.groupby('month_start')['updates_count'].sum().sort_index()
    monthly = monthly[monthly > 0]

    if months:
        monthly = monthly.tail(months)

    result = monthly.reset_index()
    result['updates_count'] = result['updates_count'].astype(int)
    result['month_label'] = result['month_start'].map(
        lambda m: f"{MONTH_ABBR_PT[m.month]}/{m.year}"
    )
    return result[columns]


def compute_agent_summary(
    records: Records,
    agent_name: str,
    agents: Lookup = None,
    roles: Lookup = None
) -> Dict:
    """
    Detail numbers for one agent: record count, totals, average per record
    and the latest record (greatest date; first one wins on equal dates).
    """
    df = normalize_records(records, agents=agents, roles=roles)
    agent_df = df[df['agent_name'] == agent_name]

    total_records = len(agent_df)
    total_updates = int(agent_df['updates_count'].sum()) if total_records else 0

    last_record = None
    dated = agent_df.dropna(subset=['date'])
    if not dated.empty:
        row = dated.loc[dated['date'].idxmax()]
        last_record = {
            'date': row['date_str'],
            'leadership_role_name': row['leadership_role_name'],
            'updates_count': int(row['updates_count']),
        }

    return {
        'total_records': total_records,
        'total_updates': total_updates,
        'average_updates_per_record': _round_half_up(total_updates / total_records) if total_records else 0,
        'last_record': last_record,
    }


def compute_weekly_trend(
    records: Records,
    agent_id: Optional[str] = None,
    agents: Lookup = None,
    now: datetime = None
) -> pd.DataFrame:
    """
    Compare the trailing 7 days with the 7 days before, per agent.

    change_percent is None when the previous window had no updates.
    """
    columns = ['agent_name', 'current_week', 'previous_week', 'change_percent', 'direction']
    now = now or datetime.now()

    df = normalize_records(records, agents)
    df = df[_agent_mask(df, agent_id)].dropna(subset=['date'])

    if df.empty:
        return pd.DataFrame(columns=columns)

    current_start = pd.Timestamp(now - timedelta(days=WEEKLY_WINDOW_DAYS))
    previous_start = pd.Timestamp(now - timedelta(days=2 * WEEKLY_WINDOW_DAYS))

    is_current = df['date'] >= current_start
    is_previous = (df['date'] >= previous_start) & ~is_current

    agent_order = df['agent_name'].drop_duplicates()
    current = df[is_current].groupby('agent_name')['updates_count'].sum()
    previous = df[is_previous].groupby('agent_name')['updates_count'].sum()

    rows = []
    for name in agent_order:
        cur = int(current.get(name, 0))
        prev = int(previous.get(name, 0))
        change = round((cur - prev) / prev * 100, 1) if prev else None
        if cur > prev:
            direction = 'up'
        elif cur < prev:
            direction = 'down'
        else:
            direction = 'flat'
        rows.append({
            'agent_name': name,
            'current_week': cur,
            'previous_week': prev,
            'change_percent': change,
            'direction': direction,
        })

    result = pd.DataFrame(rows, columns=columns)
    # object dtype keeps None instead of NaN for "no previous week"
    result['change_percent'] = pd.Series(
        [r['change_percent'] for r in rows], index=result.index, dtype=object
    )
    return result


def compute_team_overview(performance_df: pd.DataFrame) -> Dict:
    """Team cards: active agents, mean weekly updates and the leader."""
    if performance_df is None or performance_df.empty:
        return {
            'active_agents': 0,
            'weekly_average': 0,
            'top_performer': NOT_AVAILABLE,
        }

    return {
        'active_agents': len(performance_df),
        'weekly_average': _round_half_up(performance_df['weekly_updates'].mean()),
        'top_performer': performance_df.iloc[0]['agent_name'],
    }


__all__ = [
    'DateRange',
    'resolve_date_range',
    'week_start_of',
    'week_of_month_label',
    'normalize_records',
    'compute_metrics',
    'compute_agent_performance',
    'compute_weekly_series',
    'compute_role_distribution',
    'compute_monthly_series',
    'compute_agent_summary',
    'compute_weekly_trend',
    'compute_team_overview',
]

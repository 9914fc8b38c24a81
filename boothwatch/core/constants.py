"""
Centralized constants for scheduler jobs, booth statuses and alert kinds.

Change job IDs here instead of scattering literals across main and the scheduler.
Tunable thresholds and intervals live in config.Settings (env-driven).
"""

# Scheduler job IDs (must match ids used in scheduler.sweeps add_job)
STALE_SWEEP_JOB_ID = "stale_sweep"
MODE_SWEEP_JOB_ID = "non_normal_mode_sweep"
RETENTION_SWEEP_JOB_ID = "health_log_retention"

# Statuses derived by the status resolver (raw ping statuses pass through unchanged)
STATUS_MAINTENANCE = "maintenance"
STATUS_OFFLINE = "offline"
STATUS_STALE = "stale"
STATUS_UNKNOWN = "unknown"
STATUS_ERROR = "error"
STATUS_WARNING = "warning"

# Ping statuses that trigger an immediate health-update alert
ALERTING_PING_STATUSES = frozenset({STATUS_ERROR, STATUS_WARNING})

# Modes reported in ping metadata
MODE_MAINTENANCE = "Maintenance"
MODE_NORMAL = "Normal"
MODE_UNKNOWN = "Unknown"
# Modes that never count as "lingering" for the non-normal-mode sweep
ORDINARY_MODES = frozenset({MODE_NORMAL, MODE_UNKNOWN})

# Alert payload kinds passed to Notifier.send
ALERT_HEALTH_UPDATE = "health_update"
ALERT_STALE = "stale"
ALERT_NON_NORMAL_MODE = "non_normal_mode"

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600

# employee_sync/infra/metrics/sync_metrics.py
# =============================================================================
# File: employee_sync/infra/metrics/sync_metrics.py
# Description: Prometheus metrics for event publishing, consumption and the
#              derived-view cache
# =============================================================================

from prometheus_client import Counter, Histogram

# =============================================================================
# PUBLISHER
# =============================================================================

employee_events_published_total = Counter(
    'employee_sync_events_published_total',
    'Employee events handed to the broker',
    ['event_type', 'result']  # result: published, failed
)

# =============================================================================
# CONSUMER
# =============================================================================

employee_events_processed_total = Counter(
    'employee_sync_events_processed_total',
    'Employee event deliveries by terminal state',
    ['outcome']  # acknowledged, dropped, requeued
)

employee_event_processing_seconds = Histogram(
    'employee_sync_event_processing_seconds',
    'Time spent processing a single delivery',
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

notifications_published_total = Counter(
    'employee_sync_notifications_published_total',
    'Change notifications fanned out to subscribers',
    ['channel']  # checklist, employees
)

# =============================================================================
# DERIVED-VIEW CACHE
# =============================================================================

derived_view_cache_requests_total = Counter(
    'employee_sync_cache_requests_total',
    'Derived-view cache lookups',
    ['view', 'result']  # result: hit, miss, error
)

derived_view_cache_invalidations_total = Counter(
    'employee_sync_cache_invalidations_total',
    'Country invalidations by mode',
    ['mode']  # prefix, ttl_only
)

class PrometheusMetrics:
    """Centralised names of the metrics the function server exports"""

    # Counters
    COMPLETED = "fn_completed"
    FAILED = "fn_failed"
    CALLS = "fn_calls"
    ERRORS = "fn_errors"
    TIMEOUTS = "fn_timeouts"

    # Histograms (exported as <name>_sum / <name>_count)
    AGENT_SUBMIT_DURATION = "fn_span_agent_submit_duration_seconds"

    # Labels
    APP_LABEL = "fn_appname"
    ROUTE_LABEL = "fn_path"

    # API
    QUERY_RANGE_PATH = "/api/v1/query_range"
    READY_PATH = "/-/ready"

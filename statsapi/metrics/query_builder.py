from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from shared.constants import PrometheusMetrics
from statsapi.domain.models import MetricKind, QueryShape, Scope, ScopeKind

DEFAULT_ROLLING_WINDOW = "1m"

DEFAULT_METRIC_NAMES: Dict[MetricKind, str] = {
    MetricKind.COMPLETED: PrometheusMetrics.COMPLETED,
    MetricKind.FAILED: PrometheusMetrics.FAILED,
    MetricKind.CALLS: PrometheusMetrics.CALLS,
    MetricKind.ERRORS: PrometheusMetrics.ERRORS,
    MetricKind.TIMEDOUT: PrometheusMetrics.TIMEOUTS,
    MetricKind.DURATIONS: PrometheusMetrics.AGENT_SUBMIT_DURATION,
}

MetricNameTable = Mapping[ScopeKind, Mapping[MetricKind, str]]


def default_metric_table() -> Dict[ScopeKind, Dict[MetricKind, str]]:
    """The function server exports the same series names at every scope."""
    return {scope: dict(DEFAULT_METRIC_NAMES) for scope in ScopeKind}


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


class QueryBuilder:
    """Turns a (metric, scope) pair into a PromQL expression.

    Counters and gauges are summed across the series selected by the scope
    labels. Histograms yield a mean: the rolling rate of ``<name>_sum``
    divided by the rolling rate of ``<name>_count``.
    """

    def __init__(
        self,
        metric_names: Optional[MetricNameTable] = None,
        app_label: str = PrometheusMetrics.APP_LABEL,
        route_label: str = PrometheusMetrics.ROUTE_LABEL,
        rolling_window: str = DEFAULT_ROLLING_WINDOW,
    ):
        table = metric_names if metric_names is not None else default_metric_table()
        missing = [
            f"{scope.value}/{metric.value}"
            for scope in ScopeKind
            for metric in MetricKind
            if metric not in table.get(scope, {})
        ]
        if missing:
            raise ValueError(f"No Prometheus metric name for: {', '.join(missing)}")
        self._metric_names = MappingProxyType(
            {scope: MappingProxyType(dict(table[scope])) for scope in ScopeKind}
        )
        self.app_label = app_label
        self.route_label = route_label
        self.rolling_window = rolling_window
        self._strategies: Dict[QueryShape, Callable[[str, str], str]] = {
            QueryShape.COUNTER: self._counter_query,
            QueryShape.HISTOGRAM: self._histogram_query,
        }

    def metric_name(self, metric: MetricKind, scope: Scope) -> str:
        return self._metric_names[scope.kind][metric]

    def label_selector(self, scope: Scope) -> str:
        if scope.kind is ScopeKind.GLOBAL:
            return ""
        matchers = [f'{self.app_label}="{escape_label_value(scope.app_name)}"']
        if scope.kind is ScopeKind.ROUTE:
            matchers.append(
                f'{self.route_label}="{escape_label_value(scope.route_name)}"'
            )
        return "{" + ",".join(matchers) + "}"

    def build(self, metric: MetricKind, scope: Scope) -> str:
        strategy = self._strategies[metric.shape]
        return strategy(self.metric_name(metric, scope), self.label_selector(scope))

    def _counter_query(self, name: str, selector: str) -> str:
        return f"sum({name}{selector})"

    def _histogram_query(self, name: str, selector: str) -> str:
        window = self.rolling_window
        numerator = f"sum(rate({name}_sum{selector}[{window}]))"
        denominator = f"sum(rate({name}_count{selector}[{window}]))"
        return f"{numerator}/{denominator}"

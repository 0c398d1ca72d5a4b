# noqa: D104 - package initialization
from .logging import JsonFormatter, RequestContextFilter, configure_structured_logging  # noqa: F401
from .metrics import metrics_blueprint, record_detail_fetch, record_song_operation  # noqa: F401
from .tracing import init_tracing, set_span_outcome, song_span  # noqa: F401

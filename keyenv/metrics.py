from prometheus_client import Counter, Histogram

# Histogram for API call latency (seconds)
keyenv_api_call_latency_seconds = Histogram(
    'keyenv_api_call_latency_seconds',
    'Latency of KeyEnv API calls in seconds',
    ['method']
)

# Counter for total API calls, labeled by method and outcome
# status: HTTP status code, "timeout" or "connection_error"
# method: GET, POST, etc.
keyenv_api_call_total = Counter(
    'keyenv_api_call_total',
    'Total KeyEnv API calls',
    ['method', 'status']
)

# Counter for export cache activity
# event: hit, miss, invalidate
keyenv_cache_events_total = Counter(
    'keyenv_cache_events_total',
    'KeyEnv secrets export cache events',
    ['event']
)

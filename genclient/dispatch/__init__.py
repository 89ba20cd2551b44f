"""Generation dispatch layer.

Sends expensive generation requests to the proxy servers with:
  - Slot Admission Gate (polls the shared remote slot allocator)
  - Credential Resolver (caller override or the user's personal token)
  - Dispatcher (HTTP exchange, error taxonomy, activity log, fallback event)
"""

"""Infrastructure modules for the digest engine.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (get_module_logger, bind_run_context)
"""

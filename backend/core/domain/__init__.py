"""
core.domain — Framework-light building blocks shared by the app services.

Modules
-------
exceptions         Domain exceptions that map cleanly to HTTP responses.
exception_handler  DRF ``EXCEPTION_HANDLER`` translating them.
events             ``DomainEvent`` values emitted by the complaint workflow.
notifications      ``NotificationDispatcher``: events → stored notifications + push.
pagination         ``Page`` container returned by the stores.
transactions       Storage-error translation and optimistic ``compare_and_swap``.

Usage from any app::

    from core.domain.exceptions import NotFoundError, ValidationError
    from core.domain.notifications import NotificationDispatcher
    from core.domain.transactions import compare_and_swap, guarded
"""

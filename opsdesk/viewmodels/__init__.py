"""ViewModel package for UI state and command surfaces.

Call context:
    ``opsdesk.web_ui`` pages and ``opsdesk.app.controller`` import concrete
    viewmodels from this package to bind page callbacks to state transitions.

Dependencies:
    Modules in this package depend on domain types and the debounce helper
    only. I/O adapters and use-case orchestration remain outside.

Responsibilities:
    - Expose mutable UI state and command intent callbacks.
    - Keep list state in step with the backend after every mutation.
    - Keep MVVM boundaries explicit by avoiding transport or persistence logic.
"""

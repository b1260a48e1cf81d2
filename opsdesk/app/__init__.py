"""Composition root for the console runtime.

Call context:
    ``opsdesk.web_ui.runtime`` creates one :class:`AppController` per browser
    client and asks it for viewmodels bound to lazily built use cases.

Responsibilities:
    - Build REST adapters (or the offline mock) from ``SettingsVM`` values.
    - Wire use cases into viewmodels without leaking transport details.
"""

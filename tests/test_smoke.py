"""Smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import orderdesk
    import orderdesk.application
    import orderdesk.application.server
    import orderdesk.availability
    import orderdesk.cli.main
    import orderdesk.domain
    import orderdesk.ingest
    import orderdesk.runtime

    assert orderdesk is not None
    assert orderdesk.application is not None
    assert orderdesk.application.server is not None
    assert orderdesk.availability is not None
    assert orderdesk.cli.main is not None
    assert orderdesk.domain is not None
    assert orderdesk.ingest is not None
    assert orderdesk.runtime is not None

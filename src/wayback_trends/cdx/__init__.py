"""Wayback Machine CDX API access.

Provides capture-index queries against the Internet Archive's Wayback
Machine.  Queries return capture metadata (URL key, timestamp, status,
digest, length) as a raw 2D JSON table; interpretation of that table lives
in :mod:`wayback_trends.analysis.normalizer`.

No credentials are required.  The Internet Archive's infrastructure can be
slow and occasionally unavailable; failures surface as
:class:`~wayback_trends.core.exceptions.FetchError` and are never retried.
"""

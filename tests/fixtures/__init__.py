"""Test fixtures for autotoolsdep tests.

This package provides reusable pytest fixtures for testing autotoolsdep components:

- archives: In-memory .tar.gz source archives and on-disk autotools source trees

Import fixtures in your tests using:
    from tests.fixtures.archives import pkg_tarball
"""

__all__ = [
    "archives",
]

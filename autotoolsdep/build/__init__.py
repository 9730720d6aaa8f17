"""
configure/make build drivers and the dependency build pipeline.
"""

from autotoolsdep.build.autotools import (
    configure_arguments,
    make_arguments,
    run_configure,
    run_make,
)
from autotoolsdep.build.pipeline import (
    build_local_dependency,
    fetch_build_dependency,
)

__all__ = [
    "configure_arguments",
    "make_arguments",
    "run_configure",
    "run_make",
    "build_local_dependency",
    "fetch_build_dependency",
]

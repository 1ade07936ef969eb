"""Build information about the running program."""

from __future__ import annotations

import platform
import sys

# Filled in at build time.
VERSION = ""
REVISION = ""
BRANCH = ""
BUILD_USER = ""
BUILD_DATE = ""
PYTHON_VERSION = platform.python_version()

_TEMPLATE = """
{program}, version {version} (branch: {branch}, revision: {revision})
  build user:       {build_user}
  build date:       {build_date}
  python version:   {python_version}
  platform:         {platform}
"""


def _platform() -> str:
    return f"{sys.platform}/{platform.machine()}"


def print_version(program: str) -> str:
    """Return a multi-line description of the build."""
    text = _TEMPLATE.format(
        program=program,
        version=VERSION,
        branch=BRANCH,
        revision=REVISION,
        build_user=BUILD_USER,
        build_date=BUILD_DATE,
        python_version=PYTHON_VERSION,
        platform=_platform(),
    )
    return text.strip()


def info() -> str:
    """Return version, branch and revision."""
    return f"(version={VERSION}, branch={BRANCH}, revision={REVISION})"


def build_context() -> str:
    """Return the interpreter version, build user and build date."""
    return f"(python={PYTHON_VERSION}, user={BUILD_USER}, date={BUILD_DATE})"
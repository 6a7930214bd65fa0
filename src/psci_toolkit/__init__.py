"""Top-level package for the PSCI cognitive training toolkit.

Provides subpackages:
- psci_toolkit.common - exercise catalogue, content tables and thresholds
- psci_toolkit.core - immutable models, schemas and serialization
- psci_toolkit.engine - session engine (generators, scoring, reaction loop, progression)
- psci_toolkit.qt - PySide6 adapters (QTimer scheduler, signal bridge)
"""

from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path


def _read_version() -> str:
    """Checkout builds read pyproject.toml; installed builds ask the distribution."""
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if pyproject.is_file():
        try:
            for line in pyproject.read_text(encoding="utf-8").splitlines():
                key, sep, value = line.partition("=")
                if sep and key.strip() == "version":
                    return value.strip().strip("\"'")
        except OSError:
            pass
    try:
        return _dist_version("psci-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _read_version()
__all__: list[str] = ["__version__"]

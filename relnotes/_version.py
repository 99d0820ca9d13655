from importlib import metadata
from pathlib import Path

DIST_NAME = "relnotes"
DEFAULT_VERSION = "0.0.0"


def get_version() -> str:
    """Installed distribution version; a VERSION file next to the package covers source checkouts."""
    try:
        return metadata.version(DIST_NAME)
    except Exception:
        pass
    vfile = Path(__file__).resolve().parents[1] / "VERSION"
    if vfile.exists():
        return vfile.read_text().strip() or DEFAULT_VERSION
    return DEFAULT_VERSION


__version__ = get_version()

# autoscroll/PathResolver.py
"""
Locates the config, logs and documents directories of an installation.

Two layouts are recognized from the location of the entry script:
- development: main.py at the repository root, directories next to it
- portable: unpacked ZIP with the entry script under _internal/app/, where
  config ships with the app and writable logs live at the top level
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

DistributionMode = Literal["portable", "development"]

_PORTABLE_MARKERS = ("_internal", "app")


@dataclass(frozen=True)
class ResolvedPaths:
    """Directories the follower reads from and writes to."""
    app_dir: Path
    root_dir: Path
    config_dir: Path
    logs_dir: Path
    documents_dir: Path
    environment: DistributionMode


class PathResolver:
    """Resolves application directories relative to the entry script.

    Args:
        script_path: Path of the running main.py (or main.pyc when frozen)
    """

    def __init__(self, script_path: Path):
        script_path = script_path.resolve()
        self._mode: DistributionMode = self._detect_mode(script_path)

        app_dir = script_path.parent
        if self._mode == "portable":
            # AutoScroll/_internal/app/main.pyc
            root_dir = app_dir.parent.parent
            config_dir = app_dir / "config"
        else:
            root_dir = app_dir
            config_dir = root_dir / "config"

        self._paths = ResolvedPaths(
            app_dir=app_dir,
            root_dir=root_dir,
            config_dir=config_dir,
            logs_dir=root_dir / "logs",
            documents_dir=root_dir / "documents",
            environment=self._mode,
        )

    @staticmethod
    def _detect_mode(script_path: Path) -> DistributionMode:
        if all(marker in script_path.parts for marker in _PORTABLE_MARKERS):
            return "portable"
        return "development"

    @property
    def paths(self) -> ResolvedPaths:
        return self._paths

    @property
    def mode(self) -> DistributionMode:
        return self._mode

    def get_config_path(self, config_name: str) -> Path:
        return self._paths.config_dir / config_name

    def resolve_document(self, document: str | Path) -> Path:
        """Find a reference document given on the command line.

        A path that exists as given (absolute or relative to the working
        directory) wins; otherwise the name is looked up in documents_dir.
        The returned path is not guaranteed to exist.
        """
        candidate = Path(document)
        if candidate.exists() or candidate.is_absolute():
            return candidate
        return self._paths.documents_dir / candidate

    def ensure_local_dir_structure(self) -> None:
        """Creates the config and logs directories if missing."""
        for directory in (self._paths.config_dir, self._paths.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

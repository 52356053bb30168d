"""Workspace Manager - one private scratch directory per generation."""

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from ..core.id import new_workspace_id
from ..core.logging_config import get_logger
from ..monitoring import metrics_collector

logger = get_logger(__name__)


@dataclass(frozen=True)
class Workspace:
    """Handle to an exclusively owned scratch directory."""

    id: str
    path: Path


class WorkspaceManager:
    """Allocates and tears down per-request scratch directories."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def acquire(self, project_name: str) -> Workspace:
        """
        Create a fresh directory under ``base_dir``.

        The ULID suffix makes the name unique per call; ``exist_ok=False``
        turns any collision into an error instead of shared use.
        """
        workspace_id = new_workspace_id()
        path = self.base_dir / f"{project_name}_{workspace_id}"
        self.base_dir.mkdir(parents=True, exist_ok=True)
        path.mkdir(exist_ok=False)
        logger.debug("workspace_acquired", path=str(path))
        return Workspace(id=workspace_id, path=path)

    def release(self, workspace: Workspace) -> bool:
        """Remove the workspace recursively. Failures are logged, never raised."""
        try:
            shutil.rmtree(workspace.path)
        except FileNotFoundError:
            return True
        except OSError as e:
            metrics_collector.record_cleanup_failure()
            logger.warning("workspace_cleanup_failed", path=str(workspace.path), error=str(e))
            return False
        logger.debug("workspace_released", path=str(workspace.path))
        return True

    @contextmanager
    def session(self, project_name: str) -> Iterator[Workspace]:
        """Acquire a workspace and release it on every exit path."""
        workspace = self.acquire(project_name)
        try:
            yield workspace
        finally:
            self.release(workspace)

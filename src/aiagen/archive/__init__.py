"""
Project Archive
Text formats, scratch workspaces and zip packaging
"""

from .formats import ProjectPaths, ScmFormatError, parse_properties, parse_scm, project_paths
from .renderer import ArchiveRenderer, zip_directory
from .workspace import Workspace, WorkspaceManager

__all__ = [
    "ArchiveRenderer",
    "ProjectPaths",
    "ScmFormatError",
    "Workspace",
    "WorkspaceManager",
    "parse_properties",
    "parse_scm",
    "project_paths",
    "zip_directory",
]

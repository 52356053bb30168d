"""Archive Renderer - writes project files into a workspace and zips it."""

import io
import zipfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from ..core.logging_config import get_logger
from ..core.validate import GenerationRequest, UploadedFile
from ..synth.blocks import render_bky
from ..synth.models import BlockDocument, Component
from .formats import extension_identifiers, project_paths, render_properties, render_scm

logger = get_logger(__name__)

COMPRESSION_LEVEL = 9


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def zip_directory(root: Path) -> bytes:
    """Zip every file under ``root`` with paths relative to it."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=COMPRESSION_LEVEL) as zipf:
        for file_path in sorted(root.rglob("*")):
            if file_path.is_file():
                zipf.write(file_path, file_path.relative_to(root).as_posix())
    return buffer.getvalue()


class ArchiveRenderer:
    """Serializes a synthesized project into an archive byte buffer."""

    def __init__(self, extension_namespace: str = "com.appybuilder") -> None:
        self.extension_namespace = extension_namespace

    def render(
        self,
        components: Sequence[Component],
        block_document: BlockDocument,
        request: GenerationRequest,
        extension_files: Sequence[UploadedFile],
        design_images: Sequence[UploadedFile],
        workspace_root: Path,
        moment: datetime | None = None,
    ) -> bytes:
        """
        Write all project files under ``workspace_root`` and return the zip.

        Args:
            components: Screen components, in order
            block_document: Screen block program
            request: Validated request (project name, user id)
            extension_files: Extension uploads, listed in project.properties
            design_images: Image uploads, copied into assets/
            workspace_root: Scratch directory owned by this request
            moment: Timestamp for project.properties (defaults to now)

        Returns:
            Zip archive bytes
        """
        root = Path(workspace_root)
        paths = project_paths(request.user_id, request.project_name)

        external_comps = extension_identifiers(extension_files, self.extension_namespace)
        _write_text(
            root / paths.properties,
            render_properties(request.project_name, request.user_id, external_comps, moment),
        )
        _write_text(root / paths.scm, render_scm(request.project_name, components))
        _write_text(root / paths.bky, render_bky(block_document))

        assets_dir = root / paths.assets
        assets_dir.mkdir(parents=True, exist_ok=True)
        for image in design_images:
            with open(assets_dir / image.basename, "wb") as target:
                image.copy_to(target)
            image.close()

        archive = zip_directory(root)
        logger.info(
            "archive_rendered",
            size=len(archive),
            components=len(components),
            extensions=len(external_comps),
            assets=len(design_images),
        )
        return archive

"""AIA Generator - requirement text to project archive bytes."""

import time

from .archive import ArchiveRenderer, WorkspaceManager
from .core import GenerationRequest, Settings, UuidAllocator, generation_context, get_logger, get_settings
from .core.id import new_generation_id
from .monitoring import metrics_collector, trace_operation
from .planner import ComponentPlan, RequirementParser
from .synth import BlockSynthesizer, ComponentSynthesizer

logger = get_logger(__name__)


class GenerationError(Exception):
    """Archive generation failed; the underlying cause is chained."""

    pass


class AiaGenerator:
    """Runs parse, synthesis, rendering and teardown for one request at a time.

    Holds no per-request state, so one instance can serve concurrent calls.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        workspaces: WorkspaceManager | None = None,
        renderer: ArchiveRenderer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.parser = RequirementParser()
        self.components = ComponentSynthesizer(self.settings.default_search_prompt)
        self.blocks = BlockSynthesizer()
        self.workspaces = workspaces or WorkspaceManager(self.settings.workspace_dir)
        self.renderer = renderer or ArchiveRenderer(self.settings.extension_namespace)

    def plan(self, request: GenerationRequest) -> ComponentPlan:
        """Parse the request's requirement text."""
        return self.parser.parse(
            request.requirements,
            request.effective_search_prompt,
            design_image_count=len(request.design_image_files),
        )

    def generate(self, request: GenerationRequest) -> bytes:
        """
        Produce the project archive for a validated request.

        Uploaded file handles are released before this returns, whatever
        the outcome.

        Raises:
            GenerationError: If a workspace, file or archive operation fails
        """
        start_time = time.time()
        generation_id = new_generation_id()

        with generation_context(generation_id, request.project_name, request.user_id):
            logger.info("generation_start", save_config=request.save_config)
            try:
                archive = self._generate(request)
            except GenerationError as e:
                metrics_collector.record_generation("error", time.time() - start_time)
                logger.error("generation_failed", error=str(e.__cause__ or e))
                raise
            finally:
                request.close_uploads()

            duration = time.time() - start_time
            metrics_collector.record_generation("success", duration)
            metrics_collector.record_archive(len(archive))
            logger.info("generation_complete", size=len(archive), duration_ms=duration * 1000)
            return archive

    def _generate(self, request: GenerationRequest) -> bytes:
        with trace_operation("parse"):
            plan = self.plan(request)

        with trace_operation("synthesize"):
            components = self.components.synthesize(
                plan, request, request.design_image_files, uuids=UuidAllocator()
            )
            document = self.blocks.synthesize(
                plan,
                plan.button_count,
                request.effective_search_prompt,
                request.project_name,
            )

        try:
            with self.workspaces.session(request.project_name) as workspace:
                with trace_operation("render", workspace=str(workspace.path)):
                    return self.renderer.render(
                        components,
                        document,
                        request,
                        request.extension_files,
                        request.design_image_files,
                        workspace.path,
                    )
        except (OSError, ValueError) as e:
            raise GenerationError(f"Failed to generate AIA file: {e}") from e

# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The build-and-release pipeline.

Stages run strictly one after another:

    version-update → clean → restore → build → publish → (verify artifact)

The first non-zero exit stops everything with StageFailed. Nothing is
retried, and nothing already done is rolled back: a failed publish leaves
the build output in place, and re-running the pipeline is the recovery.

All paths resolve against an explicit working directory. The process's
own current directory is never changed, so a pipeline can be run against
any checkout, including a tmp_path in tests.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from plugship.config.schema import BuildConfig, BuildSettings
from plugship.logging.logger import get_logger
from plugship.pipeline.runner import CommandRunner, DryRunRunner, SubprocessRunner
from plugship.pipeline.stages import (
    CLEAN,
    Stage,
    StageResult,
    execute_stage,
    toolchain_stages,
    version_update_stage,
)
from plugship.release.verifier import ArtifactReport, verify_artifact
from plugship.utils.filesystem import remove_tree
from plugship.version.resolver import resolve_version

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a successful run produced."""

    stages: list[StageResult] = field(default_factory=list)
    version: Optional[str] = None
    artifact: Optional[ArtifactReport] = None
    dry_run: bool = False


def artifact_path_for(
    settings: BuildSettings, working_dir: Path, version: str, configuration: str,
) -> Path:
    """Where the packaged archive for `version` is expected to land."""
    relative = settings.artifact_template.format(
        plugin_id=settings.plugin_id,
        version=version,
        configuration=configuration,
    )
    return working_dir / relative


def plan_stages(
    config: BuildConfig,
    settings: BuildSettings,
    working_dir: Path,
    runner: CommandRunner,
) -> list[Stage]:
    """
    The full ordered list of stages for this run.

    Picking the version-helper launcher happens here, so a missing
    interpreter fails the run before any toolchain stage has started.
    """
    stages: list[Stage] = []
    if config.version is not None:
        stages.append(version_update_stage(config.version, settings, working_dir, runner))
    stages.extend(toolchain_stages(config, settings))
    return stages


def run_pipeline(
    config: BuildConfig,
    settings: BuildSettings,
    working_dir: Path,
    runner: Optional[CommandRunner] = None,
) -> PipelineResult:
    """
    Run every applicable stage, then verify the artifact if packaging was asked for.

    Args:
        config: The parsed command line.
        settings: Project settings (toolchain, paths, templates).
        working_dir: Directory every stage runs in and every path is relative to.
        runner: How to start processes. Defaults to DryRunRunner when
                config.dry_run is set, SubprocessRunner otherwise.

    Returns:
        PipelineResult with the completed stages and the artifact report.

    Raises:
        NoInterpreterAvailable: Version helper cannot be launched.
        StageFailed: A stage exited non-zero.
        DescriptorNotFound, VersionNotFound: Packaging needs a version and
            the descriptor doesn't provide one.
    """
    if runner is None:
        runner = DryRunRunner() if config.dry_run else SubprocessRunner()

    working_dir = working_dir.resolve()

    logger.info(
        "Pipeline started",
        extra={
            "configuration": config.configuration,
            "clean": config.clean,
            "package": config.package,
            "version": config.version,
            "dry_run": config.dry_run,
            "working_dir": str(working_dir),
        },
    )

    stages = plan_stages(config, settings, working_dir, runner)
    results: list[StageResult] = []

    for stage in stages:
        results.append(execute_stage(stage, runner, working_dir))
        if stage.name == CLEAN:
            _remove_output_dir(working_dir / settings.output_dir, config.dry_run)

    version = config.version
    artifact: Optional[ArtifactReport] = None

    if config.package:
        if version is None:
            version = resolve_version(working_dir / settings.descriptor)
        artifact_path = artifact_path_for(settings, working_dir, version, config.configuration)
        if config.dry_run:
            logger.info(
                "Dry run: would verify artifact",
                extra={"path": str(artifact_path)},
            )
        else:
            artifact = verify_artifact(artifact_path, settings.library_extension)

    logger.info(
        "Pipeline finished",
        extra={"stages": [r.stage_name for r in results], "version": version},
    )

    return PipelineResult(stages=results, version=version, artifact=artifact, dry_run=config.dry_run)


def _remove_output_dir(output_dir: Path, dry_run: bool) -> None:
    if dry_run:
        logger.info("Dry run: would remove build output", extra={"path": str(output_dir)})
        return
    if remove_tree(output_dir):
        logger.info("Removed build output", extra={"path": str(output_dir)})
    else:
        logger.debug("No build output to remove", extra={"path": str(output_dir)})

"""
Drives extraction, transformation and rendering for each declared DTO
and writes the generated files.
"""

import contextlib
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .core.config import BatchConfig
from .core.errors import DtoGenError, FormatError, OutputError
from .core.extractor import Extractor
from .core.generator import Emitter
from .core.naming import default_output_file
from .core.schema import TransformConfig
from .core.transform import TransformPipeline
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationJob:
    """One DTO to generate: where the type lives and what to do with it."""

    type_name: str
    source: str
    config: TransformConfig
    output_dir: Optional[str] = None
    output_file: Optional[str] = None


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        job: GenerationJob,
        code: str = "",
        path: Optional[Path] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        self.job = job
        self.code = code
        self.path = path
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error: Optional[DtoGenError] = None

    @classmethod
    def failure(cls, job: GenerationJob, error: DtoGenError) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(job)
        result.success = False
        result.error = error
        return result


def write_output(path: Path, data: bytes) -> None:
    """
    Write bytes to path atomically.

    The data goes to a temporary file in the destination directory and
    is moved into place, so a reader never sees a partial file and a
    failed write leaves any previous file intact.
    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise OutputError(f"Failed to write {path}: {e}", location=str(path)) from e

    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise OutputError(f"Failed to write {path}: {e}", location=str(path)) from e


class Orchestrator:
    """Runs GenerationJobs through Extractor, TransformPipeline and Emitter."""

    def __init__(
        self,
        emitter: Optional[Emitter] = None,
        extractor: Optional[Extractor] = None,
        write: bool = True,
    ):
        self.emitter = emitter or Emitter()
        self.extractor = extractor or Extractor()
        self.write = write

    def generate(self, job: GenerationJob) -> GenerationResult:
        """Generate one DTO; errors are captured in the result, never raised."""
        try:
            return self._generate(job)
        except DtoGenError as e:
            if e.type_name is None:
                e.type_name = job.type_name
            if e.location is None:
                e.location = job.source
            logger.error("Error generating %s from %s: %s", job.type_name, job.source, e)
            return GenerationResult.failure(job, e)

    def _generate(self, job: GenerationJob) -> GenerationResult:
        info = self.extractor.extract(job.source, job.type_name)
        context = TransformPipeline(job.config).apply(info)

        warnings = []
        try:
            data = self.emitter.render(context, job.config.template)
        except FormatError as e:
            logger.warning(
                "Generated code for %s is not valid Python, keeping it unformatted: %s",
                job.type_name,
                e,
            )
            warnings.append(f"unformatted output: {e}")
            data = e.raw

        output_file = job.output_file or default_output_file(job.config.output_name)
        out_dir = Path(job.output_dir) if job.output_dir else info.origin_dir
        path = out_dir / output_file

        if self.write:
            try:
                out_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise OutputError(
                    f"Failed to create output directory {out_dir}: {e}",
                    location=str(out_dir),
                ) from e
            write_output(path, data)
            logger.info("Generated %s", path)

        return GenerationResult(
            job,
            code=data.decode("utf-8"),
            path=path,
            warnings=warnings,
            metadata={
                "source_type": info.name,
                "source_module": info.module_name,
                "output_type": context.output_name,
                "field_count": len(context.fields),
                "import_count": len(context.imports),
            },
        )

    def run_batch(
        self, jobs: List[GenerationJob], max_workers: int = 1
    ) -> List[GenerationResult]:
        """
        Generate every job; one failure does not stop the rest.

        Results come back in job order regardless of worker count. Jobs
        must write to distinct destinations when run in parallel.
        """
        if max_workers <= 1 or len(jobs) <= 1:
            return [self.generate(job) for job in jobs]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.generate, jobs))


def jobs_from_config(config: BatchConfig) -> List[GenerationJob]:
    """Expand a batch document into jobs, applying global defaults."""
    g = config.global_config
    return [
        GenerationJob(
            type_name=dto.type,
            source=dto.source_location(g),
            config=dto.to_transform_config(g),
            output_dir=g.output_dir,
            output_file=dto.output_file,
        )
        for dto in config.dtos
    ]

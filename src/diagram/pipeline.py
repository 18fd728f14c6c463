"""Sequence catalog extraction, rendering and output writing for one diagram run."""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, AsyncContextManager, Callable, Optional, Union

from common.config.env import get_env_str
from common.errors import OutputWriteError, classify_error
from common.observability.context import run_id_var
from dal.mssql import MssqlConfig, MssqlQueryTargetDatabase, MssqlSchemaIntrospector
from dal.schema_assembler import SchemaAssembler
from diagram.plantuml import render
from schema import DatabaseSchema

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILENAME = "schema.puml"

Connector = Callable[[MssqlConfig], AsyncContextManager[Any]]


class PipelineStage(str, Enum):
    """Stages of a diagram run; FAILED is reachable from every other stage."""

    CONNECTING = "connecting"
    EXTRACTING_TABLES = "extracting_tables"
    EXTRACTING_REFERENCES = "extracting_references"
    RENDERING = "rendering"
    WRITING_OUTPUT = "writing_output"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a successful diagram run."""

    output_path: Path
    table_count: int
    reference_count: int
    run_id: str
    stage: PipelineStage = PipelineStage.DONE


def resolve_output_path(output_path: Optional[Union[str, Path]] = None) -> Path:
    """Return the explicit path, else DIAGRAM_OUTPUT_PATH, else ./schema.puml."""
    if output_path:
        return Path(output_path)
    return Path(get_env_str("DIAGRAM_OUTPUT_PATH", DEFAULT_OUTPUT_FILENAME))


def write_output(path: Path, text: str) -> None:
    """Write the diagram as UTF-8, replacing any existing file."""
    try:
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise OutputWriteError(
            f"Failed to write diagram to {path}: {exc}", category=classify_error(exc)
        ) from exc


class DiagramPipeline:
    """Single-use, fail-fast driver for one diagram run.

    The connection is opened once, shared by every catalog query and closed
    before rendering. The output file is only touched after rendering has
    succeeded, so extraction and rendering failures leave no file behind.
    """

    def __init__(
        self,
        config: MssqlConfig,
        output_path: Optional[Union[str, Path]] = None,
        *,
        batch_columns: bool = False,
        connector: Optional[Connector] = None,
    ) -> None:
        self._config = config
        self._output_path = resolve_output_path(output_path)
        self._batch_columns = batch_columns
        self._connector = connector or MssqlQueryTargetDatabase.connect
        self.stage = PipelineStage.CONNECTING

    async def run(self) -> PipelineResult:
        """Run every stage in order and return the result, or raise the first error."""
        run_id = uuid.uuid4().hex
        token = run_id_var.set(run_id)
        try:
            return await self._run(run_id)
        except Exception as exc:
            failed_stage = self.stage
            self.stage = PipelineStage.FAILED
            logger.debug(
                "Diagram run %s failed during %s: %s", run_id, failed_stage.value, exc
            )
            raise
        finally:
            run_id_var.reset(token)

    async def _run(self, run_id: str) -> PipelineResult:
        self._advance(PipelineStage.CONNECTING)
        async with self._connector(self._config) as conn:
            assembler = SchemaAssembler(
                MssqlSchemaIntrospector(conn), batch_columns=self._batch_columns
            )
            self._advance(PipelineStage.EXTRACTING_TABLES)
            tables = await assembler.assemble_tables()
            self._advance(PipelineStage.EXTRACTING_REFERENCES)
            references = await assembler.assemble_references()

        schema = DatabaseSchema(tables=tables, references=references)

        self._advance(PipelineStage.RENDERING)
        markup = render(schema)

        self._advance(PipelineStage.WRITING_OUTPUT)
        write_output(self._output_path, markup)

        self._advance(PipelineStage.DONE)
        return PipelineResult(
            output_path=self._output_path,
            table_count=len(schema.tables),
            reference_count=len(schema.references),
            run_id=run_id,
        )

    def _advance(self, stage: PipelineStage) -> None:
        self.stage = stage
        logger.debug("Diagram pipeline stage=%s", stage.value)


async def run_pipeline(
    config: MssqlConfig,
    output_path: Optional[Union[str, Path]] = None,
    *,
    batch_columns: bool = False,
    connector: Optional[Connector] = None,
) -> PipelineResult:
    """Run one diagram pipeline end to end."""
    pipeline = DiagramPipeline(
        config, output_path, batch_columns=batch_columns, connector=connector
    )
    return await pipeline.run()

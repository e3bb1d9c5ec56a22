"""Load pipeline: register, validate and print configuration objects in sequence."""

from __future__ import annotations

import sys
from typing import IO, Any

from confloader.core.config import ConfLoaderSettings
from confloader.core.contracts import OutputFormat
from confloader.core.exceptions import PipelineError
from confloader.core.interfaces import Configurable, Printable, Validatable
from confloader.core.logging import get_logger
from confloader.core.walker import walk_fields, walk_json
from confloader.renderers.structured import render_json
from confloader.renderers.table import render_table

logger = get_logger(__name__)

# Process-wide default; set once before loading, it is not synchronized.
_default_output_format: OutputFormat | None = None


def set_output_format(output_format: OutputFormat | str) -> None:
    """Set the format used by loads that don't pass one explicitly."""
    global _default_output_format
    _default_output_format = OutputFormat(output_format)


def get_output_format() -> OutputFormat:
    if _default_output_format is not None:
        return _default_output_format
    return ConfLoaderSettings().output_format


def load(
    *configs: Any,
    output_format: OutputFormat | str | None = None,
    sink: IO[str] | None = None,
) -> None:
    """Register, validate and print each of *configs*, stopping at the first error."""
    Loader(configs, output_format=output_format, sink=sink).run()


class Loader:
    """Drives configuration objects through register -> validate -> print."""

    def __init__(
        self,
        configs: Any,
        *,
        output_format: OutputFormat | str | None = None,
        sink: IO[str] | None = None,
    ) -> None:
        self.configs = list(configs)
        self.output_format = (
            OutputFormat(output_format) if output_format is not None else None
        )
        self.sink = sink
        self._log = logger.bind(pipeline="confloader")

    def run(self) -> None:
        """Process every config in order; the first exception aborts the batch."""
        output_format = self.output_format or get_output_format()

        for index, config in enumerate(self.configs):
            log = self._log.bind(config=type(config).__name__, index=index)
            phase = "register"
            try:
                if not isinstance(config, Configurable):
                    msg = f"{type(config).__name__} does not implement register()"
                    raise PipelineError(msg)

                config.register()
                log.debug("config.registered")

                if isinstance(config, Validatable):
                    phase = "validate"
                    config.validate()
                    log.debug("config.validated")

                if isinstance(config, Printable):
                    phase = "print"
                    self._print(config, output_format)
                    log.debug("config.printed", format=output_format.value)

            except Exception as exc:
                log.error("config.failed", phase=phase, error=str(exc))
                raise

        self._log.info("pipeline.completed", configs=len(self.configs))

    def _print(self, config: Printable, output_format: OutputFormat) -> None:
        sink = self.sink if self.sink is not None else sys.stdout
        snapshot = config.print()

        match output_format:
            case OutputFormat.JSON:
                render_json(walk_json(snapshot), sink)
            case _:
                render_table(walk_fields(snapshot), sink)

"""confloader -- populate, validate and print settings records.

Settings are plain dataclasses whose fields are declared with :func:`setting`;
:func:`load` drives configuration objects through register, validate and print.
"""

from confloader.adapters.env import parse_env
from confloader.adapters.validator import validate_struct
from confloader.adapters.yaml_file import parse_yaml
from confloader.core.contracts import SENSITIVE_DATA_MASK, FieldRecord, OutputFormat, setting
from confloader.core.exceptions import (
    ConfLoaderError,
    DecodeError,
    ParseError,
    PipelineError,
    ReadError,
    RegisterError,
    RenderError,
    ValidationError,
)
from confloader.core.interfaces import Configurable, Printable, Validatable
from confloader.core.pipeline import Loader, get_output_format, load, set_output_format
from confloader.core.sources import EnvSource, YamlSource
from confloader.core.walker import walk_fields, walk_json

__all__ = [
    "SENSITIVE_DATA_MASK",
    "ConfLoaderError",
    "Configurable",
    "DecodeError",
    "EnvSource",
    "FieldRecord",
    "Loader",
    "OutputFormat",
    "ParseError",
    "PipelineError",
    "Printable",
    "ReadError",
    "RegisterError",
    "RenderError",
    "Validatable",
    "ValidationError",
    "YamlSource",
    "get_output_format",
    "load",
    "parse_env",
    "parse_yaml",
    "set_output_format",
    "setting",
    "validate_struct",
    "walk_fields",
    "walk_json",
]

import dataclasses
import importlib
import inspect
import json
import logging
from pathlib import Path
from typing import Any

import click

from .config import SchemaGeneratorConfig
from .errors import SchemaGenerationError
from .generator import ReflectionClassJsonSchemaGenerator, ReflectionFunctionCallingSchemaGenerator
from .writer import SchemaWriter

JSON_SCHEMA_FORMAT = "json-schema"
FUNCTION_CALLING_FORMAT = "function-calling"


def load_target(target: str) -> Any:
    """Import ``module:attribute`` (the attribute may be dotted) and return the object."""
    module_name, _, attribute_path = target.partition(":")
    if not module_name or not attribute_path:
        raise click.BadParameter(f"expected 'module:attribute', got '{target}'", param_hint="TARGET")
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import module '{module_name}': {e}", param_hint="TARGET") from e
    for part in attribute_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"'{module_name}' has no attribute '{attribute_path}'", param_hint="TARGET") from None
    return obj


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Root name of the generated schema")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--format",
    "-f",
    "output_format",
    default=None,
    type=click.Choice([JSON_SCHEMA_FORMAT, FUNCTION_CALLING_FORMAT]),
    help="Output dialect (default: function-calling for functions, json-schema otherwise)",
)
@click.option("--strict/--no-strict", default=None, help="Override the strict flag of the chosen preset")
@click.option("--indent", default=None, type=int, help="JSON indentation (overrides config file)")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log graph building and transformation")
@click.argument("target", type=str)
@click.argument("output", default=None, required=False, type=click.Path(resolve_path=True))
def type_graph_schema(name, config, output_format, strict, indent, verbose, target, output):
    """Generate a JSON Schema or function-calling schema for TARGET (module:attribute)."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = SchemaGeneratorConfig.from_dict(json.load(f))
    else:
        config = SchemaGeneratorConfig()

    if indent is not None:
        config.indent = indent

    obj = load_target(target)
    if output_format is None:
        is_function = inspect.isfunction(obj) or inspect.ismethod(obj)
        output_format = FUNCTION_CALLING_FORMAT if is_function else JSON_SCHEMA_FORMAT

    try:
        if output_format == FUNCTION_CALLING_FORMAT:
            function_config = config.function_calling
            if strict is not None:
                function_config = dataclasses.replace(function_config, strict_schema_flag=strict)
            generator = ReflectionFunctionCallingSchemaGenerator(
                function_config, config.introspection, root_name=name, indent=config.indent
            )
        else:
            json_config = config.json_schema
            if strict is not None:
                json_config = dataclasses.replace(json_config, strict_schema_flag=strict)
            generator = ReflectionClassJsonSchemaGenerator(
                json_config, config.introspection, root_name=name, indent=config.indent
            )
        out = generator.generate_schema_string(obj)
    except (SchemaGenerationError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if output is None:
        click.echo(out)
    else:
        SchemaWriter().write(Path(output), out)

"""
CLI utilities for command line reconstruction and logging setup.
"""

import logging

import click

COMMAND_NAME = "arm_template_to_code"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Output paths are reduced to their file names; options left at their
    default value are omitted.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        # No active context, return basic command
        return COMMAND_NAME

    cli_args = ctx.params
    if not cli_args:
        return COMMAND_NAME

    arguments = []
    options = []

    for param in click_command.params:
        value = cli_args.get(param.name)
        if not value:
            continue

        if isinstance(param, click.Argument):
            formatted = str(value)
            if param.name == "output":
                formatted = click.format_filename(value, shorten=True)
            arguments.append(formatted)

        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0]
            if param.is_flag:
                options.append(flag)
            elif isinstance(value, (list, tuple)):
                for item in value:
                    options.extend([flag, str(item)])
            else:
                options.extend([flag, str(value)])

    return " ".join([COMMAND_NAME, *arguments, *options])


def configure_logging(verbose: bool) -> None:
    """Route pipeline log records to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

"""Click base classes with ``--examples`` support, plus shared option parsing.

WritenexCommand and WritenexGroup accept an ``examples`` parameter; passing
``--examples`` prints them and exits, keeping ``--help`` short.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import click
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class WritenexCommand(click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class WritenexGroup(click.Group):
    """Group whose subcommands are WritenexCommands by default."""

    command_class = WritenexCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


def _split_pair(pair: str, option: str) -> tuple[str, str]:
    key, sep, value = pair.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint=option)
    return key.strip(), value


def parse_assignments(pairs: Iterable[str], option: str = "--set") -> dict[str, Any]:
    """``KEY=VALUE`` pairs to a frontmatter mapping.

    Values are read as YAML scalars, so ``draft=false`` is a boolean and
    ``pubDate=2024-06-05`` a date. Anything that does not load to a scalar
    or list is kept as the literal string.
    """
    yaml = YAML(typ="safe")
    result: dict[str, Any] = {}
    for pair in pairs:
        key, raw = _split_pair(pair, option)
        try:
            value = yaml.load(raw) if raw.strip() else raw
        except YAMLError:
            value = raw
        if isinstance(value, dict):
            value = raw
        result[key] = value
    return result


def parse_tokens(pairs: Iterable[str]) -> dict[str, str]:
    """``KEY=VALUE`` pairs to custom pattern tokens (values kept verbatim)."""
    return dict(_split_pair(pair, "--token") for pair in pairs)

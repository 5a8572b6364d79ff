"""
Typed argument schemas for console commands, built on click parameters.

A schema validates the token vector of a completed line and renders the
usage line and parameter glossary that the help command prints.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import click

GLOSSARY_FORMAT = "  {:>12}  {}\n"


class DescribedArgument(click.Argument):
    """Positional click argument that carries a help string."""

    def __init__(
        self, param_decls: Sequence[str], help: Optional[str] = None, **attrs: Any
    ) -> None:
        super().__init__(list(param_decls), **attrs)
        self.help = help


def argument(
    name: str,
    type: Any = None,
    help: Optional[str] = None,
    required: bool = True,
    **attrs: Any,
) -> DescribedArgument:
    """Declare a positional parameter."""
    return DescribedArgument([name], help=help, type=type, required=required, **attrs)


def option(
    *param_decls: str,
    type: Any = None,
    help: Optional[str] = None,
    **attrs: Any,
) -> click.Option:
    """Declare a dash-prefixed option or flag."""
    return click.Option(list(param_decls), type=type, help=help, **attrs)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of validating a token vector against a schema."""

    values: Mapping[str, Any] = field(default_factory=dict)
    errors: Tuple[str, ...] = ()

    @property
    def error_count(self) -> int:
        return len(self.errors)


class ArgumentSchema:
    """Ordered set of click parameters accepted by one command."""

    def __init__(self, *params: click.Parameter, description: Optional[str] = None):
        self._params: Tuple[click.Parameter, ...] = params
        self.description = description

    @property
    def params(self) -> Tuple[click.Parameter, ...]:
        return self._params

    def _command(self, name: str) -> click.Command:
        has_options = any(isinstance(p, click.Option) for p in self._params)
        return click.Command(
            name,
            params=list(self._params),
            help=self.description,
            options_metavar="[OPTIONS]" if has_options else None,
            add_help_option=False,
            context_settings={"ignore_unknown_options": True},
        )

    def parse(self, tokens: Sequence[str]) -> ParseResult:
        """
        Validate ``tokens`` (token 0 is the command name) and convert the values.
        """
        if not tokens:
            return ParseResult(errors=("missing command name",))
        name, args = tokens[0], list(tokens[1:])
        command = self._command(name)
        try:
            ctx = command.make_context(name, args)
        except click.ClickException as e:
            return ParseResult(errors=(e.format_message(),))
        values: Dict[str, Any] = dict(ctx.params)
        return ParseResult(values=values)

    def render_usage(self, name: str) -> str:
        command = self._command(name)
        ctx = click.Context(command, info_name=name)
        pieces = command.collect_usage_pieces(ctx)
        return " ".join([name, *pieces]).rstrip()

    def glossary_rows(self) -> List[Tuple[str, str]]:
        ctx = click.Context(self._command("_"))
        rows: List[Tuple[str, str]] = []
        for param in self._params:
            if isinstance(param, click.Option):
                record = param.get_help_record(ctx)
                if record is not None:
                    rows.append(record)
            else:
                rows.append((f"<{param.name}>", getattr(param, "help", None) or ""))
        return rows

    def render_glossary(self, fmt: str = GLOSSARY_FORMAT) -> str:
        return "".join(fmt.format(term, text) for term, text in self.glossary_rows())

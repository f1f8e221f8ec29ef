"""Click command class shared by all dropctl commands."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click


class DropCommand(click.Command):
    """Command with an ``--examples`` flag and an optional step listing.

    *steps* names the commands a composite runs, in order. They are shown
    in a ``Steps`` section of ``--help`` so the pipeline is visible
    before anything executes.
    """

    def __init__(
        self,
        *args: Any,
        examples: str | None = None,
        steps: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        self.steps = tuple(str(step) for step in steps)
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if self.steps:
            with formatter.section("Steps"):
                formatter.write_dl(
                    [(f"{index}.", step) for index, step in enumerate(self.steps, start=1)]
                )
        super().format_epilog(ctx, formatter)

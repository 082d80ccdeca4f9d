"""Click option helpers for mutually exclusive mode flags."""
import click


class ModeFlag(click.Option):
    """Boolean flag that belongs to a group of mutually exclusive modes."""

    def __init__(self, *args, **kwargs):
        """Initialize with a modes parameter naming the whole group."""
        self.modes = kwargs.pop("modes", ())
        kwargs.setdefault("is_flag", True)
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Reject the flag when another mode of its group was also given."""
        if opts.get(self.name):
            for other in self.modes:
                if other != self.name and opts.get(other):
                    msg = f"Options --{self.name} and --{other} are mutually exclusive"
                    raise click.UsageError(msg, ctx=ctx)
        return super().handle_parse_result(ctx, opts, args)


def selected_mode(**flags: bool) -> str:
    """Return the name of the one mode flag that is set.

    Raises:
        click.UsageError: If no mode flag is set.
    """
    for name, value in flags.items():
        if value:
            return name
    names = ", ".join(f"--{name}" for name in flags)
    raise click.UsageError(f"One of {names} must be specified")

"""CLI entry point for rxembed."""

import rich_click as click

from .. import __version__

# Import command modules; keep module names distinct from command objects
# so that `import rxembed.cli.<module>` still resolves to the module.
from . import config_cmd as _config_mod
from . import inspect_cmd as _inspect_mod
from . import serve as _serve_mod


@click.group()
@click.version_option(version=__version__)
def cli():
    """Rich link previews for Reddit posts."""
    pass


# Register commands
cli.add_command(_serve_mod.serve)
cli.add_command(_inspect_mod.inspect)
cli.add_command(_config_mod.config)


if __name__ == "__main__":
    cli()

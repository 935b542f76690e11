"""Built-in CLI sub-commands for specgen.

* :mod:`~specgen.commands.generate` -- run the full pipeline and write the
  type model.
* :mod:`~specgen.commands.prune` -- write the filtered and pruned document.
* :mod:`~specgen.commands.inspect` -- tabulate the types or operations a
  document would produce.

Single commands export a plain callback registered on the root app; command
groups export a :class:`typer.Typer` sub-application.
"""

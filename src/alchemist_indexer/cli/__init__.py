import click


@click.group()
@click.version_option()
def cli() -> None:
    """
    Index Alchemist contract events into a local database.
    """


from . import config, database, replay, show  # noqa: F401, E402

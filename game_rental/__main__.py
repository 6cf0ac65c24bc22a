import argparse
import sys

from game_rental import config, menu
from game_rental.config import DatabaseSettings
from game_rental.console import Console
from game_rental.db import Store
from game_rental.errors import StartupConnectionError
from game_rental.log import get_logger, setup_logging

log = get_logger("game_rental")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="game-rental",
        description="Console client for the game rental store.",
        epilog="The database password is read from GAMERENTAL_DB_PASSWORD and the host from GAMERENTAL_DB_HOST.",
    )
    parser.add_argument("dbname", help="database name")
    parser.add_argument("port", type=int, help="database port")
    parser.add_argument("user", help="database user")
    return parser


def main(argv=None, console=None):
    args = build_parser().parse_args(argv)
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    settings = DatabaseSettings(database=args.dbname, port=args.port, user=args.user)
    print("Connecting to database...", end="")
    try:
        store = Store.connect(settings)
    except StartupConnectionError as e:
        log.error("startup connection failed: %s", e)
        print()
        print(f"Error - Unable to connect to database: {e}", file=sys.stderr)
        print("Make sure the database server is running on this machine.")
        return 1
    print("Done")

    with store:
        menu.run(store, console or Console())
        print("Disconnecting from database...", end="")
    print("Done\n\nBye !")
    return 0


if __name__ == "__main__":
    sys.exit(main())

from game_rental.console import parse_decimal, print_rows
from game_rental.errors import InputFormatError

COLUMNS = ("gameID", "gameName", "genre", "price")

_SELECT = "SELECT gameID, gameName, genre, price FROM Catalog"


def find_by_genre(store, genre):
    return store.query(f"{_SELECT} WHERE genre = %s ORDER BY gameName", (genre,))


def find_by_price(store, price):
    return store.query(f"{_SELECT} WHERE price = %s ORDER BY gameName", (price,))


def list_by_price(store, descending=False):
    direction = "DESC" if descending else "ASC"
    return store.query(f"{_SELECT} ORDER BY price {direction}, gameName")


def game_price(store, game_id):
    """Current catalog price of a game as a Decimal, or None when the ID is unknown."""
    row = store.query_one("SELECT price FROM Catalog WHERE gameID = %s", (game_id,))
    if row is None or row[0] is None:
        return None
    return parse_decimal(row[0])


def game_exists(store, game_id) -> bool:
    return store.query_one("SELECT gameID FROM Catalog WHERE gameID = %s", (game_id,)) is not None


def show_games(rows):
    if not rows:
        print("No games found.\n")
        return False
    print_rows(rows, COLUMNS)
    print()
    return True


# Browse the catalog
def view_catalog(store, console):
    print("\nHow would you like to view the catalog?")
    print("1. Genre")
    print("2. Price")
    print("3. Lowest to Highest Price")
    print("4. Highest to Lowest Price")
    print("9. Back")

    choice = console.choice()
    if choice == 1:
        genre = console.ask("What's the name of the genre? ")
        show_games(find_by_genre(store, genre))
    elif choice == 2:
        try:
            price = parse_decimal(console.ask("How much for a game? "))
        except InputFormatError:
            print("Please enter a price such as 19.99.\n")
            return
        show_games(find_by_price(store, price))
    elif choice == 3:
        show_games(list_by_price(store))
    elif choice == 4:
        show_games(list_by_price(store, descending=True))
    elif choice == 9:
        return
    else:
        print("Unrecognized choice!\n")

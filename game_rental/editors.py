"""
Single-field editors for users, catalog entries and tracking records,
plus the profile viewer.

Each editor is gated once on entry by the caller's role; individual field
updates do not re-check it.
"""

from datetime import datetime

from game_rental.auth import has_role, hash_password, user_exists
from game_rental.catalog import game_exists
from game_rental.config import ROLES
from game_rental.console import parse_decimal, parse_int
from game_rental.errors import InputFormatError, NotFoundError
from game_rental.log import get_logger

log = get_logger(__name__)


def _text(value):
    return value


def _password(value):
    if not value:
        raise InputFormatError("the password cannot be empty")
    return hash_password(value)


def _login(value):
    if not value:
        raise InputFormatError("the username cannot be empty")
    return value


def _role(value):
    role = value.strip().lower()
    if role not in ROLES:
        raise InputFormatError(f"role must be one of: {', '.join(ROLES)}")
    return role


def _count(value):
    count = parse_int(value)
    if count < 0:
        raise InputFormatError("the count cannot be negative")
    return count


def _price(value):
    price = parse_decimal(value)
    if price < 0:
        raise InputFormatError("the price cannot be negative")
    return price


class Field:
    def __init__(self, column, label, convert=_text):
        self.column = column
        self.label = label
        self.convert = convert


# menu number -> field; columns are fixed here and never taken from input
SELF_USER_FIELDS = {
    1: Field("password", "Password", _password),
    2: Field("phoneNum", "Phone Number"),
}
USER_FIELDS = {
    1: Field("password", "Password", _password),
    2: Field("phoneNum", "Phone Number"),
    3: Field("login", "Username", _login),
    4: Field("role", "Role", _role),
    5: Field("numOverdueGames", "Overdue Games", _count),
}
# a manager editing their own record keeps the login the session is keyed by
OWN_MANAGER_FIELDS = {number: f for number, f in USER_FIELDS.items() if f.column != "login"}
CATALOG_FIELDS = {
    1: Field("gameName", "Game Name"),
    2: Field("genre", "Genre"),
    3: Field("price", "Price", _price),
    4: Field("description", "Description"),
    5: Field("imageURL", "Image"),
}
TRACKING_FIELDS = {
    1: Field("status", "Status"),
    2: Field("currentLocation", "Current Location"),
    3: Field("courierName", "Courier Name"),
    4: Field("additionalComments", "Additional Comments"),
}


def update_user_field(store, login, column, value):
    return store.execute(f"UPDATE Users SET {column} = %s WHERE login = %s", (value, login))


def update_catalog_field(store, game_id, column, value):
    return store.execute(f"UPDATE Catalog SET {column} = %s WHERE gameID = %s", (value, game_id))


def update_tracking_field(store, tracking_id, column, value, now=None):
    """Set one tracking column and stamp lastUpdateDate, both in one transaction."""
    stamp = (now or datetime.now()).replace(microsecond=0)
    with store.transaction():
        count = store.execute(
            f"UPDATE TrackingInfo SET {column} = %s WHERE trackingID = %s", (value, tracking_id)
        )
        store.execute(
            "UPDATE TrackingInfo SET lastUpdateDate = %s WHERE trackingID = %s", (stamp, tracking_id)
        )
    return count


def tracking_exists(store, tracking_id) -> bool:
    row = store.query_one("SELECT trackingID FROM TrackingInfo WHERE trackingID = %s", (tracking_id,))
    return row is not None


def _pick_field(console, fields):
    print("Please select which you would like to change?")
    for number, f in fields.items():
        print(f"{number}. {f.label}")
    print("9. Exit")

    choice = console.choice()
    if choice == 9:
        return None
    if choice not in fields:
        print("Unrecognized choice!\n")
        return None
    return fields[choice]


def _read_value(console, f):
    raw = console.ask(f"What would you like to change the {f.label.lower()} to? ")
    try:
        return f.convert(raw)
    except InputFormatError as e:
        print(f"Invalid value: {e}\n")
        return None


def _edit(console, fields, apply):
    f = _pick_field(console, fields)
    if f is None:
        return False
    value = _read_value(console, f)
    if value is None:
        return False
    apply(f.column, value)
    print(f"{f.label} updated.\n")
    return True


def _require_user(store, login):
    if not user_exists(store, login):
        raise NotFoundError(f"No user named {login}.")


# Manager: edit any user
def _edit_any_user(store, console, manager):
    target = console.ask("Please enter the user you would like to change: ")
    try:
        _require_user(store, target)
    except NotFoundError as e:
        print(f"{e}\n")
        return False

    def apply(column, value):
        update_user_field(store, target, column, value)
        log.info("%s changed %s of user %s", manager, column, target)

    fields = USER_FIELDS
    if target == manager:
        print("You cannot change your own username while logged in.")
        fields = OWN_MANAGER_FIELDS
    return _edit(console, fields, apply)


def update_profile(store, console, login):
    if has_role(store, login, "manager"):
        return _edit_any_user(store, console, login)

    def apply(column, value):
        update_user_field(store, login, column, value)
        log.info("%s changed own %s", login, column)

    return _edit(console, SELF_USER_FIELDS, apply)


def update_user(store, console, login):
    if not has_role(store, login, "manager"):
        print("Only managers can update users.\n")
        return False
    return _edit_any_user(store, console, login)


def update_catalog(store, console, login):
    if not has_role(store, login, "manager"):
        print("Only managers can update the catalog.\n")
        return False

    game_id = console.ask("Please enter the game ID of the game you want to change: ")
    if not game_exists(store, game_id):
        print(f"Game {game_id} not found.\n")
        return False

    def apply(column, value):
        update_catalog_field(store, game_id, column, value)
        log.info("%s changed %s of game %s", login, column, game_id)

    return _edit(console, CATALOG_FIELDS, apply)


def update_tracking_info(store, console, login, now=datetime.now):
    if not has_role(store, login, "manager", "employee"):
        print("Only employees and managers can update tracking information.\n")
        return False

    tracking_id = console.ask("Please enter the tracking ID of the order you want to change: ")
    if not tracking_exists(store, tracking_id):
        print(f"Tracking ID {tracking_id} not found.\n")
        return False

    def apply(column, value):
        update_tracking_field(store, tracking_id, column, value, now())
        log.info("%s changed %s of tracking %s", login, column, tracking_id)

    return _edit(console, TRACKING_FIELDS, apply)


# Profile
def profile(store, login):
    return store.query_one(
        "SELECT login, role, favGames, phoneNum, numOverdueGames FROM Users WHERE login = %s",
        (login,),
    )


def view_profile(store, console, login):
    print("\nPlease select which you would like to view?")
    print("1. Favorite Games")
    print("2. Number of Overdue Games")
    print("3. Phone Number")
    print("9. Exit")

    choice = console.choice()
    if choice == 9:
        return
    if choice not in (1, 2, 3):
        print("Unrecognized choice!\n")
        return

    row = profile(store, login)
    if row is None:
        print(f"No data found for user: {login}\n")
        return

    _, _, fav_games, phone, overdue = row
    if choice == 1:
        print(f"Favorite Games: {fav_games or 'none'}\n")
    elif choice == 2:
        print(f"Number of Overdue Games: {overdue}\n")
    else:
        print(f"Phone Number: {phone}\n")

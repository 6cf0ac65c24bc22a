from game_rental import auth, catalog, editors, orders
from game_rental.errors import StoreError
from game_rental.log import get_logger

log = get_logger(__name__)

EXIT = 9
LOG_OUT = 20

# number -> (label, handler(store, console, login))
USER_ACTIONS = {
    1: ("View Profile", editors.view_profile),
    2: ("Update Profile", editors.update_profile),
    3: ("View Catalog", lambda store, console, login: catalog.view_catalog(store, console)),
    4: ("Place Rental Order", orders.place_rental_order),
    5: ("View Full Rental Order History", orders.view_all_orders),
    6: ("View Past 5 Rental Orders", orders.view_recent_orders),
    7: ("View Rental Order Information", orders.view_order_info),
    8: ("View Tracking Information", orders.view_tracking_info),
    # employees & managers
    9: ("Update Tracking Information", editors.update_tracking_info),
    # managers
    10: ("Update Catalog", editors.update_catalog),
    11: ("Update User", editors.update_user),
}


def greeting():
    print(
        "\n\n*******************************************************\n"
        "              Game Rental - User Interface\n"
        "*******************************************************\n"
    )


def _report(e, action):
    log.exception("%s failed", action)
    print(f"\n[Database error] {action} failed: {e}\n")


def print_main_menu():
    print("MAIN MENU")
    print("---------")
    print("1. Create user")
    print("2. Log in")
    print(f"{EXIT}. < EXIT")


def print_user_menu(login):
    print("\n" + "=" * 40)
    print(f"  {login}")
    print("=" * 40)
    for number, (label, _) in USER_ACTIONS.items():
        print(f"{number}. {label}")
    print(".........................")
    print(f"{LOG_OUT}. Log out")


# Menu after log-in
def user_menu(store, console, login):
    while True:
        print_user_menu(login)
        choice = console.choice()

        if choice == LOG_OUT:
            print(f"\nGoodbye, {login}!\n")
            return
        if choice not in USER_ACTIONS:
            print("Unrecognized choice!\n")
            continue

        label, handler = USER_ACTIONS[choice]
        try:
            handler(store, console, login)
        except StoreError as e:
            _report(e, label)


# Main menu
def run(store, console):
    """Drive the session until the user picks exit or input runs out."""
    greeting()
    try:
        while True:
            print_main_menu()
            choice = console.choice()

            login = None
            try:
                if choice == 1:
                    auth.create_user(store, console)
                elif choice == 2:
                    login = auth.log_in(store, console)
                elif choice == EXIT:
                    print("Exiting.")
                    return
                else:
                    print("Unrecognized choice!\n")
            except StoreError as e:
                _report(e, "Create user" if choice == 1 else "Log in")

            if login is not None:
                user_menu(store, console, login)
    except EOFError:
        print("\nEnd of input, exiting.")

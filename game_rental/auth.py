from passlib.context import CryptContext

from game_rental.config import DEFAULT_ROLE
from game_rental.log import get_logger

log = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(raw_password: str) -> str:
    return pwd_context.hash(raw_password)


def verify_password(raw_password: str, password_hash) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(raw_password, password_hash)
    except ValueError:
        # column holds something that is not a hash we know
        log.warning("unrecognised password hash format")
        return False


def user_exists(store, login) -> bool:
    return store.query_one("SELECT login FROM Users WHERE login = %s", (login,)) is not None


# Create account
def create_account(store, login, password, phone) -> bool:
    if not login:
        print("Please enter a username.\n")
        return False
    if not password:
        print("Please enter a password.\n")
        return False

    if user_exists(store, login):
        print("Username already exists. Please choose a different username.\n")
        return False

    store.execute(
        """
        INSERT INTO Users (login, password, role, favGames, phoneNum, numOverdueGames)
        VALUES (%s, %s, %s, NULL, %s, 0)
        """,
        (login, hash_password(password), DEFAULT_ROLE, phone),
    )
    log.info("created account %s", login)
    print("User created successfully!\n")
    return True


# Log in; returns the login or None
def authenticate(store, login, password):
    row = store.query_one("SELECT login, password FROM Users WHERE login = %s", (login,))

    if row is None or not verify_password(password, row[1]):
        print("Login failed. Username or password is incorrect.\n")
        return None
    return row[0]


def current_role(store, login):
    row = store.query_one("SELECT role FROM Users WHERE login = %s", (login,))
    return row[0] if row else None


def has_role(store, login, *roles) -> bool:
    role = current_role(store, login)
    if role is None:
        return False
    return role.strip().lower() in {r.lower() for r in roles}


def create_user(store, console):
    print("\n--- Create Account ---")
    login = console.ask("Username: ")
    password = console.ask("Password: ")
    phone = console.ask("Phone Number: ")
    return create_account(store, login, password, phone)


def log_in(store, console):
    print("\n--- Log In ---")
    login = console.ask("Please enter your username: ")
    password = console.ask("Please enter your password: ")
    user = authenticate(store, login, password)
    if user:
        print(f"\nWelcome, {user}!\n")
    return user

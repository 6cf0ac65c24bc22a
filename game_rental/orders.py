import enum
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from game_rental import config
from game_rental.catalog import game_price
from game_rental.console import parse_int, print_rows
from game_rental.errors import InputFormatError, StoreError
from game_rental.log import get_logger

log = get_logger(__name__)

CENT = Decimal("0.01")
CANCEL = "0"


class OrderState(enum.Enum):
    COLLECTING_ITEMS = "collecting_items"
    CONFIRM_MORE = "confirm_more"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass
class LineItem:
    game_id: str
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class PlacedOrder:
    rental_order_id: str
    tracking_id: str
    total_games: int
    total_price: Decimal
    order_timestamp: datetime
    due_date: datetime
    items: list = field(default_factory=list)


def total_units(items) -> int:
    return sum(item.quantity for item in items)


def total_price(items) -> Decimal:
    return sum((item.subtotal for item in items), Decimal("0")).quantize(CENT)


def add_item(items, item):
    """Add a line to the order; a game already in it gets its quantity raised instead."""
    for line in items:
        if line.game_id == item.game_id:
            line.quantity += item.quantity
            return line
    items.append(item)
    return item


def merge_items(items):
    merged = []
    for item in items:
        add_item(merged, LineItem(item.game_id, item.quantity, item.unit_price))
    return merged


def allocate_order_ids(store, rng=random):
    """
    Pick an order number whose rental order ID and tracking ID are both unused.

    Retries on collision, up to ``config.ORDER_ID_ATTEMPTS`` draws.
    """
    for _ in range(config.ORDER_ID_ATTEMPTS):
        number = rng.randrange(config.ORDER_NUMBER_MIN, config.ORDER_NUMBER_MAX)
        order_id = f"{config.ORDER_ID_PREFIX}{number}"
        tracking_id = f"{config.TRACKING_ID_PREFIX}{number}"

        taken = store.query_one(
            """
            SELECT rentalOrderID FROM RentalOrder WHERE rentalOrderID = %s
            UNION ALL
            SELECT trackingID FROM TrackingInfo WHERE trackingID = %s
            """,
            (order_id, tracking_id),
        )
        if taken is None:
            return order_id, tracking_id
        log.info("order number %s already in use, drawing again", number)

    raise StoreError(f"could not allocate a free order number after {config.ORDER_ID_ATTEMPTS} attempts")


def place_order(store, login, items, now=None, rng=random) -> PlacedOrder:
    """
    Record a rental order, its line items and its tracking record.

    The three kinds of rows are written in one transaction, so a failure
    part way leaves none of them behind.
    """
    if not items:
        raise ValueError("an order needs at least one item")
    items = merge_items(items)

    order_ts = (now or datetime.now()).replace(microsecond=0)
    due_date = order_ts + timedelta(days=config.RENTAL_PERIOD_DAYS)
    games = total_units(items)
    price = total_price(items)

    with store.transaction():
        order_id, tracking_id = allocate_order_ids(store, rng)

        store.execute(
            """
            INSERT INTO RentalOrder (rentalOrderID, login, noOfGames, totalPrice, orderTimestamp, dueDate)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (order_id, login, games, price, order_ts, due_date),
        )
        for item in items:
            store.execute(
                "INSERT INTO GamesInOrder (rentalOrderID, gameID, unitsOrdered) VALUES (%s, %s, %s)",
                (order_id, item.game_id, item.quantity),
            )
        store.execute(
            """
            INSERT INTO TrackingInfo (trackingID, rentalOrderID, status, currentLocation, courierName, lastUpdateDate)
            VALUES (%s, %s, %s, %s, %s, %s)
            """,
            (tracking_id, order_id, config.INITIAL_STATUS, config.INITIAL_LOCATION, config.INITIAL_COURIER, order_ts),
        )

    log.info("order %s placed by %s: %d games, %s", order_id, login, games, price)
    return PlacedOrder(order_id, tracking_id, games, price, order_ts, due_date, list(items))


class OrderWorkflow:
    """Collect -> confirm -> finalize, driven by answers read from the console."""

    def __init__(self, store, console, login, now=datetime.now, rng=random):
        self.store = store
        self.console = console
        self.login = login
        self.now = now
        self.rng = rng
        self.state = OrderState.COLLECTING_ITEMS
        self.items = []
        self.placed = None

    @property
    def total_units(self):
        return total_units(self.items)

    @property
    def total_price(self):
        return total_price(self.items)

    def run(self):
        while self.state is not OrderState.DONE:
            if self.state is OrderState.COLLECTING_ITEMS:
                self._collect_item()
            elif self.state is OrderState.CONFIRM_MORE:
                self._confirm_more()
            elif self.state is OrderState.FINALIZING:
                self._finalize()
        return self.placed

    def _collect_item(self):
        game_id = self.console.ask(f"Enter the Game ID of the game you want to rent (cancel: {CANCEL}): ")
        if game_id == CANCEL:
            print("Order cancelled.\n")
            self.items = []
            self.state = OrderState.DONE
            return
        if not game_id:
            print("Please enter a Game ID.")
            return

        price = game_price(self.store, game_id)
        if price is None:
            print(f"Game {game_id} not found.")
            return

        quantity = self._read_quantity()
        line = add_item(self.items, LineItem(game_id, quantity, price))
        print(f"{game_id}: {line.quantity} unit(s) at {line.unit_price} each. Running total: {self.total_price}")
        self.state = OrderState.CONFIRM_MORE

    def _read_quantity(self):
        while True:
            try:
                quantity = parse_int(self.console.ask("Enter units ordered: "))
            except InputFormatError:
                quantity = 0
            if quantity > 0:
                return quantity
            print("Units ordered must be a whole number greater than 0.")

    def _confirm_more(self):
        if self.console.yes_no("Do you want to rent more games? (yes/no) "):
            self.state = OrderState.COLLECTING_ITEMS
        else:
            self.state = OrderState.FINALIZING

    def _finalize(self):
        try:
            self.placed = place_order(self.store, self.login, self.items, self.now(), self.rng)
        except StoreError as e:
            log.exception("placing order for %s failed", self.login)
            print(f"[Order error] {e}")
        else:
            print("\n[Order placed]")
            print(f"  Rental order ID : {self.placed.rental_order_id}")
            print(f"  Tracking ID     : {self.placed.tracking_id}")
            print(f"  Games           : {self.placed.total_games}")
            print(f"  Due date        : {self.placed.due_date:%Y-%m-%d %H:%M:%S}")
        finally:
            print(f"The total price of all purchases is: {self.total_price}\n")
            self.state = OrderState.DONE


def place_rental_order(store, console, login):
    print("\n--- Place Rental Order ---")
    return OrderWorkflow(store, console, login).run()


# Order history
def list_orders(store, login):
    return store.query(
        "SELECT rentalOrderID, orderTimestamp, noOfGames, totalPrice FROM RentalOrder "
        "WHERE login = %s ORDER BY orderTimestamp",
        (login,),
    )


def recent_orders(store, login, limit=config.RECENT_ORDER_LIMIT):
    return store.query(
        "SELECT rentalOrderID, orderTimestamp, noOfGames, totalPrice FROM RentalOrder "
        "WHERE login = %s ORDER BY orderTimestamp DESC LIMIT %s",
        (login, limit),
    )


def order_info(store, login, order_id):
    """Order header joined with its tracking record, and its games. None if the user has no such order."""
    header = store.query_one(
        """
        SELECT R.rentalOrderID, R.orderTimestamp, R.dueDate, R.noOfGames, R.totalPrice,
               T.trackingID, T.status
        FROM RentalOrder R
        INNER JOIN TrackingInfo T ON R.rentalOrderID = T.rentalOrderID
        WHERE R.login = %s AND R.rentalOrderID = %s
        """,
        (login, order_id),
    )
    if header is None:
        return None

    games = store.query(
        """
        SELECT C.gameID, C.gameName, G.unitsOrdered
        FROM GamesInOrder G
        INNER JOIN Catalog C ON G.gameID = C.gameID
        WHERE G.rentalOrderID = %s
        ORDER BY C.gameName
        """,
        (order_id,),
    )
    return header, games


def tracking_info(store, login, tracking_id):
    return store.query_one(
        """
        SELECT T.trackingID, T.rentalOrderID, T.status, T.currentLocation, T.courierName,
               T.lastUpdateDate, T.additionalComments
        FROM TrackingInfo T
        INNER JOIN RentalOrder R ON R.rentalOrderID = T.rentalOrderID
        WHERE R.login = %s AND T.trackingID = %s
        """,
        (login, tracking_id),
    )


ORDER_COLUMNS = ("rentalOrderID", "orderTimestamp", "noOfGames", "totalPrice")
ORDER_INFO_COLUMNS = ("rentalOrderID", "orderTimestamp", "dueDate", "noOfGames", "totalPrice", "trackingID", "status")


def view_all_orders(store, console, login):
    print("\n[Rental order history]")
    rows = list_orders(store, login)
    if not rows:
        print("No rental orders found.\n")
        return
    print_rows(rows, ORDER_COLUMNS)
    print(f"\n{len(rows)} rental order(s)\n")


def view_recent_orders(store, console, login):
    print(f"\n[Past {config.RECENT_ORDER_LIMIT} rental orders]")
    rows = recent_orders(store, login)
    if not rows:
        print("No rental orders found.\n")
        return
    print_rows(rows, ORDER_COLUMNS)
    print()


def view_order_info(store, console, login):
    order_id = console.ask("Enter rental order ID: ")
    info = order_info(store, login, order_id)
    if info is None:
        print("No rental order found.\n")
        return

    header, games = info
    print_rows([header], ORDER_INFO_COLUMNS)
    print("\nGames in this order:")
    print_rows(games, ("gameID", "gameName", "unitsOrdered"))
    print()


def view_tracking_info(store, console, login):
    tracking_id = console.ask("Enter tracking ID: ")
    row = tracking_info(store, login, tracking_id)
    if row is None:
        print("No tracking record found.\n")
        return
    print_rows(
        [row],
        ("trackingID", "rentalOrderID", "status", "currentLocation", "courierName",
         "lastUpdateDate", "additionalComments"),
    )
    print()

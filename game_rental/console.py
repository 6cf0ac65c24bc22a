from decimal import Decimal, InvalidOperation

from game_rental.errors import InputFormatError


def parse_int(text: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise InputFormatError(f"not a whole number: {text!r}") from None


def parse_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise InputFormatError(f"not a number: {text!r}") from None
    if not value.is_finite():
        raise InputFormatError(f"not a number: {text!r}")
    return value


def print_rows(rows, header=None):
    if header:
        print("\t".join(header))
    for row in rows:
        print("\t".join("" if v is None else v for v in row))


class Console:
    """
    Where the menus read their answers from.

    The reader is any callable taking a prompt and returning one line,
    ``input`` by default. EOFError from the reader is left to the caller.
    """

    def __init__(self, reader=input):
        self._reader = reader

    def ask(self, prompt: str) -> str:
        return self._reader(prompt).strip()

    # Numbered menu choice, re-asks until it parses
    def choice(self, prompt="Please make your choice: ") -> int:
        while True:
            try:
                return parse_int(self.ask(prompt))
            except InputFormatError:
                print("Your input is invalid!")

    def yes_no(self, prompt: str) -> bool:
        answer = self.ask(prompt).lower()
        while answer not in ("yes", "no"):
            print("Wrong command, say yes or no")
            answer = self.ask(prompt).lower()
        return answer == "yes"

class GameRentalError(Exception):
    pass


class StoreError(GameRentalError):
    """A statement was rejected or the connection is gone."""


class StartupConnectionError(StoreError):
    """The store could not be reached when the program started."""


class NotFoundError(GameRentalError):
    pass


class InputFormatError(GameRentalError):
    pass

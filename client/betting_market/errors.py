from solders.pubkey import Pubkey


class BettingMarketError(Exception):
    pass


class MalformedAccount(BettingMarketError, ValueError):
    """Raw account bytes could not be interpreted as the expected record."""


class InvalidArgument(BettingMarketError, ValueError):
    """An instruction argument is missing or does not fit its declared width."""


class ConnectionFailure(BettingMarketError):
    """A fetch or submit failed at the transport layer."""


class AlreadyExists(BettingMarketError):
    def __init__(self, address: Pubkey, what: str = "account"):
        self.address = address
        self.what = what
        super().__init__(f"{what} {address} already exists")


class ConfigurationError(BettingMarketError, ValueError):
    """A required address or setting is missing from the configuration."""

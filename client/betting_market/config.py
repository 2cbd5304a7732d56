import json
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from betting_market.errors import ConfigurationError
from betting_market.utils.solana import maybe_pubkey

CLUSTER_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "dev": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "localnet": "http://localhost:8899",
    "local": "http://localhost:8899",
    "mainnet": "https://api.mainnet-beta.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}

# BTC/USD price accounts of the oracle on each cluster
BTC_PRICE_ACCOUNTS = {
    "devnet": Pubkey.from_string("HovQMDrbAgAYPCmHVSrezcSmkMtXSSUsLDFANExrZh2J"),
    "testnet": Pubkey.from_string("DJW6f4ZVqCnpYNN9rNuzqUcCvkVtBgixo8mq9FKSsCbJ"),
}

DEFAULT_JUDGE = Pubkey.from_string("uJ1Vu2YAAaR7pdX1FEQ9Mi9zQen2J6guXUSKRuxBBYQ")


@dataclass(frozen=True)
class MarketConfig:
    rpc_url: str
    program_id: Pubkey
    usd_token_mint: Pubkey
    oracle_price_account: Pubkey
    market_account: Optional[Pubkey] = None
    judge: Pubkey = DEFAULT_JUDGE
    commitment: str = "confirmed"
    skip_confirmation: bool = False

    def with_market(self, market_account: Pubkey) -> "MarketConfig":
        return replace(self, market_account=market_account)

    def require_market(self) -> Pubkey:
        if self.market_account is None:
            raise ConfigurationError("No market account configured")
        return self.market_account

    @classmethod
    def from_env(
        cls, cluster: str = "devnet", environ: Optional[Mapping[str, str]] = None
    ) -> "MarketConfig":
        if environ is None:
            environ = os.environ
        if cluster not in CLUSTER_URLS:
            raise ConfigurationError(
                f"Unknown cluster {cluster!r}, expected one of {sorted(CLUSTER_URLS)}"
            )

        def required(name):
            value = environ.get(name)
            if not value:
                raise ConfigurationError(f"{name} must be set")
            return Pubkey.from_string(value)

        oracle = maybe_pubkey(environ.get("ORACLE_PRICE_ACCOUNT")) or BTC_PRICE_ACCOUNTS.get(
            cluster
        )
        if oracle is None:
            raise ConfigurationError(f"ORACLE_PRICE_ACCOUNT must be set for {cluster}")

        return cls(
            rpc_url=environ.get("RPC_URL") or CLUSTER_URLS[cluster],
            program_id=required("BETTING_MARKET_PROGRAM_ID"),
            usd_token_mint=required("USD_TOKEN_MINT"),
            oracle_price_account=oracle,
            market_account=maybe_pubkey(environ.get("BETTING_MARKET_ACCOUNT") or None),
            judge=maybe_pubkey(environ.get("BETTING_MARKET_JUDGE") or None) or DEFAULT_JUDGE,
            commitment=environ.get("COMMITMENT", "confirmed"),
        )


def load_keypair(source: str) -> Keypair:
    """
    Accepts a solana-keygen JSON file, a base58 secret key, or the
    secret key bytes written out as comma separated integers.
    """
    if os.path.isfile(source):
        with open(source, "r") as f:
            return Keypair.from_bytes(bytes(json.load(f)))
    if "," in source:
        try:
            raw = bytes(int(part) for part in source.split(","))
        except ValueError as e:
            raise ConfigurationError(f"Invalid keypair byte list: {e}") from e
        return Keypair.from_bytes(raw)
    try:
        return Keypair.from_bytes(base58.b58decode(source))
    except ValueError as e:
        raise ConfigurationError(f"Invalid base58 keypair: {e}") from e

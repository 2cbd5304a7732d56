"""Shared fixtures: an in-memory ledger and market snapshots."""

from dataclasses import dataclass
from types import SimpleNamespace
from typing import Dict, List

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID

from betting_market.config import MarketConfig
from betting_market.errors import MalformedAccount
from betting_market.market.sdk_context import MarketContext
from betting_market.state import (
    MARKET_ACCOUNT_SIZE,
    NULL_PUBKEY,
    PAYOUT_SLOTS,
    PRICE_LEVELS,
    MarketResult,
    MarketState,
)

PROGRAM_ID = Pubkey.from_string("BetXXKCEHG1n8FMVrYHNZVtSPNuv8Yy7H1EDxSwr7a3Q")
USD_TOKEN_MINT = Pubkey.from_string("Gh9ZwEmdLJ8DscKNTkTqPbNwLNNBjuSzaG9Vp2KGtKJr")
ORACLE = Pubkey.from_string("HovQMDrbAgAYPCmHVSrezcSmkMtXSSUsLDFANExrZh2J")
MARKET = Pubkey.from_string("8szGkuLTAux9XMgZ2vtY39jVSowEcpBfFfD8hXSEqdGC")


@dataclass
class FakeAccount:
    data: bytes
    owner: Pubkey


class FakeLedger:
    """Stands in for LedgerConnection without touching the network."""

    def __init__(self):
        self.accounts: Dict[Pubkey, FakeAccount] = {}
        self.balances: Dict[Pubkey, str] = {}
        self.submitted: List[SimpleNamespace] = []
        self.rent = 696_960_000

    def put(self, address: Pubkey, data: bytes, owner: Pubkey = PROGRAM_ID):
        self.accounts[address] = FakeAccount(data, owner)

    async def get_account_info(self, address):
        return self.accounts.get(address)

    async def get_account_raw(self, address):
        info = self.accounts.get(address)
        if info is None:
            raise MalformedAccount(f"Account {address} does not exist")
        return info.data

    async def account_exists(self, address):
        return address in self.accounts

    async def calc_rent(self, space):
        return self.rent

    async def token_balance(self, address):
        return self.balances.get(address, "0")

    async def submit(self, instructions, payer, signers=()):
        self.submitted.append(
            SimpleNamespace(
                instructions=list(instructions), payer=payer, signers=list(signers)
            )
        )
        return Signature.default()

    async def close(self):
        pass


def make_state(**overrides) -> MarketState:
    values = dict(
        initialized=True,
        result=MarketResult.UNDECIDED,
        yes_token_mint=Pubkey.new_unique(),
        no_token_mint=Pubkey.new_unique(),
        usd_token_account=Pubkey.new_unique(),
        strike_price=0,
        judge=Pubkey.new_unique(),
        buy_amounts_for_yes=[0] * PRICE_LEVELS,
        buy_amounts_for_no=[0] * PRICE_LEVELS,
        payout_user_accounts=[NULL_PUBKEY] * PAYOUT_SLOTS,
        payout_mints=[NULL_PUBKEY] * PAYOUT_SLOTS,
        payout_amounts=[0] * PAYOUT_SLOTS,
    )
    values.update(overrides)
    return MarketState(**values)


@pytest.fixture
def state() -> MarketState:
    return make_state()


@pytest.fixture
def config() -> MarketConfig:
    return MarketConfig(
        rpc_url="http://localhost:8899",
        program_id=PROGRAM_ID,
        usd_token_mint=USD_TOKEN_MINT,
        oracle_price_account=ORACLE,
        market_account=MARKET,
    )


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def payer() -> Keypair:
    return Keypair()


@pytest.fixture
def sdk(config, ledger, payer, state) -> MarketContext:
    ledger.put(MARKET, state.to_bytes(MARKET_ACCOUNT_SIZE))
    return MarketContext.connect(config, payer, ledger=ledger)


def token_account(ledger: FakeLedger, address: Pubkey, balance: str):
    ledger.put(address, bytes(165), owner=TOKEN_PROGRAM_ID)
    ledger.balances[address] = balance

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID

import betting_market.instructions as ixs
from betting_market.config import MarketConfig
from betting_market.errors import AlreadyExists, InvalidArgument
from betting_market.market import actions
from betting_market.market import addrs as maddrs
from betting_market.orderbook import BOOK_DEPTH, OrderBookView, aggregate
from betting_market.state import (
    MARKET_ACCOUNT_SIZE,
    MAX_PRICE,
    MIN_PRICE,
    MarketResult,
    MarketState,
    OraclePrice,
    Payout,
)
from betting_market.utils.solana import LedgerConnection

logger = logging.getLogger(__name__)

UNINITIALIZED = "uninitialized"


def check_trade_price(price: int) -> int:
    if not MIN_PRICE < ixs.check_u64("price", price) < MAX_PRICE:
        raise InvalidArgument(
            f"Trade price must satisfy {MIN_PRICE} < price < {MAX_PRICE}, found {price}"
        )
    return price


@dataclass
class SDKUser:
    keypair: Keypair
    token_accounts: maddrs.UserTokenAccounts

    @property
    def pubkey(self) -> Pubkey:
        return self.keypair.pubkey()

    @staticmethod
    def connect(sdk: "MarketContext", keypair: Keypair) -> "SDKUser":
        state = sdk.require_state()
        return SDKUser(
            keypair=keypair,
            token_accounts=maddrs.get_user_token_accounts(
                keypair.pubkey(),
                sdk.config.usd_token_mint,
                state.yes_token_mint,
                state.no_token_mint,
            ),
        )


@dataclass
class MarketContext:
    """
    Sequences fetch, decode, aggregate and submit for a single market.

    Holds only the last fetched snapshot; every refresh replaces it.
    """

    config: MarketConfig
    ledger: LedgerConnection
    payer: Keypair
    program_authority: Pubkey
    market: Optional[Pubkey] = None
    state: Optional[MarketState] = None

    @staticmethod
    def connect(
        config: MarketConfig,
        payer: Keypair,
        ledger: Optional[LedgerConnection] = None,
    ) -> "MarketContext":
        if ledger is None:
            ledger = LedgerConnection.connect(
                config.rpc_url,
                config.commitment,
                skip_confirmation=config.skip_confirmation,
            )
        return MarketContext(
            config=config,
            ledger=ledger,
            payer=payer,
            program_authority=maddrs.get_program_authority(config.program_id),
            market=config.market_account,
        )

    async def close(self):
        await self.ledger.close()

    @property
    def program_id(self) -> Pubkey:
        return self.config.program_id

    def require_market(self) -> Pubkey:
        if self.market is None:
            return self.config.require_market()
        return self.market

    def require_state(self) -> MarketState:
        if self.state is None:
            raise InvalidArgument("No market snapshot loaded, call refresh() first")
        return self.state

    async def refresh(self) -> MarketState:
        market = self.require_market()
        raw = await self.ledger.get_account_raw(market)
        self.state = MarketState.from_bytes(raw)
        logger.debug("Refreshed market %s: %s", market, self.state.result.get_name())
        return self.state

    def order_book(self, depth: int = BOOK_DEPTH) -> OrderBookView:
        state = self.require_state()
        return aggregate(state.buy_amounts_for_yes, state.buy_amounts_for_no, depth)

    async def load_order_book(self, depth: int = BOOK_DEPTH) -> OrderBookView:
        await self.refresh()
        return self.order_book(depth)

    def payouts(self) -> List[Payout]:
        return self.require_state().payouts()

    def token_label(self, mint: Pubkey) -> str:
        state = self.require_state()
        if mint == state.yes_token_mint:
            return "YES"
        if mint == state.no_token_mint:
            return "NO"
        if mint == self.config.usd_token_mint:
            return "USD"
        return str(mint)

    def mint_for_label(self, label: str) -> Pubkey:
        state = self.require_state()
        mints = {
            "USD": self.config.usd_token_mint,
            "YES": state.yes_token_mint,
            "NO": state.no_token_mint,
        }
        try:
            return mints[label.upper()]
        except KeyError:
            raise InvalidArgument(f"Unknown token {label!r}, expected one of {list(mints)}")

    def trader_accounts(self, user: SDKUser) -> ixs.TraderAccounts:
        state = self.require_state()
        return ixs.TraderAccounts(
            user=user.pubkey,
            program_authority=self.program_authority,
            market=self.require_market(),
            usd_token_mint=self.config.usd_token_mint,
            yes_token_mint=state.yes_token_mint,
            no_token_mint=state.no_token_mint,
            user_usd_token_account=user.token_accounts.usd,
            user_yes_token_account=user.token_accounts.yes,
            user_no_token_account=user.token_accounts.no,
            market_usd_token_account=state.usd_token_account,
        )

    # trading

    async def offer_trade(
        self, user: SDKUser, is_yes: bool, price: int, amount: int
    ) -> Signature:
        check_trade_price(price)
        logger.info(
            "Offering %s %s at %s for %s",
            amount,
            "YES" if is_yes else "NO",
            price,
            user.pubkey,
        )
        return await actions.offer_trade(
            self.ledger,
            user.keypair,
            self.program_id,
            self.trader_accounts(user),
            is_yes,
            price,
            amount,
        )

    async def buy_yes(self, user: SDKUser, price: int, amount: int) -> Signature:
        return await self.offer_trade(user, True, price, amount)

    async def buy_no(self, user: SDKUser, price: int, amount: int) -> Signature:
        return await self.offer_trade(user, False, price, amount)

    async def sell_yes(self, user: SDKUser, price: int, amount: int) -> Signature:
        # selling YES at p is buying NO at 100 - p
        complement = MAX_PRICE - ixs.check_u64("price", price)
        return await self.offer_trade(user, False, complement, amount)

    async def sell_no(self, user: SDKUser, price: int, amount: int) -> Signature:
        complement = MAX_PRICE - ixs.check_u64("price", price)
        return await self.offer_trade(user, True, complement, amount)

    async def payout(self, user: SDKUser) -> Signature:
        logger.info("Requesting payout for %s", user.pubkey)
        return await actions.payout(
            self.ledger, user.keypair, self.program_id, self.trader_accounts(user)
        )

    async def free_mint(
        self, user: SDKUser, mint: Union[str, Pubkey], amount: int
    ) -> Signature:
        if isinstance(mint, str):
            mint = self.mint_for_label(mint)
        token_account = maddrs.get_user_token_account(user.pubkey, mint)
        logger.info("Minting %s of %s to %s", amount, mint, token_account)
        return await actions.free_mint(
            self.ledger,
            user.keypair,
            self.program_id,
            self.program_authority,
            mint,
            token_account,
            amount,
        )

    # judging

    def _is_settled(self, what: str) -> bool:
        if self.state is not None and self.state.is_settled:
            logger.warning(
                "Market %s already settled as %s, skipping %s",
                self.market,
                self.state.result.get_name(),
                what,
            )
            return True
        return False

    async def judge_manually(
        self, result: Union[int, MarketResult]
    ) -> Optional[Signature]:
        if self._is_settled("judge_manually"):
            return None
        logger.info("Judging market %s manually as %s", self.market, result)
        return await actions.judge_manually(
            self.ledger, self.payer, self.program_id, self.require_market(), result
        )

    async def judge_oracle(self) -> Optional[Signature]:
        if self._is_settled("judge_oracle"):
            return None
        logger.info(
            "Judging market %s against oracle %s",
            self.market,
            self.config.oracle_price_account,
        )
        return await actions.judge_oracle(
            self.ledger,
            self.payer,
            self.program_id,
            self.require_market(),
            self.config.oracle_price_account,
        )

    async def set_strike_price(self, price: int) -> Optional[Signature]:
        if self._is_settled("set_strike_price"):
            return None
        logger.info("Setting strike price of %s to %s", self.market, price)
        return await actions.set_strike_price(
            self.ledger, self.payer, self.program_id, self.require_market(), price
        )

    async def oracle_price(self) -> OraclePrice:
        raw = await self.ledger.get_account_raw(self.config.oracle_price_account)
        return OraclePrice.from_bytes(raw)

    # setup

    async def initialize_market(self, judge: Optional[Pubkey] = None) -> Pubkey:
        if judge is None:
            judge = self.config.judge
        market = Keypair()
        yes_token_mint = Keypair()
        no_token_mint = Keypair()
        usd_token_account = Keypair()
        rent = await self.ledger.calc_rent(MARKET_ACCOUNT_SIZE)

        logger.info(
            "Initializing market %s (yes=%s, no=%s, usd account=%s, judge=%s)",
            market.pubkey(),
            yes_token_mint.pubkey(),
            no_token_mint.pubkey(),
            usd_token_account.pubkey(),
            judge,
        )
        await actions.initialize_market(
            self.ledger,
            self.payer,
            self.program_id,
            self.payer.pubkey(),
            self.program_authority,
            self.config.usd_token_mint,
            judge,
            rent,
            market,
            yes_token_mint,
            no_token_mint,
            usd_token_account,
        )
        self.market = market.pubkey()
        self.state = None
        return self.market

    async def create_token_account(self, owner: Pubkey, mint: Pubkey) -> Signature:
        address = maddrs.get_user_token_account(owner, mint)
        if await self.ledger.account_exists(address):
            raise AlreadyExists(address, what="token account")
        logger.info("Creating token account %s for %s", address, owner)
        return await actions.create_token_account(
            self.ledger, self.payer, self.payer.pubkey(), owner, mint
        )

    async def create_token_accounts(self, user: SDKUser) -> List[Signature]:
        state = self.require_state()
        signatures = []
        for mint in (self.config.usd_token_mint, state.yes_token_mint, state.no_token_mint):
            try:
                signatures.append(await self.create_token_account(user.pubkey, mint))
            except AlreadyExists as e:
                logger.info("%s, nothing to do", e)
        return signatures

    async def token_balances(self, user: SDKUser) -> Dict[str, str]:
        balances = {}
        for label, address in (
            ("USD", user.token_accounts.usd),
            ("YES", user.token_accounts.yes),
            ("NO", user.token_accounts.no),
        ):
            info = await self.ledger.get_account_info(address)
            if info is None or info.owner != TOKEN_PROGRAM_ID:
                balances[label] = UNINITIALIZED
            else:
                balances[label] = await self.ledger.token_balance(address)
        return balances

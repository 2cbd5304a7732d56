import argparse
import asyncio
import logging

import pandas as pd
from solders.pubkey import Pubkey

from betting_market.config import CLUSTER_URLS, MarketConfig, load_keypair
from betting_market.errors import BettingMarketError
from betting_market.market.sdk_context import MarketContext, SDKUser
from betting_market.state import MarketResult

logger = logging.getLogger(__name__)

RESULTS = {"yes": MarketResult.YES, "no": MarketResult.NO}


def build_parser():
    ap = argparse.ArgumentParser(prog="betting-market")
    ap.add_argument("--network", default="devnet", choices=sorted(CLUSTER_URLS))
    ap.add_argument("--market", default=None, help="market account, overrides BETTING_MARKET_ACCOUNT")
    ap.add_argument("--keypair", default=None, help="keypair file, base58 secret or comma separated bytes")
    ap.add_argument("--log-level", default="WARNING")
    sub = ap.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="print the market, its order book and payouts")
    show.add_argument("--depth", type=int, default=10)

    trade = sub.add_parser("trade", help="buy or sell an outcome token")
    trade.add_argument("side", choices=["buy", "sell"])
    trade.add_argument("outcome", choices=["yes", "no"])
    trade.add_argument("price", type=int)
    trade.add_argument("amount", type=int)

    sub.add_parser("payout", help="collect what the market owes you")

    judge = sub.add_parser("judge", help="settle the market by hand")
    judge.add_argument("result", choices=sorted(RESULTS))

    sub.add_parser("judge-oracle", help="settle the market against the price oracle")

    strike = sub.add_parser("strike", help="set the strike price")
    strike.add_argument("price", type=int)

    init = sub.add_parser("init", help="create and initialize a new market")
    init.add_argument("--judge", default=None)

    mint = sub.add_parser("free-mint", help="mint test tokens to yourself")
    mint.add_argument("token", choices=["usd", "yes", "no"])
    mint.add_argument("amount", type=int)

    sub.add_parser("create-accounts", help="create your USD/YES/NO token accounts")
    sub.add_parser("oracle", help="print the oracle price")
    return ap


def print_market(sdk: MarketContext, depth: int):
    state = sdk.require_state()
    for key, value in state.summary().items():
        print(f"{key:>20}: {value}")

    book = sdk.order_book(depth)
    print("\nOrder book")
    print(book.to_dataframe().to_string(index=False))
    print(f"spread: {book.spread:.2f}")

    payouts = sdk.payouts()
    if payouts:
        print("\nPayouts")
        df = pd.DataFrame(
            [(str(p.user), sdk.token_label(p.mint), p.amount) for p in payouts],
            columns=["User", "Token", "Amount"],
        )
        print(df.to_string(index=False))


async def run(args):
    config = MarketConfig.from_env(args.network)
    if args.market is not None:
        config = config.with_market(Pubkey.from_string(args.market))

    if args.keypair is None and args.command not in ("show", "oracle"):
        raise SystemExit(f"{args.command} needs --keypair")
    payer = load_keypair(args.keypair) if args.keypair is not None else None
    sdk = MarketContext.connect(config, payer)

    try:
        if args.command == "oracle":
            price = await sdk.oracle_price()
            print(f"price: {price.price} confidence: {price.confidence} valid slot: {price.valid_slot}")
            return

        if args.command == "init":
            judge = Pubkey.from_string(args.judge) if args.judge else None
            market = await sdk.initialize_market(judge)
            print(f"market: {market}")
            return

        await sdk.refresh()
        if args.command == "show":
            print_market(sdk, args.depth)
            return

        user = SDKUser.connect(sdk, payer)
        if args.command == "trade":
            trade = getattr(sdk, f"{args.side}_{args.outcome}")
            sig = await trade(user, args.price, args.amount)
        elif args.command == "payout":
            sig = await sdk.payout(user)
        elif args.command == "judge":
            sig = await sdk.judge_manually(RESULTS[args.result])
        elif args.command == "judge-oracle":
            sig = await sdk.judge_oracle()
        elif args.command == "strike":
            sig = await sdk.set_strike_price(args.price)
        elif args.command == "free-mint":
            sig = await sdk.free_mint(user, args.token, args.amount)
        elif args.command == "create-accounts":
            sigs = await sdk.create_token_accounts(user)
            for label, balance in (await sdk.token_balances(user)).items():
                print(f"{label:>4}: {balance}")
            sig = ", ".join(str(s) for s in sigs) or None
        else:
            raise SystemExit(f"Unknown command {args.command}")

        if sig is None:
            print("nothing submitted")
        else:
            print(f"signature: {sig}")
    finally:
        await sdk.close()


def main():
    args = build_parser().parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(args))
    except BettingMarketError as e:
        logger.error("%s", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()

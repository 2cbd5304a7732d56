import pytest

from betting_market.scripts.market_cli import RESULTS, build_parser
from betting_market.state import MarketResult


def test_trade_arguments():
    args = build_parser().parse_args(["--keypair", "id.json", "trade", "sell", "yes", "60", "10"])
    assert (args.command, args.side, args.outcome, args.price, args.amount) == (
        "trade",
        "sell",
        "yes",
        60,
        10,
    )
    assert args.network == "devnet"


def test_judge_choices():
    args = build_parser().parse_args(["judge", "no"])
    assert RESULTS[args.result] == MarketResult.NO
    with pytest.raises(SystemExit):
        build_parser().parse_args(["judge", "maybe"])


def test_command_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.instructions import create_associated_token_account

import betting_market.instructions as ixs
from betting_market.state import MARKET_ACCOUNT_SIZE
from betting_market.utils.solana import Action, actionify


@actionify
def initialize_market(
    program_id: Pubkey,
    initializer: Pubkey,
    program_authority: Pubkey,
    usd_token_mint: Pubkey,
    judge: Pubkey,
    rent: int,
    market: Keypair,
    yes_token_mint: Keypair,
    no_token_mint: Keypair,
    usd_token_account: Keypair,
):
    return Action(
        instructions=[
            create_account(
                CreateAccountParams(
                    from_pubkey=initializer,
                    to_pubkey=market.pubkey(),
                    lamports=rent,
                    space=MARKET_ACCOUNT_SIZE,
                    owner=program_id,
                )
            ),
            ixs.initialize_market_ix(
                program_id=program_id,
                initializer=initializer,
                program_authority=program_authority,
                market=market.pubkey(),
                usd_token_mint=usd_token_mint,
                yes_token_mint=yes_token_mint.pubkey(),
                no_token_mint=no_token_mint.pubkey(),
                usd_token_account=usd_token_account.pubkey(),
                judge=judge,
            ),
        ],
        signers=[market, yes_token_mint, no_token_mint, usd_token_account],
    )


@actionify
def create_token_account(payer: Pubkey, owner: Pubkey, mint: Pubkey):
    return create_associated_token_account(payer=payer, owner=owner, mint=mint)


@actionify
def offer_trade(
    program_id: Pubkey,
    accounts: ixs.TraderAccounts,
    is_yes: bool,
    price: int,
    amount: int,
):
    return ixs.offer_trade_ix(
        program_id=program_id,
        accounts=accounts,
        is_yes=is_yes,
        price=price,
        amount=amount,
    )


@actionify
def payout(program_id: Pubkey, accounts: ixs.TraderAccounts):
    return ixs.payout_ix(program_id=program_id, accounts=accounts)


@actionify
def free_mint(
    program_id: Pubkey,
    program_authority: Pubkey,
    mint: Pubkey,
    user_token_account: Pubkey,
    amount: int,
):
    return ixs.free_mint_ix(
        program_id=program_id,
        program_authority=program_authority,
        mint=mint,
        user_token_account=user_token_account,
        amount=amount,
    )


@actionify
def judge_manually(program_id: Pubkey, market: Pubkey, result: int):
    return ixs.judge_manually_ix(program_id=program_id, market=market, result=result)


@actionify
def judge_oracle(program_id: Pubkey, market: Pubkey, oracle_price: Pubkey):
    return ixs.judge_oracle_ix(
        program_id=program_id, market=market, oracle_price=oracle_price
    )


@actionify
def set_strike_price(program_id: Pubkey, market: Pubkey, price: int):
    return ixs.set_strike_price_ix(program_id=program_id, market=market, price=price)

from dataclasses import dataclass

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

PROGRAM_AUTHORITY_SEED = b"betting"


def get_program_authority(program_id: Pubkey) -> Pubkey:
    return Pubkey.find_program_address([PROGRAM_AUTHORITY_SEED], program_id)[0]


def get_user_token_account(owner: Pubkey, mint: Pubkey) -> Pubkey:
    return get_associated_token_address(owner, mint)


@dataclass
class UserTokenAccounts:
    usd: Pubkey
    yes: Pubkey
    no: Pubkey


def get_user_token_accounts(
    owner: Pubkey,
    usd_token_mint: Pubkey,
    yes_token_mint: Pubkey,
    no_token_mint: Pubkey,
) -> UserTokenAccounts:
    return UserTokenAccounts(
        usd=get_user_token_account(owner, usd_token_mint),
        yes=get_user_token_account(owner, yes_token_mint),
        no=get_user_token_account(owner, no_token_mint),
    )

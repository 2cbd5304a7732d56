from podite import pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID
from solders.sysvar import RENT
from spl.token.constants import TOKEN_PROGRAM_ID

from .common import InstructionCode, readonly, writable


@pod
class Params:
    instr: InstructionCode


def initialize_market_ix(
    program_id: Pubkey,
    initializer: Pubkey,
    program_authority: Pubkey,
    market: Pubkey,
    usd_token_mint: Pubkey,
    yes_token_mint: Pubkey,
    no_token_mint: Pubkey,
    usd_token_account: Pubkey,
    judge: Pubkey,
) -> Instruction:
    """
    The YES/NO mints and the market's settlement-token account are fresh
    accounts created by the program, so they must sign alongside the initializer.
    """
    keys = [
        readonly(initializer, is_signer=True),
        readonly(program_authority),
        writable(market),
        readonly(TOKEN_PROGRAM_ID),
        readonly(usd_token_mint),
        writable(yes_token_mint, is_signer=True),
        writable(no_token_mint, is_signer=True),
        writable(usd_token_account, is_signer=True),
        readonly(judge),
        readonly(SYS_PROGRAM_ID),
        readonly(RENT),
    ]
    params = Params(instr=InstructionCode.INITIALIZE_MARKET)
    return Instruction(
        program_id=program_id, data=Params.to_bytes(params), accounts=keys
    )

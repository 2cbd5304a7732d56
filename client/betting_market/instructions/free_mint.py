from podite import U64, pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from .common import InstructionCode, check_u64, readonly, writable


@pod
class Params:
    instr: InstructionCode
    amount: U64


def free_mint_ix(
    program_id: Pubkey,
    program_authority: Pubkey,
    mint: Pubkey,
    user_token_account: Pubkey,
    amount: int,
) -> Instruction:
    keys = [
        readonly(program_authority),
        writable(mint),
        writable(user_token_account),
        readonly(TOKEN_PROGRAM_ID),
    ]
    params = Params(instr=InstructionCode.FREE_MINT, amount=check_u64("amount", amount))
    return Instruction(
        program_id=program_id, data=Params.to_bytes(params), accounts=keys
    )

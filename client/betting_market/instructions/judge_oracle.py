from podite import pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .common import InstructionCode, readonly, writable


@pod
class Params:
    instr: InstructionCode


def judge_oracle_ix(
    program_id: Pubkey, market: Pubkey, oracle_price: Pubkey
) -> Instruction:
    keys = [
        writable(market),
        readonly(oracle_price),
    ]
    params = Params(instr=InstructionCode.JUDGE_ORACLE)
    return Instruction(
        program_id=program_id, data=Params.to_bytes(params), accounts=keys
    )

from podite import U64, pod
from solders.instruction import Instruction
from solders.pubkey import Pubkey

from .common import InstructionCode, check_u64, writable


@pod
class Params:
    instr: InstructionCode
    result: U64


def judge_manually_ix(program_id: Pubkey, market: Pubkey, result: int) -> Instruction:
    # sent as a u64 (1 = YES, 2 = NO); the program rejects anything else
    params = Params(
        instr=InstructionCode.JUDGE_MANUALLY, result=int(check_u64("result", result))
    )
    return Instruction(
        program_id=program_id, data=Params.to_bytes(params), accounts=[writable(market)]
    )

import logging
import pytest
from e20_sim.cache_config import parse_cache_spec
from e20_sim.errors import StepLimitExceeded, UnimplementedOpcode
from e20_sim.runtime.cache import CacheHierarchy, Outcome
from e20_sim.runtime.simulator import run
from e20_sim.runtime.state import MachineState


@pytest.fixture
def sum_program(asm):
    """Adds 5+4+3+2+1 into $2, stores it at address 20 and halts."""
    return [
        asm.addi(1, 0, 5),   # 0
        asm.addi(2, 0, 0),   # 1
        asm.jeq(1, 0, 3),    # 2: done -> 6
        asm.add(2, 2, 1),    # 3
        asm.addi(1, 1, -1),  # 4
        asm.j(2),            # 5
        asm.sw(2, 0, 20),    # 6
        asm.j(7),            # 7
    ]


def load(words):
    state = MachineState()
    state.load_program(words)
    return state


def test_single_self_jump_halts_immediately(asm):
    result = run(load([asm.j(0)]))

    assert result.steps == 1
    assert result.final_state.pc == 0
    assert result.final_state.registers == [0] * 8
    assert result.events == []
    assert result.cache_stats == {}


def test_loop_program(sum_program):
    result = run(load(sum_program))

    final = result.final_state
    assert final.pc == 7
    assert final.registers[1] == 0
    assert final.registers[2] == 15
    assert final.memory[20] == 15
    assert result.steps == 25


@pytest.mark.parametrize("cache_spec", [None, "16,2,4", "4,1,1,32,4,2"])
def test_cache_never_changes_results(sum_program, cache_spec):
    levels = parse_cache_spec(cache_spec)
    cache = CacheHierarchy(levels) if levels else None

    result = run(load(sum_program), cache)

    assert result.final_state.registers[2] == 15
    assert result.final_state.memory[20] == 15
    assert len(result.events) == len(levels)
    assert all(e.outcome == Outcome.STORE and e.pc == 6 for e in result.events)


def test_store_then_load_back(asm):
    program = [
        asm.addi(1, 0, 42),  # 0
        asm.sw(1, 0, 8),     # 1
        asm.lw(2, 0, 8),     # 2
        asm.lw(3, 0, 0),     # 3
        asm.j(4),            # 4
    ]
    seen = []
    cache = CacheHierarchy(parse_cache_spec("16,2,4"))

    result = run(load(program), cache, on_event=seen.append)

    assert result.final_state.registers[2] == 42
    assert result.final_state.memory[8] == 42
    # $3 reads back the first instruction word
    assert result.final_state.registers[3] == program[0]
    assert [(e.outcome, e.pc, e.address, e.row) for e in result.events] == [
        (Outcome.STORE, 1, 8, 0),
        (Outcome.HIT, 2, 8, 0),
        (Outcome.MISS, 3, 0, 0),
    ]
    assert seen == result.events
    assert result.cache_stats["L1"]["hits"] == 1


def test_subroutine_call(asm):
    program = [
        asm.jal(3),          # 0
        asm.j(1),            # 1
        0,                   # 2
        asm.addi(1, 0, 7),   # 3
        asm.jr(7),           # 4
    ]
    result = run(load(program))

    assert result.final_state.pc == 1
    assert result.final_state.registers[1] == 7
    assert result.final_state.registers[7] == 1
    assert result.steps == 4


def test_register_zero_never_written(asm):
    result = run(load([asm.addi(0, 0, 5), asm.add(0, 0, 0), asm.j(2)]))
    assert result.final_state.registers[0] == 0


def test_step_limit(asm):
    with pytest.raises(StepLimitExceeded) as exc_info:
        run(load([asm.j(1), asm.j(0)]), max_steps=10)
    assert exc_info.value.steps == 10


def test_unimplemented_instruction_surfaces(asm):
    with pytest.raises(UnimplementedOpcode):
        run(load([asm.addi(1, 0, 1), asm.reg(9, 1, 1, 1), asm.j(2)]))


def test_memquantity(asm):
    result = run(load([asm.j(0)]), memquantity=8)
    assert result.final_state.memory == [asm.j(0)] + [0] * 7


def test_halt_is_quiet_at_info_level(asm, caplog):
    with caplog.at_level(logging.INFO, logger="e20-sim"):
        run(load([asm.j(0)]))
    assert not [r for r in caplog.records if r.name.startswith("e20-sim")]


def test_halt_is_traced_at_debug_level(asm, caplog):
    with caplog.at_level(logging.DEBUG, logger="e20-sim"):
        run(load([asm.j(0)]))
    assert "Halted at pc=0 after 1 instructions" in caplog.text

"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from chipax import execute, FONT_DATA


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        # Test FX15: Set delay timer
        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        # Test FX18: Set sound timer
        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        # Test FX07: Get delay timer
        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestWaitForKey:
    """Test FX0A."""

    def test_wait_without_key_rewinds(self, fresh_state):
        state = fresh_state.replace(pc=fresh_state.pc + 2)  # as if fetched

        state = execute(state, 0xF30A)

        assert state.pc == 0x200
        assert state.stalled
        assert state.V[3] == 0

    def test_wait_picks_lowest_pressed_key(self, fresh_state):
        state = fresh_state.replace(keypad=fresh_state.keypad.at[0xC].set(True).at[0x5].set(True))
        initial_pc = state.pc

        state = execute(state, 0xF30A)

        assert state.V[3] == 0x5
        assert state.pc == initial_pc
        assert not state.stalled


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        state = execute(fresh_state, 0xA300)
        state = execute(state, 0x6520)
        state = execute(state, 0xF51E)
        assert state.I == 0x320

    def test_add_to_index_sets_no_flag(self, fresh_state):
        """FX1E - Passing 0xFFF does not touch VF."""
        state = execute(fresh_state, 0xAFFF)
        state = execute(state, 0x6510)
        state = execute(state, 0xF51E)
        assert state.I == 0x100F
        assert state.V[15] == 0

    def test_add_to_index_wraps_at_16_bits(self, fresh_state):
        state = fresh_state.replace(I=fresh_state.I + 0xFFFF)
        state = execute(state, 0x6502)
        state = execute(state, 0xF51E)
        assert state.I == 0x0001


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value, digits", [(156, (1, 5, 6)), (0, (0, 0, 0)), (255, (2, 5, 5)), (7, (0, 0, 7))])
    def test_misc_bcd_conversion(self, fresh_state, value, digits):
        state = execute(fresh_state, 0x6000 | value)  # V0 = value
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)  # BCD conversion

        assert tuple(int(d) for d in state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_wraps_at_end_of_memory(self, fresh_state):
        state = execute(fresh_state, 0x6000 | 123)
        state = execute(state, 0xAFFE)
        state = execute(state, 0xF033)

        assert state.memory[0xFFE] == 1
        assert state.memory[0xFFF] == 2
        assert state.memory[0x000] == 3


class TestFont:
    """Test font character addressing."""

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            assert state.I == digit * 5, f"Font address wrong for digit {digit:X}"

    def test_font_out_of_range_digit(self, fresh_state):
        """FX29 - VX > 0xF leaves I unchanged."""
        state = execute(fresh_state, 0xA123)
        state = execute(state, 0x6010)
        state = execute(state, 0xF029)
        assert state.I == 0x123

    def test_font_loaded_at_start(self, fresh_state):
        assert [int(b) for b in fresh_state.memory[:80]] == list(FONT_DATA)
        assert int(fresh_state.memory[80]) == 0


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_round_trip(self, fresh_state):
        """FX55 then FX65 restores V0..VX and leaves I alone."""
        state = fresh_state

        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0x6309)  # V3 = 9, not stored
        state = execute(state, 0xA300)  # I = 0x300

        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == 0x300
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        state = execute(state, 0x6000)
        state = execute(state, 0x6100)
        state = execute(state, 0x6200)
        state = execute(state, 0x6300)

        state = execute(state, 0xF265)  # Load V0-V2
        assert state.I == 0x300
        assert [int(v) for v in state.V[:4]] == [1, 2, 3, 0]

    def test_store_all_registers(self, fresh_state):
        state = fresh_state.replace(V=jnp.arange(16, 32, dtype=jnp.uint8))
        state = execute(state, 0xA400)
        state = execute(state, 0xFF55)
        assert [int(b) for b in state.memory[0x400:0x410]] == list(range(16, 32))

    def test_load_only_up_to_x(self, fresh_state):
        state = fresh_state.replace(memory=fresh_state.memory.at[0x500:0x504].set(7))
        state = execute(state, 0xA500)
        state = execute(state, 0xF165)
        assert [int(v) for v in state.V[:3]] == [7, 7, 0]


def test_unknown_misc_instruction(fresh_state):
    state = execute(fresh_state, 0xF0FF)
    assert state.stalled

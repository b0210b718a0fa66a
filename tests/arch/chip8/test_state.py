import unittest

from retro_chip8.arch.chip8.state import PROGRAM_START, Chip8CpuState, RunState


class TestChip8CpuState(unittest.TestCase):
    def test_initial_values(self):
        state = Chip8CpuState()
        self.assertEqual(state.pc, PROGRAM_START)
        self.assertEqual(state.v, [0] * 16)
        self.assertEqual(state.sp, 0)
        self.assertEqual(state.run_state, RunState.RUNNING)
        self.assertIsNone(state.key_register)

    def test_vf_is_masked(self):
        state = Chip8CpuState()
        state.vf = 0x1FF
        self.assertEqual(state.v[0xF], 0xFF)

    def test_push_pop_tracks_sp(self):
        state = Chip8CpuState()
        state.push(0x202)
        state.push(0x304)
        self.assertEqual(state.sp, 2)
        self.assertEqual(state.pop(), 0x304)
        self.assertEqual(state.sp, 1)

    def test_timers_saturate_at_zero(self):
        state = Chip8CpuState(delay_timer=1, sound_timer=0)
        state.tick_timers()
        state.tick_timers()
        self.assertEqual((state.delay_timer, state.sound_timer), (0, 0))

    def test_key_wait_transitions(self):
        state = Chip8CpuState()
        state.begin_key_wait(0xC)
        self.assertTrue(state.awaiting_key)
        self.assertEqual(state.key_register, 0xC)
        state.end_key_wait()
        self.assertFalse(state.awaiting_key)
        self.assertIsNone(state.key_register)

    # コピーはリストを共有しない
    def test_copy_is_deep(self):
        state = Chip8CpuState()
        state.push(0x222)
        clone = state.copy()
        state.v[0] = 9
        state.push(0x333)
        self.assertEqual(clone.v[0], 0)
        self.assertEqual(clone.stack, [0x222])
        self.assertEqual(clone.sp, 1)


if __name__ == '__main__':
    unittest.main()

import os
import sys
import tempfile
import unittest

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PySide6")

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import DisplayConfig, SystemConfig
from retro_chip8.core.errors import ConfigError
from retro_chip8.devices.display import Framebuffer
from retro_chip8.ui.display_view import DisplayView
from retro_chip8.ui.keymap import DEFAULT_KEYMAP, KeyTranslator, qt_key_for
from retro_chip8.ui.main_window import MainWindow
from retro_chip8.ui.app import main


class QtTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication(sys.argv[:1])


class TestKeyTranslator(QtTestCase):
    def test_default_layout(self):
        translator = KeyTranslator()
        self.assertTrue(translator.press(qt_key_for("q")))
        self.assertTrue(translator.press(qt_key_for("v")))
        snapshot = translator.snapshot()
        self.assertEqual(len(snapshot), 16)
        self.assertTrue(snapshot[0x4])
        self.assertTrue(snapshot[0xF])
        self.assertEqual(sum(snapshot), 2)

    def test_unmapped_key(self):
        translator = KeyTranslator()
        self.assertFalse(translator.press(qt_key_for("p")))

    def test_release(self):
        translator = KeyTranslator()
        translator.press(qt_key_for("x"))
        translator.press(qt_key_for("1"))
        translator.release(qt_key_for("x"))
        self.assertFalse(translator.snapshot()[0x0])
        translator.release_all()
        self.assertFalse(any(translator.snapshot()))

    def test_custom_keymap(self):
        translator = KeyTranslator({"space": 0x5})
        self.assertTrue(translator.press(qt_key_for("space")))
        self.assertTrue(translator.snapshot()[0x5])
        self.assertFalse(translator.press(qt_key_for("q")))

    def test_default_keymap_covers_keypad(self):
        self.assertEqual(sorted(DEFAULT_KEYMAP.values()), list(range(16)))

    def test_unknown_key_name(self):
        with self.assertRaises(ConfigError):
            qt_key_for("no-such-key")
        with self.assertRaises(ConfigError):
            KeyTranslator({"nosuchkey": 0x1})


class TestMainWindow(QtTestCase):
    def _rom(self, data):
        handle = tempfile.NamedTemporaryFile(suffix=".ch8", delete=False)
        handle.write(bytes(data))
        handle.close()
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def test_initial_state(self):
        window = MainWindow()
        self.assertFalse(window.run_action.isEnabled())
        self.assertEqual(window.status_label.text(), "No ROM loaded")
        window.close()

    def test_load_rom_and_step(self):
        rom = self._rom([0x60, 0x2A, 0xA0, 0x50, 0xD0, 0x05])
        window = MainWindow(rom_path=rom)
        window.stop()
        self.assertTrue(window.step_action.isEnabled())
        window._step()
        self.assertEqual(window.cpu.get_state().v[0], 0x2A)
        self.assertEqual(window.register_view.text_for("V0"), "V0: 0x2A")
        window.close()

    def test_frame_runs_cycles(self):
        rom = self._rom([0xA0, 0x50, 0xD0, 0x05, 0x12, 0x04])
        window = MainWindow(rom_path=rom)
        window._on_frame()
        window.stop()
        self.assertFalse(window.stop_action.isEnabled())
        window.debugger.run(max_steps=2)
        self.assertGreater(window.cpu.display.lit_count(), 0)
        window.close()

    def test_apply_config_rebuilds_display(self):
        window = MainWindow()
        window.apply_config(SystemConfig(display=DisplayConfig(scale=4)))
        self.assertEqual(window.display_view.sizeHint().width(), 64 * 4)
        window.close()

    # @intent:test_case_config_rollback 未知のキー名を含む構成は適用されず、ロード済みのバックエンドがそのまま残ることを検証します。
    def test_rejected_config_keeps_backend(self):
        rom = self._rom([0x60, 0x2A])
        window = MainWindow(rom_path=rom)
        window.stop()
        cpu, bus, config = window.cpu, window.bus, window._config
        display_view = window.display_view

        bad = ConfigLoader().load_from_string("keymap:\n  nosuchkey: 0x1\n")
        with self.assertRaises(ConfigError):
            window.apply_config(bad)

        self.assertIs(window.cpu, cpu)
        self.assertIs(window.bus, bus)
        self.assertIs(window._config, config)
        self.assertIs(window.display_view, display_view)
        self.assertEqual(window.bus.peek(0x200), 0x60)
        window._step()
        self.assertEqual(window.cpu.get_state().v[0], 0x2A)
        self.assertEqual(window.register_view.text_for("V0"), "V0: 0x2A")
        window.close()

    def test_apply_config_reloads_rom(self):
        rom = self._rom([0x60, 0x2A])
        window = MainWindow(rom_path=rom)
        window.apply_config(SystemConfig(display=DisplayConfig(scale=4)))
        window.stop()
        self.assertEqual(window.bus.peek(0x200), 0x60)
        self.assertTrue(window.step_action.isEnabled())
        window.close()


class TestStartup(QtTestCase):
    def test_unknown_key_name_in_config_is_an_error(self):
        handle = tempfile.NamedTemporaryFile(suffix=".yaml", mode="w", delete=False)
        handle.write("keymap:\n  nosuchkey: 0x1\n")
        handle.close()
        self.addCleanup(os.unlink, handle.name)
        self.assertEqual(main(["--config", handle.name]), 1)


class TestDisplayView(QtTestCase):
    def test_size_follows_scale(self):
        view = DisplayView(Framebuffer(), scale=5)
        self.assertEqual((view.sizeHint().width(), view.sizeHint().height()), (320, 160))
        view.refresh()


if __name__ == '__main__':
    unittest.main()

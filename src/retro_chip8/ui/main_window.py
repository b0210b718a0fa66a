# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
画面表示、レジスタ表示、実行制御を保持し、QTimer で命令実行とタイマーのペースを制御します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QDockWidget, QToolBar, QFileDialog, QMessageBox, QLabel
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, QElapsedTimer, Slot

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import SystemConfig, TimerMode
from retro_chip8.core.errors import Chip8Error
from retro_chip8.debugger.debugger import Debugger, StopReason
from retro_chip8.loader.loader import RomLoader
from retro_chip8.runtime.pacer import Pacer
from .display_view import DisplayView
from .keymap import KeyTranslator, qt_key_for
from .register_view import RegisterView

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 1000 // 120


# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[SystemConfig] = None, rom_path: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Retro Chip8")
        self._config = config or SystemConfig()
        self._rom_path: Optional[str] = None
        self._running = False

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._on_frame)
        self._clock = QElapsedTimer()

        self._setup_backend()
        self._create_views()
        self._create_toolbar()
        self._create_menus()
        self._update_ui_state(False)

        if rom_path:
            self.load_rom(rom_path)

    def _setup_backend(self):
        self._install_backend(self._build_backend(self._config))

    # @intent:responsibility 構成からCPU、バス、デバッガ、ペーサー、キー変換器を生成します。ウィンドウの状態は変更しません。
    def _build_backend(self, config: SystemConfig):
        translator = KeyTranslator(config.keymap)
        cpu, bus = SystemBuilder().build_system(config)
        return cpu, bus, Debugger(cpu), Pacer(config.machine.cpu_hz, config.machine.timer_hz), translator

    def _install_backend(self, backend) -> None:
        self.cpu, self.bus, self.debugger, self.pacer, self.translator = backend

    def _create_views(self):
        self._create_display_view()

        register_dock = QDockWidget("Registers", self)
        register_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        self.register_view.set_cpu(self.cpu)
        register_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, register_dock)

        self.status_label = QLabel("No ROM loaded")
        self.statusBar().addWidget(self.status_label)

    def _create_display_view(self):
        display = self._config.display
        self.display_view = DisplayView(self.cpu.display, display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset)
        toolbar.addAction(self.reset_action)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._choose_rom)
        file_menu.addAction(self.load_rom_action)

        self.load_config_action = QAction("Load Config...", self)
        self.load_config_action.triggered.connect(self._choose_config)
        file_menu.addAction(self.load_config_action)

    def _update_ui_state(self, is_running: bool):
        self._running = is_running
        self.load_rom_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running and self._rom_path is not None)
        self.step_action.setEnabled(not is_running and self._rom_path is not None)
        self.stop_action.setEnabled(is_running)

    # @intent:responsibility ROMをロードし、CPUをリセットして実行を開始します。
    def load_rom(self, path: str) -> None:
        self.stop()
        loader = RomLoader()
        loader.clear_program_area(self.bus)
        loader.load_file(path, self.bus)
        self._rom_path = path
        self.cpu.reset()
        self.setWindowTitle(f"Retro Chip8 - {path}")
        self._refresh_views()
        self.start()

    @Slot()
    def start(self):
        if self._rom_path is None:
            return
        self.pacer.reset()
        self._clock.start()
        self._frame_timer.start()
        self._update_ui_state(True)

    @Slot()
    def stop(self):
        self._frame_timer.stop()
        self.debugger.stop()
        self._update_ui_state(False)

    # @intent:responsibility 経過時間に応じた命令サイクルとタイマーtickを実行し、画面が変化していれば再描画します。
    @Slot()
    def _on_frame(self):
        budget = self.pacer.advance(self._clock.restart() / 1000.0)
        self.cpu.keypad.update(self.translator.snapshot())

        if self._config.machine.timer_mode == TimerMode.DECOUPLED:
            for _ in range(budget.timer_ticks):
                self.cpu.tick_timers()

        try:
            reason = self.debugger.run(max_steps=budget.cycles) if budget.cycles else None
        except Chip8Error as e:
            self.stop()
            logger.error("Execution stopped: %s", e)
            QMessageBox.critical(self, "Execution Error", str(e))
            return

        if reason == StopReason.BREAKPOINT:
            self.stop()
        if self.debugger.consume_display_dirty():
            self.display_view.refresh()
        self._refresh_status()

    @Slot()
    def _step(self):
        self.cpu.keypad.update(self.translator.snapshot())
        try:
            self.debugger.step_instruction()
        except Chip8Error as e:
            QMessageBox.critical(self, "Execution Error", str(e))
        self._refresh_views()

    @Slot()
    def _reset(self):
        self.cpu.reset()
        self.pacer.reset()
        self._refresh_views()

    def _refresh_views(self):
        self.display_view.refresh()
        self._refresh_status()

    def _refresh_status(self):
        self.register_view.refresh()
        state = self.cpu.get_state()
        text = f"PC {state.pc:03X}"
        if state.awaiting_key:
            text += "  waiting for key"
        if state.sound_active:
            text += "  sound"
        self.status_label.setText(text)

    @Slot()
    def _choose_rom(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except (OSError, Chip8Error) as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")

    @Slot()
    def _choose_config(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if not file_name:
            return
        try:
            self.apply_config(ConfigLoader().load_from_file(file_name))
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load config: {e}")

    # @intent:responsibility 新しい構成でバックエンドを作り直し、ロード済みのROMがあれば再ロードします。
    # @intent:post-condition 構成やROMの読み込みに失敗した場合、例外を送出し、現在のバックエンドはそのまま残ります。
    def apply_config(self, config: SystemConfig) -> None:
        backend = self._build_backend(config)
        if self._rom_path:
            RomLoader().load_file(self._rom_path, backend[1])

        self.stop()
        self._config = config
        self._install_backend(backend)
        self._create_display_view()
        self.register_view.set_cpu(self.cpu)
        self._refresh_views()
        self.start()

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == qt_key_for("escape"):
            self.close()
            return
        if event.isAutoRepeat() or not self.translator.press(event.key()):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.translator.release(event.key()):
            super().keyReleaseEvent(event)

    def focusOutEvent(self, event):
        self.translator.release_all()
        super().focusOutEvent(event)

    def closeEvent(self, event: QCloseEvent):
        self.stop()
        event.accept()

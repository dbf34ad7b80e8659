# chip8_tracer/ui/main_window.py
"""
メインウィンドウの実装。
ディスプレイ、逆アセンブル、レジスタの各ビューを保持し、実行ループを駆動します。

実行はGUIスレッド上のQTimerで行います。1フレームごとに入力をサンプリングし、
cycles_per_frame回のtick（Debugger.run経由）を実行してから画面を再描画するため、
CPUとホストがFramebuffer・Keypadに同時に触れることはありません。
"""
import logging
from dataclasses import replace
from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow, QApplication, QDockWidget, QTabWidget, QToolBar, QLabel,
    QFileDialog, QMessageBox, QScrollArea,
)
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QEvent, QTimer, Slot

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.models import SystemConfig
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.builder import SystemBuilder
from chip8_tracer.loader.loader import RomLoader
from .display_view import DisplayView
from .register_view import RegisterView
from .code_view import CodeView
from .keymap import HostKeyState, build_qt_keymap

logger = logging.getLogger(__name__)

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("CHIP-8 Core Tracer")
        self.setGeometry(100, 100, 1200, 700)
        self.setDockNestingEnabled(True)
        self.setFocusPolicy(Qt.StrongFocus)

        self._builder = SystemBuilder()
        self._rom_loader = RomLoader()
        self._rom_data: Optional[bytes] = None
        self._sound_was_active = False
        self._beep = QApplication.beep

        self._frame_timer = QTimer(self)
        self._frame_timer.timeout.connect(self._run_frame)

        self._set_dark_theme()
        self._create_display()
        self._create_navigation_pane()
        self._create_status_inspector()
        self._create_toolbar()
        self._create_menus()

        self._setup_backend(config or SystemConfig())
        self._update_ui_state(False)

    # @intent:responsibility 設定からCPUとDebuggerを生成し、各ビューに接続します。
    # @intent:pre-condition 実行が停止している必要があります。
    def _setup_backend(self, config: SystemConfig) -> None:
        rom_data = self._rom_loader.load_file(config.rom) if config.rom else None
        cpu = self._builder.build_system(replace(config, rom=None))
        if rom_data is not None:
            cpu.load_rom(rom_data)

        self.config = config
        self.cpu = cpu
        self.debugger = self._builder.build_debugger(config, cpu)
        self.host_keys = HostKeyState(build_qt_keymap(config.keymap))
        self._rom_data = rom_data
        self._sound_was_active = False
        self._frame_timer.setInterval(max(1, round(1000 / config.machine.frame_rate)))

        self.display_view.apply_config(config.display)
        self.display_view.set_framebuffer(cpu.framebuffer)
        self.register_view.set_cpu(cpu)
        self.code_view.reset_cache()
        self._refresh_inspectors()

    def _create_display(self):
        self.display_view = DisplayView()
        scroll = QScrollArea()
        scroll.setAlignment(Qt.AlignCenter)
        scroll.setStyleSheet("background-color: #101010; border: none;")
        scroll.setWidget(self.display_view)
        self.setCentralWidget(scroll)

    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.setShortcut("F5")
        self.run_action.triggered.connect(self._run_debugger)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.setShortcut("Shift+F5")
        self.stop_action.triggered.connect(self._stop_debugger)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.setShortcut("F10")
        self.step_action.triggered.connect(self._step_debugger)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset_machine)
        toolbar.addAction(self.reset_action)

        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label)
        self.cycle_label = QLabel()
        self.statusBar().addPermanentWidget(self.cycle_label)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.open_rom_action = QAction("Open ROM...", self)
        self.open_rom_action.setShortcut("Ctrl+O")
        self.open_rom_action.triggered.connect(self._open_rom)
        file_menu.addAction(self.open_rom_action)

        self.load_config_action = QAction("Load System Config...", self)
        self.load_config_action.triggered.connect(self._load_system_config)
        file_menu.addAction(self.load_config_action)

    def _create_navigation_pane(self):
        nav_dock = QDockWidget("Navigation", self)
        nav_dock.setAllowedAreas(Qt.LeftDockWidgetArea)
        tab_widget = QTabWidget()
        self.code_view = CodeView()
        tab_widget.addTab(self.code_view, "Disassembly")
        nav_dock.setWidget(tab_widget)
        self.addDockWidget(Qt.LeftDockWidgetArea, nav_dock)

    def _create_status_inspector(self):
        status_dock = QDockWidget("Status Inspector", self)
        status_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        tab_widget = QTabWidget()
        self.register_view = RegisterView()
        tab_widget.addTab(self.register_view, "Registers")
        status_dock.setWidget(tab_widget)
        self.addDockWidget(Qt.RightDockWidgetArea, status_dock)

    # @intent:responsibility 実行状態に応じてアクションの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        self.open_rom_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.reset_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)

    @property
    def is_running(self) -> bool:
        return self._frame_timer.isActive()

    @Slot()
    def _run_debugger(self):
        # 停止中に経過した時間をDT/STに反映させない
        self.cpu.sync_timers()
        self._update_ui_state(True)
        self.status_label.setText("Running...")
        self._frame_timer.start()

    @Slot()
    def _stop_debugger(self):
        self._halt("Stopped")

    @Slot()
    def _step_debugger(self):
        # ステップ実行の合間は停止中として扱う
        self.cpu.sync_timers()
        try:
            self.debugger.step_instruction()
        except Chip8Error as e:
            self._report_fault(e)
        self._update_sound()
        self.display_view.update()
        self._refresh_inspectors()

    # @intent:responsibility CPUを初期状態に戻し、現在のROMを再配置します。
    @Slot()
    def _reset_machine(self):
        self.cpu.reset()
        self.cpu.keypad.clear()
        if self._rom_data is not None:
            self.cpu.load_rom(self._rom_data)
        self._sound_was_active = False
        self.code_view.reset_cache()
        self.display_view.update()
        self._refresh_inspectors()
        self.status_label.setText("Reset")

    # @intent:responsibility 1フレーム分の入力サンプリング、実行、描画を行います。
    @Slot()
    def _run_frame(self):
        self.cpu.keypad.update(self.host_keys.pressed_keys())
        try:
            hit = self.debugger.run(max_steps=self.config.machine.cycles_per_frame)
        except Chip8Error as e:
            self._update_sound()
            self.display_view.update()
            self._report_fault(e)
            return

        self._update_sound()
        self.display_view.update()
        self.register_view.update_registers()
        if hit:
            self._halt(f"Breakpoint at {self.cpu.get_state().pc:#06x}")

    # @intent:responsibility sound_activeの立ち上がりでビープ音を鳴らします。
    def _update_sound(self):
        active = self.cpu.sound_active
        if active and not self._sound_was_active:
            self._beep()
        self._sound_was_active = active

    def _halt(self, message: str):
        self._frame_timer.stop()
        self.debugger.stop()
        self._update_ui_state(False)
        self.status_label.setText(message)
        self._refresh_inspectors()

    def _report_fault(self, error: Chip8Error):
        logger.error("Execution fault at PC %#06x: %s", self.cpu.get_state().pc, error)
        self._halt("Fault")
        QMessageBox.critical(self, "Execution Error", str(error))

    def _refresh_inspectors(self):
        self.register_view.update_registers()
        self.code_view.update_code(self.cpu, self.cpu.get_state().pc)
        self.cycle_label.setText(f"cycles: {self.cpu.cycle_count}")

    @Slot()
    def _open_rom(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            self.open_rom(file_name)

    # @intent:responsibility ROMファイルを読み込み、マシンをリセットして配置します。
    def open_rom(self, file_name: str) -> bool:
        try:
            data = self._rom_loader.load_file(file_name)
        except Chip8Error as e:
            logger.error("Failed to load ROM %s: %s", file_name, e)
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return False

        self._rom_data = data
        self.config.rom = file_name
        self._reset_machine()
        self.status_label.setText(f"Loaded {len(data)} bytes")
        return True

    @Slot()
    def _load_system_config(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open System Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if not file_name:
            return
        try:
            config = ConfigLoader().load_from_file(file_name)
            self._setup_backend(config)
        except (OSError, ValueError, Chip8Error) as e:
            logger.error("Failed to load system config %s: %s", file_name, e)
            QMessageBox.critical(self, "Error", f"Failed to load system config: {e}")
            return
        self.status_label.setText(f"Loaded config {file_name}")

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.host_keys.press(event.key()):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.host_keys.release(event.key()):
            super().keyReleaseEvent(event)

    # @intent:responsibility ウィンドウが非アクティブになったら押下中のキーを全て離します。
    def changeEvent(self, event: QEvent):
        if event.type() == QEvent.ActivationChange and not self.isActiveWindow():
            self.host_keys.release_all()
        super().changeEvent(event)

    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

        self.setStyleSheet("""
            QWidget { font-size: 10pt; }
            QMainWindow, QToolBar { background-color: #1D1D1D; border: none; }
            QDockWidget::title { text-align: left; background: #101010; padding: 4px; font-weight: bold; }
            QTabWidget::pane { border-top: 2px solid #2A82DA; }
            QTabBar::tab { background: #1E1E1E; border: 1px solid #1E1E1E; border-bottom-color: #2A82DA; padding: 8px 12px; min-width: 80px; }
            QTabBar::tab:selected { background: #101010; border: 1px solid #2A82DA; border-bottom-color: #101010; }
        """)

    def closeEvent(self, event: QCloseEvent):
        self._frame_timer.stop()
        self.debugger.stop()
        event.accept()

# chip8_tracer/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
コマンドライン引数を解釈し、設定を読み込んでメインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_tracer.common.errors import Chip8Error
from chip8_tracer.config.loader import ConfigLoader
from chip8_tracer.config.models import SystemConfig
from .main_window import MainWindow

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="CHIP-8 interpreter and execution tracer")
    parser.add_argument("rom", nargs="?", help="ROM image to load at 0x200")
    parser.add_argument("--config", help="YAML system configuration file")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, type=str.upper,
                        help="logging level (default: WARNING)")
    return parser

# @intent:responsibility 引数から起動時の設定を組み立てます。ROM引数は設定ファイルのromより優先されます。
def load_startup_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.rom:
        config.rom = args.rom
    return config

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_startup_config(args)
    except (OSError, ValueError) as e:
        logger.error("Failed to load system config %s: %s", args.config, e)
        return 2

    app = QApplication(sys.argv[:1])

    try:
        main_win = MainWindow(config)
    except Chip8Error as e:
        logger.error("Failed to start: %s", e)
        return 1
    main_win.show()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())

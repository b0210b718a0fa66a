# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数を解釈し、メインウィンドウを起動するか、逆アセンブル結果を出力します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from retro_chip8.core.errors import Chip8Error
from retro_chip8.loader.loader import RomLoader
from retro_chip8.arch.chip8.state import PROGRAM_START

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter and tracer")
    parser.add_argument("rom", nargs="?", help="CHIP-8 ROM image to load")
    parser.add_argument("--config", help="YAML system configuration file")
    parser.add_argument("--hz", type=int, help="instruction rate (overrides machine.cpu_hz)")
    parser.add_argument("--scale", type=int, help="pixel scale factor (overrides display.scale)")
    parser.add_argument("--seed", type=int, help="random seed for the RND instruction")
    parser.add_argument("--disassemble", action="store_true", help="print a disassembly of the ROM and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


# @intent:responsibility 設定ファイルとコマンドライン引数から SystemConfig を組み立てます。
def resolve_config(args: argparse.Namespace) -> SystemConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()
    if args.hz is not None:
        config.machine.cpu_hz = args.hz
    if args.scale is not None:
        config.display.scale = args.scale
    if args.seed is not None:
        config.machine.seed = args.seed
    return config


# @intent:responsibility ROMをロードし、プログラム領域の逆アセンブル結果を標準出力に書き出します。
def print_disassembly(rom_path: str, config: SystemConfig) -> None:
    cpu, bus = SystemBuilder().build_system(config)
    size = RomLoader().load_file(rom_path, bus)
    for address, hex_bytes, text in cpu.disassemble(PROGRAM_START, size):
        print(f"{address:03X}: {hex_bytes}  {text}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    try:
        config = resolve_config(args)
        if args.disassemble:
            if not args.rom:
                logger.error("--disassemble requires a ROM")
                return 2
            print_disassembly(args.rom, config)
            return 0
    except (OSError, ValueError, Chip8Error) as e:
        logger.error("%s", e)
        return 1

    from PySide6.QtWidgets import QApplication
    from .main_window import MainWindow

    app = QApplication.instance() or QApplication(sys.argv[:1])
    try:
        main_win = MainWindow(config, args.rom)
    except (OSError, ValueError, Chip8Error) as e:
        logger.error("Failed to start: %s", e)
        return 1
    main_win.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())

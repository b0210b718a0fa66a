# tests/ui/test_app.py
"""
retro_chip8.ui.appモジュールの単体テスト。Qt を起動しない経路のみを検証します。
"""
from retro_chip8.ui.app import build_parser, main, resolve_config


class TestCommandLine:
    def test_overrides(self, tmp_path):
        config_file = tmp_path / "chip8.yaml"
        config_file.write_text("machine:\n  cpu_hz: 700\ndisplay:\n  scale: 8\n")
        args = build_parser().parse_args(["game.ch8", "--config", str(config_file), "--hz", "900", "--seed", "3"])
        config = resolve_config(args)
        assert config.machine.cpu_hz == 900
        assert config.machine.seed == 3
        assert config.display.scale == 8

    # @intent:test_case_disassemble --disassemble はリストを出力して終了コード0を返すことを検証します。
    def test_disassemble(self, tmp_path, capsys):
        rom = tmp_path / "prog.ch8"
        rom.write_bytes(bytes([0x60, 0x05, 0x61, 0x03, 0x80, 0x14]))
        assert main([str(rom), "--disassemble"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "200: 60 05  LD V0, 0x05",
            "202: 61 03  LD V1, 0x03",
            "204: 80 14  ADD V0, V1",
        ]

    def test_disassemble_requires_rom(self):
        assert main(["--disassemble"]) == 2

    def test_oversized_rom_is_an_error(self, tmp_path):
        rom = tmp_path / "big.ch8"
        rom.write_bytes(bytes(4000))
        assert main([str(rom), "--disassemble"]) == 1

    def test_bad_config_is_an_error(self, tmp_path):
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("quirks:\n  screen_edge: bounce\n")
        assert main(["--config", str(config_file), "--disassemble", "x.ch8"]) == 1

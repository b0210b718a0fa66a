import logging
import random
from typing import Tuple

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.devices.display import Framebuffer
from retro_chip8.devices.keypad import Keypad
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.font import FONT_BASE, FONT_SET
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from .models import SystemConfig

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、Bus、RAM、画面、キーパッド、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig = None) -> Tuple[Chip8Cpu, Bus]:
        config = config or SystemConfig()

        bus = Bus()
        bus.attach(0x000, RAM(MEMORY_SIZE))
        self.install_font(bus)

        rng = random.Random(config.machine.seed)
        cpu = Chip8Cpu(
            bus,
            display=Framebuffer(),
            keypad=Keypad(),
            quirks=config.quirks,
            machine=config.machine,
            rng=rng,
        )
        logger.debug("Built system: %s, %s", config.machine, config.quirks)
        return cpu, bus

    # @intent:responsibility 16進フォントを 0x050-0x09F に書き込みます。
    def install_font(self, bus: Bus) -> None:
        bus.load_block(FONT_BASE, FONT_SET)

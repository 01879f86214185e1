import os
import tempfile
import unittest

import pygame

from chip8 import Chip8, ProgramTooLarge
from chip8_host import KEY_MAPPINGS, get_rom_arg, handle_event, load_rom, run_frame


class TestKeyMappings(unittest.TestCase):
    def test_covers_every_key_once(self):
        self.assertEqual(sorted(KEY_MAPPINGS.values()), list(range(16)))

    def test_press_and_release(self):
        chip = Chip8()
        self.assertTrue(handle_event(chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_v)))
        self.assertTrue(chip.keypad[0xF])
        self.assertTrue(handle_event(chip, pygame.event.Event(pygame.KEYUP, key=pygame.K_v)))
        self.assertFalse(chip.keypad[0xF])

    def test_unmapped_key_is_ignored(self):
        chip = Chip8()
        self.assertTrue(handle_event(chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p)))
        self.assertTrue(chip.keypad.untouched())

    def test_quit(self):
        chip = Chip8()
        self.assertFalse(handle_event(chip, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)))
        self.assertFalse(handle_event(chip, pygame.event.Event(pygame.QUIT)))


class TestLoadRom(unittest.TestCase):
    def write_rom(self, data):
        fd, path = tempfile.mkstemp(suffix=".ch8")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        self.addCleanup(os.remove, path)
        return path

    def test_load(self):
        chip = Chip8()
        path = self.write_rom(b"\x12\x00")
        self.assertEqual(load_rom(chip, path), 2)
        self.assertEqual(chip.mem[0x200:0x202], [0x12, 0x00])

    def test_too_large(self):
        path = self.write_rom(bytes(0xE01))
        with self.assertRaises(ProgramTooLarge):
            load_rom(Chip8(), path)

    def test_missing_file(self):
        with self.assertRaises(OSError):
            load_rom(Chip8(), os.path.join(tempfile.gettempdir(), "no-such-rom.ch8"))


class TestCli(unittest.TestCase):
    def test_rom_argument(self):
        self.assertEqual(get_rom_arg(["pong.ch8"]), "pong.ch8")

    def test_missing_argument_exits(self):
        with self.assertRaises(SystemExit):
            get_rom_arg([])


class TestRunFrame(unittest.TestCase):
    def test_steps_then_ticks(self):
        chip = Chip8()
        # V0 += 1 forever
        chip.load_program(bytes([0x70, 0x01, 0x12, 0x00]))
        chip.dt = 3
        self.assertFalse(run_frame(chip, cycles=10))
        self.assertEqual(chip.v_regs[0], 5)
        self.assertEqual(chip.dt, 2)

    def test_reports_draw(self):
        chip = Chip8()
        chip.load_program(bytes([0xD0, 0x01, 0x12, 0x02]))
        self.assertTrue(run_frame(chip, cycles=3))
        self.assertFalse(chip.draw)


if __name__ == "__main__":
    unittest.main()

import argparse
import os
import sys

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
)

from chip8 import DEBUG, SCREEN_HEIGHT, SCREEN_WIDTH, Chip8, Chip8Error


# ******************** STATIC SECTION
# left side of a QWERTY keyboard laid out like the COSMAC VIP hex keypad
# 1 2 3 C
# 4 5 6 D
# 7 8 9 E
# A 0 B F
KEY_MAPPINGS = {
    K_x: 0x0,
    K_1: 0x1,
    K_2: 0x2,
    K_3: 0x3,
    K_q: 0x4,
    K_w: 0x5,
    K_e: 0x6,
    K_a: 0x7,
    K_s: 0x8,
    K_d: 0x9,
    K_z: 0xA,
    K_c: 0xB,
    K_4: 0xC,
    K_r: 0xD,
    K_f: 0xE,
    K_v: 0xF,
}

SCALE = int(os.getenv('CHIP8_SCALE', 16))
INSTRUCTIONS_PER_SECOND = int(os.getenv('CHIP8_IPS', 700))
TIMER_FREQUENCY = 60
CYCLES_PER_FRAME = max(1, INSTRUCTIONS_PER_SECOND // TIMER_FREQUENCY)
BLUE = pygame.Color(80,69,155,255)
LIGHT_BLUE = pygame.Color(136,126,203,255)


# ******************** UTILITIES SECTION
def get_rom_arg(argv=None):
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter")
    parser.add_argument("rom", help="input rom file")
    args = parser.parse_args(argv)
    return args.rom

def load_rom(chip, path):
    """read the ROM file at path and load it in the interpreter memory"""
    with open(path, mode='rb') as f:
        rom = f.read()
    if DEBUG: print(f"ROM file size {len(rom)}")
    chip.load_program(rom)
    if DEBUG: print(f"The ROM at path {path} has been loaded successfully")
    return len(rom)


# ******************** I/O SECTION
class Screen:
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.w, self.h, self.scale = w, h, s
        self.background = bg_color
        self.foreground = fg_color
        self.surface = pygame.display.set_mode(
            (w * self.scale, h * self.scale),
        )
        self.surface.fill(self.background)

    def render(self, framebuffer):
        """paint every ON pixel of the framebuffer over the background and show the result"""
        self.surface.fill(self.background)
        for y, row in enumerate(framebuffer.rows()):
            for x, pixel in enumerate(row):
                if pixel:
                    pygame.draw.rect(
                        self.surface,
                        self.foreground,
                        (x * self.scale, y * self.scale, self.scale, self.scale)
                    )
        pygame.display.flip()


def handle_event(chip, event):
    """apply a pygame event to the keypad, return False if the user asked to quit"""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key in KEY_MAPPINGS:
            chip.keypad[KEY_MAPPINGS[event.key]] = True     # register keypress
    elif event.type == pygame.KEYUP:
        if event.key in KEY_MAPPINGS:
            chip.keypad[KEY_MAPPINGS[event.key]] = False    # register key release
    return True


def run_frame(chip, cycles=CYCLES_PER_FRAME):
    """run one display frame worth of instructions then tick the timers, return True if the screen changed"""
    redraw = False
    for _ in range(cycles):
        chip.step()
        redraw = redraw or chip.draw
        chip.draw = False
    chip.tick_timers()
    return redraw


# ******************** ENTRY POINT SECTION
def run(chip, screen):
    clock = pygame.time.Clock()
    running = True
    while running:
        # frames per second, the timers tick once per frame
        clock.tick(TIMER_FREQUENCY)
        # process user input
        # loop throught the event queue
        for event in pygame.event.get():
            if not handle_event(chip, event):
                running = False
        if run_frame(chip):
            screen.render(chip.screen)


def main(*args, **kwargs):
    rom_name = get_rom_arg()
    chip = Chip8()
    try:
        load_rom(chip, rom_name)
    except (OSError, Chip8Error) as e:
        sys.exit(f"Loading the ROM at path {rom_name} failed: {e}")
    # pygame initialization
    pygame.init()
    pygame.display.set_caption(os.path.basename(rom_name))
    try:
        screen = Screen()
        screen.render(chip.screen)
        run(chip, screen)
    except Chip8Error as e:
        sys.exit(f"********** THE EMULATOR CRASHED: {e}\n{chip}")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()

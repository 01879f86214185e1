# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908
#
# TEST SUITE
# https://github.com/Timendus/chip8-test-suite
#
# The interpreter follows Cowgod's technical reference:
#   - 8XY6/8XYE shift Vx in place, VF gets the bit shifted out
#   - 8XY1/8XY2/8XY3 leave VF alone
#   - FX55/FX65 leave I unchanged
#   - sprites start at (Vx % 64, Vy % 32) and are clipped at the screen edges
#   - skips always move PC forward by one instruction (2 bytes)


import os
import random
from functools import wraps


# ******************** STATIC SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

FONT_ADDRESS = 0x050
FONT_SPRITE_SIZE = 5
ROM_START_ADDRESS = 0x200
MEMORY_SIZE = 0x1000
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS
STACK_SIZE = 16
NUM_REGISTERS = 16
NUM_KEYS = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False

# decode masks per high nibble, every group not listed here is decoded on 0xF000 alone
DECODE_MASKS = {
    0x0: 0xFFFF,
    0x5: 0xF00F,
    0x8: 0xF00F,
    0x9: 0xF00F,
    0xE: 0xF0FF,
    0xF: 0xF0FF,
}
SYS_OPCODES = (0x00E0, 0x00EE)


# ******************** ERRORS SECTION
class Chip8Error(Exception):
    """base class of every error raised by the interpreter, all of them are fatal to the run"""


class IllegalOpcode(Chip8Error):
    def __init__(self, opcode, address):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Illegal opcode 0x{opcode:04x} at address 0x{address:03x}")


class StackOverflow(Chip8Error):
    def __init__(self):
        super().__init__(f"The CHIP-8 stack can contain at most {STACK_SIZE} addresses. Limit exceeded")


class StackUnderflow(Chip8Error):
    def __init__(self):
        super().__init__("Tried to return from a subroutine with an empty stack")


class ProgramTooLarge(Chip8Error):
    def __init__(self, size, limit=MAX_ROM_SIZE):
        self.size = size
        self.limit = limit
        super().__init__(f"The program is {size} bytes long, at most {limit} bytes fit in memory")


class MemoryOutOfBounds(Chip8Error):
    def __init__(self, address):
        self.address = address
        super().__init__(f"Memory access out of bounds at address 0x{address:04x}")


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to print out the ASM of the instruction being called"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(*args, **kwargs):
            mem_addr = args[0].pc - 2   # args[0] equals self, pc already points to the next instruction
            vals = fn(*args, **kwargs)  # use the locals() values of each decorated function in the print
            vals['mem_addr'] = mem_addr
            if DEBUG: print(msg.format(**vals))
        return wrapper_fn
    return decorator


# ******************** I/O SECTION
class Framebuffer:
    """64x32 monochrome pixel grid, 1 means the pixel is ON"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = [0] * h * w

    def _offset(self, x, y):
        if not (0 <= x < self.w and 0 <= y < self.h):
            raise IndexError(f"Pixel ({x}, {y}) is outside of the {self.w}x{self.h} screen")
        return y * self.w + x

    def read_pixel(self, x, y):
        return self.buffer[self._offset(x, y)]

    def write_pixel(self, x, y, value):
        self.buffer[self._offset(x, y)] = 1 if value else 0

    def rows(self):
        """yield every row of the screen as a list of pixels, top to bottom"""
        for y in range(self.h):
            yield self.buffer[y * self.w:(y + 1) * self.w]

    def clear(self):
        self.buffer = [0] * self.h * self.w

    def __str__(self):
        return "\n".join("".join("#" if p else "." for p in row) for row in self.rows())


class Keypad:
    """state of the 16 hex keys, written by the host and read by the interpreter"""
    def __init__(self):
        self.keys = [False] * NUM_KEYS

    def __getitem__(self, key):
        if not 0 <= key < NUM_KEYS:
            raise IndexError(f"CHIP-8 has no key 0x{key:x}")
        return self.keys[key]

    def __setitem__(self, key, value):
        if not 0 <= key < NUM_KEYS:
            raise IndexError(f"CHIP-8 has no key 0x{key:x}")
        self.keys[key] = bool(value)

    def untouched(self):
        return not any(self.keys)

    def first(self):
        """get the lowest key currently pressed, None if there isn't any"""
        for key, pressed in enumerate(self.keys):
            if pressed:
                return key
        return None

    def release_all(self):
        self.keys = [False] * NUM_KEYS


# ******************** MEMORY SECTION
# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self):
        self.addr_list = []

    @property
    def size(self):
        return len(self.addr_list)

    def append(self, address):
        if self.size >= STACK_SIZE:
            raise StackOverflow()
        self.addr_list.append(address)

    def pop(self):
        if self.size == 0:
            raise StackUnderflow()
        return self.addr_list.pop()

    def clear(self):
        self.addr_list = []

    def __str__(self):
        return "[" + ", ".join(f"0x{a:03x}" for a in self.addr_list) + "]"

# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.inner[FONT_ADDRESS:FONT_ADDRESS+len(C8_FONTS)] = bytes(C8_FONTS)

    @staticmethod
    def _check(start, stop):
        """stop is exclusive, raise if any address in [start, stop) falls outside memory"""
        if start < 0:
            raise MemoryOutOfBounds(start)
        if stop > MEMORY_SIZE:
            raise MemoryOutOfBounds(max(start, MEMORY_SIZE))

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            start = 0 if key.start is None else key.start
            value = bytes(v & 0xFF for v in value)
            self._check(start, start + len(value))
            self.inner[start:start+len(value)] = value
        else:
            self._check(key, key + 1)
            self.inner[key] = value & 0xFF

    def __getitem__(self, index):
        if isinstance(index, slice):
            start = 0 if index.start is None else index.start
            stop = MEMORY_SIZE if index.stop is None else index.stop
            self._check(start, stop)
            return list(self.inner[start:stop])
        self._check(index, index + 1)
        return self.inner[index]

    def __len__(self):
        return MEMORY_SIZE

    def load_rom(self, rom):
        """copy the program bytes at 0x200, raise ProgramTooLarge if they don't fit"""
        if len(rom) > MAX_ROM_SIZE:
            raise ProgramTooLarge(len(rom))
        self[ROM_START_ADDRESS:] = rom


# ******************** CPU SECTION
class Chip8:
    def __init__(self, rng=None):
        # anything exposing randint(a, b), tests pass a deterministic one
        self.rng = rng if rng is not None else random.Random()
        self.screen = Framebuffer()
        self.keypad = Keypad()
        self.instructions = {
            0x0000: self._sys,
            0x00E0: self._clear_screen,
            0x00EE: self._return,
            0x1000: self._jump,
            0x2000: self._call_addr,
            0x3000: self._skip_if_eq,
            0x4000: self._skip_if_not_eq,
            0x5000: self._skip_if_eq_regs,
            0x6000: self._set_vk,
            0x7000: self._add_to_vk,
            0x8000: self._set_vx_to_vy,
            0x8001: self._set_vx_or_vy,
            0x8002: self._set_vx_and_vy,
            0x8003: self._set_vx_xor_vy,
            0x8004: self._add_vx_vy,
            0x8005: self._sub_vx_vy,
            0x8006: self._shr,
            0x8007: self._subn_vx_vy,
            0x800E: self._shl,
            0x9000: self._skip_if_not_eq_regs,
            0xA000: self._set_idx,
            0xB000: self._jump_plus,
            0xC000: self._random_byte_and,
            0xD000: self._to_screen,
            0xE09E: self._skip_if_pressed,
            0xE0A1: self._skip_if_not_pressed,
            0xF007: self._set_vx_dt,
            0xF00A: self._wait_keypress,
            0xF015: self._set_dt_vx,
            0xF018: self._set_st,
            0xF01E: self._add_to_idx,
            0xF029: self._select_char,
            0xF033: self._bcd_repr,
            0xF055: self._store_vregs,
            0xF065: self._load_vregs,
        }
        self.reset()

    def reset(self):
        """bring the machine back to its power-on state, fonts included"""
        self.mem = Memory()
        self.stack = Stack()
        self.v_regs = [0] * NUM_REGISTERS
        self.pc = ROM_START_ADDRESS
        self.idx = 0    # specify where the sprites reside in memory
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero
        self.screen.clear()
        self.keypad.release_all()
        self.draw = False
        self.waiting = False    # True while FX0A is stalling for a key

    def load_program(self, rom):
        self.mem.load_rom(rom)

    @property
    def sp(self):
        return self.stack.size

    @property
    def beeping(self):
        return self.st > 0

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:03x} | IDX_REGISTER:0x{self.idx:03x} | VARIABLE_REGISTERS:{self.v_regs}"
        timers = f"DT:{self.dt} | ST:{self.st}"
        stack = f"STACK:{self.stack}"
        flags = f"DRAW: {self.draw} | WAITING: {self.waiting}"
        return f"{registers}\n{timers}\n{stack}\n{flags}"

    def snapshot(self):
        """copy of the whole machine state as plain python values"""
        return {
            'memory': bytes(self.mem.inner),
            'v_regs': list(self.v_regs),
            'idx': self.idx,
            'pc': self.pc,
            'stack': list(self.stack.addr_list),
            'dt': self.dt,
            'st': self.st,
            'keys': list(self.keypad.keys),
            'screen': list(self.screen.buffer),
        }

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SYS 0x{address:04x}")
    def _sys(self, opcode):
        """jump to a machine code routine, ignored by every modern interpreter"""
        address = opcode & 0x0FFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKP V{x}")
    def _skip_if_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        x = (opcode & 0x0F00) >> 8
        key = self.v_regs[x] & 0xF
        if self.keypad[key]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKNP V{x}")
    def _skip_if_not_pressed(self, opcode):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        x = (opcode & 0x0F00) >> 8
        key = self.v_regs[x] & 0xF
        if not self.keypad[key]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, K")
    def _wait_keypress(self, opcode):
        """wait for a key press and store its value in Vx"""
        x = (opcode & 0x0F00) >> 8
        if self.keypad.untouched():
            self.pc -= 0x2      # stay on the same instruction until a key is pressed
            self.waiting = True
        else:
            self.v_regs[x] = self.keypad.first()
            self.waiting = False
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, DT")
    def _set_vx_dt(self, opcode):
        """set Vx = DT (delay timer) value"""
        x = (opcode & 0x0F00) >> 8
        self.v_regs[x] = self.dt
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD DT, V{x}")
    def _set_dt_vx(self, opcode):
        """set DT (delay timer) = Vx"""
        x = (opcode & 0x0F00) >> 8
        self.dt = self.v_regs[x]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CLS")
    def _clear_screen(self, opcode):
        self.screen.clear()
        self.draw = True
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RET")
    def _return(self, opcode):
        """return from a subroutine"""
        self.pc = self.stack.pop()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP 0x{address:04x}")
    def _jump(self, opcode):
        address = opcode & 0x0FFF
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CALL 0x{address:04x}")
    def _call_addr(self, opcode):
        address = opcode & 0x0FFF
        self.stack.append(self.pc)
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x}, {comparison_value}")
    def _skip_if_eq(self, opcode):
        x = (opcode & 0x0F00) >> 8
        comparison_value = opcode & 0x00FF
        if self.v_regs[x] == comparison_value:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x}, {comparison_value}")
    def _skip_if_not_eq(self, opcode):
        x = (opcode & 0x0F00) >> 8
        comparison_value = opcode & 0x00FF
        if self.v_regs[x] != comparison_value:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x}, V{y}")
    def _skip_if_eq_regs(self, opcode):
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        if self.v_regs[x] == self.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x}, V{y}")
    def _skip_if_not_eq_regs(self, opcode):
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        if self.v_regs[x] != self.v_regs[y]:
            self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, {value}")
    def _set_vk(self, opcode):
        """set the value of one of the 16 variable registers, Vx"""
        x, value = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        self.v_regs[x] = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x}, {value}")
    def _add_to_vk(self, opcode):
        """add to the value already present in one of the variable registers, VF is not touched"""
        x, value = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        self.v_regs[x] = (self.v_regs[x] + value) & 0xFF    # keep only the lowest 8 bits from the result and store them in Vx
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, V{y}")
    def _set_vx_to_vy(self, opcode):
        """set the value of Vx equal to that of Vy"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.v_regs[x] = self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: OR V{x}, V{y}")
    def _set_vx_or_vy(self, opcode):
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.v_regs[x] |= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: AND V{x}, V{y}")
    def _set_vx_and_vy(self, opcode):
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.v_regs[x] &= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: XOR V{x}, V{y}")
    def _set_vx_xor_vy(self, opcode):
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        self.v_regs[x] ^= self.v_regs[y]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x}, V{y}")
    def _add_vx_vy(self, opcode):
        """set the value of Vx to Vx + Vy, VF = carry"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        total = self.v_regs[x] + self.v_regs[y]
        self.v_regs[x] = total & 0xFF     # keep only the lowest 8 bits from the result and store them in Vx
        self.v_regs[0xF] = 1 if total > 0xFF else 0
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUB V{x}, V{y}")
    def _sub_vx_vy(self, opcode):
        """set the value of Vx to Vx - Vy, VF = NOT borrow"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        no_borrow = 1 if self.v_regs[x] >= self.v_regs[y] else 0
        self.v_regs[x] = (self.v_regs[x] - self.v_regs[y]) & 0xFF
        self.v_regs[0xF] = no_borrow
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHR V{x}")
    def _shr(self, opcode):
        """set Vx equal to Vx SHR 1, VF = bit shifted out"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        LSB = self.v_regs[x] & 0x1
        self.v_regs[x] = self.v_regs[x] >> 1
        self.v_regs[0xF] = LSB
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUBN V{x}, V{y}")
    def _subn_vx_vy(self, opcode):
        """set the value of Vx to Vy - Vx, VF = NOT borrow"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        no_borrow = 1 if self.v_regs[y] >= self.v_regs[x] else 0
        self.v_regs[x] = (self.v_regs[y] - self.v_regs[x]) & 0xFF
        self.v_regs[0xF] = no_borrow
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHL V{x}")
    def _shl(self, opcode):
        """set Vx equal to Vx SHL 1, VF = bit shifted out"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        MSB = (self.v_regs[x] & 0x80) >> 7
        self.v_regs[x] = (self.v_regs[x] << 1) & 0xFF   # multiply by 2 and keep only the lowest 8 bits from the result
        self.v_regs[0xF] = MSB
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD I, 0x{value:04x}")
    def _set_idx(self, opcode):
        """set the value of the I register"""
        value = opcode & 0x0FFF
        self.idx = value
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP V0, 0x{address:04x}")
    def _jump_plus(self, opcode):
        # may land past 0xFFF, the next fetch reports it
        address = opcode & 0x0FFF
        v0 = self.v_regs[0x0]
        self.pc = address + v0
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RND V{x}, 0x{kk:02x}")
    def _random_byte_and(self, opcode):
        x, kk = (opcode & 0x0F00) >> 8, opcode & 0x00FF
        rnd = self.rng.randint(0, 255)
        self.v_regs[x] = rnd & kk
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD ST, V{register}")
    def _set_st(self, opcode):
        """set ST = Vx"""
        register = (opcode & 0x0F00) >> 8
        self.st = self.v_regs[register]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD I, V{register}")
    def _add_to_idx(self, opcode):
        """set I = I + Vx"""
        register = (opcode & 0x0F00) >> 8
        self.idx = (self.idx + self.v_regs[register]) & 0xFFFF
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD F, V{register}")
    def _select_char(self, opcode):
        """set I to location of sprite for digit Vx"""
        register = (opcode & 0x0F00) >> 8
        digit = self.v_regs[register] & 0xF
        self.idx = FONT_ADDRESS + digit * FONT_SPRITE_SIZE
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD [I], V{x}")
    def _store_vregs(self, opcode):
        """store registers V0 through Vx (included) in memory starting at location I"""
        x = (opcode & 0x0F00) >> 8
        self.mem[self.idx:self.idx+x+1] = self.v_regs[:x+1]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x}, [I]")
    def _load_vregs(self, opcode):
        """read registers V0 through Vx (included) from memory starting at location I"""
        x = (opcode & 0x0F00) >> 8
        self.v_regs[:x+1] = self.mem[self.idx:self.idx+x+1]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD B, V{x}")
    def _bcd_repr(self, opcode):
        """takes the decimal value of Vx and the hundreds digit in memory at I, the tens digit at I+1, the ones digit at I+2"""
        x = (opcode & 0x0F00) >> 8
        value = self.v_regs[x]
        hundreds, tens, ones = value // 100, (value // 10) % 10, value % 10
        self.mem[self.idx:self.idx+3] = [hundreds, tens, ones]
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: DRW V{x}, V{y}, {n_bytes}")
    def _to_screen(self, opcode):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        x, y = (opcode & 0x0F00) >> 8, (opcode & 0x00F0) >> 4
        x0, y0 = self.v_regs[x] % self.screen.w, self.v_regs[y] % self.screen.h
        n_bytes = opcode & 0x000F
        sprite = self.mem[self.idx:self.idx+n_bytes]
        collision = 0
        for i, sprite_byte in enumerate(sprite):
            y_coordinate = y0 + i
            if y_coordinate >= self.screen.h:
                break       # clipped at the bottom edge
            for j in range(8):
                x_coordinate = x0 + j
                if x_coordinate >= self.screen.w:
                    break   # clipped at the right edge
                bit = (sprite_byte >> (7 - j)) & 0x1
                if not bit:
                    continue
                # sprites are XORed onto the existing screen and if this
                # causes any pixel to be erased then VF=1, otherwise VF=0
                pixel_state = self.screen.read_pixel(x_coordinate, y_coordinate)
                if pixel_state == 1:
                    collision = 1
                self.screen.write_pixel(x_coordinate, y_coordinate, pixel_state ^ bit)
        self.v_regs[0xF] = collision
        self.draw = True
        return locals()

    def _goto_next_instruction(self):
        self.pc += 0x2

    def fetch(self):
        """read the big-endian instruction at PC (each instruction is two bytes long)"""
        hi, lo = self.mem[self.pc:self.pc+2]
        return hi << 8 | lo

    def decode(self, opcode):
        """decode opcodes on the high nibble plus a per group mask and return the respective function"""
        group = opcode >> 12
        key = opcode & DECODE_MASKS.get(group, 0xF000)
        if group == 0x0 and key not in SYS_OPCODES:
            key = 0x0000
        if DEBUG: print(f"opcode: 0x{opcode:04x}", end="    ")
        try:
            return self.instructions[key]    # retrieve and return relative instruction
        except KeyError:
            raise IllegalOpcode(opcode, self.pc) from None

    def step(self):
        """
        execute one instruction (fetch, decode, execute)
        return False if the machine is stalled on FX0A waiting for a key, True otherwise
        """
        opcode = self.fetch()
        instruction = self.decode(opcode)
        self._goto_next_instruction()
        instruction(opcode)
        return not self.waiting

    def tick_timers(self):
        """delay/sound timers (dt/st), to be called at 60Hz"""
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            self.st -= 1

import sys
from pathlib import Path
import logging as lg
import traceback
import tomllib
from typing import Sequence

import click

from chipvm.common.hwconf import CYCLES_PER_FRAME, KEY_COUNT, KEY_LAYOUT
from chipvm.runtime.keypad import KeyState
from chipvm.runtime.memory import ProgramTooLarge
import chipvm.runtime.cpu as cpu
import chipvm.runtime.host as host


EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_KEYBOARD = 3
EXIT_FAULT = 4
EXIT_EXEC_ERROR = 100


class KeymapError(Exception):
    pass


def load_keymap(keymap_path: Path) -> tuple[str, ...]:
    config = tomllib.loads(keymap_path.read_text())

    if 'keymap' not in config:
        raise KeymapError(f'{keymap_path} has no [keymap] table')

    layout: dict[int, str] = {}

    for key, name in config['keymap'].items():
        try:
            index = int(key, 16)
        except ValueError:
            raise KeymapError(f'Unknown key {key!r}, expected 0..F') from None

        if index >= KEY_COUNT:
            raise KeymapError(f'Unknown key {key!r}, expected 0..F')

        if not isinstance(name, str):
            raise KeymapError(f'Key {key} must map to a key name')

        layout[index] = name

    missing = [f'{k:X}' for k in range(KEY_COUNT) if k not in layout]

    if missing:
        raise KeymapError(f'Keys not mapped: {" ".join(missing)}')

    names = tuple(layout[k] for k in range(KEY_COUNT))

    try:
        host.key_codes(names)
    except ValueError as e:
        raise KeymapError(f'Unknown key name in {keymap_path}: {e}') from None

    return names


def create_cpu(rom: bytes, keypad: KeyState | None = None, **kwargs) -> cpu.CPU:
    proc = cpu.CPU(keypad, **kwargs)
    proc.load_font()
    proc.load_program(rom)
    return proc


def run_frame(proc: cpu.CPU, cycles_per_frame: int = CYCLES_PER_FRAME):
    proc.tick_timers()

    for _ in range(cycles_per_frame):
        proc.step()


def execute(proc: cpu.CPU, cycles_per_frame: int, layout: Sequence[str] = KEY_LAYOUT):
    with host.Window() as window:
        proc.keypad = host.PygameKeypad(layout)

        while True:
            run_frame(proc, cycles_per_frame)

            if not window.frame(proc.framebuffer()):
                break

    lg.info('Window closed by the user')


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option(
    '-c', '--cycles-per-frame',
    type=click.IntRange(min=1), default=CYCLES_PER_FRAME, show_default=True,
    help='Instructions executed per 60 Hz frame'
)
@click.option('-k', '--keymap', type=Path, help='TOML file with a [keymap] table')
@click.argument('rom_filename', type=Path)
def run(verbose: bool, cycles_per_frame: int, keymap: Path | None, rom_filename: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('CHIPVM')

    layout: Sequence[str] = KEY_LAYOUT

    if keymap is not None:
        try:
            layout = load_keymap(keymap)
        except (OSError, tomllib.TOMLDecodeError, KeymapError) as e:
            raise click.BadParameter(str(e), param_hint='--keymap')

    try:
        rom = rom_filename.read_bytes()
    except OSError as e:
        click.echo(f'Failed to open ROM file {rom_filename}: {e.strerror}', err=True)
        sys.exit(EXIT_LOAD_ERROR)

    if not rom:
        click.echo(f'ROM file {rom_filename} is empty', err=True)
        sys.exit(EXIT_LOAD_ERROR)

    try:
        proc = create_cpu(rom)
    except ProgramTooLarge as e:
        click.echo(f'Failed to load ROM file {rom_filename}: {e}', err=True)
        sys.exit(EXIT_LOAD_ERROR)

    try:
        execute(proc, cycles_per_frame, layout)
        sys.exit(EXIT_OK)

    except cpu.RuntimeFault as e:
        lg.error(f'Execution halted on fault {e}')
        proc.debug_dump()
        sys.exit(EXIT_FAULT)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)


if __name__ == '__main__':
    run()

"""Terminal Output

Results (ticket key, URL, branch) go to stdout so they can be piped.
Progress, warnings and errors go to stderr. Color is decided per stream.
"""

import os
import sys
import threading
import time

RESET = '\033[0m'
STYLES = {
    'bold': '\033[1m',
    'dim': '\033[2m',
    'red': '\033[31m',
    'green': '\033[32m',
    'yellow': '\033[33m',
    'cyan': '\033[36m',
}


def stream_supports_color(stream) -> bool:
    """NO_COLOR wins over FORCE_COLOR; otherwise only real terminals get color."""
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    isatty = getattr(stream, 'isatty', None)
    if isatty is None or not isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            return False
    return True


def _unicode_ok(stream) -> bool:
    try:
        '✓⚠→⠋'.encode(getattr(stream, 'encoding', None) or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


UNICODE_ENABLED = _unicode_ok(sys.stdout)

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
WARN = '⚠' if UNICODE_ENABLED else '[!]'
ARROW = '→' if UNICODE_ENABLED else '->'


def paint(text: str, *styles: str, stream=None) -> str:
    """Wrap text in the named styles if the target stream shows color."""
    if not stream_supports_color(stream or sys.stdout):
        return text
    return ''.join(STYLES[s] for s in styles) + text + RESET


def success(text: str) -> str:
    return paint(text, 'green')


def info(text: str) -> str:
    return paint(text, 'cyan')


def dim(text: str, stream=None) -> str:
    return paint(text, 'dim', stream=stream)


def bold(text: str) -> str:
    return paint(text, 'bold')


def print_success(message: str) -> None:
    print(f"{success(CHECK)} {message}")


def print_error(message: str) -> None:
    print(paint(f"{CROSS} {message}", 'red', stream=sys.stderr), file=sys.stderr)


def print_warning(message: str) -> None:
    print(paint(f"{WARN} {message}", 'yellow', stream=sys.stderr), file=sys.stderr)


def print_detail(message: str) -> None:
    """Dimmed diagnostic line on stderr (used by --verbose)."""
    print(dim(f"  {message}", stream=sys.stderr), file=sys.stderr)


BRANCH_TYPE_STYLES = {
    'feature': 'green',
    'fix': 'red',
    'quality': 'yellow',
}

PROVENANCE_LABELS = {
    'cached': "reused cached draft",
    'generated': "generated draft",
    'heuristic': "offline draft (LLM unavailable)",
}


def colorize_branch(branch: str) -> str:
    """Color the type segment of a type/KEY/slug branch name."""
    branch_type, sep, rest = branch.partition('/')
    style = BRANCH_TYPE_STYLES.get(branch_type)
    if not style or not sep:
        return branch
    return paint(branch_type, 'bold', style) + sep + rest


class Spinner:
    """Progress line on stderr while the workflow runs. Use as context manager.

    Only animates when stderr is a terminal; set `label` to name the current step.
    """
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self, label: str = "", stream=None):
        self.label = label
        self.stream = stream or sys.stderr
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if _unicode_ok(self.stream) else self.FRAMES_ASCII
        self._started = 0.0

    @property
    def active(self) -> bool:
        return self._thread is not None

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            elapsed = time.monotonic() - self._started
            self.stream.write(f'\r\033[K{frame} {self.label} ({elapsed:.0f}s)')
            self.stream.flush()
            idx += 1
            self._stop_event.wait(0.08)

    def __enter__(self):
        isatty = getattr(self.stream, 'isatty', None)
        if isatty is not None and isatty():
            self._started = time.monotonic()
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
            self._thread = None
            self.stream.write('\r\033[K')
            self.stream.flush()


__all__ = [
    "STYLES", "UNICODE_ENABLED", "stream_supports_color", "paint",
    "CHECK", "CROSS", "WARN", "ARROW",
    "success", "info", "dim", "bold",
    "print_success", "print_error", "print_warning", "print_detail",
    "colorize_branch", "Spinner", "BRANCH_TYPE_STYLES", "PROVENANCE_LABELS",
]

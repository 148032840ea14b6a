"""Simple color logger for iduntool"""

import os as _os
import sys as _sys


class SimpleColorLogger():
    """Log to stderr, colored on a terminal, prefixed otherwise

    Arguments:
        loglevel: 1 errors, 2 warnings, 3 info, 4 debug
        verbose_level: threshold for verbose() messages
    """

    _RESET = '\033[0m'
    _BOLD_RED = '\033[1;31m'
    _BOLD_YELLOW = '\033[1;33m'
    _BOLD_MAGENTA = '\033[1;35m'
    _BOLD_BLUE = '\033[1;34m'
    _BOLD_GREEN = '\033[1;32m'
    _BOLD_CYAN = '\033[1;36m'

    COLORS = {
        'red': _BOLD_RED,
        'yellow': _BOLD_YELLOW,
        'magenta': _BOLD_MAGENTA,
        'blue': _BOLD_BLUE,
        'green': _BOLD_GREEN,
        'cyan': _BOLD_CYAN,
    }

    # level: (color, prefix without color)
    _LEVELS = {
        1: (_BOLD_RED, 'E'),
        2: (_BOLD_YELLOW, 'W'),
        3: (_BOLD_MAGENTA, 'I'),
        4: (_BOLD_BLUE, 'D'),
    }

    def __init__(self, loglevel=1, verbose_level=0):
        self._loglevel = loglevel
        self._verbose_level = verbose_level
        self._color = (
            _sys.stderr.isatty()
            and _os.environ.get('NO_COLOR') is None
            and _os.environ.get('TERM') != 'dumb'
            and _os.environ.get('CI') is None
        )

    def log(self, msg):
        """Print message to stderr as it is"""
        print(msg, file=_sys.stderr)

    def _emit(self, level, msg, args):
        if self._loglevel < level:
            return
        if args:
            msg = msg % args
        color, prefix = self._LEVELS[level]
        if self._color:
            self.log(f"{color}{msg}{self._RESET}")
        else:
            self.log(f"{prefix}: {msg}")

    def error(self, msg, *args):
        self._emit(1, msg, args)

    def warning(self, msg, *args):
        self._emit(2, msg, args)

    def info(self, msg, *args):
        self._emit(3, msg, args)

    def debug(self, msg, *args):
        self._emit(4, msg, args)

    def verbose(self, msg, level=1, color='green'):
        """Print verbose message if verbose_level >= level"""
        if self._verbose_level < level:
            return
        if self._color:
            code = self.COLORS.get(color, self._BOLD_GREEN)
            msg = f"{code}{msg}{self._RESET}"
        print(msg, file=_sys.stderr, flush=True)

"""idun tool: settings taken from environment"""

import os as _os

from iduntool.proxy import ParamsError


DEFAULT_TTL = 600


class Config():
    """Settings for all iduntool commands

    Every value has a default, see from_environ() for the variable names.
    """

    def __init__(
            self, proxy='idunsh', sys_dir='~/idun-sys/sys',
            terminal_names=('idunterm', 'idun-term'), ultimate_ip=None,
            cache_root='~', cache_dir='~/.cache/iduntool',
            cache_ttl=DEFAULT_TTL, indexer='fd', fuzzy_filter='fzf',
            last_match=None):
        self.proxy = proxy
        self.sys_dir = _os.path.expanduser(sys_dir)
        self.terminal_names = tuple(terminal_names)
        self.ultimate_ip = ultimate_ip or None
        self.cache_root = _os.path.expanduser(cache_root)
        self.cache_dir = _os.path.expanduser(cache_dir)
        self.cache_ttl = cache_ttl
        self.indexer = indexer
        self.fuzzy_filter = fuzzy_filter
        self.last_match = last_match or None

    @classmethod
    def from_environ(cls, environ=None):
        if environ is None:
            environ = _os.environ
        kwargs = {}
        for key, name in (
                ('proxy', 'IDUN_PROXY'),
                ('sys_dir', 'IDUN_SYS_DIR'),
                ('ultimate_ip', 'C64_ULTIMATE_IP'),
                ('cache_root', 'FF_ROOT'),
                ('cache_dir', 'FF_CACHE_DIR'),
                ('indexer', 'FF_INDEXER'),
                ('fuzzy_filter', 'FF_FILTER'),
                ('last_match', 'IDUN_LAST_MATCH')):
            if environ.get(name):
                kwargs[key] = environ[name]
        if environ.get('IDUN_TERM_PROCS'):
            kwargs['terminal_names'] = [
                name.strip() for name in environ['IDUN_TERM_PROCS'].split(',')
                if name.strip()]
        if environ.get('FF_TTL'):
            try:
                kwargs['cache_ttl'] = float(environ['FF_TTL'])
            except ValueError as err:
                raise ParamsError(
                    f"FF_TTL must be number of seconds: {environ['FF_TTL']}"
                ) from err
        return cls(**kwargs)

"""idun tool"""

import os as _os
import sys as _sys
import argparse as _argparse

import iduntool.__about__ as _about
import iduntool.utils as _utils
from iduntool.config import Config
from iduntool.filecache import CacheKind, FileCache, Session
from iduntool.logger import SimpleColorLogger
from iduntool.mount import MountResolver
from iduntool.proxy import (
    IdunError, ParamsError, FileNotFound, CommandRequest, ExecutionKind,
    ExecProxy, detect_context)
from iduntool.resolver import CommandResolver, UnresolvedCommand
from iduntool.viewer import ViewerDispatcher


SHELL_INIT = r'''# iduntool shell integration, use: eval "$(iduntool shell-init)"
command_not_found_handle() { iduntool resolve "$@"; }
mount() { iduntool mount "$@"; }
show() { iduntool show "$@"; }
run() { iduntool run "$@"; }
zload() { iduntool zload "$@"; }
dir() { iduntool dir "$@"; }
catalog() { iduntool catalog "$@"; }
drives() { iduntool drives "$@"; }
ffrefresh() { iduntool ffrefresh "$@"; }
ffinfo() { iduntool ffinfo "$@"; }
ff() {
    local m
    m=$(iduntool ff "$@") || return
    export IDUN_LAST_MATCH="$m"
    printf '%s\n' "$m"
}
fcd() {
    local d
    d=$(iduntool fcd "$@") && cd -- "$d"
}
_iduntool_last_match() {
    mapfile -t COMPREPLY < <(iduntool complete "$1")
}
complete -o default -F _iduntool_last_match run show zload
'''


class IdunTool():
    def __init__(self, config, log=None, context=None):
        self._config = config
        self._log = log if log is not None else SimpleColorLogger()
        self._context = context
        self._proxy = ExecProxy(config.proxy, log=self._log)
        self._session = Session(config.last_match)
        self._resolver = CommandResolver(
            self._proxy, config.sys_dir, log=self._log)
        self._mounts = MountResolver(
            self._proxy, config.ultimate_ip, log=self._log)
        self._viewer = ViewerDispatcher(self._proxy, log=self._log)
        self._cache = FileCache(
            config.cache_root, config.cache_dir, config.cache_ttl,
            session=self._session, indexer=config.indexer,
            fuzzy_filter=config.fuzzy_filter, log=self._log)

    @property
    def context(self):
        """Execution context, detected on first use"""
        if self._context is None:
            self._context = detect_context(self._config.terminal_names)
            self._log.debug("execution context: %s", self._context.value)
        return self._context

    def _invoke(self, request):
        return self._proxy.invoke(request, self.context)

    def cmd_mount(self, *args):
        return self._mounts.mount(self.context, *args)

    def cmd_show(self, *file_names):
        return self._viewer.dispatch(list(file_names), self.context)

    def cmd_run(self, file_name, ultimate=False):
        if not _os.path.isfile(file_name):
            raise FileNotFound(file_name)
        path = _os.path.abspath(file_name)
        if ultimate:
            if not self._config.ultimate_ip:
                raise ParamsError('run -u requires C64_ULTIMATE_IP')
            request = CommandRequest(
                'load', (path,), ExecutionKind.MESSAGE, ultimate=True)
        elif _utils.has_tool_header(file_name):
            request = CommandRequest(file_name, (), ExecutionKind.EXEC)
        else:
            request = CommandRequest('load', (path,), ExecutionKind.MESSAGE)
        return self._invoke(request)

    def cmd_zload(self, file_name):
        if not _os.path.isfile(file_name):
            raise FileNotFound(file_name)
        return self._invoke(CommandRequest(
            'zload', (_utils.quote_argument(file_name),), ExecutionKind.EXEC))

    def cmd_dir(self, dev=None):
        return self._invoke(CommandRequest(
            'dir', (dev or _os.getcwd(),), ExecutionKind.MESSAGE))

    def cmd_catalog(self, dev=None, xarg=None):
        return self._invoke(CommandRequest(
            'catalog', (dev or _os.getcwd(),), ExecutionKind.MESSAGE,
            xarg=xarg))

    def cmd_message(self, name):
        return self._invoke(CommandRequest(name, (), ExecutionKind.MESSAGE))

    def cmd_resolve(self, name, *args):
        return self._resolver.dispatch(name, list(args), self.context)

    def cmd_ff(self, pattern):
        match = self._cache.query(pattern, CacheKind.FILE)
        if match is None:
            self._log.warning("no file matching '%s'", pattern)
            return 1
        print(match)
        return 0

    def cmd_fcd(self, pattern):
        match = self._cache.query(pattern, CacheKind.DIRECTORY)
        if match is None:
            self._log.warning("no directory matching '%s'", pattern)
            return 1
        print(match)
        return 0

    def cmd_ffrefresh(self):
        self._cache.refresh_all()
        return 0

    def cmd_ffinfo(self):
        for kind, (count, age) in self._cache.info().items():
            if count == 0 and age == float('inf'):
                print(f'{kind.value}: not indexed')
            else:
                print(f'{kind.value}: {count} entries, {int(age)}s old')
        return 0

    def cmd_complete(self, command):
        for candidate in self._session.completions(command):
            print(candidate)
        return 0

    def process_command(self, args):
        """Run command from parsed arguments, return exit code"""
        command = args.command
        try:
            if command == 'mount':
                return self.cmd_mount(*args.args)
            if command == 'drives':
                return self.cmd_mount()
            if command == 'show':
                return self.cmd_show(*args.files)
            if command == 'run':
                return self.cmd_run(args.file, ultimate=args.ultimate)
            if command == 'zload':
                return self.cmd_zload(args.file)
            if command in ('dir', 'ls'):
                return self.cmd_dir(args.dev)
            if command == 'catalog':
                return self.cmd_catalog(args.dev, xarg=args.xarg)
            if command in ('reboot', 'stop'):
                return self.cmd_message(command)
            if command == 'resolve':
                return self.cmd_resolve(args.name, *args.args)
            if command == 'ff':
                return self.cmd_ff(args.pattern)
            if command == 'fcd':
                return self.cmd_fcd(args.pattern)
            if command == 'ffrefresh':
                return self.cmd_ffrefresh()
            if command == 'ffinfo':
                return self.cmd_ffinfo()
            if command == 'complete':
                return self.cmd_complete(args.for_command)
            if command == 'shell-init':
                print(SHELL_INIT, end='')
                return 0
            raise ParamsError(f"unknown command: '{command}'")
        except UnresolvedCommand as err:
            # same message as the shell prints
            self._log.log(str(err))
            return err.exit_code
        except IdunError as err:
            self._log.error(err)
            return err.exit_code
        except KeyboardInterrupt:
            self._log.warning(' Exiting..')
            return 130


_VERSION_STR = "%s %s (%s)" % (
    _about.APP_NAME,
    _about.VERSION,
    _about.AUTHOR)
_COMMANDS_HELP_STR = """
Environment:
  IDUN_PROXY            proxy binary (idunsh)
  IDUN_SYS_DIR          device system tools directory
  IDUN_TERM_PROCS       device terminal process names, comma separated
  C64_ULTIMATE_IP       IP of C64 Ultimate, enables mount a:/b: and run -u
  FF_ROOT               root of fuzzy file index (~)
  FF_CACHE_DIR          where file lists are stored (~/.cache/iduntool)
  FF_TTL                maximum age of file lists in seconds (600)
"""


class _ArgumentParser(_argparse.ArgumentParser):
    """Report usage errors as ParamsError"""

    def error(self, message):
        self.print_usage(_sys.stderr)
        raise ParamsError(f"{self.prog}: {message}")


def _build_parser():
    parser = _ArgumentParser(
        prog=_about.APP_NAME,
        description=_about.DESCRIPTION,
        formatter_class=_argparse.RawTextHelpFormatter,
        epilog=_COMMANDS_HELP_STR)
    parser.add_argument(
        "-V", "--version", action='version', version=_VERSION_STR)
    parser.add_argument(
        '-d', '--debug', default=0, action='count', help='set debug level')
    parser.add_argument(
        '-v', '--verbose', default=0, action='count', help='verbose output')
    sub = parser.add_subparsers(dest='command', metavar='command')
    sub.required = True

    cmd = sub.add_parser(
        'mount', help='mount image or directory, list drives without args')
    cmd.add_argument('args', nargs='*', help='drive (like d:) and target')
    sub.add_parser('drives', help='list active drives and mounts')
    cmd = sub.add_parser('show', help='show pictures with device viewer')
    cmd.add_argument('files', nargs='*')
    cmd = sub.add_parser('run', help='run program on device')
    cmd.add_argument(
        '-u', dest='ultimate', action='store_true',
        help='load using C64 Ultimate')
    cmd.add_argument('file')
    cmd = sub.add_parser('zload', help='load Z80 program on device')
    cmd.add_argument('file')
    cmd = sub.add_parser('dir', aliases=['ls'], help='short file list')
    cmd.add_argument('dev', nargs='?')
    cmd = sub.add_parser('catalog', help='long file list in device format')
    cmd.add_argument(
        '-x', '--xarg', metavar='flags', help='flags passed to catalog')
    cmd.add_argument('dev', nargs='?')
    sub.add_parser('reboot', help='reboot cartridge and computer')
    sub.add_parser('stop', help='stop running program')
    cmd = sub.add_parser(
        'resolve', help='run unknown shell command on device')
    cmd.add_argument('name')
    cmd.add_argument('args', nargs=_argparse.REMAINDER)
    cmd = sub.add_parser('ff', help='find file by fuzzy pattern')
    cmd.add_argument('pattern')
    cmd = sub.add_parser('fcd', help='find directory by fuzzy pattern')
    cmd.add_argument('pattern')
    sub.add_parser('ffrefresh', help='rebuild file lists now')
    sub.add_parser('ffinfo', help='show size and age of file lists')
    cmd = sub.add_parser('complete', help='print completion candidates')
    cmd.add_argument('for_command', metavar='command')
    sub.add_parser('shell-init', help='print bash integration')
    return parser


def main(argv=None):
    """Main"""
    try:
        args = _build_parser().parse_args(argv)
    except ParamsError as err:
        SimpleColorLogger().error(err)
        _sys.exit(err.exit_code)
    log = SimpleColorLogger(args.debug + 1, verbose_level=args.verbose)
    try:
        config = Config.from_environ()
    except IdunError as err:
        log.error(err)
        _sys.exit(err.exit_code)
    idun_tool = IdunTool(config, log=log)
    _sys.exit(idun_tool.process_command(args))


if __name__ == '__main__':
    main()

"""idun tool: transport to the device through the idunsh proxy"""

import enum as _enum
import dataclasses as _dataclasses
import subprocess as _subprocess
import psutil as _psutil


class IdunError(Exception):
    """General idun tool error"""
    exit_code = 1


class ParamsError(IdunError):
    """Wrong command arguments"""


class PathNotFound(IdunError):
    """Path not found"""
    def __init__(self, file_name):
        self._file_name = file_name
        super().__init__(self.__str__())

    def __str__(self):
        return f"Path '{self._file_name}' was not found"

    @property
    def file_name(self):
        return self._file_name


class FileNotFound(PathNotFound):
    """File not found"""
    exit_code = 2

    def __str__(self):
        return f"File '{self._file_name}' was not found"


class ProxyFailure(IdunError):
    """Proxy could not run the requested tool"""
    exit_code = 127

    def __init__(self, tool):
        self._tool = tool
        super().__init__(self.__str__())

    def __str__(self):
        return f"{self._tool} failed to load"

    @property
    def tool(self):
        return self._tool


class ExecutionKind(_enum.Enum):
    EXEC = 'exec'
    MESSAGE = 'message'


class ExecutionContext(_enum.Enum):
    INTERACTIVE_SHELL = 'interactive'
    STANDARD_TERMINAL = 'standard'


@_dataclasses.dataclass(frozen=True)
class CommandRequest:
    """One operation forwarded to the device

    EXEC requests run program `name` on the device,
    MESSAGE requests send `name` as control command to the proxy.
    """
    name: str
    arguments: tuple = ()
    kind: ExecutionKind = ExecutionKind.EXEC
    xarg: str = None
    ultimate: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'arguments', tuple(self.arguments))


def detect_context(terminal_names, depth=2):
    """Find out if we are running inside the device terminal

    The device terminal starts a shell which then starts us, so the first
    `depth` ancestors are checked for a name from `terminal_names`.

    Returns:
        ExecutionContext
    """
    try:
        proc = _psutil.Process()
        for _ in range(depth):
            proc = proc.parent()
            if proc is None:
                break
            if proc.name() in terminal_names:
                return ExecutionContext.INTERACTIVE_SHELL
    except _psutil.Error:
        return ExecutionContext.STANDARD_TERMINAL
    return ExecutionContext.STANDARD_TERMINAL


class ExecProxy():
    """Spawn the idunsh proxy for a CommandRequest"""

    ERR_NOT_FOUND = 127

    def __init__(self, proxy='idunsh', log=None):
        self._proxy = proxy
        self._log = log

    def build_argv(self, request, context):
        argv = [self._proxy]
        if request.kind is ExecutionKind.EXEC:
            argv.append('-s')
        if context is ExecutionContext.STANDARD_TERMINAL:
            argv.append('-o')
        if request.ultimate:
            argv.append('-u')
        if request.xarg:
            argv += ['-x', request.xarg]
        if request.kind is ExecutionKind.EXEC:
            argv += ['exec', '--', request.name]
        else:
            argv += [request.name, '--']
        argv += request.arguments
        return argv

    def _run(self, argv):
        if self._log:
            self._log.info('$ %s', ' '.join(argv))
        return _subprocess.run(argv).returncode

    def invoke(self, request, context):
        """Forward request to the device, return exit code

        Raises:
            ProxyFailure when the proxy can not be started
                from a standard terminal
        """
        argv = self.build_argv(request, context)
        if context is ExecutionContext.INTERACTIVE_SHELL:
            try:
                return self._run(argv)
            except OSError as err:
                if self._log:
                    self._log.debug('%s: %s', self._proxy, err)
                    self._log.error(str(ProxyFailure(request.name)))
                return self.ERR_NOT_FOUND
        try:
            return self._run(argv)
        except OSError as err:
            raise ProxyFailure(self._proxy) from err

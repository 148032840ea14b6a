"""idun tool: forward unknown shell commands to the device"""

import os as _os

import iduntool.utils as _utils
from iduntool.proxy import IdunError, CommandRequest, ExecutionKind


class UnresolvedCommand(IdunError):
    """Command is not known locally nor on the device"""
    exit_code = 127

    def __init__(self, name):
        self._name = name
        super().__init__(self.__str__())

    def __str__(self):
        return f"{self._name}: command not found"

    @property
    def name(self):
        return self._name


class CommandResolver():
    """Decide if a command the shell could not find belongs to the device

    Rules are tried in order, first match wins:
        1. tool in the device system directory
        2. drive spec, like 'b:'
        3. tool in current directory (recognized by its header)
    """

    def __init__(self, proxy, sys_dir, log=None):
        self._proxy = proxy
        self._sys_dir = sys_dir
        self._log = log

    def _is_sys_tool(self, name):
        if not name or _os.sep in name:
            return False
        return _os.path.isfile(_os.path.join(self._sys_dir, name))

    def resolve(self, name, arguments):
        """Find how to forward command to device

        Returns:
            CommandRequest

        Raises:
            UnresolvedCommand when no rule matches
        """
        arguments = _utils.expand_arguments(arguments)
        if self._is_sys_tool(name):
            rule = 'system tool'
        elif _utils.is_drive_spec(name):
            rule = 'drive'
        elif _utils.has_tool_header(_os.path.join('.', name)):
            rule = 'local tool'
        else:
            raise UnresolvedCommand(name)
        if self._log:
            self._log.debug("%s: resolved as %s", name, rule)
        return CommandRequest(name, arguments, ExecutionKind.EXEC)

    def dispatch(self, name, arguments, context):
        """Resolve command and run it on the device, return exit code"""
        request = self.resolve(name, arguments)
        return self._proxy.invoke(request, context)

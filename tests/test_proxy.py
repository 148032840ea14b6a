"""Tests for proxy transport (no device, idunsh is mocked)"""

import subprocess
import unittest
from unittest.mock import Mock, patch

import psutil

from iduntool.proxy import (
    CommandRequest, ExecutionKind, ExecutionContext, ExecProxy,
    ProxyFailure, detect_context)


INTERACTIVE = ExecutionContext.INTERACTIVE_SHELL
STANDARD = ExecutionContext.STANDARD_TERMINAL


def completed(returncode):
    return subprocess.CompletedProcess([], returncode)


class TestCommandRequest(unittest.TestCase):
    def test_defaults(self):
        req = CommandRequest("koa-viewer")
        self.assertEqual(req.arguments, ())
        self.assertIs(req.kind, ExecutionKind.EXEC)
        self.assertIsNone(req.xarg)
        self.assertFalse(req.ultimate)

    def test_arguments_become_tuple(self):
        req = CommandRequest("mount", ["a:", "x.d64"], ExecutionKind.MESSAGE)
        self.assertEqual(req.arguments, ("a:", "x.d64"))

    def test_immutable(self):
        req = CommandRequest("stop")
        with self.assertRaises(AttributeError):
            req.name = "reboot"


class TestBuildArgv(unittest.TestCase):
    def setUp(self):
        self.proxy = ExecProxy("idunsh")

    def test_exec_standard_terminal(self):
        req = CommandRequest("koa-viewer", ['"a.koa"'])
        self.assertEqual(
            self.proxy.build_argv(req, STANDARD),
            ["idunsh", "-s", "-o", "exec", "--", "koa-viewer", '"a.koa"'])

    def test_exec_interactive_has_no_redirect(self):
        req = CommandRequest("koa-viewer", ['"a.koa"'])
        self.assertEqual(
            self.proxy.build_argv(req, INTERACTIVE),
            ["idunsh", "-s", "exec", "--", "koa-viewer", '"a.koa"'])

    def test_message(self):
        req = CommandRequest(
            "mount", ["d:", "/x/disk.d64"], ExecutionKind.MESSAGE)
        self.assertEqual(
            self.proxy.build_argv(req, STANDARD),
            ["idunsh", "-o", "mount", "--", "d:", "/x/disk.d64"])

    def test_ultimate_flag(self):
        req = CommandRequest(
            "mount", ["a:", "/x/disk.d64"], ExecutionKind.MESSAGE,
            ultimate=True)
        self.assertEqual(
            self.proxy.build_argv(req, STANDARD),
            ["idunsh", "-o", "-u", "mount", "--", "a:", "/x/disk.d64"])

    def test_xarg(self):
        req = CommandRequest(
            "catalog", ["a:"], ExecutionKind.MESSAGE, xarg="lw")
        self.assertEqual(
            self.proxy.build_argv(req, INTERACTIVE),
            ["idunsh", "-x", "lw", "catalog", "--", "a:"])

    def test_custom_proxy(self):
        proxy = ExecProxy("/opt/idun/bin/idunsh")
        argv = proxy.build_argv(CommandRequest("stop", (),
                                ExecutionKind.MESSAGE), STANDARD)
        self.assertEqual(argv[0], "/opt/idun/bin/idunsh")


class TestInvoke(unittest.TestCase):
    def setUp(self):
        self.log = Mock()
        self.proxy = ExecProxy("idunsh", log=self.log)
        self.req = CommandRequest("koa-viewer", ['"a.koa"'])

    @patch("iduntool.proxy._subprocess.run")
    def test_standard_returns_exit_code(self, mock_run):
        mock_run.return_value = completed(3)
        self.assertEqual(self.proxy.invoke(self.req, STANDARD), 3)
        mock_run.assert_called_once()
        self.assertEqual(mock_run.call_args[0][0][:3], ["idunsh", "-s", "-o"])

    @patch("iduntool.proxy._subprocess.run")
    def test_standard_spawn_failure(self, mock_run):
        mock_run.side_effect = FileNotFoundError("idunsh")
        with self.assertRaises(ProxyFailure) as ctx:
            self.proxy.invoke(self.req, STANDARD)
        self.assertEqual(str(ctx.exception), "idunsh failed to load")
        self.assertEqual(ctx.exception.exit_code, 127)

    @patch("iduntool.proxy._subprocess.run")
    def test_interactive_success(self, mock_run):
        mock_run.return_value = completed(0)
        self.assertEqual(self.proxy.invoke(self.req, INTERACTIVE), 0)
        self.log.error.assert_not_called()

    @patch("iduntool.proxy._subprocess.run")
    def test_interactive_passes_exit_code(self, mock_run):
        mock_run.return_value = completed(4)
        self.assertEqual(self.proxy.invoke(self.req, INTERACTIVE), 4)
        self.log.error.assert_not_called()

    @patch("iduntool.proxy._subprocess.run")
    def test_interactive_spawn_failure_is_127(self, mock_run):
        mock_run.side_effect = FileNotFoundError("idunsh")
        self.assertEqual(self.proxy.invoke(self.req, INTERACTIVE), 127)
        self.log.error.assert_called_once_with("koa-viewer failed to load")

    @patch("iduntool.proxy._subprocess.run")
    def test_no_retry(self, mock_run):
        mock_run.return_value = completed(1)
        self.proxy.invoke(self.req, STANDARD)
        self.proxy.invoke(self.req, INTERACTIVE)
        self.assertEqual(mock_run.call_count, 2)


class TestDetectContext(unittest.TestCase):
    def _chain(self, *names):
        """Mock process with ancestors of given names"""
        proc = Mock()
        current = proc
        for name in names:
            parent = Mock()
            parent.name.return_value = name
            current.parent.return_value = parent
            current = parent
        current.parent.return_value = None
        return proc

    @patch("iduntool.proxy._psutil.Process")
    def test_terminal_is_grandparent(self, mock_process):
        mock_process.return_value = self._chain("bash", "idunterm", "init")
        self.assertIs(detect_context(("idunterm",)), INTERACTIVE)

    @patch("iduntool.proxy._psutil.Process")
    def test_terminal_is_parent(self, mock_process):
        mock_process.return_value = self._chain("idunterm", "init")
        self.assertIs(detect_context(("idunterm",)), INTERACTIVE)

    @patch("iduntool.proxy._psutil.Process")
    def test_other_terminal(self, mock_process):
        mock_process.return_value = self._chain(
            "bash", "gnome-terminal", "idunterm")
        self.assertIs(detect_context(("idunterm",)), STANDARD)

    @patch("iduntool.proxy._psutil.Process")
    def test_no_parent(self, mock_process):
        mock_process.return_value = self._chain()
        self.assertIs(detect_context(("idunterm",)), STANDARD)

    @patch("iduntool.proxy._psutil.Process")
    def test_access_denied(self, mock_process):
        mock_process.side_effect = psutil.AccessDenied(1)
        self.assertIs(detect_context(("idunterm",)), STANDARD)


if __name__ == "__main__":
    unittest.main()

"""idun tool"""

from iduntool.proxy import (
    IdunError, ParamsError, PathNotFound, FileNotFound,
    ProxyFailure, CommandRequest, ExecutionKind, ExecutionContext, ExecProxy)
from iduntool.resolver import CommandResolver, UnresolvedCommand
from iduntool.mount import MountResolver
from iduntool.viewer import ViewerDispatcher, ViewerClass
from iduntool.filecache import FileCache, CacheKind, CacheError, Session
from iduntool.logger import SimpleColorLogger

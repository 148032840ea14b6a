"""idun tool: show picture files with a device viewer"""

import enum as _enum

import iduntool.utils as _utils
from iduntool.proxy import ParamsError, CommandRequest, ExecutionKind


class ViewerClass(_enum.Enum):
    KOA = 'koa'
    ZX = 'zx'
    VDC = 'vdc'
    DEFAULT = 'default'


SUFFIX_CLASSES = {
    'koa': ViewerClass.KOA,
    'kla': ViewerClass.KOA,
    'scr': ViewerClass.ZX,
    'vdc': ViewerClass.VDC,
}

VIEWERS = {
    ViewerClass.KOA: 'koa-viewer',
    ViewerClass.ZX: 'zx-viewer',
    ViewerClass.VDC: 'vdc-viewer',
}

DEFAULT_VIEWER = VIEWERS[ViewerClass.VDC]


def classify(file_names):
    """Find one viewer class for all files

    Returns:
        ViewerClass, DEFAULT if files are mixed or any is not recognized
    """
    classes = set()
    for file_name in file_names:
        viewer_class = SUFFIX_CLASSES.get(_utils.file_suffix(file_name))
        if viewer_class is None:
            return ViewerClass.DEFAULT
        classes.add(viewer_class)
    if len(classes) == 1:
        return classes.pop()
    return ViewerClass.DEFAULT


def select_viewer(file_names):
    return VIEWERS.get(classify(file_names), DEFAULT_VIEWER)


class ViewerDispatcher():
    def __init__(self, proxy, log=None):
        self._proxy = proxy
        self._log = log

    def build_request(self, file_names):
        if not file_names:
            raise ParamsError('usage: show {file} [...]')
        viewer = select_viewer(file_names)
        if self._log:
            self._log.debug("show %d file(s) with %s", len(file_names), viewer)
        return CommandRequest(
            viewer,
            [_utils.quote_argument(name) for name in file_names],
            ExecutionKind.EXEC)

    def dispatch(self, file_names, context):
        """Show files on device, return exit code of the viewer"""
        request = self.build_request(file_names)
        return self._proxy.invoke(request, context)

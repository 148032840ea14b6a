"""idun tool: mount disk images and local directories as device drives

Three kinds of mount are possible:

1. **Privileged mount**: drives `a:` and `b:` are real floppy drives
   emulated by the C64 Ultimate. When its IP is known (`C64_ULTIMATE_IP`),
   the image is sent to the Ultimate (`idunsh -u mount`).
2. **Image mount**: `.d64`, `.d71` and `.t64` images become a virtual
   drive of the idun cartridge (`idunsh mount`).
3. **Assign**: an existing local directory becomes a virtual drive
   (`idunsh assign`).

Without arguments the list of active drives is requested (`idunsh drives`).
"""

import os as _os
import dataclasses as _dataclasses

import iduntool.utils as _utils
from iduntool.proxy import (
    ParamsError, PathNotFound, CommandRequest, ExecutionKind)


IMAGE_FORMATS = ('d64', 'd71', 't64')
PRIMARY_DRIVES = frozenset('ab')

_USAGE = 'usage: mount [{drive}: {image_or_dir}]'


@_dataclasses.dataclass(frozen=True)
class DriveSpec:
    letter: str
    colon_terminated: bool = True

    def __str__(self):
        return f'{self.letter}:' if self.colon_terminated else self.letter

    @property
    def is_primary(self):
        return self.letter.lower() in PRIMARY_DRIVES


@_dataclasses.dataclass(frozen=True)
class DiskImage:
    path: str
    fmt: str


@_dataclasses.dataclass(frozen=True)
class DirectoryPath:
    path: str


def parse_drive(arg):
    """Parse 'x:' drive argument

    Raises:
        ParamsError if arg is not a drive spec
    """
    if not _utils.is_drive_spec(arg):
        raise ParamsError(f"invalid drive '{arg}', {_USAGE}")
    return DriveSpec(arg[0], True)


def classify_target(target):
    """Classify mount target by its suffix and by filesystem

    Image suffix wins over an existing directory with the same name.

    Returns:
        DiskImage, DirectoryPath or None when target is neither
    """
    suffix = _utils.file_suffix(target)
    if suffix in IMAGE_FORMATS:
        return DiskImage(_os.path.abspath(target), suffix)
    if _os.path.isdir(target):
        return DirectoryPath(_os.path.abspath(target))
    return None


class MountResolver():
    def __init__(self, proxy, ultimate_ip=None, log=None):
        self._proxy = proxy
        self._ultimate_ip = ultimate_ip
        self._log = log

    def build_request(self, *args):
        """Create request for mount arguments without contacting device

        Raises:
            ParamsError for wrong arguments
            PathNotFound when target is not image nor directory
        """
        if not args:
            return CommandRequest('drives', (), ExecutionKind.MESSAGE)
        if len(args) != 2:
            raise ParamsError(_USAGE)
        drive_arg, target = args
        drive = parse_drive(drive_arg)
        if drive.is_primary and self._ultimate_ip:
            if self._log:
                self._log.info(
                    "mount %s using C64 Ultimate at %s",
                    drive, self._ultimate_ip)
            return CommandRequest(
                'mount', (str(drive), _os.path.abspath(target)),
                ExecutionKind.MESSAGE, ultimate=True)
        mount_target = classify_target(target)
        if isinstance(mount_target, DiskImage):
            return CommandRequest(
                'mount', (str(drive), mount_target.path),
                ExecutionKind.MESSAGE)
        if isinstance(mount_target, DirectoryPath):
            return CommandRequest(
                'assign', (str(drive), mount_target.path),
                ExecutionKind.MESSAGE)
        raise PathNotFound(target)

    def mount(self, context, *args):
        """Mount target to drive or list drives, return exit code"""
        request = self.build_request(*args)
        return self._proxy.invoke(request, context)

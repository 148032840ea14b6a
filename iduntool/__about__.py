"""ABOUT
"""

APP_NAME = "iduntool"
VERSION = "v0.3.0"
AUTHOR = "Brian Holdsworth"
DESCRIPTION = "idun tool - drive an idun cartridge from a Linux shell"
LONG_DESCRIPTION = DESCRIPTION
KEYWORDS = "idun commodore c64 c128 shell"
LICENSE = "GPL-3.0-or-later"

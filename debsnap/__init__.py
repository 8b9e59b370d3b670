"""Snapshot and restore the package lists, settings and dotfiles of a Debian desktop."""

APP_NAME = "debsnap"
VERSION = "1.0.0"

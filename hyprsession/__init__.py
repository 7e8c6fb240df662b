"""Hyprsession - save the open Hyprland windows and restore them on the next start.

A snapshot of every client (class, title, geometry, workspace, group and the
command that launched it) is written periodically. On start, the last
snapshot is reconciled against the live window set: existing windows are
moved back in place and missing ones are launched with matching window rules.
"""

# SPDX-License-Identifier: MIT
"""Packaging services.

Services implement the release logic and report through the console
abstraction; the CLI layer only wires them to flags and exit codes.
"""

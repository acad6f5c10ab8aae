# dotboot: Dotfiles Bootstrap Utility
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
dotboot core package.

Clones a dotfiles repository and links its configuration directories
into the config root, backing up whatever was there first.
"""
from .linker import Linker as Linker  # noqa: F401 (re-export)
from .linker import link_units as link_units  # noqa: F401 (re-export)

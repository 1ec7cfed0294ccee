# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 FamilyGraph Contributors

__version__ = "0.1.0"

# SPDX-License-Identifier: MIT
"""Host probing: platform capabilities and program, header and library lookup."""

# SPDX-License-Identifier: MIT
"""Translation of abstract command lines into host shell commands."""

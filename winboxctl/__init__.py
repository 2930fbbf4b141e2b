# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""winboxctl - Run Windows containers from a non-Windows host via a Vagrant box."""

__version__ = "0.1.0"

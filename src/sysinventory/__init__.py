# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
sysinventory - installed software and hardware inventory for Fedora desktops.
"""

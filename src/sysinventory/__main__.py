# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

import sys

from sysinventory.cli import main

sys.exit(main())

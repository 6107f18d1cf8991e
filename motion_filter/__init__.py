################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

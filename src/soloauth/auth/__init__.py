# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Security primitives: password verifier, key material, session table,
cookie codec and XSRF tokens."""

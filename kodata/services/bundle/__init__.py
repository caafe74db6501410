"""Release-aligned bundle composition.

- semver: version parsing and comparison
- ordering: asset placement rules and filtering
- window: keep the last N minor series of a release history
- align: pick one dependency release for a target release
- compose: merge target and dependency assets into one ordered bundle
- github/config/store/service: release listing, package files, publishing
"""

from __future__ import annotations

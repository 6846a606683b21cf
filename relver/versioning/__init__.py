"""Release versioning services.

- resolver: branch lookup, manifest normalization and validation
- bumper: commit-driven version bump under the branch ceiling
- changelog: changelog entry rendering, persistence and tagging
- selftest: dry run of the CI release sequence
"""

from __future__ import annotations

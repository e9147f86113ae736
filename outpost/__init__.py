"""Outpost: posting styles, transport selection and archival fan-out.

The outgoing half of a mail/news client:
  - Posting-style rules resolved against the compose context
  - Transport method resolution over group metadata and user preference
  - Archival copies fanned out to every destination, tolerating partial failure
"""

__version__ = "0.1.0"
__description__ = "Outgoing message pipeline for mail and news clients"

from outpost.core.pipeline import OutgoingPipeline

__all__ = ["OutgoingPipeline", "__version__"]

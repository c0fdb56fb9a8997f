"""Public web archive submission.

WaybackSubmitter asks the Internet Archive to capture a URL.  Submissions
run detached from the archival pipeline.
"""

from link_archiver.providers.wayback.wayback_provider import WaybackSubmitter

__all__ = ["WaybackSubmitter"]

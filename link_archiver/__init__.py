"""link_archiver -- archive bookmarked links with a headless browser.

One call to :meth:`link_archiver.pipeline.orchestrator.ArchiveOrchestrator.archive_link`
classifies a link, captures its artifacts (preview, readable text,
screenshot, PDF, single-file HTML), optionally tags it with an LLM and
reconciles the stored record.
"""

__version__ = "0.1.0"

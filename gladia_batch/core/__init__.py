"""Core batch pipeline: scan, order, poll, extract, and persist.

WHY: The core package holds everything between "here is a directory" and
"here is an updated sidecar" except the HTTP client itself, which lives
in gladia_batch.api and is treated as an external capability.

HOW: enumerator.py scans, sequencer.py orders, poller.py waits for jobs,
extractor.py flattens results, store.py merges them to disk, and
pipeline.py drives them file by file.

RULES:
- Only pipeline.py talks to more than one sibling module
- No module here reads the environment directly
"""

"""Homepage crawling subsystem.

Structure:
- base.py: the Entry record produced by extraction
- errors.py: origin fetch failures
- timeparse.py: relative-time text ("3 hours ago") to hours
- spiders/: source implementations (fetch + HTML extraction)

Parsing uses selectolax; fetching uses httpx over HTTP/2.
"""

"""Common literal values used across guide_pages.

These constants keep filenames and template names centralized so generators,
the CLI, and tests can import the same values without drifting. Intended for
internal use within the guide_pages package.

Examples
--------
>>> from guide_pages import _constants
>>> _constants.OUTPUT_FILENAME_TEMPLATE.format(prefix="guide-", stem="inserts")
'guide-inserts.html'
>>> _constants.GUIDE_SUFFIX
'.guide'
"""

GUIDE_SUFFIX = ".guide"
OUTPUT_FILENAME_TEMPLATE = "{prefix}{stem}.html"
PAGE_TEMPLATE = "guide_page.jinja"
INDEX_TEMPLATE = "guide_index.jinja"

"""Common literal values used across ply_site.

These constants keep reserved filenames and suffixes centralized so the site
builder, the template functions, and tests import the same values without
drifting.

Examples
--------
>>> from ply_site import _constants
>>> _constants.LAYOUT_FILENAME
'ply.template'
>>> "post.md".endswith(_constants.MARKDOWN_SUFFIX)
True
"""

MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"
INDEX_SOURCE = "index.md"
INDEX_TARGET = "index.html"
LAYOUT_FILENAME = "ply.template"
LOCAL_OVERRIDE_DIR = "ply.local"
DEFAULT_IGNORE = (r"/\.[^/]+$",)
DEFAULT_PYGMENTS_STYLE = "monokai"
